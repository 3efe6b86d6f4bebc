from __future__ import annotations

from pathlib import Path

import pytest

from blogview.config import POST_STYLE_PRESETS, Config, load_config


def _write_project_config(root: Path) -> Path:
    config_text = (
        "site_title: Example Blog\n"
        "footer_name: example.org\n"
        "path_prefix: blog/\n"
        "output_dir: public\n"
        "themes_dir: themes\n"
        "theme_name: midnight\n"
        "avatar_size: 64\n"
        "post_style: compact\n"
        "profile_providers:\n"
        "  github:\n"
        "    label: github\n"
        "    url_template: https://github.com/{handle}\n"
        "  Twitter:\n"
        "    label: twitter\n"
        "    url_template: https://twitter.com/{handle}\n"
    )
    cfg_path = root / "blogview.yml"
    cfg_path.write_text(config_text, encoding="utf-8")
    return cfg_path


def test_load_config_resolves_paths_relative_to_config_directory(tmp_path: Path) -> None:
    project = tmp_path / "project"
    project.mkdir()
    _write_project_config(project)

    cfg = load_config(project)

    assert cfg.output_dir == (project / "public").resolve()
    assert cfg.themes_dir == (project / "themes").resolve()
    assert cfg.theme_name == "midnight"
    assert cfg.footer_name == "example.org"
    assert cfg.path_prefix == "/blog"
    assert cfg.avatar_size == 64
    assert cfg.post_style == POST_STYLE_PRESETS["compact"]
    assert set(cfg.profile_providers) == {"github", "twitter"}
    assert cfg.profile_providers["twitter"].url_for("glen") == "https://twitter.com/glen"


def test_load_config_accepts_file_path(tmp_path: Path) -> None:
    cfg_path = _write_project_config(tmp_path)

    cfg = load_config(cfg_path)

    assert cfg.output_dir == (tmp_path / "public").resolve()


def test_load_config_directory_without_file_uses_defaults(tmp_path: Path) -> None:
    cfg = load_config(tmp_path)

    assert cfg.site_title == "glenbray.com"
    assert cfg.output_dir == (tmp_path / "site").resolve()
    assert cfg.themes_dir is None
    assert list(cfg.profile_providers) == ["github", "dev"]
    assert cfg.post_style.back_label == "← Back"


def test_load_config_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "missing.yml")


def test_provider_template_requires_handle_placeholder() -> None:
    with pytest.raises(ValueError, match="handle"):
        Config(profile_providers={"github": {"label": "github", "url_template": "https://github.com/"}})


def test_unknown_post_style_preset_is_rejected() -> None:
    with pytest.raises(ValueError, match="post_style"):
        Config(post_style="fancy")


def test_inline_post_style_mapping(tmp_path: Path) -> None:
    cfg_path = tmp_path / "blogview.yml"
    cfg_path.write_text("post_style:\n  back_label: Home\n", encoding="utf-8")

    cfg = load_config(cfg_path)

    assert cfg.post_style.back_label == "Home"
    assert cfg.post_style.article_class == POST_STYLE_PRESETS["standard"].article_class


def test_non_mapping_config_is_rejected(tmp_path: Path) -> None:
    cfg_path = tmp_path / "blogview.yml"
    cfg_path.write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ValueError, match="mapping"):
        load_config(cfg_path)


def test_duplicate_provider_keys_are_rejected() -> None:
    with pytest.raises(ValueError, match="Duplicate profile provider"):
        Config(
            profile_providers={
                "GitHub": {"label": "github", "url_template": "https://github.com/{handle}"},
                "github": {"label": "gh", "url_template": "https://github.com/{handle}"},
            }
        )


def test_avatar_size_defaults_to_image_dimensions() -> None:
    assert Config().avatar_size is None
