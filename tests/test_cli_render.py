from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from blogview import __version__
from blogview.cli import app


def _write_record(path: Path) -> Path:
    payload = {
        "site": {
            "displayName": "Glen Bray",
            "profileLinks": {"github": "glenbray"},
            "avatar": {"src": "/static/avatar.jpg"},
        },
        "post": {
            "id": "post-1",
            "title": "Hello",
            "publishedDate": "01 January, 2020",
            "excerpt": "Hi there",
            "bodyMarkup": "<p>Hi</p>",
            "slug": "/hello/",
        },
        "nav": {"currentPath": "/hello/", "siteTitle": "glenbray.com"},
    }
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_render_writes_page_to_configured_output(tmp_path: Path) -> None:
    (tmp_path / "blogview.yml").write_text("output_dir: public\n", encoding="utf-8")
    record = _write_record(tmp_path / "record.json")

    result = CliRunner().invoke(app, ["render", str(record), "--config", str(tmp_path)])

    assert result.exit_code == 0, result.output
    page = tmp_path / "public" / "hello" / "index.html"
    assert page.exists()
    assert '<section class="markdown"><p>Hi</p></section>' in page.read_text(encoding="utf-8")


def test_render_honours_output_option(tmp_path: Path) -> None:
    record = _write_record(tmp_path / "record.json")
    output = tmp_path / "out.html"

    result = CliRunner().invoke(
        app,
        ["render", str(record), "--config", str(tmp_path), "--output", str(output)],
    )

    assert result.exit_code == 0, result.output
    assert output.read_text(encoding="utf-8").startswith("<!DOCTYPE html>")


def test_render_rejects_invalid_record(tmp_path: Path) -> None:
    record = tmp_path / "record.json"
    record.write_text(json.dumps({"post": {"id": "x"}}), encoding="utf-8")

    result = CliRunner().invoke(app, ["render", str(record), "--config", str(tmp_path)])

    assert result.exit_code == 1
    assert "Invalid page record" in result.output


def test_render_reports_missing_record(tmp_path: Path) -> None:
    result = CliRunner().invoke(app, ["render", str(tmp_path / "nope.json"), "--config", str(tmp_path)])

    assert result.exit_code == 1
    assert "Record not found" in result.output


def test_render_reports_missing_config(tmp_path: Path) -> None:
    record = _write_record(tmp_path / "record.json")

    result = CliRunner().invoke(
        app,
        ["render", str(record), "--config", str(tmp_path / "missing.yml")],
    )

    assert result.exit_code == 2


def test_render_reports_unknown_provider(tmp_path: Path) -> None:
    record = _write_record(tmp_path / "record.json")
    data = json.loads(record.read_text(encoding="utf-8"))
    data["site"]["profileLinks"] = {"friendster": "glen"}
    record.write_text(json.dumps(data), encoding="utf-8")

    result = CliRunner().invoke(
        app,
        ["render", str(record), "--config", str(tmp_path), "--output", str(tmp_path / "out.html")],
    )

    assert result.exit_code == 1
    assert "Render failed" in result.output


def test_version_prints_package_version() -> None:
    result = CliRunner().invoke(app, ["version"])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_render_reports_broken_theme_include(tmp_path: Path) -> None:
    theme_dir = tmp_path / "themes" / "loose"
    theme_dir.mkdir(parents=True)
    (theme_dir / "theme.json").write_text(json.dumps({"entrypoints": {"shell": "shell.html"}}), encoding="utf-8")
    (theme_dir / "shell.html").write_text('{% include "partials/gone.html" %}', encoding="utf-8")
    (tmp_path / "blogview.yml").write_text("themes_dir: themes\ntheme_name: loose\n", encoding="utf-8")
    record = _write_record(tmp_path / "record.json")

    result = CliRunner().invoke(
        app,
        ["render", str(record), "--config", str(tmp_path), "--output", str(tmp_path / "out.html")],
    )

    assert result.exit_code == 1
    assert "Render failed" in result.output
    assert not (tmp_path / "out.html").exists()
