"""Configuration models and YAML loading for blogview."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

from .models import normalize_path_prefix

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "blogview.yml"
DEFAULT_SITE_NAME = "glenbray.com"


class ProfileProvider(BaseModel):
    """URL template used to link an author handle on an external service."""

    label: str
    url_template: str

    @field_validator("url_template")
    def _require_handle_placeholder(cls, value: str) -> str:
        if "{handle}" not in value:
            raise ValueError("Profile provider url_template must contain '{handle}'.")
        return value

    def url_for(self, handle: str) -> str:
        return self.url_template.replace("{handle}", handle)


def _default_providers() -> dict[str, ProfileProvider]:
    return {
        "github": ProfileProvider(label="github", url_template="https://github.com/{handle}"),
        "dev": ProfileProvider(label="dev.to", url_template="https://dev.to/{handle}"),
    }


class PostViewStyle(BaseModel):
    """Presentation classes and labels applied by the post template."""

    article_class: str = Field(default="bg-white px-6 py-4 rounded shadow mb-8")
    title_class: str = Field(default="text-4xl font-black mt-8 mb-0")
    date_class: str = Field(default="text-lg leading-loose mb-8 text-gray-600")
    divider_class: str = Field(default="h-px mb-8")
    nav_class: str = Field(default="mb-8")
    back_link_class: str = Field(default="text-2xl text-blue-600")
    back_label: str = Field(default="← Back")


POST_STYLE_PRESETS: dict[str, PostViewStyle] = {
    "standard": PostViewStyle(),
    "compact": PostViewStyle(
        article_class="bg-white px-4 py-2 rounded shadow mb-6",
        title_class="text-3xl font-black mt-6 mb-0",
        date_class="text-base leading-loose mb-6 text-gray-600",
        divider_class="h-px mb-6",
        nav_class="mb-6",
        back_link_class="text-xl text-blue-600",
        back_label="←",
    ),
}


class Config(BaseModel):
    site_title: str = Field(default=DEFAULT_SITE_NAME)
    footer_name: str = Field(
        default=DEFAULT_SITE_NAME,
        description="Fixed site name printed in the copyright footer.",
    )
    path_prefix: str = Field(default="", description="Prefix prepended to the site root path.")
    lang: str = Field(default="en")
    output_dir: Path = Field(default=Path("site"))
    themes_dir: Path | None = Field(default=None)
    theme_name: str = Field(default="default")
    avatar_size: int | None = Field(
        default=None,
        ge=1,
        description="Override for the rendered avatar width and height; defaults to the image dimensions.",
    )
    profile_providers: dict[str, ProfileProvider] = Field(default_factory=_default_providers)
    post_style: PostViewStyle = Field(default_factory=PostViewStyle)

    @field_validator("output_dir", mode="before")
    def _ensure_path(cls, value: Any) -> Path:
        return Path(value)

    @field_validator("themes_dir", mode="before")
    def _ensure_optional_path(cls, value: Any) -> Path | None:
        if value is None:
            return None
        return Path(value)

    @field_validator("path_prefix")
    def _normalize_prefix(cls, value: str) -> str:
        return normalize_path_prefix(value)

    @field_validator("profile_providers", mode="before")
    def _normalize_provider_keys(cls, value: Any) -> Any:
        if not isinstance(value, dict):
            return value
        normalized: dict[str, Any] = {}
        for key, entry in value.items():
            name = str(key).strip().lower()
            if name in normalized:
                raise ValueError(f"Duplicate profile provider '{name}' after normalizing '{key}'.")
            normalized[name] = entry
        return normalized

    @field_validator("post_style", mode="before")
    def _resolve_style_preset(cls, value: Any) -> Any:
        if isinstance(value, str):
            preset = POST_STYLE_PRESETS.get(value.strip().lower())
            if preset is None:
                known = ", ".join(sorted(POST_STYLE_PRESETS))
                raise ValueError(f"Unknown post_style preset '{value}' (expected one of: {known}).")
            return preset.model_copy()
        return value


def load_config(path: str | Path) -> Config:
    """Load configuration and resolve relative paths based on the config location.

    ``path`` may point to a file or to a directory containing ``blogview.yml``.
    A directory without a config file yields the defaults anchored there.
    """
    candidate = Path(path)
    data: dict[str, Any] = {}
    if candidate.is_dir():
        config_file = candidate / CONFIG_FILENAME
        if config_file.exists():
            with config_file.open("r", encoding="utf-8") as handle:
                data = yaml.safe_load(handle) or {}
        else:
            logger.warning("Configuration %s not found in %s; using defaults.", CONFIG_FILENAME, candidate)
        base_dir = candidate.resolve()
    else:
        if not candidate.exists():
            raise FileNotFoundError(candidate)
        with candidate.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
        base_dir = candidate.parent.resolve()

    if not isinstance(data, dict):
        raise ValueError(f"Configuration {candidate} must define a mapping at the top level.")

    cfg = Config(**data)

    def _abs_required(value: Path) -> Path:
        return value if value.is_absolute() else (base_dir / value).resolve()

    cfg.output_dir = _abs_required(cfg.output_dir)
    if cfg.themes_dir is not None:
        cfg.themes_dir = _abs_required(cfg.themes_dir)
    return cfg
