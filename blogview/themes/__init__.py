"""Theme loading and rendering utilities for blogview."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Sequence

from jinja2 import Environment, FileSystemLoader, TemplateError, TemplateNotFound, select_autoescape
from markupsafe import Markup
from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "theme.json"
DEFAULT_THEME_NAME = "default"
BUNDLED_THEMES_ROOT = Path(__file__).resolve().parent
REQUIRED_ENTRYPOINTS: tuple[str, ...] = ("shell", "author", "seo", "post", "document")


class ThemeError(RuntimeError):
    """Raised when a theme cannot be loaded or validated."""


class ThemeManifest(BaseModel):
    """Structured representation of the theme.json manifest."""

    model_config = ConfigDict(extra="ignore")

    name: str = Field(default="Unnamed Theme")
    version: str | None = Field(default=None)
    entrypoints: dict[str, str] = Field(default_factory=dict)
    partials: dict[str, str] = Field(default_factory=dict)

    def merge_with(self, fallback: "ThemeManifest | None") -> "ThemeManifest":
        if fallback is None:
            return self
        return ThemeManifest(
            name=self.name or fallback.name,
            version=self.version or fallback.version,
            entrypoints={**fallback.entrypoints, **self.entrypoints},
            partials={**fallback.partials, **self.partials},
        )

    def to_template_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "version": self.version,
            "entrypoints": dict(self.entrypoints),
            "partials": dict(self.partials),
        }


class ThemeLoader:
    """Load a theme manifest and its Jinja environment, falling back to the bundled theme."""

    def __init__(
        self,
        *,
        themes_root: Path | None = None,
        active_theme: str = DEFAULT_THEME_NAME,
        fallback_root: Path = BUNDLED_THEMES_ROOT,
        fallback_theme: str = DEFAULT_THEME_NAME,
    ) -> None:
        self._themes_root = themes_root or fallback_root
        self._active_theme = active_theme or DEFAULT_THEME_NAME
        self._fallback_root = fallback_root
        self._fallback_theme = fallback_theme or DEFAULT_THEME_NAME
        self._environment: Environment | None = None
        self._manifest: ThemeManifest | None = None
        self._load()

    @property
    def manifest(self) -> ThemeManifest:
        assert self._manifest is not None  # pragma: no cover
        return self._manifest

    @property
    def environment(self) -> Environment:
        assert self._environment is not None  # pragma: no cover
        return self._environment

    @property
    def active_theme(self) -> str:
        return self._active_theme

    def render(self, key: str, context: dict[str, Any]) -> Markup:
        """Render the template registered under ``key`` as a safe fragment."""
        template_path = self.manifest.entrypoints.get(key)
        if not template_path:
            raise ThemeError(f"Theme '{self._active_theme}' does not define an entrypoint named '{key}'.")
        try:
            template = self.environment.get_template(template_path)
            return Markup(template.render(**context))
        except TemplateNotFound as exc:
            raise ThemeError(
                f"Template '{exc.name}' not found while rendering '{key}' for theme '{self._active_theme}'."
            ) from exc
        except TemplateError as exc:
            raise ThemeError(
                f"Template '{template_path}' failed to render for theme '{self._active_theme}': {exc}"
            ) from exc

    def ensure_templates(self, template_keys: Sequence[str]) -> None:
        for key in template_keys:
            template_path = self.manifest.entrypoints.get(key)
            if not template_path:
                raise ThemeError(f"Theme '{self._active_theme}' is missing the '{key}' entrypoint.")
            try:
                self.environment.get_template(template_path)
            except TemplateNotFound as exc:
                raise ThemeError(
                    f"Required template '{template_path}' not found while loading theme '{self._active_theme}'."
                ) from exc
            except TemplateError as exc:
                raise ThemeError(f"Template '{template_path}' is invalid in theme '{self._active_theme}': {exc}") from exc

    def ensure_partials(self) -> None:
        for name, template_path in self.manifest.partials.items():
            try:
                self.environment.get_template(template_path)
            except TemplateNotFound as exc:
                raise ThemeError(
                    f"Partial '{name}' template '{template_path}' not found while loading theme '{self._active_theme}'."
                ) from exc
            except TemplateError as exc:
                raise ThemeError(f"Partial template '{template_path}' is invalid in theme '{self._active_theme}': {exc}") from exc

    def _load(self) -> None:
        fallback_dir = self._fallback_root / self._fallback_theme
        active_dir = self._themes_root / self._active_theme

        fallback_manifest = self._load_manifest(fallback_dir)
        active_manifest = fallback_manifest if active_dir == fallback_dir else self._load_manifest(active_dir)

        if active_manifest is None and fallback_manifest is None:
            raise ThemeError(
                f"Neither active theme '{self._active_theme}' nor fallback '{self._fallback_theme}' could be loaded."
            )

        search_paths: list[Path] = []
        if active_manifest is None:
            logger.warning(
                "Active theme '%s' not available under %s. Falling back to '%s'.",
                self._active_theme,
                self._themes_root,
                self._fallback_theme,
            )
            assert fallback_manifest is not None
            merged_manifest = fallback_manifest
        else:
            merged_manifest = active_manifest.merge_with(
                fallback_manifest if fallback_manifest is not active_manifest else None
            )
            search_paths.append(active_dir)
        if fallback_manifest is not None and fallback_dir not in search_paths:
            search_paths.append(fallback_dir)

        environment = Environment(
            loader=FileSystemLoader([str(path) for path in search_paths]),
            autoescape=select_autoescape(["html", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=False,
        )
        environment.globals["theme"] = merged_manifest.to_template_dict()

        self._environment = environment
        self._manifest = merged_manifest
        self.ensure_templates(REQUIRED_ENTRYPOINTS)
        self.ensure_partials()

    @staticmethod
    def _load_manifest(theme_dir: Path) -> ThemeManifest | None:
        manifest_path = theme_dir / MANIFEST_FILENAME
        if not manifest_path.exists():
            logger.debug("Theme manifest not found at %s", manifest_path)
            return None
        try:
            data = json.loads(manifest_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise ThemeError(f"Failed to load theme manifest at {manifest_path}: {exc}") from exc
        try:
            return ThemeManifest.model_validate(data)
        except ValidationError as exc:
            raise ThemeError(f"Theme manifest validation failed for {manifest_path}: {exc}") from exc


def build_theme_loader(
    *,
    themes_root: Path | None = None,
    active_theme: str = DEFAULT_THEME_NAME,
) -> ThemeLoader:
    """Construct a ThemeLoader with helpful error reporting."""
    try:
        return ThemeLoader(themes_root=themes_root, active_theme=active_theme)
    except ThemeError:
        raise
    except Exception as exc:  # pragma: no cover
        raise ThemeError(f"Unexpected error loading theme '{active_theme}': {exc}") from exc
