"""blogview rendering package exposing the blog page components."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version as load_pkg_version
from pathlib import Path
import tomllib

from .components import (
    RenderedPost,
    SiteRenderer,
    render_author_summary,
    render_page_shell,
    render_post_view,
    trusted_markup,
)
from .models import FixedImage, NavigationContext, PageRecord, Post, PostLink, SiteIdentity

__all__ = [
    "__version__",
    "FixedImage",
    "NavigationContext",
    "PageRecord",
    "Post",
    "PostLink",
    "RenderedPost",
    "SiteIdentity",
    "SiteRenderer",
    "render_author_summary",
    "render_page_shell",
    "render_post_view",
    "trusted_markup",
]


def _read_local_project_version() -> str:
    """Read the project version from pyproject.toml when the package is uninstalled."""
    pyproject = Path(__file__).resolve().parent.parent / "pyproject.toml"
    try:
        data = tomllib.loads(pyproject.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return "0.0.0"
    return data.get("project", {}).get("version", "0.0.0")


try:
    __version__ = load_pkg_version("blogview")
except PackageNotFoundError:
    __version__ = _read_local_project_version()
