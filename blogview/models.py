"""Resolved page records consumed by the blog renderers."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


def normalize_path_prefix(value: str) -> str:
    """Return a prefix with one leading slash and no trailing slash, or an empty string."""
    text = value.strip().rstrip("/")
    if text and not text.startswith("/"):
        text = f"/{text}"
    return text


class _Record(BaseModel):
    """Immutable record accepting both camelCase graph keys and field names."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        extra="ignore",
    )


class FixedImage(_Record):
    """Pre-processed image resized to constant pixel dimensions upstream."""

    src: str
    src_set: str | None = None
    width: int = Field(default=100, ge=1)
    height: int = Field(default=100, ge=1)
    base64: str | None = None


class SiteIdentity(_Record):
    """Singleton author identity resolved once per build."""

    display_name: str
    profile_links: dict[str, str] = Field(default_factory=dict)
    avatar: FixedImage

    @field_validator("profile_links", mode="before")
    def _normalize_providers(cls, value: object) -> object:
        if not isinstance(value, dict):
            return value
        normalized: dict[str, object] = {}
        for key, handle in value.items():
            name = str(key).strip().lower()
            if name in normalized:
                raise ValueError(f"Duplicate profile provider '{name}' after normalizing '{key}'.")
            normalized[name] = handle
        return normalized


class Post(_Record):
    """A single post as produced by the external markdown pipeline."""

    id: str
    title: str
    published_date: str
    description: str | None = None
    excerpt: str = ""
    body_markup: str = ""
    slug: str | None = None

    @property
    def meta_description(self) -> str:
        """Description used for page metadata, falling back to the excerpt."""
        if self.description:
            return self.description
        return self.excerpt or ""


class PostLink(_Record):
    """Reference to a neighbouring post used for previous/next navigation."""

    slug: str
    title: str


class NavigationContext(_Record):
    """Per-page navigation inputs that select the header variant."""

    current_path: str
    site_title: str
    path_prefix: str = ""

    @field_validator("path_prefix")
    def _normalize_prefix(cls, value: str) -> str:
        return normalize_path_prefix(value)

    @property
    def root_path(self) -> str:
        return f"{self.path_prefix}/"

    @property
    def is_root(self) -> bool:
        return self.current_path == self.root_path


class SeoMetadata(_Record):
    """Head metadata emitted for a rendered page."""

    title: str
    description: str = ""
    site_title: str = ""
    author: str = ""
    lang: str = "en"
    meta: tuple[tuple[str, str, str], ...] = ()

    @property
    def document_title(self) -> str:
        if self.site_title and self.title:
            return f"{self.title} | {self.site_title}"
        return self.title or self.site_title


class PageRecord(_Record):
    """Fully resolved payload for one post page."""

    site: SiteIdentity
    post: Post
    nav: NavigationContext
    previous: PostLink | None = None
    next: PostLink | None = None
