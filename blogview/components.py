"""Page shell, author summary and post view renderers."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from functools import lru_cache
from typing import Callable

from markupsafe import Markup

from .config import Config, PostViewStyle
from .models import NavigationContext, Post, PostLink, SeoMetadata, SiteIdentity
from .themes import ThemeLoader, build_theme_loader

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


class RenderError(RuntimeError):
    """Raised when a record cannot be rendered with the active configuration."""


class ProfileProviderError(RenderError):
    """Raised when an author profile link names a provider with no URL template."""


def trusted_markup(markup: str | None) -> Markup:
    """Mark pre-sanitized HTML for verbatim insertion.

    The markup is not escaped or cleaned here. Only pass HTML produced by a
    trusted upstream renderer.
    """
    if markup is None:
        return Markup("")
    return Markup(markup)


def build_seo_metadata(
    title: str,
    description: str | None,
    *,
    site_title: str = "",
    author: str = "",
    lang: str = "en",
) -> SeoMetadata:
    """Collect the head metadata for a page; a missing description renders empty."""
    text = description or ""
    return SeoMetadata(
        title=title,
        description=text,
        site_title=site_title,
        author=author,
        lang=lang,
        meta=(
            ("name", "description", text),
            ("property", "og:title", title),
            ("property", "og:description", text),
            ("property", "og:type", "article"),
            ("name", "twitter:card", "summary"),
            ("name", "twitter:creator", author),
            ("name", "twitter:title", title),
            ("name", "twitter:description", text),
        ),
    )


@dataclass(frozen=True, slots=True)
class ProfileLink:
    """Resolved anchor for one author profile."""

    provider: str
    label: str
    href: str


@dataclass(frozen=True, slots=True)
class RenderedPost:
    """Head and body fragments produced for a single post page."""

    head: Markup
    body: Markup
    seo: SeoMetadata


class SiteRenderer:
    """Render blog components through the active theme templates."""

    def __init__(
        self,
        config: Config | None = None,
        *,
        theme: ThemeLoader | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._config = config or Config()
        self._theme = theme or build_theme_loader(
            themes_root=self._config.themes_dir,
            active_theme=self._config.theme_name,
        )
        self._clock = clock or datetime.now

    @property
    def config(self) -> Config:
        return self._config

    @property
    def theme(self) -> ThemeLoader:
        return self._theme

    def page_shell(self, nav: NavigationContext, children: Markup | str) -> Markup:
        """Wrap ``children`` with the header chosen by path and the copyright footer."""
        return self._theme.render(
            "shell",
            {
                "nav": nav,
                "children": children,
                "year": self._clock().year,
                "footer_name": self._config.footer_name,
            },
        )

    def profile_links(self, identity: SiteIdentity) -> list[ProfileLink]:
        links: list[ProfileLink] = []
        for provider_name, handle in identity.profile_links.items():
            provider = self._config.profile_providers.get(provider_name)
            if provider is None:
                known = ", ".join(sorted(self._config.profile_providers)) or "none"
                raise ProfileProviderError(
                    f"No profile provider configured for '{provider_name}' (known: {known})."
                )
            links.append(ProfileLink(provider=provider_name, label=provider.label, href=provider.url_for(handle)))
        return links

    def author_summary(self, identity: SiteIdentity) -> Markup:
        return self._theme.render(
            "author",
            {
                "identity": identity,
                "links": self.profile_links(identity),
                "width": self._config.avatar_size or identity.avatar.width,
                "height": self._config.avatar_size or identity.avatar.height,
            },
        )

    def seo(self, metadata: SeoMetadata) -> Markup:
        return self._theme.render("seo", {"seo": metadata})

    def post_view(
        self,
        post: Post,
        site_title: str,
        nav: NavigationContext,
        *,
        identity: SiteIdentity,
        previous: PostLink | None = None,
        next_post: PostLink | None = None,
        style: PostViewStyle | None = None,
    ) -> RenderedPost:
        """Render a post inside the page shell with author summaries above and below."""
        page_nav = nav.model_copy(update={"site_title": site_title})
        metadata = build_seo_metadata(
            post.title,
            post.meta_description,
            site_title=site_title,
            author=identity.display_name,
            lang=self._config.lang,
        )
        author = self.author_summary(identity)
        content = self._theme.render(
            "post",
            {
                "post": post,
                "body": trusted_markup(post.body_markup),
                "author": author,
                "nav": page_nav,
                "style": style or self._config.post_style,
                "previous": self._neighbour(previous, page_nav),
                "next": self._neighbour(next_post, page_nav),
            },
        )
        logger.debug("Rendered post %s (%s)", post.id, post.slug or "no slug")
        return RenderedPost(
            head=self.seo(metadata),
            body=self.page_shell(page_nav, content),
            seo=metadata,
        )

    def render_document(self, rendered: RenderedPost) -> str:
        """Compose a complete HTML document from rendered post fragments."""
        html = self._theme.render(
            "document",
            {"head": rendered.head, "body": rendered.body, "seo": rendered.seo},
        )
        return f"{html}\n"

    @staticmethod
    def _neighbour(link: PostLink | None, nav: NavigationContext) -> dict[str, str] | None:
        if link is None:
            return None
        slug = link.slug.strip("/")
        href = f"{nav.root_path}{slug}/" if slug else nav.root_path
        return {"href": href, "title": link.title}


@lru_cache(maxsize=1)
def default_renderer() -> SiteRenderer:
    """Shared renderer using the default configuration and bundled theme."""
    return SiteRenderer()


def render_page_shell(
    nav: NavigationContext,
    children: Markup | str,
    *,
    renderer: SiteRenderer | None = None,
) -> Markup:
    return (renderer or default_renderer()).page_shell(nav, children)


def render_author_summary(identity: SiteIdentity, *, renderer: SiteRenderer | None = None) -> Markup:
    return (renderer or default_renderer()).author_summary(identity)


def render_post_view(
    post: Post,
    site_title: str,
    nav: NavigationContext,
    *,
    identity: SiteIdentity,
    previous: PostLink | None = None,
    next_post: PostLink | None = None,
    style: PostViewStyle | None = None,
    renderer: SiteRenderer | None = None,
) -> RenderedPost:
    return (renderer or default_renderer()).post_view(
        post,
        site_title,
        nav,
        identity=identity,
        previous=previous,
        next_post=next_post,
        style=style,
    )


def render_seo(metadata: SeoMetadata, *, renderer: SiteRenderer | None = None) -> Markup:
    return (renderer or default_renderer()).seo(metadata)
