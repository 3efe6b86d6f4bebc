"""Write rendered post pages into the site output directory."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from .components import SiteRenderer
from .config import Config
from .models import PageRecord

logger = logging.getLogger(__name__)


def load_page_record(path: str | Path) -> PageRecord:
    """Read and validate a resolved page record stored as JSON."""
    source = Path(path)
    with source.open("r", encoding="utf-8") as handle:
        data = json.load(handle)
    return PageRecord.model_validate(data)


def post_output_path(record: PageRecord, config: Config) -> Path:
    """Resolve ``<output_dir>/<slug>/index.html`` for a post, using its id without a slug."""
    slug = (record.post.slug or record.post.id).strip().strip("/")
    relative = Path(slug)
    if not slug or relative.is_absolute() or ".." in relative.parts:
        msg = f"Post slug '{record.post.slug or record.post.id}' must be relative to the site root."
        raise ValueError(msg)
    return config.output_dir / relative / "index.html"


def write_post_page(
    record: PageRecord,
    config: Config,
    renderer: SiteRenderer | None = None,
    *,
    destination: Path | None = None,
) -> Path:
    """Render a post page document and write it to disk."""
    resources = renderer or SiteRenderer(config)
    nav = record.nav
    if not nav.path_prefix and config.path_prefix:
        nav = nav.model_copy(update={"path_prefix": config.path_prefix})
    rendered = resources.post_view(
        record.post,
        nav.site_title or config.site_title,
        nav,
        identity=record.site,
        previous=record.previous,
        next_post=record.next,
    )
    html = resources.render_document(rendered)
    target = destination or post_output_path(record, config)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(html, encoding="utf-8")
    logger.info("Wrote post page %s", target)
    return target
