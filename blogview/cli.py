"""CLI entrypoints for blogview."""

import json
from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError
from rich.console import Console

from . import __version__
from .components import RenderError, SiteRenderer
from .config import CONFIG_FILENAME, Config, load_config
from .pages import load_page_record, write_post_page
from .themes import ThemeError

console = Console()
app = typer.Typer(help="Render blog pages from resolved page records.")

ConfigPathOption = Annotated[
    str,
    typer.Option("--config", "-c", help="Path to configuration file or project directory."),
]


@app.command()
def render(
    record_path: Annotated[
        Path,
        typer.Argument(..., help="Resolved page record (JSON) to render."),
    ],
    config_path: ConfigPathOption = CONFIG_FILENAME,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the page here instead of <output_dir>/<slug>/index.html."),
    ] = None,
) -> None:
    """Render a post page record into a complete HTML document."""
    config = _load(config_path)

    try:
        record = load_page_record(record_path)
    except FileNotFoundError as exc:
        console.print(f"[bold red]Record not found[/]: {record_path}")
        raise typer.Exit(code=1) from exc
    except (json.JSONDecodeError, ValidationError) as exc:
        console.print(f"[bold red]Invalid page record[/]: {exc}")
        raise typer.Exit(code=1) from exc

    try:
        renderer = SiteRenderer(config)
        written = write_post_page(record, config, renderer, destination=output)
    except (ThemeError, RenderError, ValueError) as exc:
        console.print(f"[bold red]Render failed[/]: {exc}")
        raise typer.Exit(code=1) from exc

    console.print(f"[bold green]Rendered[/] {record.post.title!r} -> {written}")


@app.command()
def version() -> None:
    """Print the installed blogview version."""
    console.print(__version__)


def _load(path: str) -> Config:
    try:
        return load_config(path)
    except FileNotFoundError as exc:
        raise typer.BadParameter(f"Config file not found: {path}") from exc
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


def main() -> None:
    app()


if __name__ == "__main__":
    main()
