"""Search the image library with a tag query."""

from __future__ import annotations

import io
import json

import click
from rich.console import Console

from pixstash.cli import Context, pass_context
from pixstash.config import OUTPUT_FORMATS
from pixstash.exceptions import LibraryError
from pixstash.library.models import SavedImage
from pixstash.library.service import tags_by_image
from pixstash.library.session import get_library_session, require_library
from pixstash.search.parser import parse_query
from pixstash.search.query import execute_search
from pixstash.utils.output import (
    THEME,
    console,
    create_table,
    debug,
    error,
    info,
    pager_print,
    verbose,
)

EXIT_SUCCESS = 0
EXIT_NO_RESULTS = 0
EXIT_USAGE_ERROR = 1
EXIT_LIBRARY_ERROR = 2

_RATING_LABELS: dict[str, str] = {
    "g": "general",
    "s": "sensitive",
    "q": "questionable",
    "e": "explicit",
}


def _clip_text(value: str, max_width: int | None) -> str:
    """Truncate text to max_width, appending ellipsis if clipped."""
    if max_width is None or len(value) <= max_width:
        return value
    if max_width <= 1:
        return value[:max_width]
    return value[: max_width - 1] + "…"


@click.command("search", context_settings={"ignore_unknown_options": True})
@click.argument("query", nargs=-1)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(list(OUTPUT_FORMATS)),
    default=None,
    help="Output format (default: from config, else table)",
)
@click.option(
    "--limit",
    type=int,
    default=None,
    help="Limit number of results",
)
@click.option(
    "--trash",
    is_flag=True,
    default=False,
    help="Also search images in the trash",
)
@click.option(
    "--clip",
    type=int,
    default=40,
    show_default=True,
    help="Max width for the URL and tag columns (0 = no clip)",
)
@pass_context
def cli(
    ctx: Context,
    query: tuple[str, ...],
    output_format: str | None,
    limit: int | None,
    trash: bool,
    clip: int,
) -> None:
    """Search saved images with a Danbooru-style tag query.

    QUERY is joined with spaces. An empty query lists every image.
    Words starting with "-" are read as excluded tags, not options.

    \b
    Syntax:
      girl cat              both tags
      girl or cat           either tag (chains: a or b or c)
      -realistic            tag must be absent
      rating:g,s            rating list (or rating:general, rating:e)
      is:png  is:unrated    file type / images without a rating
      tagcount:>5           also 3, 1..10, 1,3,5, <=2
      account:a,b           saved from these accounts (-account: excludes)

    \b
    Examples:
      pixstash search "anime long_hair or short_hair -realistic"
      pixstash search "rating:g is:png tagcount:3..10"
      pixstash search --format ids "account:artist_1"
    """
    config = ctx.config
    if config is None:
        error("Configuration not loaded")
        raise SystemExit(EXIT_USAGE_ERROR)

    output_format = output_format or config.default_format
    if limit is None:
        limit = config.default_limit

    clip_width: int | None = clip if clip > 0 else None
    query_string = " ".join(query)

    parsed = parse_query(query_string)
    debug(f"Parsed filter: {json.dumps(parsed.to_dict())}")

    try:
        db_path = require_library(config.library_db)
        verbose(f"Library: {db_path}")
        with get_library_session(db_path) as session:
            images = execute_search(session, parsed, include_deleted=trash)

            if limit is not None:
                images = images[:limit]

            if not images:
                info(f"No results for: {query_string}")
                raise SystemExit(EXIT_NO_RESULTS)

            tags = tags_by_image(session, [image.id for image in images])

            if output_format == "table":
                _print_table(images, tags, query_string, clip_width)
            elif output_format == "ids":
                _print_ids(images)
            elif output_format == "json":
                _print_json(images, tags)

    except LibraryError as e:
        error(str(e), hint="Save an image first with: pixstash add URL")
        raise SystemExit(EXIT_LIBRARY_ERROR)

    raise SystemExit(EXIT_SUCCESS)


def _print_table(
    images: list[SavedImage],
    tags: dict[str, list[str]],
    query_string: str,
    clip_width: int | None,
) -> None:
    """Print results as a Rich table, using pager when appropriate."""
    info(f"Search: {query_string} ({len(images)} results)")

    table = create_table(show_header=True, header_style="bold")
    table.add_column("ID", style="image.id", no_wrap=True)
    table.add_column("Rating", style="image.rating", no_wrap=True)
    table.add_column("Type", no_wrap=True)
    table.add_column("Account", no_wrap=True)
    table.add_column("Tags", style="image.tags", no_wrap=True)
    table.add_column("URL", style="path", no_wrap=True)

    for image in images:
        table.add_row(
            image.id[:8],
            _RATING_LABELS.get(image.rating or "", ""),
            image.mime_type or "",
            image.account or "",
            _clip_text(" ".join(tags.get(image.id, [])), clip_width),
            _clip_text(image.image_url, clip_width),
        )

    # Render to buffer so we can route through pager
    buf = io.StringIO()
    render_console = Console(
        file=buf,
        theme=THEME,
        force_terminal=not console.no_color,
        width=1000,
        no_color=console.no_color,
    )
    render_console.print(table)

    pager_print(buf.getvalue(), header_lines=3)


def _print_ids(images: list[SavedImage]) -> None:
    """Print one image id per line."""
    for image in images:
        click.echo(image.id)


def _print_json(images: list[SavedImage], tags: dict[str, list[str]]) -> None:
    """Print results as JSON array."""
    results = []
    for image in images:
        results.append(
            {
                "id": image.id,
                "image_url": image.image_url,
                "page_url": image.page_url,
                "page_title": image.page_title,
                "mime_type": image.mime_type,
                "file_size": image.file_size,
                "width": image.width,
                "height": image.height,
                "saved_at": image.saved_at,
                "rating": image.rating,
                "account": image.account,
                "tags": tags.get(image.id, []),
                "is_deleted": image.is_deleted,
            }
        )
    click.echo(json.dumps(results, indent=2))
