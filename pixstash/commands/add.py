"""Save an image bookmark to the library."""

from __future__ import annotations

import mimetypes
from pathlib import Path

import click

from pixstash.cli import Context, pass_context
from pixstash.exceptions import LibraryError, ValidationError
from pixstash.library.service import save_image
from pixstash.library.session import get_library_session
from pixstash.utils.output import debug, error, success

EXIT_SUCCESS = 0
EXIT_USAGE_ERROR = 1
EXIT_LIBRARY_ERROR = 2


def _guess_mime(url: str, file: Path | None) -> str:
    """Guess the MIME type from the local file name, else from the URL."""
    for candidate in (str(file) if file is not None else None, url):
        if candidate:
            mime, _ = mimetypes.guess_type(candidate)
            if mime:
                return mime
    return ""


@click.command("add")
@click.argument("url")
@click.option("--page-url", default=None, help="Page the image was found on")
@click.option("--title", default=None, help="Title of that page")
@click.option("--mime", default=None, help="MIME type (default: guessed from file or URL)")
@click.option(
    "--file",
    "file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Store the image bytes from this local file",
)
@click.option("--account", default=None, help="Account the image was saved from")
@click.option(
    "--tag",
    "-t",
    "tags",
    multiple=True,
    help="Tag to attach (repeatable; rating:g|s|q|e sets the rating)",
)
@pass_context
def cli(
    ctx: Context,
    url: str,
    page_url: str | None,
    title: str | None,
    mime: str | None,
    file: Path | None,
    account: str | None,
    tags: tuple[str, ...],
) -> None:
    """Save the image at URL with tags.

    \b
    Examples:
      pixstash add https://example.com/a.png -t cat -t long_hair -t rating:g
      pixstash add https://example.com/b.jpg --file ./b.jpg --account artist_1
    """
    config = ctx.config
    if config is None:
        error("Configuration not loaded")
        raise SystemExit(EXIT_USAGE_ERROR)

    blob = file.read_bytes() if file is not None else None
    mime_type = mime if mime is not None else _guess_mime(url, file)
    debug(f"Saving {url} as {mime_type or 'unknown type'}")

    try:
        with get_library_session(config.library_db) as session:
            image_id = save_image(
                session,
                url,
                page_url=page_url,
                page_title=title,
                mime_type=mime_type,
                blob=blob,
                tags=tags,
                account=account,
            )
    except ValidationError as e:
        error(str(e))
        raise SystemExit(EXIT_USAGE_ERROR)
    except LibraryError as e:
        error(str(e))
        raise SystemExit(EXIT_LIBRARY_ERROR)

    success(f"Saved image {image_id}")
