"""Replace the tags of a saved image."""

from __future__ import annotations

import click

from pixstash.cli import Context, pass_context
from pixstash.exceptions import LibraryError, NotFoundError, ValidationError
from pixstash.library.service import resolve_image_id, set_image_rating, update_image_tags
from pixstash.library.session import get_library_session, require_library
from pixstash.utils.output import error, success

EXIT_USAGE_ERROR = 1
EXIT_LIBRARY_ERROR = 2


@click.command("tag")
@click.argument("image_id")
@click.argument("tags", nargs=-1)
@click.option(
    "--rating",
    "-r",
    type=click.Choice(["g", "s", "q", "e", "none"], case_sensitive=False),
    default=None,
    help="Set the rating (none clears it)",
)
@pass_context
def cli(ctx: Context, image_id: str, tags: tuple[str, ...], rating: str | None) -> None:
    """Replace the tags of IMAGE_ID with TAGS.

    IMAGE_ID may be abbreviated to any unique prefix. Without TAGS only
    the rating is changed.

    \b
    Examples:
      pixstash tag 3f2a9c1e cat long_hair rating:s
      pixstash tag 3f2a9c1e --rating none
    """
    config = ctx.config
    if config is None:
        error("Configuration not loaded")
        raise SystemExit(EXIT_USAGE_ERROR)

    if not tags and rating is None:
        error("Nothing to do", hint="Pass tags, --rating, or both")
        raise SystemExit(EXIT_USAGE_ERROR)

    try:
        db_path = require_library(config.library_db)
        with get_library_session(db_path) as session:
            full_id = resolve_image_id(session, image_id)
            if tags:
                stored = update_image_tags(session, full_id, tags)
                success(f"Tagged {full_id}: {' '.join(stored)}")
            if rating is not None:
                set_image_rating(session, full_id, None if rating.lower() == "none" else rating)
                success(f"Rating of {full_id} set to {rating.lower()}")
    except (NotFoundError, ValidationError) as e:
        error(str(e))
        raise SystemExit(EXIT_USAGE_ERROR)
    except LibraryError as e:
        error(str(e))
        raise SystemExit(EXIT_LIBRARY_ERROR)
