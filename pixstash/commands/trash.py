"""Show or empty the trash."""

from __future__ import annotations

import click

from pixstash.cli import Context, pass_context
from pixstash.exceptions import LibraryError
from pixstash.library.service import count_images, empty_trash
from pixstash.library.session import get_library_session, require_library
from pixstash.utils.output import error, info, success


@click.command("trash")
@click.option("--empty", is_flag=True, default=False, help="Permanently delete trashed images")
@pass_context
def cli(ctx: Context, empty: bool) -> None:
    """Show how many images are in the trash, or empty it with --empty."""
    config = ctx.config
    if config is None:
        error("Configuration not loaded")
        raise SystemExit(1)

    try:
        db_path = require_library(config.library_db)
        with get_library_session(db_path) as session:
            if empty:
                removed = empty_trash(session)
                success(f"Removed {removed} images from the trash")
                return
            trashed = count_images(session, deleted=True)
            info(f"{trashed} images in the trash, {count_images(session)} in the library")
    except LibraryError as e:
        error(str(e))
        raise SystemExit(2)
