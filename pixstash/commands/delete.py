"""Move images to the trash."""

from __future__ import annotations

import click

from pixstash.cli import Context, pass_context
from pixstash.exceptions import LibraryError, NotFoundError, ValidationError
from pixstash.library.service import (
    delete_all_images,
    delete_image,
    permanently_delete_image,
    resolve_image_id,
)
from pixstash.library.session import get_library_session, require_library
from pixstash.utils.output import error, success

EXIT_USAGE_ERROR = 1
EXIT_LIBRARY_ERROR = 2


@click.command("delete")
@click.argument("image_ids", nargs=-1)
@click.option("--all", "delete_all", is_flag=True, default=False, help="Trash every image")
@click.option(
    "--permanent",
    is_flag=True,
    default=False,
    help="Remove the images instead of moving them to the trash",
)
@pass_context
def cli(ctx: Context, image_ids: tuple[str, ...], delete_all: bool, permanent: bool) -> None:
    """Move IMAGE_IDS to the trash.

    \b
    Examples:
      pixstash delete 3f2a9c1e
      pixstash delete 3f2a9c1e --permanent
      pixstash delete --all
    """
    config = ctx.config
    if config is None:
        error("Configuration not loaded")
        raise SystemExit(EXIT_USAGE_ERROR)

    if delete_all == bool(image_ids):
        error("Pass either image ids or --all")
        raise SystemExit(EXIT_USAGE_ERROR)
    if delete_all and permanent:
        error("--permanent cannot be combined with --all", hint="Use: pixstash trash --empty")
        raise SystemExit(EXIT_USAGE_ERROR)

    try:
        db_path = require_library(config.library_db)
        with get_library_session(db_path) as session:
            if delete_all:
                count = delete_all_images(session)
                success(f"Moved {count} images to the trash")
                return
            for image_id in image_ids:
                full_id = resolve_image_id(session, image_id)
                if permanent:
                    permanently_delete_image(session, full_id)
                    success(f"Deleted {full_id}")
                else:
                    delete_image(session, full_id)
                    success(f"Moved {full_id} to the trash")
    except (NotFoundError, ValidationError) as e:
        error(str(e))
        raise SystemExit(EXIT_USAGE_ERROR)
    except LibraryError as e:
        error(str(e))
        raise SystemExit(EXIT_LIBRARY_ERROR)
