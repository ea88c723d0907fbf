"""Take images back out of the trash."""

from __future__ import annotations

import click

from pixstash.cli import Context, pass_context
from pixstash.exceptions import LibraryError, NotFoundError, ValidationError
from pixstash.library.service import resolve_image_id, restore_image
from pixstash.library.session import get_library_session, require_library
from pixstash.utils.output import error, success


@click.command("restore")
@click.argument("image_ids", nargs=-1, required=True)
@pass_context
def cli(ctx: Context, image_ids: tuple[str, ...]) -> None:
    """Restore IMAGE_IDS from the trash."""
    config = ctx.config
    if config is None:
        error("Configuration not loaded")
        raise SystemExit(1)

    try:
        db_path = require_library(config.library_db)
        with get_library_session(db_path) as session:
            for image_id in image_ids:
                full_id = resolve_image_id(session, image_id)
                restore_image(session, full_id)
                success(f"Restored {full_id}")
    except (NotFoundError, ValidationError) as e:
        error(str(e))
        raise SystemExit(1)
    except LibraryError as e:
        error(str(e))
        raise SystemExit(2)
