"""CRUD operations over the image library."""

from __future__ import annotations

import logging
import time
import uuid
from typing import TYPE_CHECKING

from pixstash.exceptions import ImageNotFoundError, ValidationError
from pixstash.library.models import ImageTag, SavedImage
from pixstash.library.ratings import extract_rating_from_tags
from pixstash.search.ast_nodes import EvaluableRecord
from pixstash.search.metatags import RATING_CODES

if TYPE_CHECKING:
    from collections.abc import Iterable

    from sqlalchemy.orm import Session

log = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


def normalize_tags(tags: Iterable[str]) -> list[str]:
    """Drop empty and duplicate tags, keeping first-seen order.

    Raises:
        ValidationError: If a tag contains whitespace (queries split on it,
            so such a tag could never be searched for).
    """
    result: list[str] = []
    seen: set[str] = set()
    for tag in tags:
        if not tag:
            continue
        if tag.split() != [tag]:
            raise ValidationError("tag", tag, f"tags may not contain whitespace: {tag!r}")
        if tag in seen:
            continue
        seen.add(tag)
        result.append(tag)
    return result


def _require_image(session: Session, image_id: str) -> SavedImage:
    image = session.get(SavedImage, image_id)
    if image is None:
        raise ImageNotFoundError(image_id)
    return image


def _replace_tags(session: Session, image_id: str, tags: list[str]) -> None:
    session.query(ImageTag).filter(ImageTag.image_id == image_id).delete()
    for position, tag in enumerate(tags):
        session.add(ImageTag(image_id=image_id, tag=tag, position=position))


def save_image(
    session: Session,
    image_url: str,
    *,
    page_url: str | None = None,
    page_title: str | None = None,
    mime_type: str = "",
    blob: bytes | None = None,
    file_size: int | None = None,
    width: int | None = None,
    height: int | None = None,
    tags: Iterable[str] = (),
    account: str | None = None,
    saved_at: int | None = None,
) -> str:
    """Save a new image bookmark.

    ``rating:x`` entries in *tags* become the image's rating.

    Returns:
        The id of the new image.
    """
    rating, cleaned = extract_rating_from_tags(list(tags))
    cleaned = normalize_tags(cleaned)

    if file_size is None:
        file_size = len(blob) if blob is not None else 0

    image = SavedImage(
        id=uuid.uuid4().hex,
        image_url=image_url,
        page_url=page_url,
        page_title=page_title,
        mime_type=mime_type,
        blob=blob,
        file_size=file_size,
        width=width,
        height=height,
        saved_at=saved_at if saved_at is not None else _now_ms(),
        rating=rating,
        account=account,
        is_deleted=False,
    )
    session.add(image)
    _replace_tags(session, image.id, cleaned)
    session.flush()
    log.debug("Saved image %s (%d tags)", image.id, len(cleaned))
    return image.id


def get_image(session: Session, image_id: str) -> SavedImage | None:
    """Return the image with *image_id*, or None."""
    return session.get(SavedImage, image_id)


def resolve_image_id(session: Session, id_or_prefix: str) -> str:
    """Expand a full or abbreviated image id to the stored id.

    Raises:
        ImageNotFoundError: If no image id starts with *id_or_prefix*.
        ValidationError: If the prefix matches more than one image.
    """
    if session.get(SavedImage, id_or_prefix) is not None:
        return id_or_prefix
    if not id_or_prefix:
        raise ImageNotFoundError(id_or_prefix)
    rows = (
        session.query(SavedImage.id)
        .filter(SavedImage.id.startswith(id_or_prefix, autoescape=True))
        .limit(2)
        .all()
    )
    if not rows:
        raise ImageNotFoundError(id_or_prefix)
    if len(rows) > 1:
        raise ValidationError("id", id_or_prefix, "prefix matches more than one image")
    return rows[0].id


def get_image_tags(session: Session, image_id: str) -> list[str]:
    """Return the tags of one image in stored order."""
    rows = (
        session.query(ImageTag.tag)
        .filter(ImageTag.image_id == image_id)
        .order_by(ImageTag.position)
        .all()
    )
    return [row.tag for row in rows]


def tags_by_image(session: Session, image_ids: Iterable[str] | None = None) -> dict[str, list[str]]:
    """Return ``{image_id: [tags...]}``, optionally restricted to *image_ids*."""
    query = session.query(ImageTag).order_by(ImageTag.image_id, ImageTag.position)
    if image_ids is not None:
        query = query.filter(ImageTag.image_id.in_(list(image_ids)))
    result: dict[str, list[str]] = {}
    for row in query.all():
        result.setdefault(row.image_id, []).append(row.tag)
    return result


def update_image_tags(session: Session, image_id: str, tags: Iterable[str]) -> list[str]:
    """Replace the tags of an image.

    A ``rating:x`` tag sets the rating; without one the rating is left as is.

    Returns:
        The tags as stored (rating tags removed, normalized).

    Raises:
        ImageNotFoundError: If no image has this id.
    """
    image = _require_image(session, image_id)
    rating, cleaned = extract_rating_from_tags(list(tags))
    cleaned = normalize_tags(cleaned)
    if rating is not None:
        image.rating = rating
    _replace_tags(session, image_id, cleaned)
    session.flush()
    return cleaned


def set_image_rating(session: Session, image_id: str, rating: str | None) -> None:
    """Set or clear the rating of an image.

    Raises:
        ImageNotFoundError: If no image has this id.
        ValidationError: If *rating* is not one of g, s, q, e.
    """
    image = _require_image(session, image_id)
    if rating is not None:
        rating = rating.lower()
        if rating not in RATING_CODES:
            raise ValidationError("rating", rating, "must be one of g, s, q, e")
    image.rating = rating
    session.flush()


def delete_image(session: Session, image_id: str) -> None:
    """Move an image to the trash (soft delete)."""
    image = _require_image(session, image_id)
    image.is_deleted = True
    session.flush()


def restore_image(session: Session, image_id: str) -> None:
    """Take an image back out of the trash."""
    image = _require_image(session, image_id)
    image.is_deleted = False
    session.flush()


def permanently_delete_image(session: Session, image_id: str) -> None:
    """Remove an image and its tags from the database."""
    image = _require_image(session, image_id)
    session.query(ImageTag).filter(ImageTag.image_id == image_id).delete()
    session.delete(image)
    session.flush()


def delete_all_images(session: Session) -> int:
    """Soft-delete every image not already in the trash.

    Returns:
        Number of images moved to the trash.
    """
    count = (
        session.query(SavedImage)
        .filter(SavedImage.is_deleted.is_(False))
        .update({SavedImage.is_deleted: True}, synchronize_session="fetch")
    )
    session.flush()
    return count


def empty_trash(session: Session) -> int:
    """Permanently delete every soft-deleted image.

    Returns:
        Number of images removed.
    """
    ids = [row.id for row in session.query(SavedImage.id).filter(SavedImage.is_deleted.is_(True))]
    if ids:
        session.query(ImageTag).filter(ImageTag.image_id.in_(ids)).delete(
            synchronize_session="fetch"
        )
        session.query(SavedImage).filter(SavedImage.id.in_(ids)).delete(
            synchronize_session="fetch"
        )
        session.flush()
    log.info("Emptied trash: %d images", len(ids))
    return len(ids)


def count_images(session: Session, *, deleted: bool = False) -> int:
    """Count images that are not in the trash (or, with *deleted*, that are)."""
    return session.query(SavedImage).filter(SavedImage.is_deleted.is_(deleted)).count()


def to_record(image: SavedImage, tags: Iterable[str]) -> EvaluableRecord:
    """Build the evaluator's view of a stored image."""
    return EvaluableRecord.from_tags(
        tags,
        rating=image.rating,
        mime_type=image.mime_type or "",
        account=image.account,
        key=image.id,
    )


def load_records(session: Session) -> list[EvaluableRecord]:
    """Return an EvaluableRecord for every image not in the trash."""
    images = (
        session.query(SavedImage)
        .filter(SavedImage.is_deleted.is_(False))
        .order_by(SavedImage.saved_at.desc())
        .all()
    )
    tags = tags_by_image(session)
    return [to_record(image, tags.get(image.id, [])) for image in images]
