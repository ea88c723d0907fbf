"""Run a StructuredFilter against the image library."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import or_

from pixstash.library.models import SavedImage
from pixstash.library.service import tags_by_image, to_record
from pixstash.search.ast_nodes import StructuredFilter
from pixstash.search.evaluator import matches

if TYPE_CHECKING:
    from sqlalchemy.orm import Query, Session


def _apply_metatag_clauses(query: Query, parsed: StructuredFilter) -> Query:
    """Push the column-level clauses (rating, MIME type, account) into SQL."""
    if parsed.ratings or parsed.include_unrated:
        conditions = []
        if parsed.ratings:
            conditions.append(SavedImage.rating.in_(sorted(parsed.ratings)))
        if parsed.include_unrated:
            conditions.append(SavedImage.rating.is_(None))
        query = query.filter(or_(*conditions))

    if parsed.file_types:
        query = query.filter(SavedImage.mime_type.in_(sorted(parsed.file_types)))

    if parsed.accounts:
        query = query.filter(SavedImage.account.in_(sorted(parsed.accounts)))

    if parsed.exclude_accounts:
        query = query.filter(
            or_(
                SavedImage.account.is_(None),
                SavedImage.account.notin_(sorted(parsed.exclude_accounts)),
            )
        )
    return query


def execute_search(
    session: Session,
    parsed: StructuredFilter,
    *,
    include_deleted: bool = False,
) -> list[SavedImage]:
    """Execute a parsed tag query against the library.

    Rating, MIME type and account clauses narrow the rows in SQL; tag and
    tag-count clauses are then evaluated per image with ``matches``.

    Args:
        session: SQLAlchemy session connected to the library database.
        parsed: Parsed query from ``parse_query``.
        include_deleted: Also search images in the trash.

    Returns:
        Matching images, newest first.
    """
    query = session.query(SavedImage)
    if not include_deleted:
        query = query.filter(SavedImage.is_deleted.is_(False))
    query = _apply_metatag_clauses(query, parsed)

    images = query.order_by(SavedImage.saved_at.desc()).all()
    if parsed.is_empty() or not images:
        return images

    tags = tags_by_image(session, [image.id for image in images])
    return [image for image in images if matches(parsed, to_record(image, tags.get(image.id, [])))]
