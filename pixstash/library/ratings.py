"""Pull ``rating:x`` entries out of an image's tag list."""

from __future__ import annotations

import re

from pixstash.search.metatags import RATING_CODES

# Only the short form counts here; rating:general is an ordinary tag
_RATING_TAG_RE = re.compile(r"rating:([a-z])", re.IGNORECASE)


def extract_rating_from_tags(tags: list[str]) -> tuple[str | None, list[str]]:
    """Split rating tags from the other tags.

    The first ``rating:g``/``s``/``q``/``e`` tag (any case) sets the rating;
    every rating tag is dropped from the returned list, and the remaining
    tags keep their order.

    Returns:
        Tuple of (rating or None, cleaned_tags).
    """
    rating: str | None = None
    cleaned: list[str] = []
    for tag in tags:
        match = _RATING_TAG_RE.fullmatch(tag)
        if match and match.group(1).lower() in RATING_CODES:
            if rating is None:
                rating = match.group(1).lower()
            continue
        cleaned.append(tag)
    return rating, cleaned
