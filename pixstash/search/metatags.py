"""Extract ``key:value`` metatags from raw query text.

Passes run in a fixed order (tagcount, rating, is, account). Each pass
consumes every clause it recognizes before the next one runs, so a later
pattern never sees text an earlier pass already claimed. Clauses are whole
whitespace-delimited tokens; anything that does not match exactly (``rating:``
with no value, ``tagcount:abc``, ``is:bmp``) is left in the residual text as
an ordinary tag.
"""

from __future__ import annotations

import re

from pixstash.search.ast_nodes import MetatagFragments
from pixstash.search.tagcount import parse_tag_count

# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------

_TAGCOUNT_RE = re.compile(r"(?<!\S)tagcount:(\S+)", re.IGNORECASE)
_RATING_RE = re.compile(
    r"(?<!\S)rating:([gsqe](?:,[gsqe])+|general|sensitive|questionable|explicit|[gsqe])(?!\S)",
    re.IGNORECASE,
)
_IS_RE = re.compile(r"(?<!\S)is:(unrated|jpg|jpeg|png|webp|gif|svg)(?!\S)", re.IGNORECASE)
_ACCOUNT_RE = re.compile(
    r"(?<!\S)(-?)account:([A-Za-z0-9_]+(?:,[A-Za-z0-9_]+)*)(?!\S)",
    re.IGNORECASE,
)

# is:<value> -> canonical MIME type
FILE_TYPE_MIME: dict[str, str] = {
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "webp": "image/webp",
    "gif": "image/gif",
    "svg": "image/svg+xml",
}

RATING_CODES: frozenset[str] = frozenset({"g", "s", "q", "e"})


# ---------------------------------------------------------------------------
# Passes
# ---------------------------------------------------------------------------


def _extract_tag_count(text: str, fragments: MetatagFragments) -> str:
    """Consume valid ``tagcount:`` clauses; the first one sets the filter."""

    def _consume(match: re.Match[str]) -> str:
        parsed = parse_tag_count(match.group(1))
        if parsed is None:
            return match.group(0)
        if fragments.tag_count is None:
            fragments.tag_count = parsed
        return " "

    return _TAGCOUNT_RE.sub(_consume, text)


def _extract_ratings(text: str, fragments: MetatagFragments) -> str:
    """Consume ``rating:`` clauses, unioning codes into ``ratings``."""

    def _consume(match: re.Match[str]) -> str:
        value = match.group(1).lower()
        # Full words map to their first letter, lists are split
        for part in value.split(","):
            fragments.ratings.add(part[0])
        return " "

    return _RATING_RE.sub(_consume, text)


def _extract_file_types(text: str, fragments: MetatagFragments) -> str:
    """Consume ``is:`` clauses into ``file_types`` or ``include_unrated``."""

    def _consume(match: re.Match[str]) -> str:
        value = match.group(1).lower()
        if value == "unrated":
            fragments.include_unrated = True
        else:
            fragments.file_types.add(FILE_TYPE_MIME[value])
        return " "

    return _IS_RE.sub(_consume, text)


def _extract_accounts(text: str, fragments: MetatagFragments) -> str:
    """Consume ``account:`` and ``-account:`` clauses."""

    def _consume(match: re.Match[str]) -> str:
        target = fragments.exclude_accounts if match.group(1) else fragments.accounts
        target.update(name for name in match.group(2).split(",") if name)
        return " "

    return _ACCOUNT_RE.sub(_consume, text)


def collapse_whitespace(text: str) -> str:
    """Collapse runs of whitespace to single spaces and trim."""
    return " ".join(text.split())


def extract_metatags(text: str) -> tuple[MetatagFragments, str]:
    """Split query text into metatag fragments and residual tag text.

    Args:
        text: Raw query text as typed by the user.

    Returns:
        Tuple of (fragments, residual) where residual holds only plain,
        ``-``excluded and ``or`` tokens, single-spaced.
    """
    fragments = MetatagFragments()
    working = text
    working = _extract_tag_count(working, fragments)
    working = _extract_ratings(working, fragments)
    working = _extract_file_types(working, fragments)
    working = _extract_accounts(working, fragments)
    return fragments, collapse_whitespace(working)
