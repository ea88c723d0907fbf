"""Tokenize residual query text into include, exclude and OR-group tags."""

from __future__ import annotations

OR_KEYWORD = "or"
EXCLUDE_PREFIX = "-"


def is_or_keyword(token: str) -> bool:
    """Return whether *token* is the ``or`` combinator (any case)."""
    return token.lower() == OR_KEYWORD


def _find_group(or_groups: list[list[str]], tag: str) -> list[str] | None:
    for group in or_groups:
        if tag in group:
            return group
    return None


def parse_tag_tokens(text: str) -> tuple[list[str], list[str], list[list[str]]]:
    """Parse plain tag text into (include_tags, exclude_tags, or_groups).

    Tokens are read left to right. ``a or b`` binds its neighbours into an
    OR group, pulling ``a`` back out of the include list; a chain
    ``a or b or c`` grows the group ``a`` already belongs to. ``-tag``
    excludes ``tag`` and a bare ``-`` is dropped. Everything else, including
    an ``or`` with nothing on one side, is a required tag.

    Args:
        text: Residual query text with metatags already removed.

    Returns:
        Tuple of (include_tags, exclude_tags, or_groups).
    """
    tokens = text.split()
    include_tags: list[str] = []
    exclude_tags: list[str] = []
    or_groups: list[list[str]] = []

    # Whether the previous token was appended to include_tags
    prev_included = False

    i = 0
    while i < len(tokens):
        token = tokens[i]

        if is_or_keyword(token) and 0 < i < len(tokens) - 1:
            prev_tag = tokens[i - 1]
            next_tag = tokens[i + 1]

            if prev_included:
                include_tags.pop()

            group = _find_group(or_groups, prev_tag)
            if group is not None:
                group.append(next_tag)
            else:
                or_groups.append([prev_tag, next_tag])

            prev_included = False
            i += 2
            continue

        if token.startswith(EXCLUDE_PREFIX):
            tag = token[len(EXCLUDE_PREFIX) :]
            if tag:
                exclude_tags.append(tag)
            prev_included = False
        else:
            include_tags.append(token)
            prev_included = True

        i += 1

    return include_tags, exclude_tags, or_groups
