"""Parse Danbooru-style tag queries into a StructuredFilter."""

from __future__ import annotations

import logging

from pixstash.search.ast_nodes import StructuredFilter
from pixstash.search.metatags import extract_metatags
from pixstash.search.tokens import parse_tag_tokens

log = logging.getLogger(__name__)


def parse_query(query_string: str) -> StructuredFilter:
    """Parse a tag query string into a StructuredFilter.

    Supported syntax::

        girl cat            both tags required
        girl or cat         either tag
        -dog                tag must be absent
        rating:g,s          rating in the list (also rating:general)
        is:png is:unrated   MIME type / unrated images
        tagcount:>5         tag count (exact, >, <, >=, <=, N..M, A,B,C)
        account:a,b         saved from one of these accounts
        -account:c          not saved from this account

    Malformed clauses never raise; they are kept as plain tags.

    Args:
        query_string: The query to parse.

    Returns:
        A new StructuredFilter. An empty query yields a filter that
        matches every record.
    """
    if not query_string.strip():
        return StructuredFilter()

    fragments, residual = extract_metatags(query_string)
    include_tags, exclude_tags, or_groups = parse_tag_tokens(residual)

    parsed = StructuredFilter(
        include_tags=include_tags,
        exclude_tags=exclude_tags,
        or_groups=or_groups,
        ratings=fragments.ratings,
        include_unrated=fragments.include_unrated,
        file_types=fragments.file_types,
        tag_count=fragments.tag_count,
        accounts=fragments.accounts,
        exclude_accounts=fragments.exclude_accounts,
    )
    log.debug("Parsed %r -> %s", query_string, parsed)
    return parsed
