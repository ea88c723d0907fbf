"""Evaluate a StructuredFilter against in-memory records."""

from __future__ import annotations

import operator
from collections.abc import Callable, Iterable

from pixstash.search.ast_nodes import (
    TAGCOUNT_CMP,
    TAGCOUNT_LIST,
    TAGCOUNT_RANGE,
    EvaluableRecord,
    StructuredFilter,
    TagCountFilter,
)

_COMPARATORS: dict[str, Callable[[int, int], bool]] = {
    ">": operator.gt,
    "<": operator.lt,
    ">=": operator.ge,
    "<=": operator.le,
}


def _rating_matches(query: StructuredFilter, record: EvaluableRecord) -> bool:
    if not query.ratings and not query.include_unrated:
        return True
    if record.rating is None:
        return query.include_unrated
    return record.rating in query.ratings


def _account_matches(query: StructuredFilter, record: EvaluableRecord) -> bool:
    if query.accounts and record.account not in query.accounts:
        return False
    if record.account is not None and record.account in query.exclude_accounts:
        return False
    return True


def tag_count_matches(count_filter: TagCountFilter, count: int) -> bool:
    """Return whether *count* satisfies a tag-count filter."""
    if count_filter.kind == TAGCOUNT_LIST:
        return count in count_filter.values
    if count_filter.kind == TAGCOUNT_RANGE:
        return count_filter.min <= count <= count_filter.max
    if count_filter.kind == TAGCOUNT_CMP:
        return _COMPARATORS[count_filter.op](count, count_filter.value)
    return count == count_filter.value


def _tags_match(query: StructuredFilter, tags: frozenset[str]) -> bool:
    if not all(tag in tags for tag in query.include_tags):
        return False
    if not all(any(tag in tags for tag in group) for group in query.or_groups):
        return False
    return not any(tag in tags for tag in query.exclude_tags)


def matches(query: StructuredFilter, record: EvaluableRecord) -> bool:
    """Return whether *record* satisfies every clause of *query*.

    Empty clauses are vacuously true, so an empty filter matches all
    records. Metatag clauses run first; tag membership is checked last.
    """
    if not _rating_matches(query, record):
        return False
    if query.file_types and record.mime_type not in query.file_types:
        return False
    if query.tag_count is not None and not tag_count_matches(query.tag_count, record.tag_count):
        return False
    if not _account_matches(query, record):
        return False
    return _tags_match(query, record.tags)


def filter_records(
    query: StructuredFilter, records: Iterable[EvaluableRecord]
) -> list[EvaluableRecord]:
    """Return the records matching *query*, in input order."""
    return [record for record in records if matches(query, record)]
