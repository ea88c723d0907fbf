"""Danbooru-style tag query parsing, evaluation and rewriting."""

from pixstash.search.ast_nodes import (
    EvaluableRecord,
    MetatagFragments,
    StructuredFilter,
    TagCountFilter,
)
from pixstash.search.evaluator import filter_records, matches
from pixstash.search.metatags import extract_metatags
from pixstash.search.mutator import remove_tag
from pixstash.search.parser import parse_query
from pixstash.search.tagcount import parse_tag_count
from pixstash.search.tokens import parse_tag_tokens

__all__ = [
    "EvaluableRecord",
    "MetatagFragments",
    "StructuredFilter",
    "TagCountFilter",
    "extract_metatags",
    "filter_records",
    "matches",
    "parse_query",
    "parse_tag_count",
    "parse_tag_tokens",
    "remove_tag",
]
