"""Unit tests for StructuredFilter evaluation."""

from __future__ import annotations

import pytest

from pixstash.search.ast_nodes import EvaluableRecord, StructuredFilter, TagCountFilter
from pixstash.search.evaluator import filter_records, matches, tag_count_matches
from pixstash.search.parser import parse_query


def _rec(*tags: str, rating: str | None = None, mime: str = "", account: str | None = None):
    return EvaluableRecord.from_tags(tags, rating=rating, mime_type=mime, account=account)


class TestRecord:
    def test_tag_count_counts_distinct_tags(self) -> None:
        record = EvaluableRecord.from_tags(["a", "b", "a"])
        assert record.tag_count == 2
        assert record.tags == frozenset({"a", "b"})


class TestTagClauses:
    def test_empty_filter_matches_everything(self) -> None:
        assert matches(StructuredFilter(), _rec())
        assert matches(StructuredFilter(), _rec("a", rating="e", mime="image/png"))

    def test_include_all_required(self) -> None:
        q = parse_query("girl cat")
        assert matches(q, _rec("girl", "cat", "dog"))
        assert not matches(q, _rec("girl"))

    def test_exclude(self) -> None:
        q = parse_query("girl -dog")
        assert matches(q, _rec("girl", "cat"))
        assert not matches(q, _rec("girl", "dog"))

    def test_or_group_needs_one_member(self) -> None:
        q = parse_query("girl or cat")
        assert matches(q, _rec("girl"))
        assert matches(q, _rec("cat"))
        assert not matches(q, _rec("dog"))

    def test_every_group_must_match(self) -> None:
        q = parse_query("a or b c or d")
        assert matches(q, _rec("a", "d"))
        assert not matches(q, _rec("a", "b"))

    def test_tag_membership_is_case_sensitive(self) -> None:
        assert not matches(parse_query("Cat"), _rec("cat"))


class TestRatingClause:
    def test_rating_list(self) -> None:
        q = parse_query("rating:g,s")
        assert matches(q, _rec(rating="g"))
        assert matches(q, _rec(rating="s"))
        assert not matches(q, _rec(rating="e"))
        assert not matches(q, _rec())

    def test_unrated_only(self) -> None:
        q = parse_query("is:unrated")
        assert matches(q, _rec())
        assert not matches(q, _rec(rating="g"))

    def test_ratings_or_unrated(self) -> None:
        q = parse_query("rating:e is:unrated")
        assert matches(q, _rec(rating="e"))
        assert matches(q, _rec())
        assert not matches(q, _rec(rating="q"))


class TestFileTypeClause:
    def test_mime_membership(self) -> None:
        q = parse_query("is:png is:jpg")
        assert matches(q, _rec(mime="image/png"))
        assert matches(q, _rec(mime="image/jpeg"))
        assert not matches(q, _rec(mime="image/gif"))
        assert not matches(q, _rec())


class TestAccountClause:
    def test_include_requires_account(self) -> None:
        q = parse_query("account:alice")
        assert matches(q, _rec(account="alice"))
        assert not matches(q, _rec(account="bob"))
        assert not matches(q, _rec())

    def test_exclude_passes_records_without_account(self) -> None:
        q = parse_query("-account:bob")
        assert matches(q, _rec())
        assert matches(q, _rec(account="alice"))
        assert not matches(q, _rec(account="bob"))


class TestTagCount:
    @pytest.mark.parametrize(
        ("count_filter", "count", "expected"),
        [
            (TagCountFilter.exact(2), 2, True),
            (TagCountFilter.exact(2), 3, False),
            (TagCountFilter.cmp(">", 2), 3, True),
            (TagCountFilter.cmp(">", 2), 2, False),
            (TagCountFilter.cmp(">=", 2), 2, True),
            (TagCountFilter.cmp("<", 2), 1, True),
            (TagCountFilter.cmp("<=", 2), 3, False),
            (TagCountFilter.range(1, 3), 1, True),
            (TagCountFilter.range(1, 3), 3, True),
            (TagCountFilter.range(1, 3), 4, False),
            (TagCountFilter.list([0, 2]), 0, True),
            (TagCountFilter.list([0, 2]), 1, False),
        ],
    )
    def test_tag_count_matches(self, count_filter: TagCountFilter, count: int, expected: bool) -> None:
        assert tag_count_matches(count_filter, count) is expected

    def test_query_uses_distinct_count(self) -> None:
        q = parse_query("tagcount:2")
        assert matches(q, _rec("a", "b", "a"))
        assert not matches(q, _rec("a"))


class TestFilterRecords:
    def test_keeps_input_order(self) -> None:
        records = [
            _rec("cat", rating="g"),
            _rec("dog", rating="g"),
            _rec("cat", rating="e"),
            _rec("cat", "girl", rating="s"),
        ]
        result = filter_records(parse_query("cat rating:g,s"), records)
        assert result == [records[0], records[3]]

    def test_real_world_query(self) -> None:
        q = parse_query("anime long_hair or short_hair -realistic rating:g,s is:png tagcount:3..10")
        good = _rec("anime", "short_hair", "smile", rating="s", mime="image/png")
        wrong_type = _rec("anime", "short_hair", "smile", rating="s", mime="image/jpeg")
        realistic = _rec("anime", "long_hair", "realistic", rating="g", mime="image/png")
        assert filter_records(q, [good, wrong_type, realistic]) == [good]
