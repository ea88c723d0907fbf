"""Unit tests for removing a tag from query text."""

from __future__ import annotations

import pytest

from pixstash.search.mutator import remove_tag
from pixstash.search.parser import parse_query


class TestRemoveTag:
    def test_removes_tag_with_following_or(self) -> None:
        assert remove_tag("cat or girl", "cat") == "girl"

    def test_removes_tag_with_preceding_or(self) -> None:
        assert remove_tag("girl or cat", "cat") == "girl"

    def test_leaves_other_tags(self) -> None:
        assert remove_tag("dog cat girl", "cat") == "dog girl"

    def test_tag_at_beginning(self) -> None:
        assert remove_tag("cat girl", "cat") == "girl"

    def test_tag_at_end(self) -> None:
        assert remove_tag("girl cat", "cat") == "girl"

    def test_only_tag(self) -> None:
        assert remove_tag("cat", "cat") == ""

    def test_middle_of_chain_keeps_alternatives_joined(self) -> None:
        assert remove_tag("dog or cat or girl", "cat") == "dog or girl"

    def test_ends_of_chain(self) -> None:
        assert remove_tag("dog or cat or girl", "dog") == "cat or girl"
        assert remove_tag("dog or cat or girl", "girl") == "dog or cat"

    @pytest.mark.parametrize("keyword", ["OR", "Or", "oR"])
    def test_or_keyword_any_case(self, keyword: str) -> None:
        assert remove_tag(f"cat {keyword} girl", "cat") == "girl"

    def test_absent_tag_is_noop(self) -> None:
        assert remove_tag("dog girl", "cat") == "dog girl"

    def test_multiple_spaces_normalized(self) -> None:
        assert remove_tag("dog  cat  girl", "cat") == "dog girl"

    def test_every_occurrence_removed(self) -> None:
        assert remove_tag("cat dog cat", "cat") == "dog"

    def test_exact_token_only(self) -> None:
        assert remove_tag("-cat cats cat", "cat") == "-cat cats"

    def test_metatags_preserved(self) -> None:
        assert remove_tag("rating:g cat is:png", "cat") == "rating:g is:png"

    def test_result_parses_to_remaining_group(self) -> None:
        q = parse_query(remove_tag("anime dog or cat or girl", "cat"))
        assert q.include_tags == ["anime"]
        assert q.or_groups == [["dog", "girl"]]
