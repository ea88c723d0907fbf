"""Unit tests for tag token parsing."""

from __future__ import annotations

from pixstash.search.tokens import is_or_keyword, parse_tag_tokens


def test_is_or_keyword() -> None:
    assert is_or_keyword("or")
    assert is_or_keyword("OR")
    assert is_or_keyword("oR")
    assert not is_or_keyword("ore")
    assert not is_or_keyword("-or")


class TestParseTagTokens:
    def test_empty(self) -> None:
        assert parse_tag_tokens("") == ([], [], [])

    def test_include_and_exclude(self) -> None:
        assert parse_tag_tokens("a -b c") == (["a", "c"], ["b"], [])

    def test_or_pulls_previous_tag_from_include(self) -> None:
        include, exclude, groups = parse_tag_tokens("a b or c d")
        assert include == ["a", "d"]
        assert exclude == []
        assert groups == [["b", "c"]]

    def test_chain_extends_existing_group(self) -> None:
        _, _, groups = parse_tag_tokens("a or b or c or d")
        assert groups == [["a", "b", "c", "d"]]

    def test_separate_groups(self) -> None:
        _, _, groups = parse_tag_tokens("a or b c or d")
        assert groups == [["a", "b"], ["c", "d"]]

    def test_or_alone(self) -> None:
        assert parse_tag_tokens("or") == (["or"], [], [])

    def test_bare_hyphen_dropped(self) -> None:
        assert parse_tag_tokens("- a -") == (["a"], [], [])

    def test_double_hyphen_excludes_hyphen_tag(self) -> None:
        assert parse_tag_tokens("--x") == ([], ["-x"], [])
