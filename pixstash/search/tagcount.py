"""Parse the value of a ``tagcount:`` clause."""

from __future__ import annotations

import logging
from importlib import resources
from typing import Any

from lark import Lark, Token, Transformer, UnexpectedInput

from pixstash.search.ast_nodes import TagCountFilter

log = logging.getLogger(__name__)


def _load_grammar() -> str:
    """Load the Lark grammar from the package resources."""
    return resources.files("pixstash.search").joinpath("tagcount.lark").read_text()


_parser = Lark(_load_grammar(), parser="lalr")


class _TagCountTransformer(Transformer):
    """Transform a tagcount parse tree into a TagCountFilter."""

    def count_list(self, items: list[Any]) -> TagCountFilter:
        return TagCountFilter.list(int(tok) for tok in items)

    def count_expr(self, items: list[Any]) -> TagCountFilter:
        # Optional parts come through as None placeholders
        tokens = [tok for tok in items if isinstance(tok, Token)]
        op = next((str(tok) for tok in tokens if tok.type == "CMP_OP"), "")
        numbers = [int(tok) for tok in tokens if tok.type == "COUNT"]

        if len(numbers) == 2:
            return TagCountFilter.range(numbers[0], numbers[1])
        if op:
            return TagCountFilter.cmp(op, numbers[0])
        return TagCountFilter.exact(numbers[0])


_transformer = _TagCountTransformer()


def parse_tag_count(value: str) -> TagCountFilter | None:
    """Parse a ``tagcount:`` value into a filter.

    Accepts ``1,3,5`` (list), ``>5`` / ``<3`` / ``>=2`` / ``<=10``
    (comparison), ``1..10`` or ``10..1`` (range, normalized so min <= max)
    and ``4`` (exact).

    Args:
        value: The text after ``tagcount:``.

    Returns:
        The parsed filter, or None when the value is not valid tagcount
        syntax (empty, non-numeric, negative, ...).
    """
    value = value.strip()
    if not value:
        return None

    try:
        tree = _parser.parse(value)
    except UnexpectedInput:
        log.debug("Not a tagcount value: %r", value)
        return None
    return _transformer.transform(tree)
