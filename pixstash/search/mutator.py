"""Rewrite query text with one tag removed.

This works on the raw tokens, not on a parsed filter, so metatags and
unrelated tokens come back exactly as the user typed them (apart from
whitespace, which is normalized to single spaces).
"""

from __future__ import annotations

from pixstash.search.tokens import is_or_keyword


def remove_tag(query_string: str, tag: str) -> str:
    """Remove every occurrence of *tag* from a query string.

    An ``or`` left dangling by the removal goes with the tag:

        >>> remove_tag("girl or cat", "girl")
        'cat'
        >>> remove_tag("girl or cat", "cat")
        'girl'

    Inside a longer chain the remaining alternatives stay OR-joined:

        >>> remove_tag("dog or cat or girl", "cat")
        'dog or girl'

    Args:
        query_string: The query text.
        tag: The exact token to remove (case-sensitive).

    Returns:
        The rewritten query, single-spaced and trimmed. If *tag* does not
        occur, the whitespace-normalized input.
    """
    tokens = query_string.split()
    output: list[str] = []
    pending_or_drop = False

    for i, token in enumerate(tokens):
        if token == tag:
            if output and is_or_keyword(output[-1]):
                # a or TAG or b: keep one "or" so a and b stay alternatives
                bridges_chain = (
                    len(output) > 1 and i + 2 < len(tokens) and is_or_keyword(tokens[i + 1])
                )
                if not bridges_chain:
                    output.pop()
            pending_or_drop = True
            continue

        if pending_or_drop and is_or_keyword(token):
            pending_or_drop = False
            continue

        output.append(token)
        pending_or_drop = False

    return " ".join(output).strip()
