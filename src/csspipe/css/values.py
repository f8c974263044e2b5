"""Declaration value tokenizing helpers."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Any

import tinycss2

_BLOCK_TYPES = frozenset({"() block", "[] block", "{} block"})


def parse_value(value: str) -> list[Any]:
    """Tokenize a declaration value (strings, comma lists, function calls)."""

    return tinycss2.parse_component_value_list(value)


def walk_tokens(tokens: Iterable[Any]) -> Iterator[Any]:
    """Yield tokens depth-first, descending into functions and blocks."""

    for token in tokens:
        yield token
        if token.type == "function":
            yield from walk_tokens(token.arguments)
        elif token.type in _BLOCK_TYPES:
            yield from walk_tokens(token.content)


def string_values(value: str) -> list[str]:
    """Return the unquoted value of every string token found in `value`."""

    return [token.value for token in walk_tokens(parse_value(value)) if token.type == "string"]
