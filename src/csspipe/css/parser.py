"""Build stylesheet trees from text with tinycss2 and print them back."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import tinycss2

from csspipe.css.tree import AtRule, Comment, Container, Declaration, Node, Position, Root, Rule
from csspipe.errors import CssSyntaxError

INDENT = "  "


def parse(css: str, *, from_path: str | None = None) -> Root:
    """Parse stylesheet text into a `Root`.

    Raises `CssSyntaxError` on the first grammar error tinycss2 reports.
    """

    root = Root(input_path=from_path, input_css=css)
    for item in tinycss2.parse_stylesheet(css, skip_comments=False, skip_whitespace=True):
        root.append(_convert(item, from_path))
    return root


def _convert(item: Any, from_path: str | None) -> Node:
    if item.type == "error":
        raise CssSyntaxError(
            item.message,
            file_path=from_path,
            line=item.source_line,
            column=item.source_column,
        )

    source = Position(item.source_line, item.source_column)
    if item.type == "comment":
        return Comment(item.value, source=source)

    if item.type == "declaration":
        return Declaration(
            item.name,
            tinycss2.serialize(item.value).strip(),
            important=item.important,
            source=source,
            value_source=_first_significant_position(item.value) or source,
        )

    if item.type == "qualified-rule":
        rule = Rule(tinycss2.serialize(item.prelude).strip(), source=source)
        _convert_block(rule, item.content, from_path)
        return rule

    if item.type == "at-rule":
        at_rule = AtRule(
            item.at_keyword,
            tinycss2.serialize(item.prelude).strip(),
            has_block=item.content is not None,
            source=source,
        )
        if item.content is not None:
            _convert_block(at_rule, item.content, from_path)
        return at_rule

    raise CssSyntaxError(
        f"Unexpected {item.type} at top level",
        file_path=from_path,
        line=item.source_line,
        column=item.source_column,
    )


def _convert_block(container: Container, content: list[Any], from_path: str | None) -> None:
    items = tinycss2.parse_blocks_contents(content, skip_comments=False, skip_whitespace=True)
    for item in items:
        container.append(_convert(item, from_path))


def _first_significant_position(tokens: Iterable[Any]) -> Position | None:
    for token in tokens:
        if token.type not in ("whitespace", "comment"):
            return Position(token.source_line, token.source_column)
    return None


def stringify(root: Container) -> str:
    """Print a tree back to CSS text, two-space indented."""

    lines = [_render(node, 0) for node in root.nodes]
    return "\n".join(lines) + ("\n" if lines else "")


def _render(node: Node, depth: int) -> str:
    pad = INDENT * depth
    if isinstance(node, Declaration):
        important = " !important" if node.important else ""
        return f"{pad}{node.prop}: {node.value}{important};"
    if isinstance(node, Comment):
        return f"{pad}/*{node.text}*/"
    if isinstance(node, Rule):
        return _render_block(pad + node.selector, node, depth)
    if isinstance(node, AtRule):
        header = f"{pad}@{node.name}" + (f" {node.params}" if node.params else "")
        if not node.has_block:
            return header + ";"
        return _render_block(header, node, depth)
    raise TypeError(f"Cannot stringify {type(node).__name__}")


def _render_block(header: str, container: Container, depth: int) -> str:
    if not container.nodes:
        return header + " {}"
    body = "\n".join(_render(child, depth + 1) for child in container.nodes)
    return f"{header} {{\n{body}\n{INDENT * depth}}}"
