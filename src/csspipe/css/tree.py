"""Mutable stylesheet tree."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class Position:
    """1-based line/column inside the source text."""

    line: int
    column: int


class Node:
    """Base node with a parent link and an optional source position."""

    type = "node"

    def __init__(self, *, source: Position | None = None) -> None:
        self.parent: Container | None = None
        self.source = source

    def remove(self) -> None:
        if self.parent is not None:
            self.parent.remove_child(self)

    def replace_with(self, *nodes: Node) -> None:
        parent = self.parent
        if parent is None:
            raise ValueError("Cannot replace a detached node.")
        index = parent.index(self)
        parent.remove_child(self)
        for offset, node in enumerate(nodes):
            parent.insert(index + offset, node)


class Container(Node):
    """Node holding an ordered list of children."""

    def __init__(self, *, nodes: list[Node] | None = None, source: Position | None = None) -> None:
        super().__init__(source=source)
        self.nodes: list[Node] = []
        for node in nodes or []:
            self.append(node)

    def append(self, *nodes: Node) -> None:
        for node in nodes:
            node.remove()
            node.parent = self
            self.nodes.append(node)

    def insert(self, index: int, node: Node) -> None:
        node.remove()
        node.parent = self
        self.nodes.insert(index, node)

    def index(self, node: Node) -> int:
        for position, child in enumerate(self.nodes):
            if child is node:
                return position
        raise ValueError("Node is not a child of this container.")

    def remove_child(self, node: Node) -> None:
        del self.nodes[self.index(node)]
        node.parent = None

    def walk(self) -> Iterator[Node]:
        """Yield every descendant depth-first; children may be removed while walking."""

        for child in list(self.nodes):
            yield child
            if isinstance(child, Container):
                yield from child.walk()

    def walk_decls(self, prop: str | None = None) -> Iterator[Declaration]:
        wanted = prop.lower() if prop is not None else None
        for node in self.walk():
            if isinstance(node, Declaration) and (wanted is None or node.prop.lower() == wanted):
                yield node

    def walk_rules(self) -> Iterator[Rule]:
        for node in self.walk():
            if isinstance(node, Rule):
                yield node

    def walk_at_rules(self, name: str | None = None) -> Iterator[AtRule]:
        wanted = name.lower() if name is not None else None
        for node in self.walk():
            if isinstance(node, AtRule) and (wanted is None or node.name.lower() == wanted):
                yield node


class Root(Container):
    """Top of a parsed stylesheet; keeps the text it was parsed from."""

    type = "root"

    def __init__(
        self,
        *,
        nodes: list[Node] | None = None,
        input_path: str | None = None,
        input_css: str = "",
    ) -> None:
        super().__init__(nodes=nodes)
        self.input_path = input_path
        self.input_css = input_css

    def __repr__(self) -> str:
        return f"Root(input_path={self.input_path!r}, nodes={len(self.nodes)})"


class Rule(Container):
    type = "rule"

    def __init__(
        self,
        selector: str,
        *,
        nodes: list[Node] | None = None,
        source: Position | None = None,
    ) -> None:
        super().__init__(nodes=nodes, source=source)
        self.selector = selector

    def __repr__(self) -> str:
        return f"Rule({self.selector!r})"


class AtRule(Container):
    """At-rule; `has_block` is False for statement forms such as `@import "x.css";`."""

    type = "atrule"

    def __init__(
        self,
        name: str,
        params: str = "",
        *,
        nodes: list[Node] | None = None,
        has_block: bool | None = None,
        source: Position | None = None,
    ) -> None:
        super().__init__(nodes=nodes, source=source)
        self.name = name
        self.params = params
        self.has_block = bool(nodes) if has_block is None else has_block

    def __repr__(self) -> str:
        return f"AtRule({self.name!r}, {self.params!r})"


class Declaration(Node):
    type = "decl"

    def __init__(
        self,
        prop: str,
        value: str,
        *,
        important: bool = False,
        source: Position | None = None,
        value_source: Position | None = None,
    ) -> None:
        super().__init__(source=source)
        self.prop = prop
        self.value = value
        self.important = important
        self.value_source = value_source

    def __repr__(self) -> str:
        return f"Declaration({self.prop!r}, {self.value!r})"


class Comment(Node):
    type = "comment"

    def __init__(self, text: str, *, source: Position | None = None) -> None:
        super().__init__(source=source)
        self.text = text

    def __repr__(self) -> str:
        return f"Comment({self.text!r})"
