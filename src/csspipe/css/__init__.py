"""Stylesheet tree, parser and printer."""

from .parser import parse, stringify
from .tree import AtRule, Comment, Container, Declaration, Node, Position, Root, Rule
from .values import parse_value, string_values, walk_tokens

__all__ = [
    "AtRule",
    "Comment",
    "Container",
    "Declaration",
    "Node",
    "Position",
    "Root",
    "Rule",
    "parse",
    "parse_value",
    "string_values",
    "stringify",
    "walk_tokens",
]
