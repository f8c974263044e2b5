"""Tests for syntax tree reuse checks."""

from __future__ import annotations

import pytest

from csspipe.core import AST, Asset
from csspipe.core.guard import AST_KIND, AST_VERSION, can_reuse_ast, parse_asset
from csspipe.css import Root
from csspipe.fs import MemoryFileSystem


@pytest.mark.parametrize(
    "kind,version,expected",
    [
        (AST_KIND, AST_VERSION, True),
        (AST_KIND, "1.4.2", True),
        (AST_KIND, "2.0.0", False),
        (AST_KIND, "0.9.0", False),
        (AST_KIND, "not-a-version", False),
        ("other", AST_VERSION, False),
    ],
)
def test_can_reuse_ast(kind, version, expected):
    assert can_reuse_ast(AST(kind=kind, version=version, program=Root())) is expected


@pytest.mark.asyncio
async def test_parse_asset_tags_tree():
    fs = MemoryFileSystem({"/proj/a.css": ".a { color: red; }"})
    asset = Asset(file_path="/proj/a.css", fs=fs)

    ast = await parse_asset(asset)

    assert (ast.kind, ast.version) == (AST_KIND, AST_VERSION)
    assert ast.program.input_path == "/proj/a.css"
    assert ast.program.nodes[0].selector == ".a"
