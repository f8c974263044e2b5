"""AST tagging and reuse checks."""

from __future__ import annotations

import asyncio
from functools import partial

from packaging.specifiers import SpecifierSet
from packaging.version import InvalidVersion, Version

from csspipe.core.asset import AST, Asset
from csspipe.css import parse

AST_KIND = "csspipe"
AST_VERSION = "1.0.0"
COMPATIBLE_RANGE = SpecifierSet(">=1.0.0,<2.0.0")


def can_reuse_ast(ast: AST) -> bool:
    """Return True when `ast` was produced by a compatible version of this stage."""

    if ast.kind != AST_KIND:
        return False
    try:
        version = Version(ast.version)
    except InvalidVersion:
        return False
    return version in COMPATIBLE_RANGE


def tag(program) -> AST:
    return AST(kind=AST_KIND, version=AST_VERSION, program=program)


async def parse_asset(asset: Asset) -> AST:
    """Parse the asset's current code into a tagged tree."""

    code = await asset.get_code()
    loop = asyncio.get_running_loop()
    program = await loop.run_in_executor(None, partial(parse, code, from_path=asset.file_path))
    return tag(program)
