"""Disk-backed filesystem and resolver."""

from __future__ import annotations

import asyncio
import os
from pathlib import Path

from csspipe.errors import ResolutionError


class LocalFileSystem:
    """Reads files from disk without blocking the event loop."""

    async def read_file(self, path: str, encoding: str = "utf-8") -> str:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, Path(path).read_text, encoding)


async def resolve_path(from_path: str, specifier: str) -> str:
    """Resolve `specifier` the way stylesheet imports are resolved.

    Relative and absolute specifiers are taken against the importing file's directory; bare
    specifiers are looked up in `node_modules` directories walking upward.
    """

    base = Path(os.path.abspath(from_path)).parent
    if specifier.startswith((".", "/")) or os.path.isabs(specifier):
        candidate = Path(os.path.normpath(base / specifier))
        if candidate.is_file():
            return str(candidate)
        raise ResolutionError(specifier, from_path)

    package_path = specifier[1:] if specifier.startswith("~") else specifier
    for directory in (base, *base.parents):
        candidate = directory / "node_modules" / package_path
        if candidate.is_file():
            return str(candidate)
    raise ResolutionError(specifier, from_path)
