"""Filesystem and resolver capabilities consumed by the transform stage."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Protocol


class FileSystem(Protocol):
    """Read-only view of the files an asset may reference."""

    async def read_file(self, path: str, encoding: str = "utf-8") -> str:
        """Return the full text of `path`."""


Resolver = Callable[[str, str], Awaitable[str]]
"""`await resolve(from_path, specifier)` returns the absolute path of `specifier`."""
