"""In-memory filesystem for virtual asset trees."""

from __future__ import annotations

import os
from collections.abc import Mapping

from csspipe.errors import ResolutionError


class MemoryFileSystem:
    """Serve file text from a mapping of normalized paths."""

    def __init__(self, files: Mapping[str, str] | None = None) -> None:
        self._files: dict[str, str] = {}
        for path, text in (files or {}).items():
            self.write_file(path, text)

    def write_file(self, path: str, text: str) -> None:
        self._files[os.path.normpath(path)] = text

    def exists(self, path: str) -> bool:
        return os.path.normpath(path) in self._files

    async def read_file(self, path: str, encoding: str = "utf-8") -> str:
        try:
            return self._files[os.path.normpath(path)]
        except KeyError as exc:
            raise FileNotFoundError(path) from exc

    async def resolve(self, from_path: str, specifier: str) -> str:
        """Resolve relative or absolute specifiers against the stored files."""

        candidate = os.path.normpath(os.path.join(os.path.dirname(from_path), specifier))
        if candidate not in self._files:
            raise ResolutionError(specifier, from_path)
        return candidate
