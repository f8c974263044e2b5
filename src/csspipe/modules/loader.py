"""Resolution of `composes ... from "<file>"` references into export tokens."""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from csspipe.errors import ComposesCycleError
from csspipe.fs import FileSystem, Resolver
from csspipe.modules.core import ExportTokens, ModulesCore
from csspipe.modules.naming import to_root_relative

logger = logging.getLogger(__name__)

_QUOTES_RE = re.compile(r"""^["']|["']$""")


class ComposesLoader(Protocol):
    async def fetch(self, specifier: str, relative_to: str) -> ExportTokens:
        """Return the export tokens of the file `specifier` names."""


LoaderFactory = Callable[[ModulesCore], ComposesLoader]


@dataclass(slots=True)
class VirtualModuleLoader:
    """Loads composed stylesheets through the host's resolver and read-only filesystem.

    Holds no mutable state, so any number of fetches may run concurrently.
    """

    core: ModulesCore
    fs: FileSystem
    resolve: Resolver

    async def fetch(self, specifier: str, relative_to: str) -> ExportTokens:
        return await self._fetch(specifier, relative_to, (os.path.normpath(relative_to),))

    async def _fetch(self, specifier: str, relative_to: str, chain: tuple[str, ...]) -> ExportTokens:
        import_path = _QUOTES_RE.sub("", specifier)
        resolved = await self.resolve(relative_to, import_path)
        absolute = os.path.normpath(os.path.join(os.path.dirname(relative_to), resolved))
        if absolute in chain:
            raise ComposesCycleError([*chain, absolute])

        source = await self.fs.read_file(absolute, "utf-8")
        logger.debug("Loading composed file %s (from %s)", absolute, relative_to)

        nested_chain = (*chain, absolute)

        async def fetch_nested(nested_specifier: str, _relative_to: str) -> ExportTokens:
            return await self._fetch(nested_specifier, absolute, nested_chain)

        result = await self.core.load(source, to_root_relative(absolute), fetch_nested)
        return result.export_tokens

    @property
    def final_source(self) -> str:
        return ""
