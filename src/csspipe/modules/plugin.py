"""Plugin that applies CSS-Modules scoping inside the plugin pipeline."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from functools import partial

from csspipe.plugins.base import ProcessResult
from csspipe.css import Root
from csspipe.fs import LocalFileSystem, resolve_path
from csspipe.modules.core import ExportTokens, ModulesCore
from csspipe.modules.loader import LoaderFactory, VirtualModuleLoader
from csspipe.modules.naming import ScopedNameGenerator, generate_scoped_name, template_scoped_name

logger = logging.getLogger(__name__)

LOCALS_CONVENTIONS = ("camelCase", "camelCaseOnly", "dashes", "dashesOnly")

ExportsCollector = Callable[[str, ExportTokens], None]

_CAMEL_RE = re.compile(r"[-_]+(\w)")
_DASH_RE = re.compile(r"-+(\w)")


def _default_loader() -> LoaderFactory:
    return partial(VirtualModuleLoader, fs=LocalFileSystem(), resolve=resolve_path)


@dataclass(slots=True)
class CssModulesPlugin:
    """Scopes the tree being processed and hands its export tokens to `get_json`."""

    get_json: ExportsCollector | None = None
    loader: LoaderFactory = field(default_factory=_default_loader)
    generate_scoped_name: ScopedNameGenerator | str = generate_scoped_name
    scope_behaviour: str = "local"
    global_module_paths: Sequence[str] = ()
    locals_convention: str | None = None
    export_globals: bool = False
    name: str = "css-modules"

    def __post_init__(self) -> None:
        if self.locals_convention is not None and self.locals_convention not in LOCALS_CONVENTIONS:
            raise ValueError(f"Unsupported locals convention: {self.locals_convention!r}")
        if isinstance(self.generate_scoped_name, str):
            self.generate_scoped_name = template_scoped_name(self.generate_scoped_name)

    async def process(self, root: Root, result: ProcessResult) -> None:
        path = root.input_path or result.from_path or ""
        core = ModulesCore(
            generate_scoped_name=self.generate_scoped_name,
            scope_behaviour=self._behaviour_for(path),
            export_globals=self.export_globals,
        )
        loader = self.loader(core)
        tokens = await core.tokenize(root, path=path, css=root.input_css, fetch=loader.fetch)
        tokens = convert_locals(tokens, self.locals_convention)
        logger.debug("Collected %s CSS-Modules tokens for %s", len(tokens), path)
        if self.get_json is not None:
            self.get_json(path, tokens)

    def _behaviour_for(self, path: str) -> str:
        if any(re.search(pattern, path) for pattern in self.global_module_paths):
            return "global"
        return self.scope_behaviour


def _camel_case(name: str) -> str:
    return _CAMEL_RE.sub(lambda match: match.group(1).upper(), name)


def _dashes_camel_case(name: str) -> str:
    return _DASH_RE.sub(lambda match: match.group(1).upper(), name)


def convert_locals(tokens: ExportTokens, convention: str | None) -> ExportTokens:
    """Rename export keys according to a `locals_convention` setting."""

    if convention is None:
        return dict(tokens)

    converted: ExportTokens = {}
    for name, value in tokens.items():
        if convention in ("camelCase", "dashes"):
            converted[name] = value
        renamed = _camel_case(name) if convention.startswith("camelCase") else _dashes_camel_case(name)
        converted.setdefault(renamed, value)
    return converted
