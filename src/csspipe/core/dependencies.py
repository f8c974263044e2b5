"""Registration of cross-file dependencies introduced by `composes ... from`."""

from __future__ import annotations

import logging
import re

from csspipe.core.asset import Asset, Dependency, SourceLocation
from csspipe.css import Position, Root, parse_value, walk_tokens

logger = logging.getLogger(__name__)

# Cheap pre-check over the raw text. Multi-line or decorated `composes` values slip past it;
# such files are only scanned when the tree is already dirty.
COMPOSES_RE = re.compile(r"""composes:.+from\s*("|').*("|')\s*;?""")
FROM_IMPORT_RE = re.compile(r""".+from\s*(?:"|')(.*)(?:"|')\s*;?""")


def may_compose_from_files(code: str) -> bool:
    return COMPOSES_RE.search(code) is not None


def collect_composes_dependencies(root: Root, file_path: str) -> list[Dependency]:
    """Walk every declaration and build one dependency per string token of `composes ... from`."""

    dependencies: list[Dependency] = []
    for decl in root.walk_decls("composes"):
        match = FROM_IMPORT_RE.search(decl.value)
        if match is None:
            continue

        import_path = match.group(1)
        start = decl.value_source or decl.source or Position(1, 1)
        loc = SourceLocation(
            file_path=file_path,
            start=start,
            end=Position(start.line, start.column + len(import_path)),
        )
        for token in walk_tokens(parse_value(decl.value)):
            if token.type == "string":
                dependencies.append(Dependency(module_specifier=import_path, loc=loc))
    return dependencies


def extract_composes_dependencies(asset: Asset, root: Root, code: str | None) -> int:
    """Register composes dependencies on `asset`; `code` is None when it no longer matches `root`."""

    if code is not None and not may_compose_from_files(code):
        return 0

    dependencies = collect_composes_dependencies(root, asset.file_path)
    for dependency in dependencies:
        asset.add_dependency(dependency)
    if dependencies:
        logger.debug(
            "Registered %s composes dependencies for %s", len(dependencies), asset.file_path
        )
    return len(dependencies)
