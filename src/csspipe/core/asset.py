"""Asset and AST records exchanged with the host pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from csspipe.css import Position, Root, stringify
from csspipe.fs import FileSystem


@dataclass(slots=True)
class AST:
    """Tagged tree: `kind` names the tree format, `version` its compatibility family."""

    kind: str
    version: str
    program: Root


@dataclass(slots=True, frozen=True)
class SourceLocation:
    file_path: str
    start: Position
    end: Position


@dataclass(slots=True, frozen=True)
class Dependency:
    """Edge registered into the host's dependency graph."""

    module_specifier: str
    loc: SourceLocation | None = None
    is_url: bool = False


@dataclass(slots=True)
class OutputAsset:
    """Asset produced by a transform pass."""

    kind: str
    file_path: str
    content: str


@dataclass(slots=True)
class Asset:
    """Stylesheet under transformation.

    Code is fetched lazily through `fs`. Once `set_ast` replaces the tree, the asset is dirty and
    `get_code` regenerates text from the tree.
    """

    file_path: str
    fs: FileSystem
    code: str | None = None
    ast: AST | None = None
    meta: dict[str, Any] = field(default_factory=dict)
    dependencies: list[Dependency] = field(default_factory=list)
    included_files: list[str] = field(default_factory=list)
    _ast_dirty: bool = field(default=False, init=False, repr=False)

    async def get_code(self) -> str:
        if self._ast_dirty and self.ast is not None:
            self.code = stringify(self.ast.program)
            self._ast_dirty = False
        if self.code is None:
            self.code = await self.fs.read_file(self.file_path, "utf-8")
        return self.code

    async def get_ast(self) -> AST | None:
        return self.ast

    def set_ast(self, ast: AST, *, dirty: bool = True) -> None:
        self.ast = ast
        self._ast_dirty = dirty

    def is_ast_dirty(self) -> bool:
        return self._ast_dirty

    def add_dependency(self, dependency: Dependency) -> None:
        self.dependencies.append(dependency)

    def add_included_file(self, file_path: str) -> None:
        if file_path not in self.included_files:
            self.included_files.append(file_path)

    def get_dependencies(self) -> list[Dependency]:
        return list(self.dependencies)
