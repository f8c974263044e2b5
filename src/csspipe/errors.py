"""Exception types raised by the CSS transform stage."""

from __future__ import annotations

from collections.abc import Sequence


class CssSyntaxError(ValueError):
    """Raised when stylesheet text cannot be parsed."""

    def __init__(
        self,
        reason: str,
        *,
        file_path: str | None = None,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        self.reason = reason
        self.file_path = file_path
        self.line = line
        self.column = column
        super().__init__(self._format())

    def _format(self) -> str:
        location = self.file_path or "<css input>"
        if self.line is not None:
            location = f"{location}:{self.line}"
            if self.column is not None:
                location = f"{location}:{self.column}"
        return f"{location}: {self.reason}"


class CssModulesError(Exception):
    """Raised for invalid CSS-Modules constructs (bad composes, unknown names)."""


class ComposesCycleError(CssModulesError):
    """Raised when composed files import each other in a loop."""

    def __init__(self, chain: Sequence[str]) -> None:
        self.chain = tuple(chain)
        super().__init__("Circular composes import: " + " -> ".join(self.chain))


class ResolutionError(LookupError):
    """Raised when a module specifier cannot be resolved to a file."""

    def __init__(self, specifier: str, from_path: str) -> None:
        self.specifier = specifier
        self.from_path = from_path
        super().__init__(f"Cannot resolve '{specifier}' from '{from_path}'")


__all__ = ["CssSyntaxError", "CssModulesError", "ComposesCycleError", "ResolutionError"]
