"""Base definitions for csspipe plugins."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Awaitable, Protocol

from csspipe.css import Root


@dataclass(slots=True)
class Message:
    """Side-channel record emitted by a plugin.

    `type == "dependency"` with a `file` marks a file whose contents the output depends on.
    """

    type: str
    plugin: str
    file: str | None = None
    parent: str | None = None
    text: str | None = None
    data: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class ProcessResult:
    """State shared by the plugins of one pipeline run."""

    root: Root
    from_path: str | None = None
    messages: list[Message] = field(default_factory=list)

    def warn(self, text: str, *, plugin: str) -> None:
        self.messages.append(Message(type="warning", plugin=plugin, text=text))

    def warnings(self) -> list[Message]:
        return [message for message in self.messages if message.type == "warning"]


class CssPlugin(Protocol):
    """Interface for tree transformation plugins."""

    name: str

    def process(self, root: Root, result: ProcessResult) -> Awaitable[None] | None:
        """Mutate `root` in place; may be a coroutine function."""


__all__ = ["CssPlugin", "Message", "ProcessResult"]
