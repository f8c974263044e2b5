"""Ordered execution of tree plugins."""

from __future__ import annotations

import copy
import inspect
import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from csspipe.core.asset import Asset
from csspipe.css import Root
from csspipe.plugins.base import CssPlugin, Message, ProcessResult

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Processor:
    """Runs plugins one after another over a private copy of the tree.

    The input tree is never touched, so a failing plugin leaves nothing half-applied; its
    exception propagates as raised.
    """

    plugins: Sequence[CssPlugin] = field(default_factory=list)

    async def process(self, root: Root, *, from_path: str | None = None) -> ProcessResult:
        result = ProcessResult(root=copy.deepcopy(root), from_path=from_path or root.input_path)
        for plugin in self.plugins:
            outcome = plugin.process(result.root, result)
            if inspect.isawaitable(outcome):
                await outcome
        return result


def register_included_files(asset: Asset, messages: Iterable[Message]) -> int:
    """Record files reported through `dependency` messages; other messages are skipped."""

    count = 0
    for message in messages:
        if message.type != "dependency":
            continue
        if not message.file:
            logger.debug("Ignoring dependency message without a file from %s", message.plugin)
            continue
        asset.add_included_file(message.file)
        count += 1
    return count
