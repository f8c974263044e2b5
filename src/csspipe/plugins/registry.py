"""Plugin registry for csspipe."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from importlib import import_module
from typing import Any

from csspipe.plugins.base import CssPlugin

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "csspipe.plugins"

PluginFactory = Callable[..., CssPlugin]


class PluginRegistry:
    """Registry mapping plugin names to factories."""

    def __init__(self) -> None:
        self._factories: dict[str, PluginFactory] = {}

    def register(self, name: str, factory: PluginFactory) -> None:
        if name in self._factories:
            return
        self._factories[name] = factory

    def clear(self) -> None:
        self._factories.clear()

    def names(self) -> list[str]:
        return sorted(self._factories)

    def load_entrypoints(self) -> None:
        from importlib.metadata import entry_points

        try:
            resolved_entry_points = entry_points()
        except Exception as exc:  # pragma: no cover - entry point enumeration failure
            logger.warning("Failed to enumerate plugin entry points: %s", exc)
            return

        candidates: Iterable[Any]
        if hasattr(resolved_entry_points, "select"):
            candidates = resolved_entry_points.select(group=ENTRY_POINT_GROUP)
        else:  # pragma: no cover - unexpected shim
            candidates = []

        for entry_point in candidates:
            try:
                factory = entry_point.load()
            except Exception as exc:  # pylint: disable=broad-except
                name = getattr(entry_point, "name", repr(entry_point))
                logger.warning("Failed to load plugin entry point %s: %s", name, exc)
                continue
            self.register(entry_point.name, factory)

    def get(self, name: str) -> PluginFactory:
        """Return the factory for `name`, importing `module:attribute` references on demand."""

        if name in self._factories:
            return self._factories[name]
        if ":" not in name:
            raise ValueError(f"Unknown plugin '{name}'.")

        module_name, _, attribute = name.partition(":")
        try:
            module = import_module(module_name)
        except ImportError as exc:
            raise ValueError(f"Unable to import plugin module '{module_name}': {exc}") from exc
        try:
            return getattr(module, attribute)
        except AttributeError as exc:
            raise ValueError(f"Plugin module '{module_name}' has no attribute '{attribute}'.") from exc

    def create(self, name: str, options: Mapping[str, Any] | None = None) -> CssPlugin:
        factory = self.get(name)
        return factory(**dict(options or {}))


registry = PluginRegistry()


def load_default_plugins() -> None:
    """Import built-in plugins so they self-register."""

    import_module("csspipe.plugins.import_inline")
