"""Tree plugins and their registry."""

from .base import CssPlugin, Message, ProcessResult
from .registry import PluginRegistry, load_default_plugins, registry

__all__ = ["CssPlugin", "Message", "PluginRegistry", "ProcessResult", "load_default_plugins", "registry"]
