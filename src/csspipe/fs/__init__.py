"""Filesystem and module-resolution adapters."""

from .base import FileSystem, Resolver
from .local import LocalFileSystem, resolve_path
from .memory import MemoryFileSystem

__all__ = ["FileSystem", "LocalFileSystem", "MemoryFileSystem", "Resolver", "resolve_path"]
