"""CSS-Modules scoping: naming, tokenizer, composed-file loader and pipeline plugin."""

from .core import ExportTokens, LoadResult, ModulesCore, PathFetcher
from .loader import ComposesLoader, LoaderFactory, VirtualModuleLoader
from .naming import generate_scoped_name, hashing_path, template_scoped_name, to_root_relative
from .plugin import CssModulesPlugin, convert_locals

__all__ = [
    "ComposesLoader",
    "CssModulesPlugin",
    "ExportTokens",
    "LoadResult",
    "LoaderFactory",
    "ModulesCore",
    "PathFetcher",
    "VirtualModuleLoader",
    "convert_locals",
    "generate_scoped_name",
    "hashing_path",
    "template_scoped_name",
    "to_root_relative",
]
