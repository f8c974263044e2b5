"""Core transform stage for csspipe."""

from .asset import AST, Asset, Dependency, OutputAsset, SourceLocation
from .companion import CSS_MODULES_META_KEY, render_exports, synthesize_companion
from .dependencies import collect_composes_dependencies, extract_composes_dependencies
from .guard import AST_KIND, AST_VERSION, can_reuse_ast
from .pipeline import Processor, register_included_files
from .transformer import CssTransformer

__all__ = [
    "AST",
    "AST_KIND",
    "AST_VERSION",
    "Asset",
    "CSS_MODULES_META_KEY",
    "CssTransformer",
    "Dependency",
    "OutputAsset",
    "Processor",
    "SourceLocation",
    "can_reuse_ast",
    "collect_composes_dependencies",
    "extract_composes_dependencies",
    "register_included_files",
    "render_exports",
    "synthesize_companion",
]
