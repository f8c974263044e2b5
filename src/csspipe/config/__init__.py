"""Configuration utilities for csspipe."""

from .loader import (
    ConfigModel,
    HydratedConfig,
    ModulesOptions,
    PluginSpec,
    TransformerConfig,
    build_config,
    find_config_file,
    load_config,
    post_deserialize,
    pre_serialize,
)

__all__ = [
    "ConfigModel",
    "HydratedConfig",
    "ModulesOptions",
    "PluginSpec",
    "TransformerConfig",
    "build_config",
    "find_config_file",
    "load_config",
    "post_deserialize",
    "pre_serialize",
]
