"""Configuration loading for csspipe."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from csspipe.plugins.base import CssPlugin
from csspipe.plugins.registry import PluginRegistry, load_default_plugins
from csspipe.plugins.registry import registry as default_registry

CONFIG_FILENAMES = (".csspiperc.yaml", ".csspiperc.yml", "csspipe.config.yaml")
MODULE_BY_NAME_RE = re.compile(r"\.module\.")


class PluginSpec(BaseModel):
    """One entry of the plugin chain: a registered name or `module:attribute`, plus options."""

    model_config = ConfigDict(extra="forbid")

    name: str
    options: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _expand_shorthand(cls, value: Any) -> Any:
        if isinstance(value, str):
            return {"name": value}
        if isinstance(value, dict) and len(value) == 1 and not {"name", "options"} & set(value):
            name, options = next(iter(value.items()))
            return {"name": name, "options": options or {}}
        return value

    @field_validator("name")
    @classmethod
    def _normalize_name(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError("Plugin name must not be empty.")
        return normalized


class ModulesOptions(BaseModel):
    """CSS-Modules options; unset fields keep the transformer defaults."""

    model_config = ConfigDict(extra="forbid")

    generate_scoped_name: str | None = None
    scope_behaviour: Literal["local", "global"] = "local"
    global_module_paths: list[str] = Field(default_factory=list)
    locals_convention: Literal["camelCase", "camelCaseOnly", "dashes", "dashesOnly"] | None = None
    export_globals: bool = False

    @field_validator("global_module_paths")
    @classmethod
    def _validate_patterns(cls, value: list[str]) -> list[str]:
        for pattern in value:
            try:
                re.compile(pattern)
            except re.error as exc:
                raise ValueError(f"Invalid global module pattern {pattern!r}: {exc}") from exc
        return value


class ConfigModel(BaseModel):
    """Root configuration model (the persisted form)."""

    model_config = ConfigDict(extra="forbid")

    version: int = 1
    plugins: list[PluginSpec] = Field(default_factory=list)
    modules: bool | ModulesOptions | None = None

    @field_validator("plugins", mode="before")
    @classmethod
    def _normalize_plugins(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, dict):
            return [{name: options} for name, options in value.items()]
        if not isinstance(value, list):
            raise ValueError("plugins must be a list or a mapping of name -> options.")
        return value

    def modules_options(self) -> dict[str, Any] | None:
        """Return CSS-Modules plugin overrides, or None when modules are disabled."""

        if self.modules is None or self.modules is False:
            return None
        if self.modules is True:
            return {}
        return self.modules.model_dump(exclude_defaults=True)


@dataclass(slots=True)
class HydratedConfig:
    """Runtime form: instantiated plugins plus CSS-Modules overrides."""

    plugins: list[CssPlugin] = field(default_factory=list)
    modules: dict[str, Any] | None = None


@dataclass(slots=True)
class TransformerConfig:
    """Validated configuration with its hydrated runtime form."""

    model: ConfigModel
    hydrated: HydratedConfig
    raw: Mapping[str, Any] = field(default_factory=dict, repr=False)
    loaded_from: tuple[str, ...] = field(default_factory=tuple, repr=False)

    @property
    def modules_enabled(self) -> bool:
        return self.hydrated.modules is not None


def hydrate(model: ConfigModel, registry: PluginRegistry | None = None) -> HydratedConfig:
    """Instantiate the configured plugin chain."""

    plugin_registry = registry if registry is not None else _default_registry()
    plugins = [plugin_registry.create(spec.name, spec.options) for spec in model.plugins]
    return HydratedConfig(plugins=plugins, modules=model.modules_options())


def build_config(
    data: Mapping[str, Any],
    *,
    loaded_from: tuple[str, ...] = (),
    registry: PluginRegistry | None = None,
) -> TransformerConfig:
    try:
        model = ConfigModel.model_validate(dict(data))
    except ValidationError as exc:
        raise ValueError(f"Invalid configuration: {exc}") from exc
    return TransformerConfig(
        model=model,
        hydrated=hydrate(model, registry),
        raw=dict(data),
        loaded_from=loaded_from,
    )


def load_config(
    file_path: str | Path,
    *,
    config_path: Path | None = None,
    root: Path | None = None,
    registry: PluginRegistry | None = None,
) -> TransformerConfig | None:
    """Load the configuration governing the stylesheet at `file_path`.

    An explicit `config_path` is used exclusively. Otherwise configuration files are searched from
    the stylesheet's directory upward, stopping at `root`. Stylesheets named `*.module.*` always
    get CSS-Modules; any other stylesheet without a configuration file gets None.
    """

    is_module = MODULE_BY_NAME_RE.search(Path(file_path).name) is not None
    data: dict[str, Any] = {}
    loaded_from: tuple[str, ...] = ()

    if config_path is not None:
        resolved = _resolve_path(config_path)
        if not resolved.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")
        data = _read_yaml(resolved)
        loaded_from = (str(resolved),)
    else:
        found = find_config_file(Path(file_path).parent, root)
        if found is not None:
            data = _read_yaml(found)
            loaded_from = (str(found),)
        elif not is_module:
            return None

    if is_module and data.get("modules") is None:
        data = {**data, "modules": True}

    return build_config(data, loaded_from=loaded_from, registry=registry)


def find_config_file(start: Path, root: Path | None = None) -> Path | None:
    """Return the nearest configuration file at or above `start`."""

    start = _resolve_path(start)
    stop = _resolve_path(root) if root is not None else None
    for directory in (start, *start.parents):
        for name in CONFIG_FILENAMES:
            candidate = directory / name
            if candidate.is_file():
                return candidate
        if stop is not None and directory == stop:
            break
    return None


def pre_serialize(config: TransformerConfig) -> dict[str, Any]:
    """Reduce a configuration to JSON-safe data for transfer across process boundaries."""

    return {
        "config": config.model.model_dump(mode="json"),
        "loaded_from": list(config.loaded_from),
    }


def post_deserialize(
    payload: Mapping[str, Any],
    registry: PluginRegistry | None = None,
) -> TransformerConfig:
    """Rebuild the hydrated configuration from `pre_serialize` output."""

    return build_config(
        payload.get("config") or {},
        loaded_from=tuple(payload.get("loaded_from") or ()),
        registry=registry,
    )


def _default_registry() -> PluginRegistry:
    load_default_plugins()
    return default_registry


def _resolve_path(path: Path) -> Path:
    """Resolve configuration paths relative to the current working directory."""

    path = Path(path)
    return path if path.is_absolute() else Path.cwd() / path


def _read_yaml(path: Path) -> dict[str, Any]:
    """Read a YAML file into a dictionary."""

    content = path.read_text(encoding="utf-8")
    data = yaml.safe_load(content) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Configuration file {path} must define a mapping at the top level.")
    return data
