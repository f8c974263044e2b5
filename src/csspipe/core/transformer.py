"""CSS transform stage: parse, register composes dependencies, run plugins, emit companion."""

from __future__ import annotations

import logging
from functools import partial
from pathlib import Path
from typing import Any

from csspipe.config import TransformerConfig, load_config, post_deserialize, pre_serialize
from csspipe.core.asset import AST, Asset, OutputAsset
from csspipe.core.companion import CSS_MODULES_META_KEY, synthesize_companion
from csspipe.core.dependencies import extract_composes_dependencies
from csspipe.core.guard import can_reuse_ast, parse_asset, tag
from csspipe.core.pipeline import Processor, register_included_files
from csspipe.css import stringify
from csspipe.fs import Resolver
from csspipe.modules import CssModulesPlugin, ExportTokens, VirtualModuleLoader, generate_scoped_name
from csspipe.plugins import PluginRegistry

logger = logging.getLogger(__name__)

CSS_KIND = "css"


class CssTransformer:
    """Transformer hooks called by the host pipeline for each stylesheet asset."""

    def load_config(
        self,
        file_path: str | Path,
        *,
        config_path: Path | None = None,
        root: Path | None = None,
        registry: PluginRegistry | None = None,
    ) -> TransformerConfig | None:
        return load_config(file_path, config_path=config_path, root=root, registry=registry)

    def pre_serialize_config(self, config: TransformerConfig) -> dict[str, Any]:
        return pre_serialize(config)

    def post_deserialize_config(
        self, payload: dict[str, Any], registry: PluginRegistry | None = None
    ) -> TransformerConfig:
        return post_deserialize(payload, registry)

    def can_reuse_ast(self, ast: AST) -> bool:
        return can_reuse_ast(ast)

    async def parse(self, asset: Asset, config: TransformerConfig | None) -> AST | None:
        if config is None:
            return None
        return await parse_asset(asset)

    async def transform(
        self,
        asset: Asset,
        config: TransformerConfig | None,
        resolve: Resolver,
    ) -> list[Asset | OutputAsset]:
        """Run the configured plugin chain over the asset's tree.

        Returns the asset itself followed by the CSS-Modules companion script when the asset
        exports tokens.
        """

        if config is None:
            return [asset]

        asset.meta.pop(CSS_MODULES_META_KEY, None)
        plugins = list(config.hydrated.plugins)
        if config.hydrated.modules is not None:
            plugins.append(self._modules_plugin(asset, config.hydrated.modules, resolve))

        ast = await asset.get_ast()
        if ast is None:
            raise ValueError(f"No syntax tree available for {asset.file_path}")
        code = None if asset.is_ast_dirty() else await asset.get_code()
        extract_composes_dependencies(asset, ast.program, code)

        result = await Processor(plugins).process(ast.program, from_path=asset.file_path)
        asset.set_ast(tag(result.root))
        register_included_files(asset, result.messages)
        for warning in result.warnings():
            logger.warning("%s: %s (%s)", warning.plugin, warning.text, asset.file_path)

        assets: list[Asset | OutputAsset] = [asset]
        companion = synthesize_companion(asset)
        if companion is not None:
            assets.append(companion)
        return assets

    def generate(self, ast: AST) -> str:
        return stringify(ast.program)

    async def run(
        self,
        asset: Asset,
        config: TransformerConfig | None,
        resolve: Resolver,
    ) -> list[OutputAsset]:
        """Drive one asset through parse/transform/generate the way a host pipeline would."""

        ast = await asset.get_ast()
        if ast is None or not self.can_reuse_ast(ast):
            parsed = await self.parse(asset, config)
            if parsed is not None:
                asset.set_ast(parsed, dirty=False)

        outputs: list[OutputAsset] = []
        for item in await self.transform(asset, config, resolve):
            if isinstance(item, OutputAsset):
                outputs.append(item)
                continue
            if config is not None and item.ast is not None:
                content = self.generate(item.ast)
            else:
                content = await item.get_code()
            outputs.append(OutputAsset(kind=CSS_KIND, file_path=item.file_path, content=content))
        logger.info("Transformed %s into %s asset(s)", asset.file_path, len(outputs))
        return outputs

    def _modules_plugin(
        self,
        asset: Asset,
        overrides: dict[str, Any],
        resolve: Resolver,
    ) -> CssModulesPlugin:
        def collect(_filename: str, tokens: ExportTokens) -> None:
            asset.meta[CSS_MODULES_META_KEY] = tokens

        options: dict[str, Any] = {
            "get_json": collect,
            "loader": partial(VirtualModuleLoader, fs=asset.fs, resolve=resolve),
            "generate_scoped_name": generate_scoped_name,
            **overrides,
        }
        return CssModulesPlugin(**options)
