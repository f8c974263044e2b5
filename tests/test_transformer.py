"""End-to-end tests for the CSS transform stage."""

from __future__ import annotations

import pytest

from csspipe.config import ConfigModel, HydratedConfig, TransformerConfig, build_config
from csspipe.core import CSS_MODULES_META_KEY, AST, Asset, CssTransformer
from csspipe.css import parse
from csspipe.errors import CssModulesError
from csspipe.fs import MemoryFileSystem
from csspipe.modules import generate_scoped_name
from csspipe.plugins.import_inline import ImportInlinePlugin

MODULE_PATH = "/proj/src/a.module.css"
MODULE_CSS = '.title { composes: base from "./base.css"; color: red; }\n'
BASE_CSS = ".base { margin: 0; }\n"


def _fs() -> MemoryFileSystem:
    return MemoryFileSystem({MODULE_PATH: MODULE_CSS, "/proj/src/base.css": BASE_CSS})


@pytest.mark.asyncio
async def test_modules_transform_emits_css_and_companion():
    fs = _fs()
    asset = Asset(file_path=MODULE_PATH, fs=fs)

    outputs = await CssTransformer().run(asset, build_config({"modules": True}), fs.resolve)

    title = generate_scoped_name("title", "/proj/src/a.module.css", MODULE_CSS)
    base = generate_scoped_name("base", "/proj/src/base.css", BASE_CSS)
    assert asset.meta[CSS_MODULES_META_KEY] == {"title": f"{title} {base}"}
    assert [dep.module_specifier for dep in asset.get_dependencies()] == ["./base.css"]

    css, companion = outputs
    assert css.kind == "css"
    assert css.content == f".{title} {{\n  color: red;\n}}\n"
    assert companion.kind == "js"
    assert companion.file_path == MODULE_PATH + ".js"
    assert companion.content == (
        'module.exports = Object.assign({}, require("./base.css"), '
        f'{{\n  "title": "{title} {base}"\n}});'
    )


@pytest.mark.asyncio
async def test_without_config_the_asset_passes_through():
    fs = MemoryFileSystem({"/proj/a.css": ".a{color:red}"})
    asset = Asset(file_path="/proj/a.css", fs=fs)

    outputs = await CssTransformer().run(asset, None, fs.resolve)

    assert [(output.kind, output.content) for output in outputs] == [("css", ".a{color:red}")]
    assert asset.ast is None


@pytest.mark.asyncio
async def test_empty_plugin_chain_reprints_tree():
    fs = MemoryFileSystem({"/proj/a.css": ".a{color:red}"})
    asset = Asset(file_path="/proj/a.css", fs=fs)

    outputs = await CssTransformer().run(asset, build_config({}), fs.resolve)

    assert [output.content for output in outputs] == [".a {\n  color: red;\n}\n"]
    assert CSS_MODULES_META_KEY not in asset.meta


@pytest.mark.asyncio
async def test_plugin_dependency_messages_become_included_files():
    fs = MemoryFileSystem(
        {"/proj/a.css": '@import "./base.css";\n.a { color: red; }', "/proj/base.css": BASE_CSS}
    )
    asset = Asset(file_path="/proj/a.css", fs=fs)
    config = TransformerConfig(
        model=ConfigModel(),
        hydrated=HydratedConfig(plugins=[ImportInlinePlugin(fs=fs, resolve=fs.resolve)]),
    )

    (css,) = await CssTransformer().run(asset, config, fs.resolve)

    assert asset.included_files == ["/proj/base.css"]
    assert css.content == ".base {\n  margin: 0;\n}\n.a {\n  color: red;\n}\n"


@pytest.mark.asyncio
async def test_incompatible_ast_is_reparsed():
    fs = MemoryFileSystem({"/proj/a.css": ".a { color: red; }"})
    asset = Asset(file_path="/proj/a.css", fs=fs)
    asset.set_ast(AST(kind="foreign", version="9.0.0", program=parse(".stale {}")), dirty=False)

    (css,) = await CssTransformer().run(asset, build_config({}), fs.resolve)

    assert css.content == ".a {\n  color: red;\n}\n"


@pytest.mark.asyncio
async def test_dirty_tree_is_scanned_for_dependencies():
    fs = MemoryFileSystem({"/proj/src/x.css": ".x { color: red; }"})
    asset = Asset(file_path="/proj/src/a.module.css", fs=fs, code=".unrelated {}")
    tree = parse(".a {\n  composes: x\n    from './x.css';\n}", from_path=asset.file_path)
    asset.set_ast(AST(kind="csspipe", version="1.0.0", program=tree))

    await CssTransformer().transform(asset, build_config({"modules": True}), fs.resolve)

    assert [dep.module_specifier for dep in asset.get_dependencies()] == ["./x.css"]


@pytest.mark.asyncio
async def test_modules_error_propagates_and_leaves_tree():
    fs = MemoryFileSystem({"/proj/a.module.css": ".a { composes: missing; }"})
    asset = Asset(file_path="/proj/a.module.css", fs=fs)
    transformer = CssTransformer()
    asset.set_ast(await transformer.parse(asset, build_config({})), dirty=False)

    with pytest.raises(CssModulesError):
        await transformer.transform(asset, build_config({"modules": True}), fs.resolve)

    assert asset.ast.program.nodes[0].selector == ".a"
    assert not asset.is_ast_dirty()


@pytest.mark.asyncio
async def test_modules_options_are_applied():
    css_text = ".main-title { color: red; }"
    fs = MemoryFileSystem({"/proj/a.module.css": css_text})
    asset = Asset(file_path="/proj/a.module.css", fs=fs)
    config = build_config(
        {"modules": {"generate_scoped_name": "[local]_[hash:4]", "locals_convention": "camelCaseOnly"}}
    )

    await CssTransformer().run(asset, config, fs.resolve)

    (name, value), = asset.meta[CSS_MODULES_META_KEY].items()
    assert name == "mainTitle"
    assert value.startswith("main-title_") and len(value) == len("main-title_") + 4
