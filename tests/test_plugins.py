"""Plugin registry and built-in plugin tests."""

from __future__ import annotations

import importlib.metadata

import pytest

from csspipe.css import AtRule, Rule, parse
from csspipe.fs import MemoryFileSystem
from csspipe.plugins import ProcessResult
from csspipe.plugins.import_inline import ImportInlinePlugin, parse_import_params
from csspipe.plugins.registry import PluginRegistry


class DummyPlugin:
    def __init__(self, name: str = "dummy", **options) -> None:
        self.name = name
        self.options = options

    def process(self, root, result) -> None:
        return None


class DummyEntryPoint:
    def __init__(self, name: str, factory=None, *, raises: bool = False) -> None:  # noqa: ANN001
        self.name = name
        self._factory = factory
        self._raises = raises

    def load(self):  # noqa: ANN201
        if self._raises:
            raise RuntimeError("boom")
        assert self._factory is not None
        return self._factory


class DummyEntryPoints(list[DummyEntryPoint]):
    def select(self, *, group: str | None = None):  # noqa: ANN001 - mimics stdlib API
        if group == "csspipe.plugins":
            return self
        return []


def test_plugin_registry_loads_entrypoints_via_select(monkeypatch):
    registry = PluginRegistry()
    entry_points = DummyEntryPoints(
        [
            DummyEntryPoint("bad", raises=True),
            DummyEntryPoint("good", factory=DummyPlugin),
        ]
    )
    monkeypatch.setattr(importlib.metadata, "entry_points", lambda: entry_points)
    registry.load_entrypoints()

    assert registry.names() == ["good"]
    plugin = registry.create("good", {"level": 2})
    assert isinstance(plugin, DummyPlugin)
    assert plugin.options == {"level": 2}


def test_plugin_registry_imports_module_references():
    registry = PluginRegistry()

    plugin = registry.create("csspipe.plugins.import_inline:ImportInlinePlugin")

    assert isinstance(plugin, ImportInlinePlugin)


@pytest.mark.parametrize(
    "name,message",
    [
        ("missing", "Unknown plugin"),
        ("csspipe.does_not_exist:Plugin", "Unable to import"),
        ("csspipe.plugins.import_inline:Nope", "has no attribute"),
    ],
)
def test_plugin_registry_rejects_bad_names(name, message):
    with pytest.raises(ValueError, match=message):
        PluginRegistry().get(name)


@pytest.mark.parametrize(
    "params,expected",
    [
        ('"./a.css"', ("./a.css", "")),
        ("url(./a.css)", ("./a.css", "")),
        ("url('./a.css') screen", ("./a.css", "screen")),
        ("", (None, "")),
    ],
)
def test_parse_import_params(params, expected):
    assert parse_import_params(params) == expected


@pytest.mark.asyncio
async def test_import_inline_plugin_inlines_recursively():
    fs = MemoryFileSystem(
        {
            "/proj/base.css": '@import "./reset.css";\n.base { margin: 0; }',
            "/proj/reset.css": "* { box-sizing: border-box; }",
        }
    )
    root = parse('@import "./base.css";\n@import "./print.css" print;\n.a { color: red; }', from_path="/proj/a.css")
    result = ProcessResult(root=root, from_path="/proj/a.css")

    await ImportInlinePlugin(fs=fs, resolve=fs.resolve).process(root, result)

    selectors = [node.selector for node in root.nodes if isinstance(node, Rule)]
    assert selectors == ["*", ".base", ".a"]
    assert [node.params for node in root.nodes if isinstance(node, AtRule)] == ['"./print.css" print']
    assert [(m.type, m.file, m.parent) for m in result.messages] == [
        ("dependency", "/proj/reset.css", "/proj/base.css"),
        ("dependency", "/proj/base.css", "/proj/a.css"),
    ]


@pytest.mark.asyncio
async def test_import_inline_plugin_warns_on_cycles():
    fs = MemoryFileSystem(
        {
            "/proj/a.css": '@import "./b.css";',
            "/proj/b.css": '@import "./a.css";\n.b { color: blue; }',
        }
    )
    root = parse('@import "./b.css";', from_path="/proj/a.css")
    result = ProcessResult(root=root, from_path="/proj/a.css")

    await ImportInlinePlugin(fs=fs, resolve=fs.resolve).process(root, result)

    assert [node.selector for node in root.nodes] == [".b"]
    assert [warning.text for warning in result.warnings()] == ["Skipping circular @import of /proj/a.css"]
