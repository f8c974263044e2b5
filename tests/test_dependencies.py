"""Tests for composes dependency registration."""

from __future__ import annotations

from csspipe.core import Asset, extract_composes_dependencies
from csspipe.css import Position, parse
from csspipe.fs import MemoryFileSystem

PATH = "/proj/src/a.css"


def _asset() -> Asset:
    return Asset(file_path=PATH, fs=MemoryFileSystem())


def test_composes_from_file_registers_dependency_with_location():
    code = '.a {\n  composes: foo from "./a.css";\n}'
    asset = _asset()

    count = extract_composes_dependencies(asset, parse(code, from_path=PATH), code)

    assert count == 1
    (dependency,) = asset.get_dependencies()
    assert dependency.module_specifier == "./a.css"
    assert dependency.loc.file_path == PATH
    assert dependency.loc.start == Position(2, 13)
    assert dependency.loc.end == Position(2, 20)


def test_local_and_global_composes_register_nothing():
    code = ".a { color: red; }\n.b { composes: a; }\n.c { composes: x from global; }"
    asset = _asset()

    assert extract_composes_dependencies(asset, parse(code), None) == 0
    assert asset.get_dependencies() == []


def test_every_composes_declaration_counts():
    code = ".a { composes: x from './x.css'; }\n.b { composes: y from './y.css'; }"
    asset = _asset()

    extract_composes_dependencies(asset, parse(code), code)

    assert [dep.module_specifier for dep in asset.get_dependencies()] == ["./x.css", "./y.css"]


def test_text_precheck_skips_multiline_values_unless_code_is_stale():
    code = ".a {\n  composes: a\n    from './a.css';\n}"
    root = parse(code)

    fresh = _asset()
    assert extract_composes_dependencies(fresh, root, code) == 0

    stale = _asset()
    assert extract_composes_dependencies(stale, root, None) == 1
    assert stale.get_dependencies()[0].module_specifier == "./a.css"


def test_each_string_token_registers_a_duplicate_dependency():
    code = '.a { composes: "legacy" from "./a.css"; }'
    asset = _asset()

    assert extract_composes_dependencies(asset, parse(code), code) == 2
    assert [dep.module_specifier for dep in asset.get_dependencies()] == ["./a.css", "./a.css"]
