"""Script asset exposing CSS-Modules export tokens."""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping

from csspipe.core.asset import Asset, OutputAsset

CSS_MODULES_META_KEY = "css_modules"
COMPANION_KIND = "js"
COMPANION_SUFFIX = ".js"


def render_exports(tokens: Mapping[str, str], dependencies: Iterable[str] = ()) -> str:
    """Return script source exporting `tokens` merged over each dependency's exports."""

    payload = json.dumps(dict(tokens), indent=2, ensure_ascii=False)
    specifiers = list(dict.fromkeys(dependencies))
    if not specifiers:
        return f"module.exports = {payload};"

    requires = ", ".join(f"require({json.dumps(specifier)})" for specifier in specifiers)
    return f"module.exports = Object.assign({{}}, {requires}, {payload});"


def synthesize_companion(asset: Asset) -> OutputAsset | None:
    tokens = asset.meta.get(CSS_MODULES_META_KEY)
    if not tokens:
        return None

    specifiers = [dep.module_specifier for dep in asset.get_dependencies() if not dep.is_url]
    return OutputAsset(
        kind=COMPANION_KIND,
        file_path=asset.file_path + COMPANION_SUFFIX,
        content=render_exports(tokens, specifiers),
    )
