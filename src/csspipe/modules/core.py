"""CSS-Modules tokenizer.

Rewrites the class, id and keyframes names of one stylesheet into scoped names, resolves
`composes` declarations (local, `from global`, or `from "<file>"` through a fetch callback) and
collects the resulting export tokens.
"""

from __future__ import annotations

import asyncio
import re
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

import tinycss2
from tinycss2.ast import FunctionBlock, HashToken, IdentToken

from csspipe.css import AtRule, Declaration, Root, Rule, parse
from csspipe.errors import CssModulesError
from csspipe.modules.naming import ScopedNameGenerator, generate_scoped_name, hashing_path

ExportTokens = dict[str, str]
PathFetcher = Callable[[str, str], Awaitable[ExportTokens]]

SCOPE_BEHAVIOURS = ("local", "global")

COMPOSES_VALUE_RE = re.compile(r"""^(.+?)\s+from\s+("[^"]*"|'[^']*'|[\w-]+)$""", re.DOTALL)
SINGLE_CLASS_RE = re.compile(
    r"^(?:\.(-?[_a-zA-Z][\w-]*)|:local\(\s*\.(-?[_a-zA-Z][\w-]*)\s*\))$"
)
KEYFRAMES_NAME_RE = re.compile(r"^:(global|local)\(\s*(.+?)\s*\)$")
KEYFRAMES_AT_RULE_RE = re.compile(r"^(?:-[a-z]+-)?keyframes$", re.IGNORECASE)
ANIMATION_PROPS = frozenset({"animation", "animation-name"})
EXPORT_SELECTOR = ":export"


@dataclass(slots=True)
class LoadResult:
    export_tokens: ExportTokens
    root: Root


@dataclass(slots=True)
class ModulesCore:
    """Turns stylesheets into scoped trees plus export tokens."""

    generate_scoped_name: ScopedNameGenerator = generate_scoped_name
    scope_behaviour: str = "local"
    export_globals: bool = False

    def __post_init__(self) -> None:
        if self.scope_behaviour not in SCOPE_BEHAVIOURS:
            raise ValueError(f"Unsupported scope behaviour: {self.scope_behaviour!r}")

    async def load(self, source: str, path: str, fetch: PathFetcher) -> LoadResult:
        """Parse and tokenize `source`, fetching composed files through `fetch`."""

        root = parse(source, from_path=path)
        tokens = await self.tokenize(root, path=path, css=source, fetch=fetch)
        return LoadResult(export_tokens=tokens, root=root)

    async def tokenize(self, root: Root, *, path: str, css: str, fetch: PathFetcher) -> ExportTokens:
        """Scope `root` in place and return its export tokens.

        Names are hashed with `path` anchored at `/` and stripped of any filesystem root, so a
        file maps to the same scoped names whether it is transformed directly or reached through a
        composition.
        """

        imported = await _fetch_composed_files(root, path, fetch)
        scope = _FileScope(
            generate=self.generate_scoped_name,
            filename=hashing_path(path),
            css=css,
            default_mode=self.scope_behaviour,
        )
        compositions = scope.rewrite(root)

        exports: dict[str, list[str]] = {}
        composed_of = _resolve_compositions(compositions, scope, imported)
        for name in list(scope.local_names):
            exports[name] = _expand(name, scope, composed_of, frozenset())
        if self.export_globals:
            for name in scope.global_names:
                exports.setdefault(name, [name])

        for rule in list(root.walk_rules()):
            if rule.selector.strip() == EXPORT_SELECTOR:
                for decl in rule.nodes:
                    if isinstance(decl, Declaration):
                        exports[decl.prop] = [decl.value]
                rule.remove()

        return {name: " ".join(values) for name, values in exports.items()}


async def _fetch_composed_files(root: Root, path: str, fetch: PathFetcher) -> dict[str, ExportTokens]:
    sources: list[str] = []
    for decl in root.walk_decls("composes"):
        match = COMPOSES_VALUE_RE.match(decl.value.strip())
        if match is None:
            continue
        source = match.group(2)
        if _is_quoted(source) and source not in sources:
            sources.append(source)

    try:
        async with asyncio.TaskGroup() as group:
            tasks = [group.create_task(fetch(source, path)) for source in sources]
    except ExceptionGroup as failures:
        raise failures.exceptions[0]
    return {source: task.result() for source, task in zip(sources, tasks)}


def _is_quoted(value: str) -> bool:
    return len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'"


@dataclass(slots=True)
class _Composition:
    owner: str
    decl: Declaration


@dataclass(slots=True)
class _LocalRef:
    name: str


@dataclass(slots=True)
class _FileScope:
    generate: ScopedNameGenerator
    filename: str
    css: str
    default_mode: str
    local_names: dict[str, str] = field(default_factory=dict)
    global_names: dict[str, None] = field(default_factory=dict)
    keyframes: dict[str, str] = field(default_factory=dict)

    def scoped(self, name: str) -> str:
        if name not in self.local_names:
            self.local_names[name] = self.generate(name, self.filename, self.css)
        return self.local_names[name]

    def rewrite(self, root: Root) -> list[_Composition]:
        compositions: list[_Composition] = []
        for node in root.walk():
            if isinstance(node, Rule):
                if _inside_keyframes(node) or node.selector.strip() == EXPORT_SELECTOR:
                    continue
                original = node.selector
                node.selector = self.rewrite_selector(original)
                for child in node.nodes:
                    if isinstance(child, Declaration) and child.prop.lower() == "composes":
                        compositions.append(_Composition(self._composing_class(original), child))
            elif isinstance(node, AtRule) and KEYFRAMES_AT_RULE_RE.match(node.name):
                node.params = self._rewrite_keyframes_name(node.params)

        if self.keyframes:
            for decl in root.walk_decls():
                if decl.prop.lower() in ANIMATION_PROPS:
                    decl.value = self._rewrite_animation(decl.value)
        return compositions

    def rewrite_selector(self, selector: str) -> str:
        tokens = tinycss2.parse_component_value_list(selector)
        return tinycss2.serialize(self._rewrite_tokens(tokens, self.default_mode)).strip()

    def _rewrite_tokens(self, tokens: list[Any], mode: str) -> list[Any]:
        out: list[Any] = []
        current = mode
        index = 0
        while index < len(tokens):
            token = tokens[index]
            following = tokens[index + 1] if index + 1 < len(tokens) else None

            if token == ",":
                current = mode
                out.append(token)
            elif token == "." and following is not None and following.type == "ident":
                out.append(token)
                out.append(
                    IdentToken(
                        following.source_line,
                        following.source_column,
                        self._name(following.value, current),
                    )
                )
                index += 2
                continue
            elif token.type == "hash" and token.is_identifier:
                out.append(
                    HashToken(
                        token.source_line,
                        token.source_column,
                        self._name(token.value, current),
                        True,
                    )
                )
            elif token == ":" and _is_mode_switch(following, "ident"):
                current = following.lower_value
                index += 2
                at_compound_start = not out or out[-1].type == "whitespace" or out[-1] == ","
                if at_compound_start and index < len(tokens) and tokens[index].type == "whitespace":
                    index += 1
                continue
            elif token == ":" and _is_mode_switch(following, "function"):
                out.extend(self._rewrite_tokens(_trim(following.arguments), following.lower_name))
                index += 2
                continue
            elif token.type == "function":
                out.append(
                    FunctionBlock(
                        token.source_line,
                        token.source_column,
                        token.name,
                        self._rewrite_tokens(token.arguments, current),
                    )
                )
            else:
                out.append(token)
            index += 1
        return out

    def _name(self, name: str, mode: str) -> str:
        if mode == "local":
            return self.scoped(name)
        self.global_names[name] = None
        return name

    def _composing_class(self, selector: str) -> str:
        match = SINGLE_CLASS_RE.match(selector.strip())
        if match is not None:
            if match.group(2) is not None:
                return match.group(2)
            if self.default_mode == "local":
                return match.group(1)
        raise CssModulesError(
            f"composition is only allowed when selector is single :local class name not in {selector!r}"
        )

    def _rewrite_keyframes_name(self, params: str) -> str:
        name = params.strip()
        mode = self.default_mode
        match = KEYFRAMES_NAME_RE.match(name)
        if match is not None:
            mode, name = match.group(1), match.group(2)
        if mode != "local":
            return name
        scoped = self.scoped(name)
        self.keyframes[name] = scoped
        return scoped

    def _rewrite_animation(self, value: str) -> str:
        tokens = tinycss2.parse_component_value_list(value)
        rewritten = [
            IdentToken(token.source_line, token.source_column, self.keyframes[token.value])
            if token.type == "ident" and token.value in self.keyframes
            else token
            for token in tokens
        ]
        return tinycss2.serialize(rewritten).strip()


def _is_mode_switch(token: Any, kind: str) -> bool:
    if token is None or token.type != kind:
        return False
    name = token.lower_value if kind == "ident" else token.lower_name
    return name in SCOPE_BEHAVIOURS


def _trim(tokens: list[Any]) -> list[Any]:
    start, end = 0, len(tokens)
    while start < end and tokens[start].type == "whitespace":
        start += 1
    while end > start and tokens[end - 1].type == "whitespace":
        end -= 1
    return tokens[start:end]


def _inside_keyframes(rule: Rule) -> bool:
    parent = rule.parent
    return isinstance(parent, AtRule) and KEYFRAMES_AT_RULE_RE.match(parent.name) is not None


def _resolve_compositions(
    compositions: list[_Composition],
    scope: _FileScope,
    imported: dict[str, ExportTokens],
) -> dict[str, list[str | _LocalRef]]:
    composed_of: dict[str, list[str | _LocalRef]] = {}
    for composition in compositions:
        value = composition.decl.value.strip()
        match = COMPOSES_VALUE_RE.match(value)
        names_part, source = (match.group(1), match.group(2)) if match else (value, None)
        names = [name for name in re.split(r"[\s,]+", names_part) if name]
        items = composed_of.setdefault(composition.owner, [])

        for name in names:
            if source is None:
                if name not in scope.local_names:
                    raise CssModulesError(f'referenced class name "{name}" in composes not found')
                items.append(_LocalRef(name))
            elif source == "global":
                items.append(name)
            elif source in imported:
                tokens = imported[source]
                if name not in tokens:
                    raise CssModulesError(
                        f'referenced class name "{name}" in composes not found in {source}'
                    )
                items.extend(tokens[name].split())
            else:
                raise CssModulesError(
                    f"composes source must be a quoted path or 'global', got {source!r}"
                )
        composition.decl.remove()
    return composed_of


def _expand(
    name: str,
    scope: _FileScope,
    composed_of: dict[str, list[str | _LocalRef]],
    seen: frozenset[str],
) -> list[str]:
    result = [scope.local_names[name]]
    for item in composed_of.get(name, ()):
        if isinstance(item, _LocalRef):
            if item.name in seen or item.name == name:
                continue
            names = _expand(item.name, scope, composed_of, seen | {name})
        else:
            names = [item]
        result.extend(entry for entry in names if entry not in result)
    return result
