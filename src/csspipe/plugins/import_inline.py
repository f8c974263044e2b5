"""Plugin inlining local `@import` rules."""

from __future__ import annotations

from dataclasses import dataclass, field

from csspipe.css import AtRule, Container, parse, parse_value
from csspipe.fs import FileSystem, LocalFileSystem, Resolver, resolve_path
from csspipe.plugins.base import Message, ProcessResult
from csspipe.plugins.registry import registry

_REMOTE_PREFIXES = ("http://", "https://", "//")


def parse_import_params(params: str) -> tuple[str | None, str]:
    """Split `@import` params into the imported URL and the trailing media query text."""

    tokens = [token for token in parse_value(params) if token.type not in ("whitespace", "comment")]
    if not tokens:
        return None, ""

    first, rest = tokens[0], tokens[1:]
    url: str | None = None
    if first.type in ("string", "url"):
        url = first.value
    elif first.type == "function" and first.lower_name == "url":
        strings = [arg for arg in first.arguments if arg.type == "string"]
        url = strings[0].value if strings else None
    media = " ".join(token.serialize() for token in rest)
    return url, media


@dataclass(slots=True)
class ImportInlinePlugin:
    """Replaces `@import "<local file>";` with the imported file's rules.

    Remote URLs and imports carrying media queries are left untouched. Every inlined file is
    reported as a `dependency` message.
    """

    fs: FileSystem = field(default_factory=LocalFileSystem)
    resolve: Resolver = resolve_path
    name: str = "import-inline"

    async def process(self, root: Container, result: ProcessResult) -> None:
        from_path = getattr(root, "input_path", None) or result.from_path
        if from_path is None:
            result.warn("Cannot inline @import without a source path", plugin=self.name)
            return
        await self._inline(root, from_path, result, (from_path,))

    async def _inline(
        self,
        container: Container,
        from_path: str,
        result: ProcessResult,
        chain: tuple[str, ...],
    ) -> None:
        imports = [
            node
            for node in container.nodes
            if isinstance(node, AtRule) and node.name.lower() == "import"
        ]
        for at_rule in imports:
            url, media = parse_import_params(at_rule.params)
            if url is None or url.startswith(_REMOTE_PREFIXES) or media:
                continue

            resolved = await self.resolve(from_path, url)
            if resolved in chain:
                result.warn(f"Skipping circular @import of {resolved}", plugin=self.name)
                at_rule.remove()
                continue

            imported = parse(await self.fs.read_file(resolved, "utf-8"), from_path=resolved)
            await self._inline(imported, resolved, result, (*chain, resolved))
            result.messages.append(
                Message(type="dependency", plugin=self.name, file=resolved, parent=from_path)
            )
            at_rule.replace_with(*list(imported.nodes))


registry.register("import-inline", ImportInlinePlugin)
