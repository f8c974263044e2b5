"""Tests for plugin pipeline execution."""

from __future__ import annotations

import pytest

from csspipe.core import Asset, Processor, register_included_files
from csspipe.css import parse, stringify
from csspipe.fs import MemoryFileSystem
from csspipe.plugins import Message


class RecordingPlugin:
    def __init__(self, name: str, calls: list[str], value: str) -> None:
        self.name = name
        self.calls = calls
        self.value = value

    def process(self, root, result) -> None:
        self.calls.append(self.name)
        for decl in root.walk_decls("color"):
            decl.value = self.value


class AsyncRecordingPlugin(RecordingPlugin):
    async def process(self, root, result) -> None:
        RecordingPlugin.process(self, root, result)
        result.messages.append(Message(type="dependency", plugin=self.name, file="/proj/dep.css"))


class FailingPlugin:
    name = "failing"

    def process(self, root, result) -> None:
        for decl in root.walk_decls():
            decl.value = "broken"
        raise RuntimeError("boom")


@pytest.mark.asyncio
async def test_plugins_run_in_order_on_a_copy():
    root = parse(".a { color: red; }", from_path="/proj/a.css")
    calls: list[str] = []
    processor = Processor([RecordingPlugin("one", calls, "blue"), AsyncRecordingPlugin("two", calls, "green")])

    result = await processor.process(root)

    assert calls == ["one", "two"]
    assert result.from_path == "/proj/a.css"
    assert stringify(result.root) == ".a {\n  color: green;\n}\n"
    assert stringify(root) == ".a {\n  color: red;\n}\n"
    assert [message.file for message in result.messages] == ["/proj/dep.css"]


@pytest.mark.asyncio
async def test_failing_plugin_propagates_and_leaves_input_untouched():
    root = parse(".a { color: red; }")

    with pytest.raises(RuntimeError, match="boom"):
        await Processor([FailingPlugin()]).process(root)

    assert stringify(root) == ".a {\n  color: red;\n}\n"


def test_register_included_files_only_uses_dependency_messages():
    asset = Asset(file_path="/proj/a.css", fs=MemoryFileSystem())
    messages = [
        Message(type="dependency", plugin="p", file="/proj/x.css"),
        Message(type="warning", plugin="p", text="careful"),
        Message(type="dependency", plugin="p"),
        Message(type="dependency", plugin="q", file="/proj/x.css"),
    ]

    assert register_included_files(asset, messages) == 2
    assert asset.included_files == ["/proj/x.css"]
