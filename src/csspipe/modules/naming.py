"""Scoped class-name generation."""

from __future__ import annotations

import os
import re
from collections.abc import Callable
from hashlib import md5

ScopedNameGenerator = Callable[[str, str, str], str]

_PLACEHOLDER_RE = re.compile(r"\[(local|name|hash)(?::(\d+))?\]")
_UNSAFE_RE = re.compile(r"[^a-zA-Z0-9_-]")


def content_hash(filename: str, css: str) -> str:
    return md5((filename + css).encode("utf-8")).hexdigest()


def generate_scoped_name(name: str, filename: str, css: str) -> str:
    """Return `_<name>_<first five hex chars of md5(filename + css)>`."""

    return f"_{name}_{content_hash(filename, css)[:5]}"


def template_scoped_name(pattern: str) -> ScopedNameGenerator:
    """Build a generator from a pattern such as `[name]__[local]___[hash:8]`.

    `[name]` is the file stem, `[local]` the class name and `[hash]` the content hash (five
    characters unless a length is given).
    """

    if not _PLACEHOLDER_RE.search(pattern):
        raise ValueError(f"Scoped name pattern {pattern!r} has no placeholders.")

    def generate(name: str, filename: str, css: str) -> str:
        def substitute(match: re.Match[str]) -> str:
            kind, length = match.group(1), match.group(2)
            if kind == "local":
                return name
            if kind == "name":
                stem = os.path.basename(filename).split(".", 1)[0]
                return _UNSAFE_RE.sub("_", stem)
            return content_hash(filename, css)[: int(length) if length else 5]

        return _PLACEHOLDER_RE.sub(substitute, pattern)

    return generate


def to_root_relative(path: str) -> str:
    """Strip a leading filesystem root marker (`/` or a drive anchor) from `path`."""

    root = os.path.abspath(os.sep)
    if path.startswith(root):
        return path[len(root):]
    return path


def hashing_path(path: str) -> str:
    """Return the `/`-anchored root-relative form of `path` that scoped names are hashed with."""

    return "/" + to_root_relative(path).replace(os.sep, "/")
