"""Parser for npm package.json files.

Uses tree-sitter for positions. Unlike the other manifests, package.json
must be valid JSON: a decode error fails the collection.
"""

from __future__ import annotations

import json

import tree_sitter_json as tsjson
from tree_sitter import Language, Node, Parser

from depcollector.models import Dependency, Position
from depcollector.registry import register_collector

_JSON_LANGUAGE = Language(tsjson.language())

DEFAULT_CLASSES = ["dependencies"]


def _position(source: bytes, offset: int) -> Position:
    """1-based line and character column of byte *offset* in *source*."""
    line_start = source.rfind(b"\n", 0, offset) + 1
    column = len(source[line_start:offset].decode("utf-8", errors="replace"))
    return Position(line=source.count(b"\n", 0, offset) + 1, column=column + 1)


def _token(source: bytes, node: Node) -> tuple[str, Position]:
    """Return the text of a key/value token and where it starts.

    Strings give their unescaped content. Every column is one past the
    token start, so for strings it is the first character after the
    opening quote and for other values the second character.
    """
    raw = node.text.decode("utf-8")
    position = _position(source, node.start_byte + 1)
    if node.type == "string":
        return json.loads(raw), position
    return raw, position


def _pairs(node: Node | None) -> list[Node]:
    if node is None or node.type != "object":
        return []
    return [child for child in node.named_children if child.type == "pair"]


def parse_package_json(contents: str, classes: list[str] | None = None) -> list[Dependency]:
    """Extract dependencies listed under the *classes* sections of package.json.

    Raises ``json.JSONDecodeError`` if *contents* is not valid JSON.
    """
    json.loads(contents)
    allowed = DEFAULT_CLASSES if classes is None else classes

    source = contents.encode("utf-8")
    tree = Parser(_JSON_LANGUAGE).parse(source)
    root = tree.root_node.named_children[0] if tree.root_node.named_children else None

    deps: list[Dependency] = []
    for section in _pairs(root):
        section_name, _ = _token(source, section.child_by_field_name("key"))
        if section_name not in allowed:
            continue
        for pair in _pairs(section.child_by_field_name("value")):
            name, name_position = _token(source, pair.child_by_field_name("key"))
            # trimmed name, position still at the raw key
            name = name.strip()
            if not name:
                continue
            version, version_position = _token(source, pair.child_by_field_name("value"))
            deps.append(Dependency.build(name, name_position, version, version_position))
    return deps


class PackageJsonCollector:
    """Collect dependencies from the allowed sections of a package.json."""

    def __init__(self, classes: list[str] | None = None) -> None:
        self.classes = list(DEFAULT_CLASSES) if classes is None else classes

    async def collect(self, contents: str) -> list[Dependency]:
        return parse_package_json(contents, self.classes)


register_collector(
    "package-json",
    ("package.json",),
    lambda _uri, classes: PackageJsonCollector(classes),
)
