"""Tree-sitter view of a TypeScript source file.

Tree-sitter reports positions in UTF-8 bytes while diagnostics and edits use
character offsets into the Python string, so :class:`SourceTree` converts
between the two.
"""

from __future__ import annotations

import tree_sitter_typescript as tstypescript
from tree_sitter import Language, Node, Parser

TS_LANGUAGE = Language(tstypescript.language_typescript())
TSX_LANGUAGE = Language(tstypescript.language_tsx())

_ts_parser = Parser(TS_LANGUAGE)
_tsx_parser = Parser(TSX_LANGUAGE)

OPTIONAL_MARKER = "?."

# Newer grammars wrap the marker in a named ``optional_chain`` node, older
# ones emit a bare ``?.`` token.
_OPTIONAL_CHILD_TYPES = ("optional_chain", OPTIONAL_MARKER)


def parser_for(path: str) -> Parser:
    if path.endswith((".tsx", ".jsx")):
        return _tsx_parser
    return _ts_parser


def has_optional_marker(node: Node) -> bool:
    """True if this segment itself carries ``?.`` (``a?.b``, ``a?.[k]``, ``f?.()``).

    Only direct children are inspected: in ``a?.b.c`` the outer access has no
    marker of its own.
    """
    return any(child.type in _OPTIONAL_CHILD_TYPES for child in node.children)


class SourceTree:
    """A parsed source file with character-offset lookups."""

    def __init__(self, path: str, text: str):
        self.path = path
        self.text = text
        self._data = text.encode("utf-8")
        self._ascii = len(self._data) == len(text)
        self.tree = parser_for(path).parse(self._data)

    @property
    def root(self) -> Node:
        return self.tree.root_node

    def byte_offset(self, offset: int) -> int:
        if self._ascii:
            return offset
        return len(self.text[:offset].encode("utf-8"))

    def char_offset(self, byte: int) -> int:
        if self._ascii:
            return byte
        return len(self._data[:byte].decode("utf-8", errors="ignore"))

    def start(self, node: Node) -> int:
        return self.char_offset(node.start_byte)

    def end(self, node: Node) -> int:
        return self.char_offset(node.end_byte)

    def node_text(self, node: Node) -> str:
        return self.text[self.start(node):self.end(node)]

    def token_at(self, offset: int) -> Node | None:
        """Smallest node starting at or spanning ``offset``.

        At the very end of the text the token to the left is used instead.
        Returns None when nothing but the root covers the offset.
        """
        if offset < 0 or offset > len(self.text):
            return None
        byte = self.byte_offset(offset)
        node = self.root.descendant_for_byte_range(byte, byte)
        if (node is None or node == self.root) and byte > 0:
            node = self.root.descendant_for_byte_range(byte - 1, byte - 1)
        if node is None or node == self.root:
            return None
        return node
