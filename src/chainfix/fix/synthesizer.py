"""Edit synthesis: the minimal `?.` insertion for a resolved target node."""

from __future__ import annotations

from tree_sitter import Node

from chainfix.core.models import NodeShape, TextEdit
from chainfix.fix.classify import (
    MEMBER_EXPRESSION,
    SUBSCRIPT_EXPRESSION,
    base_of,
    has_non_null_assertion_in_chain,
    is_tagged_template_tag,
    is_write_context,
    shape_of,
)
from chainfix.frontend.syntax import OPTIONAL_MARKER, SourceTree

_SAFE_CALLEES = ("identifier", MEMBER_EXPRESSION, SUBSCRIPT_EXPRESSION)


class EditSynthesizer:
    """Generates optional-chaining edits for nodes of one source tree."""

    def __init__(self, source: SourceTree):
        self.source = source

    def edit_for(self, target: Node) -> TextEdit | None:
        """Return the edit for ``target``, or None if it should be left alone."""
        handler = self._get_handler(shape_of(target))
        if handler is None:
            return None

        base = base_of(target)
        if base is None:
            return None
        if is_write_context(target):
            return None
        # A `!` anywhere in the base chain is a deliberate assertion.
        if has_non_null_assertion_in_chain(base):
            return None
        if base.type == "super":
            return None
        if is_tagged_template_tag(target):
            return None

        return handler(target, base)

    def _get_handler(self, shape: NodeShape):
        handlers = {
            NodeShape.MEMBER_ACCESS: self._edit_member_access,
            NodeShape.INDEXED_ACCESS: self._edit_indexed_access,
            NodeShape.INVOCATION: self._edit_invocation,
        }
        return handlers.get(shape)

    def _edit_member_access(self, node: Node, base: Node) -> TextEdit | None:
        """``a.b`` -> ``a?.b``"""
        prop = node.child_by_field_name("property")
        if prop is None:
            return None

        text = self.source.text
        base_end = self.source.end(base)
        between = text[base_end:self.source.start(prop)]

        # For `a . b` (or a comment in between) take the dot closest to `b`.
        rel_dot = between.rfind(".")
        if rel_dot == -1:
            return None

        dot = base_end + rel_dot
        if text[dot - 1:dot + 1] == OPTIONAL_MARKER:
            return None

        return TextEdit(start=dot, end=dot + 1, new_text=OPTIONAL_MARKER)

    def _edit_indexed_access(self, node: Node, base: Node) -> TextEdit | None:
        """``a[k]`` -> ``a?.[k]``"""
        text = self.source.text
        bracket = text.find("[", self.source.end(base))
        if bracket == -1 or bracket >= self.source.end(node):
            return None

        if text[max(0, bracket - 2):bracket] == OPTIONAL_MARKER:
            return None

        return TextEdit(start=bracket, end=bracket, new_text=OPTIONAL_MARKER)

    def _edit_invocation(self, node: Node, callee: Node) -> TextEdit | None:
        """``f()`` -> ``f?.()``"""
        # `new f?.()` is not valid syntax.
        if node.parent is not None and node.parent.type == "new_expression":
            return None

        # Anything fancier than a name or an access is left for a human.
        if callee.type not in _SAFE_CALLEES:
            return None

        insert_at = self.source.end(callee)
        text = self.source.text
        # Already an optional call: `f?.()`.
        if OPTIONAL_MARKER in text[max(0, insert_at - 2):insert_at + 2]:
            return None

        return TextEdit(start=insert_at, end=insert_at, new_text=OPTIONAL_MARKER)
