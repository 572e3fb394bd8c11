"""Resolve the node a diagnostic should be fixed at."""

from __future__ import annotations

from tree_sitter import Node

from chainfix.core.models import INVOKE_CODE
from chainfix.fix.classify import CALL_EXPRESSION, base_of, is_access_like, is_tagged_template
from chainfix.frontend.syntax import has_optional_marker


def find_nearest_access_like(start: Node) -> Node | None:
    node: Node | None = start
    while node is not None:
        if is_access_like(node):
            return node
        node = node.parent
    return None


def find_enclosing_call(start: Node) -> Node | None:
    node: Node | None = start
    while node is not None:
        if node.type == CALL_EXPRESSION and not is_tagged_template(node):
            return node
        node = node.parent
    return None


def find_nullish_access_target(start: Node) -> Node | None:
    """Target for an "object is possibly null/undefined" diagnostic.

    When the nearest access already has ``?.`` the diagnostic is about the
    next segment of the chain (``a?.b.c`` reports ``a?.b``), so the fix moves
    one level up to the access whose base is the guarded segment.
    """
    nearest = find_nearest_access_like(start)
    if nearest is None:
        return None

    if has_optional_marker(nearest):
        parent = nearest.parent
        if parent is not None and is_access_like(parent) and base_of(parent) == nearest:
            return parent

    return nearest


def pick_fix_target(anchor: Node, code: int) -> Node | None:
    # TS2722 (cannot invoke possibly undefined) becomes an optional call.
    if code == INVOKE_CODE:
        return find_enclosing_call(anchor)
    return find_nullish_access_target(anchor)
