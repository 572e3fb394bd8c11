"""Syntactic classification of TypeScript expression nodes."""

from __future__ import annotations

from tree_sitter import Node

from chainfix.core.models import NodeShape

MEMBER_EXPRESSION = "member_expression"
SUBSCRIPT_EXPRESSION = "subscript_expression"
CALL_EXPRESSION = "call_expression"

_SHAPES = {
    MEMBER_EXPRESSION: NodeShape.MEMBER_ACCESS,
    SUBSCRIPT_EXPRESSION: NodeShape.INDEXED_ACCESS,
    CALL_EXPRESSION: NodeShape.INVOCATION,
}

# Covers `=` plus every compound form (`+=`, `??=`, `||=`, ...).
_ASSIGNMENTS = ("assignment_expression", "augmented_assignment_expression")


def is_tagged_template(node: Node) -> bool:
    """A tagged template parses as a call whose arguments are a template string."""
    if node.type != CALL_EXPRESSION:
        return False
    arguments = node.child_by_field_name("arguments")
    return arguments is not None and arguments.type == "template_string"


def shape_of(node: Node) -> NodeShape:
    # Tagged templates are not allowed in an optional chain (TS1358).
    if is_tagged_template(node):
        return NodeShape.OTHER
    return _SHAPES.get(node.type, NodeShape.OTHER)


def is_access_like(node: Node) -> bool:
    return node.type in _SHAPES and not is_tagged_template(node)


def base_of(node: Node) -> Node | None:
    """The expression an access or call is applied to."""
    if node.type == CALL_EXPRESSION:
        return node.child_by_field_name("function")
    if node.type in (MEMBER_EXPRESSION, SUBSCRIPT_EXPRESSION):
        return node.child_by_field_name("object")
    return None


def _within(node: Node, outer: Node | None) -> bool:
    if outer is None:
        return False
    return node.start_byte >= outer.start_byte and node.end_byte <= outer.end_byte


def is_write_context(node: Node) -> bool:
    """True if ``node`` is (part of) an assignment, ``++``/``--`` or ``delete`` target.

    Optional chaining is not a valid assignment target, so ``a?.b.c = 1``
    must never be produced.
    """
    cur = node
    while cur.parent is not None:
        parent = cur.parent

        if parent.type in _ASSIGNMENTS and _within(cur, parent.child_by_field_name("left")):
            return True

        if parent.type == "update_expression" and _within(cur, parent.child_by_field_name("argument")):
            return True

        if parent.type == "unary_expression":
            operator = parent.child_by_field_name("operator")
            if operator is not None and operator.type == "delete" and _within(
                cur, parent.child_by_field_name("argument")
            ):
                return True

        cur = parent

    return False


def _unwrap_parenthesized(node: Node) -> Node | None:
    for child in node.named_children:
        if child.type != "comment":
            return child
    return None


def has_non_null_assertion_in_chain(expr: Node | None) -> bool:
    """True if ``expr`` or any base it is accessed through uses ``!``."""
    cur = expr
    while cur is not None:
        if cur.type == "non_null_expression":
            return True
        if cur.type == "parenthesized_expression":
            cur = _unwrap_parenthesized(cur)
            continue
        if is_access_like(cur):
            cur = base_of(cur)
            continue
        return False
    return False


def is_tagged_template_tag(node: Node) -> bool:
    """True if ``node`` is part of the chain used as a template tag.

    A `?.` anywhere in that chain makes the tag an optional chain, which
    TypeScript rejects (TS1358).
    """
    cur = node
    while cur.parent is not None:
        parent = cur.parent
        if is_tagged_template(parent):
            return parent.child_by_field_name("function") == cur
        if not is_access_like(parent) or base_of(parent) != cur:
            return False
        cur = parent
    return False
