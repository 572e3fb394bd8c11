"""Tests for write-context and non-null assertion detection."""

from __future__ import annotations

import pytest

from chainfix.core.models import NodeShape
from chainfix.fix.classify import (
    has_non_null_assertion_in_chain,
    is_access_like,
    is_tagged_template,
    is_tagged_template_tag,
    is_write_context,
    shape_of,
)
from chainfix.frontend.syntax import SourceTree


class TestIsWriteContext:
    @pytest.mark.parametrize(
        "source",
        [
            "a.b.c = 1;",
            "a.b.c += 1;",
            "a.b.c ??= 1;",
            "a.b.c++;",
            "--a.b.c;",
            "delete a.b.c;",
        ],
    )
    def test_write_targets(self, source: str, find_node):
        tree = SourceTree("/t.ts", source)
        node = find_node(tree, "member_expression", "a.b")
        assert is_write_context(node) is True

    @pytest.mark.parametrize(
        "source",
        [
            "x = a.b.c;",
            "const y = a.b.c + 1;",
            "typeof a.b.c;",
            "f(a.b.c);",
        ],
    )
    def test_read_positions(self, source: str, find_node):
        tree = SourceTree("/t.ts", source)
        node = find_node(tree, "member_expression", "a.b")
        assert is_write_context(node) is False

    def test_index_inside_assignment_target_counts_as_write(self, find_node):
        tree = SourceTree("/t.ts", "m[a.b] = 1;")
        node = find_node(tree, "member_expression", "a.b")
        assert is_write_context(node) is True


class TestHasNonNullAssertionInChain:
    def test_assertion_at_root(self, find_node):
        tree = SourceTree("/t.ts", "const x = a!.b.c;")
        node = find_node(tree, "member_expression", "a!.b.c")
        assert has_non_null_assertion_in_chain(node) is True

    def test_assertion_in_the_middle(self, find_node):
        tree = SourceTree("/t.ts", "const x = a.b!.c;")
        node = find_node(tree, "member_expression", "a.b!.c")
        assert has_non_null_assertion_in_chain(node) is True

    def test_assertion_behind_parentheses(self, find_node):
        tree = SourceTree("/t.ts", "const x = (a!).b;")
        node = find_node(tree, "member_expression", "(a!).b")
        assert has_non_null_assertion_in_chain(node) is True

    def test_assertion_behind_call(self, find_node):
        tree = SourceTree("/t.ts", "const x = a!.fn().c;")
        node = find_node(tree, "member_expression", "a!.fn().c")
        assert has_non_null_assertion_in_chain(node) is True

    def test_plain_chain(self, find_node):
        tree = SourceTree("/t.ts", "const x = a.b().c[0];")
        node = find_node(tree, "subscript_expression", "a.b().c[0]")
        assert has_non_null_assertion_in_chain(node) is False

    def test_none(self):
        assert has_non_null_assertion_in_chain(None) is False


class TestShapeOf:
    def test_shapes(self, find_node):
        tree = SourceTree("/t.ts", "f(a.b[0]);")
        call = find_node(tree, "call_expression", "f(a.b[0])")
        subscript = find_node(tree, "subscript_expression", "a.b[0]")
        member = find_node(tree, "member_expression", "a.b")
        ident = find_node(tree, "identifier", "f")

        assert shape_of(call) is NodeShape.INVOCATION
        assert shape_of(subscript) is NodeShape.INDEXED_ACCESS
        assert shape_of(member) is NodeShape.MEMBER_ACCESS
        assert shape_of(ident) is NodeShape.OTHER
        assert is_access_like(ident) is False


class TestTaggedTemplates:
    def test_tagged_template_is_not_an_invocation(self, find_node):
        tree = SourceTree("/t.ts", "const s = tag`x`;")
        tagged = find_node(tree, "call_expression", "tag`x`")

        assert is_tagged_template(tagged) is True
        assert shape_of(tagged) is NodeShape.OTHER
        assert is_access_like(tagged) is False

    def test_plain_call_is_not_a_tagged_template(self, find_node):
        tree = SourceTree("/t.ts", "f(`x`);")
        assert is_tagged_template(find_node(tree, "call_expression", "f(`x`)")) is False

    def test_tag_chain(self, find_node):
        tree = SourceTree("/t.ts", "const s = o.a.t`x`;")
        assert is_tagged_template_tag(find_node(tree, "member_expression", "o.a.t")) is True
        assert is_tagged_template_tag(find_node(tree, "member_expression", "o.a")) is True

    def test_access_inside_substitution_is_not_a_tag(self, find_node):
        tree = SourceTree("/t.ts", "const s = tag`${a.b}`;")
        assert is_tagged_template_tag(find_node(tree, "member_expression", "a.b")) is False
