"""Shared fixtures: a scripted stand-in for the TypeScript compiler, tree helpers."""

from __future__ import annotations

import re

import pytest

from chainfix.core.models import Diagnostic
from chainfix.frontend.tsc import DiagnosticProvider


class RegexProvider(DiagnosticProvider):
    """Reports a diagnostic at the start of every regex match in every file.

    Each rule is ``(code, pattern)``; with ``first_only`` only the first
    match of the first matching rule is reported per pass.
    """

    def __init__(self, rules, first_only=False):
        self.rules = [(code, re.compile(pattern)) for code, pattern in rules]
        self.first_only = first_only
        self.calls = 0

    def collect(self, files, root_names, compiler):
        self.calls += 1
        diagnostics = []
        for name, text in files.items():
            for code, pattern in self.rules:
                for match in pattern.finditer(text):
                    diagnostics.append(Diagnostic(code=code, file_path=name, offset=match.start()))
                    if self.first_only:
                        return diagnostics
        return diagnostics


@pytest.fixture
def regex_provider():
    return RegexProvider


def _find_node(source, node_type, snippet):
    """First node of ``node_type`` whose text is exactly ``snippet``."""
    stack = [source.root]
    while stack:
        node = stack.pop(0)
        if node.type == node_type and source.node_text(node) == snippet:
            return node
        stack.extend(node.children)
    raise AssertionError(f"no {node_type} node for {snippet!r}")


@pytest.fixture
def find_node():
    return _find_node
