"""End-to-end: real tsc diagnostics -> fixes -> re-check."""

from __future__ import annotations

import json
import shutil
import textwrap
from pathlib import Path

import pytest

from chainfix.fix.engine import fix_source_text
from chainfix.fix.project import fix_project

pytestmark = pytest.mark.skipif(shutil.which("tsc") is None, reason="TypeScript compiler not installed")


def _fix(source: str) -> str:
    return fix_source_text(textwrap.dedent(source)).text


def test_adds_optional_chaining_for_property_access():
    out = _fix("""
        type A = { b?: { c: number } };
        declare const a: A | undefined;
        const x = a.b.c;
    """)
    assert "a?.b?.c" in out


def test_propagates_on_already_optional_root():
    out = _fix("""
        type A = { b?: { c: number } };
        declare const a: A | undefined;
        const x = a?.b.c;
    """)
    assert "a?.b?.c" in out


def test_element_access():
    out = _fix("""
        type A = { b?: { [k: string]: { c: number } | undefined } };
        declare const a: A | undefined;
        const x = a.b["k"].c;
    """)
    assert 'a?.b?.["k"]' in out


def test_optional_call():
    out = _fix("""
        type A = { fn?: () => { c: number } | undefined };
        declare const a: A | undefined;
        const x = a.fn().c;
    """)
    assert "a?.fn?.().c" in out


def test_write_context_is_untouched():
    out = _fix("""
        type A = { b?: { c: number } };
        declare const a: A | undefined;
        a.b.c = 1;
    """)
    assert "a.b.c = 1" in out


def test_non_null_assertion_is_respected():
    out = _fix("""
        type A = { b?: { c: number } };
        declare const a: A | undefined;
        const x = a!.b.c;
    """)
    assert "a!.b.c" in out


def test_fixed_output_is_stable():
    first = fix_source_text(textwrap.dedent("""
        type A = { b?: { c: number } };
        declare const a: A | undefined;
        const x = a.b.c;
    """))
    second = fix_source_text(first.text)
    assert second.total_changes == 0
    assert second.text == first.text


def test_project_with_relative_import(tmp_path: Path):
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "types.ts").write_text("export type A = { b?: { c: number } };\n")
    (tmp_path / "src" / "main.ts").write_text(
        'import type { A } from "./types";\n'
        "declare const a: A | undefined;\n"
        "export const x = a.b.c;\n"
    )
    (tmp_path / "tsconfig.json").write_text(json.dumps({
        "compilerOptions": {"strict": True, "target": "ES2020", "module": "ESNext", "moduleResolution": "node"},
        "include": ["src"],
    }))

    # Only main.ts is held in memory; types.ts is resolved from disk.
    result = fix_project(tmp_path / "tsconfig.json", directory=tmp_path / "src" / "main.ts", dry=True)
    assert result.total_changes == 2
    assert "a.b.c" in (tmp_path / "src" / "main.ts").read_text()

    result = fix_project(tmp_path / "tsconfig.json", backup=False)
    assert "a?.b?.c" in (tmp_path / "src" / "main.ts").read_text()
    assert result.total_changes == 2
