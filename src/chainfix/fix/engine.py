"""Fix Engine: drives analyze -> resolve -> apply passes to a fixed point."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence

from chainfix.core.models import (
    DEFAULT_CODES,
    DEFAULT_MAX_PASSES,
    Diagnostic,
    FixRunResult,
    FixSession,
    PassReport,
    SourceFixResult,
    TextEdit,
)
from chainfix.fix.edits import apply_edits, dedupe_edits
from chainfix.fix.resolver import pick_fix_target
from chainfix.fix.synthesizer import EditSynthesizer
from chainfix.frontend.syntax import SourceTree
from chainfix.frontend.tsc import CompilerConfig, DiagnosticProvider, TscDiagnosticProvider

logger = logging.getLogger(__name__)

DEFAULT_SOURCE_NAME = "/input.ts"

DEFAULT_COMPILER_OPTIONS = {
    "strict": True,
    "noUncheckedIndexedAccess": True,
    "target": "ESNext",
    "module": "ESNext",
    "lib": ["ESNext", "DOM"],
    "types": [],
}


class ConvergenceEngine:
    """Repeats compiler analysis and fixing until nothing changes.

    Every pass asks the provider for fresh diagnostics, since each applied
    edit shifts offsets and may surface new diagnostics further down a chain.
    The loop ends when a pass sees no diagnostics, applies no edits, or the
    session's pass cap is reached.
    """

    def __init__(self, provider: DiagnosticProvider):
        self.provider = provider

    def run(
        self,
        session: FixSession,
        root_names: Sequence[str],
        compiler: CompilerConfig,
    ) -> FixRunResult:
        for number in range(1, session.max_passes + 1):
            diagnostics = self._analyze(session, root_names, compiler)
            if not diagnostics:
                logger.debug("Pass %d: no diagnostics left", number)
                break

            report = PassReport(number=number, diagnostics=len(diagnostics))
            edits_by_file = self._resolve(session, diagnostics, report)
            self._apply(session, edits_by_file, report)

            session.passes_run = number
            session.total_changes += report.edits_applied
            session.reports.append(report)
            logger.info(
                "Pass %d: %d diagnostic(s), %d edit(s) applied, %d skipped",
                number, report.diagnostics, report.edits_applied, report.skipped,
            )
            if report.edits_applied == 0:
                break

        return FixRunResult(
            files=dict(session.files),
            total_changes=session.total_changes,
            passes=session.passes_run,
            reports=list(session.reports),
        )

    def _analyze(
        self,
        session: FixSession,
        root_names: Sequence[str],
        compiler: CompilerConfig,
    ) -> list[Diagnostic]:
        diagnostics = self.provider.collect(dict(session.files), list(root_names), compiler)
        return [
            d for d in diagnostics
            if d.code in session.codes and d.file_path is not None and d.offset is not None
        ]

    def _resolve(
        self,
        session: FixSession,
        diagnostics: Iterable[Diagnostic],
        report: PassReport,
    ) -> dict[str, list[TextEdit]]:
        trees: dict[str, SourceTree] = {}
        edits_by_file: dict[str, list[TextEdit]] = {}

        for diagnostic in diagnostics:
            text = session.files.get(diagnostic.file_path)
            if text is None:
                report.skipped += 1
                continue

            tree = trees.get(diagnostic.file_path)
            if tree is None:
                tree = trees[diagnostic.file_path] = SourceTree(diagnostic.file_path, text)

            edit = self._edit_for(tree, diagnostic)
            if edit is None:
                report.skipped += 1
                logger.debug(
                    "Left TS%d at %s:%d for manual review",
                    diagnostic.code, diagnostic.file_path, diagnostic.offset,
                )
                continue

            edits_by_file.setdefault(diagnostic.file_path, []).append(edit)

        return edits_by_file

    @staticmethod
    def _edit_for(tree: SourceTree, diagnostic: Diagnostic) -> TextEdit | None:
        anchor = tree.token_at(diagnostic.offset)
        if anchor is None:
            return None
        target = pick_fix_target(anchor, diagnostic.code)
        if target is None:
            return None
        return EditSynthesizer(tree).edit_for(target)

    @staticmethod
    def _apply(
        session: FixSession,
        edits_by_file: Mapping[str, list[TextEdit]],
        report: PassReport,
    ) -> None:
        for file_path, edits in edits_by_file.items():
            # Several diagnostics can point at the same node.
            unique = dedupe_edits(edits)
            before = session.files[file_path]
            after = apply_edits(before, unique)
            if after != before:
                session.files[file_path] = after
                report.edits_applied += len(unique)
                report.files_changed.append(file_path)


def fix_in_memory_project(
    files: Mapping[str, str],
    root_names: Sequence[str],
    compiler: CompilerConfig,
    codes: Iterable[int] | None = None,
    max_passes: int | None = None,
    provider: DiagnosticProvider | None = None,
) -> FixRunResult:
    """Fix a set of named file texts without touching the file system."""
    session = FixSession(
        files=dict(files),
        codes=frozenset(codes) if codes is not None else DEFAULT_CODES,
        max_passes=max_passes if max_passes is not None else DEFAULT_MAX_PASSES,
    )
    engine = ConvergenceEngine(provider or TscDiagnosticProvider())
    return engine.run(session, root_names, compiler)


def fix_source_text(
    text: str,
    file_name: str = DEFAULT_SOURCE_NAME,
    compiler_options: Mapping | None = None,
    codes: Iterable[int] | None = None,
    max_passes: int | None = None,
    provider: DiagnosticProvider | None = None,
) -> SourceFixResult:
    """Fix a single piece of TypeScript source.

    The text is checked as a one-file project with strict null checks so
    the "possibly undefined" diagnostics fire; ``compiler_options``
    override the defaults.
    """
    compiler = CompilerConfig(options={**DEFAULT_COMPILER_OPTIONS, **(compiler_options or {})})
    result = fix_in_memory_project(
        files={file_name: text},
        root_names=[file_name],
        compiler=compiler,
        codes=codes,
        max_passes=max_passes,
        provider=provider,
    )
    return SourceFixResult(
        text=result.files.get(file_name, text),
        total_changes=result.total_changes,
        passes=result.passes,
    )
