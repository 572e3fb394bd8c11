"""Rich terminal formatting for chainfix output."""

from __future__ import annotations

import difflib
from pathlib import Path

from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

from chainfix.core.models import PassReport, ProjectFixResult

console = Console()
error_console = Console(stderr=True)


def summary_line(result: ProjectFixResult) -> str:
    if result.dry:
        return f"DRY RUN: would apply {result.total_changes} edits"
    return f"DONE: applied {result.total_changes} edits"


def print_summary(result: ProjectFixResult) -> None:
    """Print the one-line run summary plus where the backups went."""
    color = "yellow" if result.dry else "green"
    console.print(f"[{color}]{summary_line(result)}[/{color}]")
    files = len(result.changed_files)
    console.print(
        f"  {files} file(s) changed in {result.passes} pass(es)",
        style="dim",
    )
    if result.backup_dir is not None:
        console.print(f"  Backups saved to {result.backup_dir}", style="dim")
        console.print("  Run `chainfix undo` to revert.", style="dim")


def print_pass_reports(reports: list[PassReport]) -> None:
    table = Table(title="Fix passes", title_justify="left")
    table.add_column("Pass", justify="right")
    table.add_column("Diagnostics", justify="right")
    table.add_column("Edits", justify="right", style="green")
    table.add_column("Skipped", justify="right", style="yellow")
    table.add_column("Files")
    for report in reports:
        table.add_row(
            str(report.number),
            str(report.diagnostics),
            str(report.edits_applied),
            str(report.skipped),
            str(len(report.files_changed)),
        )
    console.print(table)


def unified_diff(path: str, before: str, after: str) -> str:
    return "".join(difflib.unified_diff(
        before.splitlines(keepends=True),
        after.splitlines(keepends=True),
        fromfile=f"a/{Path(path).name}",
        tofile=f"b/{Path(path).name}",
    ))


def print_diffs(result: ProjectFixResult) -> None:
    for path, (before, after) in sorted(result.changed_files.items()):
        console.print(f"\n[bold]{path}[/bold]")
        console.print(Syntax(unified_diff(path, before, after), "diff", theme="ansi_dark"))
