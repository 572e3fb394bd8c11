"""Fix a TypeScript project on disk."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from chainfix.core.models import ProjectFixResult
from chainfix.fix.backup import BackupStore
from chainfix.fix.engine import fix_in_memory_project
from chainfix.frontend.project import load_project, read_sources, select_root_names, write_sources
from chainfix.frontend.tsc import DiagnosticProvider, TscDiagnosticProvider

logger = logging.getLogger(__name__)


def fix_project(
    config_path: Path,
    directory: Path | None = None,
    dry: bool = False,
    codes: Iterable[int] | None = None,
    max_passes: int | None = None,
    provider: DiagnosticProvider | None = None,
    tsc: str | list[str] | None = None,
    backup: bool = True,
) -> ProjectFixResult:
    """Load the tsconfig at ``config_path``, fix its files and write them back.

    With ``dry`` nothing is written; the result still carries the edit count
    and the would-be contents of every changed file.
    """
    project = load_project(config_path, tsc=tsc)
    root_names = select_root_names(project.root_names, directory)
    originals = read_sources(root_names)
    logger.info("Fixing %d file(s) from %s", len(originals), project.config_path)

    if provider is None:
        provider = TscDiagnosticProvider(tsc=tsc, workdir=project.directory)

    result = fix_in_memory_project(
        files=originals,
        root_names=root_names,
        compiler=project.compiler,
        codes=codes,
        max_passes=max_passes,
        provider=provider,
    )

    changed = {
        name: (originals[name], text)
        for name, text in result.files.items()
        if originals.get(name) != text
    }

    backup_dir = None
    if changed and not dry:
        if backup:
            backup_dir = BackupStore(project.directory).save({name: before for name, (before, _) in changed.items()})
        write_sources({name: after for name, (_, after) in changed.items()})

    return ProjectFixResult(
        total_changes=result.total_changes,
        passes=result.passes,
        changed_files=changed,
        dry=dry,
        backup_dir=backup_dir,
        reports=result.reports,
    )
