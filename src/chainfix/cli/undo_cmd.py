"""chainfix undo command."""

from __future__ import annotations

from pathlib import Path

import click

from chainfix.core.output import console
from chainfix.fix.backup import BackupStore


@click.command()
@click.option("--list", "list_all", is_flag=True, help="List backup sessions")
@click.option("--target", "-t", "target", default=".", help="Project directory holding .chainfix/ (default: current dir)")
def undo(list_all: bool, target: str):
    """Restore the files rewritten by the last `chainfix fix` run."""
    store = BackupStore(Path(target).resolve())

    if list_all:
        sessions = store.list_sessions()
        if not sessions:
            console.print("\n  No backups found.\n")
            return

        console.print("\n  [bold]Backup sessions[/bold]\n")
        for session in sessions:
            entries = store.entries(session)
            console.print(f"  {session.name}  {len(entries)} file(s)")
        console.print()
        return

    restored = store.undo_last_session()
    if not restored:
        console.print("\n  No fix session to undo.\n")
        return

    console.print("\n  [bold]Restored:[/bold]\n")
    for entry in restored:
        console.print(f"  [green]✅[/green] {entry.file}")
    console.print()
