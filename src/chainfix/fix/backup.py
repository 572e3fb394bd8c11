"""Backups of rewritten files and undo support."""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from chainfix.core.config import CHAINFIX_DIR_NAME, get_chainfix_dir


@dataclass
class BackupEntry:
    """One file saved before a fix run rewrote it."""

    file: Path
    backup: Path
    timestamp: str


class BackupStore:
    """Keeps per-run backups under ``.chainfix/backups/<timestamp>/``."""

    def __init__(self, project_path: Path):
        self.project_path = project_path
        # Reading backups must not create .chainfix/; save() does that.
        self.backup_dir = project_path / CHAINFIX_DIR_NAME / "backups"

    def save(self, originals: dict[str, str]) -> Path:
        """Back up the original content of every file about to be rewritten."""
        get_chainfix_dir(self.project_path)
        timestamp = datetime.now().strftime("%Y-%m-%dT%H-%M-%S")
        session_dir = self.backup_dir / timestamp
        counter = 1
        while session_dir.exists():
            session_dir = self.backup_dir / f"{timestamp}.{counter}"
            counter += 1
        session_dir.mkdir(parents=True)

        manifest = []
        for index, (file_path, content) in enumerate(sorted(originals.items())):
            backup_file = session_dir / f"{index:04d}-{Path(file_path).name}.bak"
            with open(backup_file, "w", encoding="utf-8", newline="") as f:
                f.write(content)
            manifest.append({
                "file": str(file_path),
                "backup": str(backup_file),
                "timestamp": timestamp,
            })

        (session_dir / "manifest.json").write_text(json.dumps(manifest, indent=2))
        return session_dir

    def list_sessions(self) -> list[Path]:
        """Backup sessions, newest first."""
        if not self.backup_dir.exists():
            return []
        return sorted(
            (d for d in self.backup_dir.iterdir() if (d / "manifest.json").exists()),
            reverse=True,
        )

    def entries(self, session_dir: Path) -> list[BackupEntry]:
        manifest = json.loads((session_dir / "manifest.json").read_text())
        return [
            BackupEntry(file=Path(e["file"]), backup=Path(e["backup"]), timestamp=e["timestamp"])
            for e in manifest
        ]

    def undo_last_session(self) -> list[BackupEntry]:
        """Restore every file from the most recent session, then drop the session."""
        sessions = self.list_sessions()
        if not sessions:
            return []

        latest = sessions[0]
        restored = []
        for entry in self.entries(latest):
            if not entry.backup.exists():
                continue
            with open(entry.backup, encoding="utf-8", newline="") as f:
                content = f.read()
            with open(entry.file, "w", encoding="utf-8", newline="") as f:
                f.write(content)
            restored.append(entry)

        (latest / "manifest.json").rename(latest / "manifest.restored.json")
        return restored
