"""TypeScript project discovery and source file I/O."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path

from chainfix.core.errors import ProjectConfigError
from chainfix.frontend.tsc import CompilerConfig, resolve_tsc_command, run_tsc

logger = logging.getLogger(__name__)


@dataclass
class Project:
    """A loaded tsconfig: its root files and the compiler settings to use."""

    config_path: Path
    root_names: list[str] = field(default_factory=list)
    compiler: CompilerConfig = field(default_factory=CompilerConfig)

    @property
    def directory(self) -> Path:
        return self.config_path.parent


def load_project(config_path: Path, tsc: str | list[str] | None = None) -> Project:
    """Resolve a tsconfig with ``tsc --showConfig``.

    Raises :class:`ProjectConfigError` with the compiler's message when the
    configuration cannot be read or is invalid.
    """
    config_path = Path(config_path).resolve()
    if config_path.is_dir():
        config_path = config_path / "tsconfig.json"
    if not config_path.is_file():
        raise ProjectConfigError(f"Cannot find a tsconfig.json file at the specified path: {config_path}")

    command = resolve_tsc_command(tsc, config_path.parent)
    completed = run_tsc(command, ["-p", str(config_path), "--showConfig"], config_path.parent)
    if completed.returncode != 0:
        message = (completed.stdout + completed.stderr).strip()
        raise ProjectConfigError(message or f"tsc --showConfig failed for {config_path}")

    try:
        resolved = json.loads(completed.stdout)
    except json.JSONDecodeError as exc:
        raise ProjectConfigError(f"Unreadable tsc --showConfig output for {config_path}: {exc}") from exc

    root_names = [
        os.path.normpath(os.path.join(config_path.parent, name))
        for name in resolved.get("files", [])
    ]
    logger.debug("Loaded %s with %d root file(s)", config_path, len(root_names))
    return Project(
        config_path=config_path,
        root_names=root_names,
        compiler=CompilerConfig(extends=config_path),
    )


def select_root_names(root_names: Iterable[str], directory: Path | None) -> list[str]:
    """Keep only the files under ``directory`` (all of them when it is None)."""
    if directory is None:
        return list(root_names)
    prefix = Path(directory).resolve()
    return [name for name in root_names if Path(name).resolve().is_relative_to(prefix)]


def read_sources(paths: Iterable[str]) -> dict[str, str]:
    """Read each file; unreadable files are left out."""
    sources = {}
    for path in paths:
        try:
            with open(path, encoding="utf-8", newline="") as f:
                sources[path] = f.read()
        except (OSError, UnicodeDecodeError) as exc:
            logger.debug("Skipping unreadable file %s: %s", path, exc)
    return sources


def write_sources(sources: Mapping[str, str]) -> None:
    for path, text in sources.items():
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(text)
