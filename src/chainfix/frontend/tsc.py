"""Diagnostics from the TypeScript compiler.

The compiler only reads files from disk, so each pass writes the working
text into a throw-away overlay directory together with a ``tsconfig.json``
that extends the project's own configuration, runs ``tsc --noEmit`` on it,
and maps the reported positions back onto the in-memory files.
"""

from __future__ import annotations

import json
import logging
import os
import re
import shlex
import shutil
import subprocess
import tempfile
from abc import ABC, abstractmethod
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from chainfix.core.errors import FrontEndError, ProjectConfigError
from chainfix.core.models import Diagnostic

logger = logging.getLogger(__name__)

OVERLAY_PREFIX = ".chainfix-overlay-"

_LOCATED_RE = re.compile(
    r"^(?P<file>.+?)\((?P<line>\d+),(?P<column>\d+)\): error TS(?P<code>\d+): (?P<message>.*)$"
)
_GLOBAL_RE = re.compile(r"^error TS(?P<code>\d+): (?P<message>.*)$")
_LINE_BREAK_RE = re.compile(r"\r\n|[\n\r\u2028\u2029]")


@dataclass(frozen=True)
class CompilerConfig:
    """Compiler settings for a run.

    ``extends`` points at the project's tsconfig; ``options`` are
    ``compilerOptions`` layered on top of it.
    """

    extends: Path | None = None
    options: dict = field(default_factory=dict)


class DiagnosticProvider(ABC):
    """Produces compiler diagnostics for the current text of a set of files."""

    @abstractmethod
    def collect(
        self,
        files: Mapping[str, str],
        root_names: Sequence[str],
        compiler: CompilerConfig,
    ) -> list[Diagnostic]:
        ...


def is_config_code(code: int) -> bool:
    """Compiler option / tsconfig diagnostics (TS5xxx)."""
    return 5000 <= code < 6000


def find_tsc(start: Path | None = None) -> list[str]:
    """Locate the compiler: nearest ``node_modules/.bin/tsc``, then ``PATH``."""
    here = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        candidate = directory / "node_modules" / ".bin" / "tsc"
        if candidate.exists():
            return [str(candidate)]

    found = shutil.which("tsc")
    if found:
        return [found]

    raise FrontEndError(
        "TypeScript compiler not found. Install `typescript` in the project "
        "or pass --tsc."
    )


def resolve_tsc_command(tsc: str | Sequence[str] | None, start: Path | None = None) -> list[str]:
    if tsc is None:
        return find_tsc(start)
    if isinstance(tsc, str):
        return shlex.split(tsc)
    return list(tsc)


def run_tsc(command: Sequence[str], args: Sequence[str], cwd: Path) -> subprocess.CompletedProcess:
    try:
        return subprocess.run(
            [*command, *args],
            cwd=cwd,
            capture_output=True,
            text=True,
            encoding="utf-8",
        )
    except OSError as exc:
        raise FrontEndError(f"Failed to run {' '.join(command)}: {exc}") from exc


def line_starts(text: str) -> list[int]:
    starts = [0]
    for match in _LINE_BREAK_RE.finditer(text):
        starts.append(match.end())
    return starts


def utf16_column_to_index(line_text: str, column: int) -> int:
    """Convert a 0-based UTF-16 column into a string index within ``line_text``."""
    units = 0
    for index, char in enumerate(line_text):
        if units >= column:
            return index
        units += 2 if ord(char) > 0xFFFF else 1
    return len(line_text)


def position_to_offset(text: str, line: int, column: int) -> int | None:
    """Map a 1-based ``(line, column)`` as printed by tsc to a character offset."""
    starts = line_starts(text)
    if line < 1 or line > len(starts):
        return None
    start = starts[line - 1]
    end = starts[line] if line < len(starts) else len(text)
    return start + utf16_column_to_index(text[start:end], column - 1)


def common_base(paths: Sequence[str]) -> Path:
    directories = [os.path.dirname(os.path.abspath(p)) for p in paths]
    if not directories:
        return Path.cwd()
    return Path(os.path.commonpath(directories))


class TscDiagnosticProvider(DiagnosticProvider):
    """Runs ``tsc --noEmit`` over an overlay of the in-memory files."""

    def __init__(self, tsc: str | Sequence[str] | None = None, workdir: Path | None = None):
        self.workdir = workdir
        self._command = resolve_tsc_command(tsc, workdir) if tsc is not None else None

    @property
    def command(self) -> list[str]:
        if self._command is None:
            self._command = find_tsc(self.workdir)
        return self._command

    def collect(
        self,
        files: Mapping[str, str],
        root_names: Sequence[str],
        compiler: CompilerConfig,
    ) -> list[Diagnostic]:
        base = common_base([*root_names, *files])
        with tempfile.TemporaryDirectory(prefix=OVERLAY_PREFIX, dir=self.workdir) as tmp:
            overlay = Path(tmp).resolve()
            mirrored = self._write_overlay(overlay, base, files)
            roots = [
                str(overlay / self._relative(name, base)) if name in files else os.path.abspath(name)
                for name in root_names
            ]
            config_path = overlay / "tsconfig.json"
            config_path.write_text(
                json.dumps(self._overlay_config(overlay, base, roots, compiler), indent=2),
                encoding="utf-8",
            )

            completed = run_tsc(self.command, ["-p", str(config_path), "--pretty", "false"], overlay)
            output = completed.stdout + completed.stderr
            if completed.returncode != 0 and not output.strip():
                raise FrontEndError(f"tsc exited with status {completed.returncode} and no output")

            diagnostics = list(self.parse_output(output, overlay, mirrored, files))

        logger.debug("tsc reported %d diagnostic(s)", len(diagnostics))
        return diagnostics

    @staticmethod
    def _relative(name: str, base: Path) -> str:
        return os.path.relpath(os.path.abspath(name), base)

    def _write_overlay(self, overlay: Path, base: Path, files: Mapping[str, str]) -> dict[str, str]:
        mirrored = {}
        for name, text in files.items():
            target = overlay / self._relative(name, base)
            target.parent.mkdir(parents=True, exist_ok=True)
            with open(target, "w", encoding="utf-8", newline="") as f:
                f.write(text)
            mirrored[str(target.resolve())] = name
        return mirrored

    @staticmethod
    def _overlay_config(overlay: Path, base: Path, roots: list[str], compiler: CompilerConfig) -> dict:
        options = {
            **compiler.options,
            "noEmit": True,
            # Emit modes that tsc rejects alongside noEmit (TS5053 and friends).
            "emitDeclarationOnly": False,
            "composite": False,
            "incremental": False,
            "tsBuildInfoFile": None,
            # Overlay files must stay inside rootDir and resolve relative
            # imports against the real tree.
            "rootDir": os.path.commonpath([str(overlay), str(base)]),
            "rootDirs": [str(overlay), str(base)],
        }
        config: dict = {"compilerOptions": options, "files": roots, "include": []}
        if compiler.extends is not None:
            config["extends"] = str(Path(compiler.extends).resolve())
        return config

    @staticmethod
    def parse_output(
        output: str,
        cwd: Path,
        mirrored: Mapping[str, str],
        files: Mapping[str, str],
    ) -> Iterator[Diagnostic]:
        """Parse ``--pretty false`` output into diagnostics.

        Locations outside the overlay yield diagnostics without a file.
        Compiler option errors (global, or located in a tsconfig) raise
        :class:`ProjectConfigError` once the whole output has been read.
        """
        config_errors = []
        for line in output.splitlines():
            match = _LOCATED_RE.match(line)
            if match:
                code = int(match["code"])
                path = str((cwd / match["file"]).resolve())
                name = mirrored.get(path)
                if name is None and is_config_code(code):
                    config_errors.append(line)
                    continue
                offset = None
                if name is not None:
                    offset = position_to_offset(files[name], int(match["line"]), int(match["column"]))
                yield Diagnostic(code=code, file_path=name, offset=offset, message=match["message"])
                continue

            match = _GLOBAL_RE.match(line)
            if match and is_config_code(int(match["code"])):
                config_errors.append(line)

        if config_errors:
            raise ProjectConfigError("\n".join(config_errors))
