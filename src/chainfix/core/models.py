"""Shared data models used across chainfix modules."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from pathlib import Path

# TS2531/2532/2533: object is possibly null/undefined, TS18048: 'x' is
# possibly undefined, TS2722: cannot invoke an object which is possibly
# undefined.
DEFAULT_CODES = frozenset({2531, 2532, 2533, 18048, 2722})
INVOKE_CODE = 2722
DEFAULT_MAX_PASSES = 10


class NodeShape(enum.Enum):
    MEMBER_ACCESS = "member_access"
    INDEXED_ACCESS = "indexed_access"
    INVOCATION = "invocation"
    OTHER = "other"


@dataclass(frozen=True)
class Diagnostic:
    """A compiler diagnostic pointing at a character offset in a file."""

    code: int
    file_path: str | None
    offset: int | None
    message: str = ""


@dataclass(frozen=True)
class TextEdit:
    """Replace ``text[start:end]`` with ``new_text``."""

    start: int
    end: int
    new_text: str

    def __post_init__(self) -> None:
        if self.start < 0 or self.start > self.end:
            raise ValueError(f"Invalid edit range: {self.start}..{self.end}")


@dataclass
class PassReport:
    """Accounting for a single analyze/resolve/apply pass."""

    number: int
    diagnostics: int = 0
    edits_applied: int = 0
    skipped: int = 0
    files_changed: list[str] = field(default_factory=list)


@dataclass
class FixSession:
    """Working state of one fix run. Owns the in-memory text per file."""

    files: dict[str, str]
    codes: frozenset[int] = DEFAULT_CODES
    max_passes: int = DEFAULT_MAX_PASSES
    total_changes: int = 0
    passes_run: int = 0
    reports: list[PassReport] = field(default_factory=list)


@dataclass
class FixRunResult:
    files: dict[str, str]
    total_changes: int
    passes: int
    reports: list[PassReport] = field(default_factory=list)


@dataclass
class SourceFixResult:
    text: str
    total_changes: int
    passes: int


@dataclass
class ProjectFixResult:
    """Outcome of fixing a project on disk."""

    total_changes: int
    passes: int
    changed_files: dict[str, tuple[str, str]] = field(default_factory=dict)  # path -> (before, after)
    dry: bool = False
    backup_dir: Path | None = None
    reports: list[PassReport] = field(default_factory=list)
