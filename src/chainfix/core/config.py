"""Configuration management for chainfix (chainfix.toml parsing + defaults)."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from chainfix.core.models import DEFAULT_CODES, DEFAULT_MAX_PASSES

CONFIG_FILE_NAME = "chainfix.toml"
CHAINFIX_DIR_NAME = ".chainfix"


@dataclass
class FixConfig:
    codes: list[int] = field(default_factory=lambda: sorted(DEFAULT_CODES))
    max_passes: int = DEFAULT_MAX_PASSES
    backup: bool = True


@dataclass
class FrontendConfig:
    tsc: str | None = None


@dataclass
class ChainfixConfig:
    """Complete chainfix configuration."""

    fix: FixConfig = field(default_factory=FixConfig)
    frontend: FrontendConfig = field(default_factory=FrontendConfig)


def load_config(project_path: Path | None = None) -> ChainfixConfig:
    """Load configuration from chainfix.toml if present, otherwise return defaults."""
    config = ChainfixConfig()

    if project_path is None:
        project_path = Path.cwd()

    config_file = project_path / CONFIG_FILE_NAME
    if not config_file.exists():
        return config

    with open(config_file, "rb") as f:
        data = tomllib.load(f)

    if "fix" in data:
        fx = data["fix"]
        if "codes" in fx:
            config.fix.codes = [int(c) for c in fx["codes"]]
        if "max_passes" in fx:
            config.fix.max_passes = int(fx["max_passes"])
        if "backup" in fx:
            config.fix.backup = bool(fx["backup"])

    if "frontend" in data:
        fe = data["frontend"]
        if "tsc" in fe:
            config.frontend.tsc = fe["tsc"]

    return config


def get_chainfix_dir(project_path: Path | None = None) -> Path:
    """Get or create the .chainfix directory."""
    if project_path is None:
        project_path = Path.cwd()
    chainfix_dir = project_path / CHAINFIX_DIR_NAME
    chainfix_dir.mkdir(exist_ok=True)
    return chainfix_dir


def parse_codes(value: str) -> frozenset[int]:
    """Parse a comma separated list of diagnostic codes (``"2532, 18048"``)."""
    codes = set()
    for part in value.split(","):
        part = part.strip()
        if not part:
            continue
        if part.upper().startswith("TS"):
            part = part[2:]
        codes.add(int(part))
    return frozenset(codes)
