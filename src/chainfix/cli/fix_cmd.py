"""chainfix fix command."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from chainfix.core.config import load_config, parse_codes
from chainfix.core.errors import ChainfixError
from chainfix.core.output import (
    error_console,
    print_diffs,
    print_pass_reports,
    print_summary,
)
from chainfix.fix.project import fix_project


def _codes_option(ctx, param, value):
    if value is None:
        return None
    try:
        return parse_codes(value)
    except ValueError:
        raise click.BadParameter("expected a comma separated list of numbers, e.g. 2532,18048")


@click.command()
@click.option("--project", "-p", "project", default="./tsconfig.json", help="Path to tsconfig.json (default: ./tsconfig.json)")
@click.option("--dir", "directory", type=click.Path(file_okay=False), help="Only fix files under this directory")
@click.option("--dry", is_flag=True, help="Report what would change without writing files")
@click.option("--codes", callback=_codes_option, help="Diagnostic codes to fix (default: 2531,2532,2533,18048,2722)")
@click.option("--max-passes", "--maxPasses", "max_passes", type=click.IntRange(min=1), help="Maximum analyze/fix passes (default: 10)")
@click.option("--tsc", help="Command used to run the TypeScript compiler")
@click.option("--diff", "show_diff", is_flag=True, help="Print a unified diff of every changed file")
@click.option("--no-backup", is_flag=True, help="Do not back up files before rewriting them")
@click.option("--verbose", "-v", is_flag=True, help="Show per-pass details and debug logging")
def fix(
    project: str,
    directory: str | None,
    dry: bool,
    codes: frozenset[int] | None,
    max_passes: int | None,
    tsc: str | None,
    show_diff: bool,
    no_backup: bool,
    verbose: bool,
):
    """Add optional chaining at every fixable "possibly undefined" site.

    Runs tsc over the project, applies `?.` edits, and repeats until a pass
    makes no change or the pass limit is hit.
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    config_path = Path(project).resolve()
    config = load_config(config_path.parent if not config_path.is_dir() else config_path)

    try:
        result = fix_project(
            config_path,
            directory=Path(directory).resolve() if directory else None,
            dry=dry,
            codes=codes if codes is not None else config.fix.codes,
            max_passes=max_passes if max_passes is not None else config.fix.max_passes,
            tsc=tsc or config.frontend.tsc,
            backup=config.fix.backup and not no_backup,
        )
    except ChainfixError as e:
        error_console.print(f"[red]{e}[/red]")
        raise SystemExit(1)

    if verbose and result.reports:
        print_pass_reports(result.reports)
    if show_diff:
        print_diffs(result)
    print_summary(result)
