"""Click CLI entry point for chainfix."""

from __future__ import annotations

import click

from chainfix._version import __version__


@click.group()
@click.version_option(version=__version__, prog_name="chainfix")
def cli():
    """chainfix - add optional chaining where tsc says a value may be missing.

    Runs the TypeScript compiler, rewrites `a.b` to `a?.b` (and `f()` to
    `f?.()`) at every flagged site it can fix mechanically, and repeats until
    nothing changes.
    """
    pass


# Import and register subcommands
from chainfix.cli.fix_cmd import fix  # noqa: E402
from chainfix.cli.undo_cmd import undo  # noqa: E402

cli.add_command(fix)
cli.add_command(undo)


if __name__ == "__main__":
    cli()
