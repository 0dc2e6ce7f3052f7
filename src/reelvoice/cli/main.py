"""Root CLI group for reelvoice."""

from __future__ import annotations

import click

from reelvoice import __version__


@click.group()
@click.version_option(version=__version__, prog_name="reelvoice")
def cli() -> None:
    """reelvoice — narration timing and audio assembly for short videos."""


# Import and register subcommands
from reelvoice.cli.init_cmd import init_cmd  # noqa: E402
from reelvoice.cli.budget_cmd import budget_cmd  # noqa: E402
from reelvoice.cli.narrate_cmd import narrate_cmd  # noqa: E402
from reelvoice.cli.assemble_cmd import assemble_cmd  # noqa: E402

cli.add_command(init_cmd, "init")
cli.add_command(budget_cmd, "budget")
cli.add_command(narrate_cmd, "narrate")
cli.add_command(assemble_cmd, "assemble")
