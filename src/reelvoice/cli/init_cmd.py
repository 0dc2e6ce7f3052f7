"""reelvoice init — write the default configuration."""

from __future__ import annotations

from pathlib import Path

import click

from reelvoice.models.config import Settings
from reelvoice.utils.io import write_yaml
from reelvoice.utils.progress import log_error, log_success


@click.command()
@click.option(
    "--output", "-o",
    default="reelvoice.yaml",
    type=click.Path(),
    help="Where to write the configuration file",
)
@click.option("--force", is_flag=True, help="Overwrite an existing file")
def init_cmd(output: str, force: bool) -> None:
    """Write the default configuration to YAML for editing."""
    config_path = Path(output).resolve()
    if config_path.exists() and not force:
        log_error(f"Config already exists: {config_path} (use --force to overwrite)")
        raise SystemExit(1)

    write_yaml(config_path, Settings().model_dump(mode="json"))

    log_success(f"Config written: {config_path}")
    click.echo(f"\nNext: reelvoice narrate TRANSCRIPT --video-duration 15 --config {config_path}")
