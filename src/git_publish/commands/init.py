"""git-publish init: write the default publish.json."""

from pathlib import Path

import click

from ..config import config_path, write_default_config


def run_init(force: bool = False, cwd: Path | None = None) -> Path:
    """
    Write publish.json with the default branches (master, main, gray) to cwd.
    Raises ConfigError if the file exists and force is off.
    """
    path = config_path(cwd)
    config = write_default_config(path, overwrite=force)
    click.echo(f"Wrote {path} with {len(config.branch_tags)} branches")
    return path
