"""git-publish CLI entry point."""

import logging
import sys

import click

from .commands import init, publish, show
from .commands.branches import DEFAULT_FETCH_TIMEOUT
from .config import GitPublishError


def main() -> None:
    """Entry point for git-publish command."""
    cli()


def _publish(fetch_timeout: float) -> None:
    try:
        publish.run_publish(fetch_timeout=fetch_timeout)
    except GitPublishError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@click.group(invoke_without_command=True)
@click.option("-v", "--verbose", is_flag=True, help="Log git commands and tag resolution")
@click.option(
    "--fetch-timeout",
    type=float,
    default=DEFAULT_FETCH_TIMEOUT,
    show_default=True,
    help="Seconds to wait for the remote fetch",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, fetch_timeout: float) -> None:
    """git-publish: create and push version tags on branches without switching to them."""
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.obj["fetch_timeout"] = fetch_timeout
    if ctx.invoked_subcommand is None:
        _publish(fetch_timeout)


@cli.command("publish")
@click.pass_context
def publish_cmd(ctx: click.Context) -> None:
    """Pick a branch, create the next tag on it and optionally push it."""
    _publish(ctx.obj["fetch_timeout"])


@cli.command("last")
@click.option("--format", "tag_format", default=None, help="Tag format, e.g. v0.0.0")
@click.argument("branch")
def last_cmd(tag_format: str | None, branch: str) -> None:
    """Print the last tag on BRANCH."""
    try:
        show.run_last(branch, tag_format=tag_format)
    except GitPublishError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@cli.command("next")
@click.option("--format", "tag_format", default=None, help="Tag format, e.g. v0.0.0")
@click.argument("branch")
def next_cmd(tag_format: str | None, branch: str) -> None:
    """Print the suggested next tag for BRANCH."""
    try:
        show.run_next(branch, tag_format=tag_format)
    except GitPublishError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@cli.command("init")
@click.option("--force", is_flag=True, help="Overwrite an existing publish.json")
def init_cmd(force: bool) -> None:
    """Write the default publish.json to the current directory."""
    try:
        init.run_init(force=force)
    except GitPublishError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
