"""git-publish last / next: print the last tag of a branch or the suggested next one."""

from pathlib import Path

import click

from ..config import GitPublishError, config_path, load_config
from ..git import GitBackend, SubprocessGit
from ..resolver import TagResolver
from ..versioning import next_tag

FALLBACK_FORMAT = "v0.0.0"


class ShowError(GitPublishError):
    """Show error."""


def resolve_format(branch: str, tag_format: str | None, cwd: Path | None = None) -> str:
    """Explicit format, else the branch's format from an existing publish.json, else v0.0.0."""
    if tag_format:
        return tag_format
    if config_path(cwd).exists():
        configured = load_config(cwd).format_for(branch)
        if configured:
            return configured
    return FALLBACK_FORMAT


def _resolver(git: GitBackend | None, cwd: Path | None) -> TagResolver:
    git = git or SubprocessGit(cwd)
    if not git.is_repository():
        raise ShowError("Not in a git repository")
    return TagResolver(git)


def run_last(
    branch: str,
    tag_format: str | None = None,
    git: GitBackend | None = None,
    cwd: Path | None = None,
) -> str | None:
    """Print the last tag on branch (or that there is none)."""
    resolver = _resolver(git, cwd)
    last = resolver.resolve_last(branch, resolve_format(branch, tag_format, cwd))
    click.echo(last if last is not None else "No existing tags")
    return last


def run_next(
    branch: str,
    tag_format: str | None = None,
    git: GitBackend | None = None,
    cwd: Path | None = None,
) -> str:
    """Print the tag that would be suggested for branch."""
    resolver = _resolver(git, cwd)
    fmt = resolve_format(branch, tag_format, cwd)
    suggested = next_tag(resolver.resolve_last(branch, fmt), fmt)
    click.echo(suggested)
    return suggested
