"""Branch discovery: which configured branches exist, and refreshing them from the remote."""

import logging
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError

import click

from ..config import BranchTag, Config
from ..git import GitBackend, GitError

logger = logging.getLogger(__name__)

DEFAULT_REMOTE = "origin"
DEFAULT_FETCH_TIMEOUT = 5.0


def _fetch_all(git: GitBackend, remote: str) -> list[str]:
    """Fetch branches, then tags if there are any. Returns warnings instead of raising."""
    warnings = []
    try:
        git.fetch(remote)
    except GitError as e:
        warnings.append(f"warning: initial fetch failed: {e}")
    if git.has_any_tags():
        try:
            git.fetch_tags(remote)
        except GitError as e:
            warnings.append(f"warning: failed to fetch tags: {e}")
    return warnings


def fetch_remote(
    git: GitBackend, remote: str = DEFAULT_REMOTE, timeout: float = DEFAULT_FETCH_TIMEOUT
) -> bool:
    """
    Refresh remote branches and tags, waiting at most timeout seconds.
    On timeout the fetch is left running in the background and local state is used.
    Returns True if the fetch finished in time.
    """
    click.echo("Fetching branch information from remote, please wait...")
    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="git-fetch")
    future = executor.submit(_fetch_all, git, remote)
    try:
        warnings = future.result(timeout=timeout)
    except FutureTimeoutError:
        click.echo("Fetch taking longer than expected, continuing...")
        return False
    finally:
        executor.shutdown(wait=False)

    click.echo("Remote information fetched successfully.")
    for warning in warnings:
        click.echo(warning, err=True)
    return True


def unique(items: list[str]) -> list[str]:
    """Drop duplicates, keeping first-seen order."""
    return list(dict.fromkeys(items))


def configured_branches(git: GitBackend, names: list[str]) -> list[str]:
    """Local and remote branches whose name is one of names."""
    found = []
    try:
        found.extend(b for b in git.local_branches() if b in names)
    except GitError as e:
        logger.debug("Cannot list local branches: %s", e)
    try:
        found.extend(b for b in git.remote_branches() if b in names)
    except GitError as e:
        logger.debug("Cannot list remote branches: %s", e)
    return unique(found)


def filter_existing_branches(
    git: GitBackend,
    config: Config,
    has_remote: bool,
    fetch_timeout: float = DEFAULT_FETCH_TIMEOUT,
) -> Config:
    """Keep only configured branches present locally or on the remote (fetched first)."""
    if has_remote:
        fetch_remote(git, timeout=fetch_timeout)

    available = configured_branches(git, [bt.branch for bt in config.branch_tags])

    kept: list[BranchTag] = []
    for bt in config.branch_tags:
        if bt.branch in available:
            kept.append(bt)
        else:
            click.echo(
                f"Warning: Branch '{bt.branch}' does not exist in this repository and will be skipped"
            )
    return Config(branch_tags=kept)
