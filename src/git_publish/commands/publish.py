"""git-publish: pick a branch, confirm the next tag, create it and optionally push it."""

import re
from pathlib import Path

import click

from ..config import BranchTag, Config, GitPublishError, load_config
from ..git import GitBackend, GitError, SubprocessGit
from ..resolver import TagResolver
from ..versioning import extract_prefix, is_greater, next_tag
from .branches import DEFAULT_FETCH_TIMEOUT, filter_existing_branches


class PublishError(GitPublishError):
    """Publish error."""


def green(text: str) -> str:
    return click.style(text, fg="green")


def cyan(text: str) -> str:
    return click.style(text, fg="cyan")


def _read_choice(text: str) -> str:
    return click.prompt(text, default="", show_default=False, prompt_suffix=" ").strip()


def _pick(options: list[str], entered: str) -> int | None:
    """1-based menu choice -> index into options, or None if out of range / not a number."""
    try:
        idx = int(entered)
    except ValueError:
        return None
    if 0 < idx <= len(options):
        return idx - 1
    return None


def tag_pattern(tag_format: str) -> re.Pattern:
    return re.compile("^" + re.escape(extract_prefix(tag_format)) + r"[0-9]+\.[0-9]+\.[0-9]+$")


def select_branch(config: Config, resolver: TagResolver) -> BranchTag:
    """List the configured branches with their last tag and ask which one to tag."""
    click.echo("Select branch for tagging:")
    for i, bt in enumerate(config.branch_tags, start=1):
        last = resolver.resolve_last(bt.branch, bt.tag)
        if last is None:
            click.echo(f"{i}: {bt.branch} (No existing tags, format: {bt.tag})")
        else:
            click.echo(f"{i}: {bt.branch} (Last tag: {green(last)})")

    default = config.branch_tags[0]
    entered = _read_choice(f"Enter number (default: 1 for {default.branch}):")
    if not entered:
        return default
    idx = _pick([bt.branch for bt in config.branch_tags], entered)
    if idx is None:
        click.echo(f"Invalid selection, using default branch: {default.branch}")
        return default
    return config.branch_tags[idx]


def validate_tag(tag: str, tag_format: str, last_tag: str | None) -> str | None:
    """Reason tag cannot be created, or None if it is acceptable."""
    if not tag_pattern(tag_format).match(tag):
        return f"Invalid format! Tag should match {tag_format}"
    if last_tag and not is_greater(tag, last_tag):
        return f"{click.style('Error:', fg='red')} New tag must be greater than the last tag: {last_tag}"
    return None


def prompt_for_tag(tag_format: str, default_tag: str, last_tag: str | None) -> str:
    """Ask for the tag to create until the answer fits the format and is newer than last_tag."""
    click.echo(f"Enter tag (format: {tag_format}, default: {green(default_tag)}):")
    tag = _read_choice(">") or default_tag
    problem = validate_tag(tag, tag_format, last_tag)
    while problem is not None:
        click.echo(problem)
        tag = _read_choice(">")
        problem = validate_tag(tag, tag_format, last_tag)
    click.echo(f"Valid tag: {green(tag)}")
    return tag


def prompt_for_remote(remote_urls: dict[str, str]) -> str | None:
    """Ask whether to push and to which remote. None means do not push."""
    answer = _read_choice("Do you want to push tag to remote? (Y/n):").lower()
    if answer not in ("", "y", "yes"):
        return None

    if len(remote_urls) == 1:
        name, url = next(iter(remote_urls.items()))
        click.echo(f"Using remote: {name} ({url})")
        return name

    names = sorted(remote_urls)
    click.echo("Select remote to push to:")
    for i, name in enumerate(names, start=1):
        click.echo(f"{i}: {name} ({remote_urls[name]})")
    entered = _read_choice(f"Enter number (default: 1 for {names[0]}):")
    if not entered:
        return names[0]
    idx = _pick(names, entered)
    if idx is None:
        click.echo(f"Invalid selection, using default remote: {names[0]}")
        return names[0]
    return names[idx]


def run_publish(
    git: GitBackend | None = None,
    cwd: Path | None = None,
    fetch_timeout: float = DEFAULT_FETCH_TIMEOUT,
) -> str:
    """
    Interactive flow:
    1. Check we are inside a git repository
    2. Load publish.json and drop branches that exist neither locally nor on a remote
    3. Ask for the branch, suggest the tag after its last tag, ask for the tag
    4. Create the tag on the branch tip and push it if asked to
    Returns the created tag.
    """
    git = git or SubprocessGit(cwd)
    if not git.is_repository():
        raise PublishError("Not in a git repository")

    click.echo(cyan("Initializing git-publish..."))
    remote_urls = git.remote_urls()
    config = filter_existing_branches(git, load_config(cwd), bool(remote_urls), fetch_timeout)
    if not config.branch_tags:
        raise PublishError("None of the configured branches exist in this repository")
    click.echo(green("Initialization complete!"))

    resolver = TagResolver(git)
    selected = select_branch(config, resolver)
    last_tag = resolver.resolve_last(selected.branch, selected.tag)
    suggested = next_tag(last_tag, selected.tag)

    if last_tag is None:
        click.echo(cyan("Creating first tag for this branch..."))
    else:
        click.echo(f"Last tag: {last_tag}, suggested next tag: {green(suggested)}")

    tag = prompt_for_tag(selected.tag, suggested, last_tag)

    remote = None
    if remote_urls:
        remote = prompt_for_remote(remote_urls)
    else:
        click.echo("No remote repositories found. Skipping push step.")

    # the branch may only exist as origin/<branch>
    target = resolver.oracle.branch_commit(selected.branch) or selected.branch
    try:
        git.create_tag(tag, target)
    except GitError as e:
        raise PublishError(f"Error creating tag {tag}: {e}") from e

    if remote is not None:
        click.echo(f"Pushing tag {tag} to remote {remote}...")
        try:
            git.push_tag(remote, tag)
        except GitError as e:
            raise PublishError(f"Error pushing tag {tag} to remote {remote}: {e}") from e

    click.echo(f"Successfully created tag {green(tag)} on branch {green(selected.branch)}")
    if remote is not None:
        click.echo(f"Tag was pushed to remote: {green(remote)}")
    return tag
