"""Configuration: publish.json parsing and defaults."""

import json
import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path

import click

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "publish.json"


class GitPublishError(Exception):
    """Base exception for git-publish."""


class ConfigError(GitPublishError):
    """Configuration error (publish.json cannot be written or is invalid)."""


@dataclass(frozen=True)
class BranchTag:
    """A configured branch and the tag format used on it."""

    branch: str
    tag: str


@dataclass
class Config:
    branch_tags: list[BranchTag] = field(default_factory=list)

    def format_for(self, branch: str) -> str | None:
        """Tag format configured for branch, or None."""
        for bt in self.branch_tags:
            if bt.branch == branch:
                return bt.tag
        return None

    def to_dict(self) -> dict:
        return {"branchTags": [asdict(bt) for bt in self.branch_tags]}


def default_config() -> Config:
    return Config(
        branch_tags=[
            BranchTag(branch="master", tag="v0.0.0"),
            BranchTag(branch="main", tag="v0.0.0"),
            BranchTag(branch="gray", tag="g0.0.0"),
        ]
    )


def config_path(cwd: Path | None = None) -> Path:
    return (cwd or Path.cwd()) / CONFIG_FILENAME


def parse_config(data: object) -> Config:
    """
    Build a Config from decoded JSON.
    Raises ConfigError if the shape is not {"branchTags": [{"branch": str, "tag": str}, ...]}.
    """
    if not isinstance(data, dict):
        raise ConfigError("Config must be a JSON object")
    entries = data.get("branchTags", [])
    if not isinstance(entries, list):
        raise ConfigError("branchTags must be a list")
    branch_tags = []
    for entry in entries:
        if not isinstance(entry, dict):
            raise ConfigError(f"Invalid branchTags entry: {entry!r}")
        branch = entry.get("branch")
        tag = entry.get("tag")
        if not isinstance(branch, str) or not isinstance(tag, str) or not branch:
            raise ConfigError(f"Invalid branchTags entry: {entry!r}")
        branch_tags.append(BranchTag(branch=branch, tag=tag))
    return Config(branch_tags=branch_tags)


def write_default_config(path: Path, overwrite: bool = False) -> Config:
    """Write the default config to path. Raises ConfigError if it exists and overwrite is off."""
    if path.exists() and not overwrite:
        raise ConfigError(f"Config file already exists: {path}")
    config = default_config()
    try:
        path.write_text(json.dumps(config.to_dict(), indent=2) + "\n")
    except OSError as e:
        raise ConfigError(f"Cannot write default config to {path}: {e}") from e
    return config


def load_config(cwd: Path | None = None) -> Config:
    """
    Read publish.json from cwd.
    - Missing file: write the defaults there and use them.
    - Unreadable, invalid or empty file: warn and use the defaults.
    """
    path = config_path(cwd)
    if not path.exists():
        logger.debug("No %s found, writing defaults to %s", CONFIG_FILENAME, path)
        try:
            return write_default_config(path)
        except ConfigError as e:
            click.echo(f"Warning: {e}", err=True)
            return default_config()

    try:
        data = json.loads(path.read_text())
    except OSError as e:
        click.echo(f"Error reading config file: {e}", err=True)
        click.echo("Using default configuration", err=True)
        return default_config()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        click.echo(f"Error parsing config file: {e}", err=True)
        click.echo("Using default configuration", err=True)
        return default_config()

    try:
        config = parse_config(data)
    except ConfigError as e:
        click.echo(f"Error parsing config file: {e}", err=True)
        click.echo("Using default configuration", err=True)
        return default_config()

    if not config.branch_tags:
        click.echo("Config file is valid but empty. Using default configuration", err=True)
        return default_config()

    logger.debug("Loaded %d branch(es) from %s", len(config.branch_tags), path)
    return config
