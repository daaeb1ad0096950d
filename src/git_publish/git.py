"""Git backend: the queries and mutations git-publish needs from a repository."""

import logging
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path

from .config import GitPublishError

logger = logging.getLogger(__name__)


class GitError(GitPublishError):
    """A git command failed."""

    def __init__(self, args: list[str], returncode: int, stderr: str = "") -> None:
        self.cmd = args
        self.returncode = returncode
        self.stderr = stderr.strip()
        detail = f": {self.stderr}" if self.stderr else ""
        super().__init__(f"'{' '.join(args)}' exited with status {returncode}{detail}")


class GitBackend(ABC):
    """
    Interface to a git repository.
    The query operations are all the tag resolver needs; the rest is used by the commands.
    """

    # Queries used by tag resolution

    @abstractmethod
    def has_any_tags(self) -> bool:
        """True if the repository holds at least one tag."""

    @abstractmethod
    def tag_exists(self, tag: str) -> bool:
        """True if refs/tags/<tag> exists."""

    @abstractmethod
    def list_tags(self, pattern: str) -> list[str]:
        """Tags matching a glob pattern, newest version first where git can sort them."""

    @abstractmethod
    def resolve_commit(self, ref: str) -> str | None:
        """Commit id a branch, remote branch or tag points at; None if it does not resolve."""

    @abstractmethod
    def is_ancestor(self, ancestor: str, descendant: str) -> bool:
        """True if commit ancestor is reachable from commit descendant."""

    # Repository operations

    @abstractmethod
    def is_repository(self) -> bool: ...

    @abstractmethod
    def local_branches(self) -> list[str]: ...

    @abstractmethod
    def remote_branches(self) -> list[str]:
        """Remote branch names without the remote part (origin/main -> main)."""

    @abstractmethod
    def remote_urls(self) -> dict[str, str]: ...

    @abstractmethod
    def fetch(self, remote: str) -> None: ...

    @abstractmethod
    def fetch_tags(self, remote: str) -> None: ...

    @abstractmethod
    def create_tag(self, tag: str, ref: str) -> None:
        """Create a lightweight tag on the commit ref resolves to."""

    @abstractmethod
    def push_tag(self, remote: str, tag: str) -> None: ...


class SubprocessGit(GitBackend):
    """GitBackend that runs the git executable in cwd."""

    def __init__(self, cwd: Path | None = None, executable: str = "git") -> None:
        self.cwd = cwd
        self.executable = executable

    def _run(self, *args: str) -> subprocess.CompletedProcess:
        cmd = [self.executable, *args]
        logger.debug("Running %s", " ".join(cmd))
        try:
            return subprocess.run(
                cmd,
                cwd=self.cwd,
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as e:
            raise GitError(cmd, -1, str(e)) from e

    def _output(self, *args: str) -> str:
        """Run git and return stdout; raise GitError on a non-zero exit."""
        result = self._run(*args)
        if result.returncode != 0:
            raise GitError([self.executable, *args], result.returncode, result.stderr)
        return result.stdout

    def _succeeds(self, *args: str) -> bool:
        try:
            return self._run(*args).returncode == 0
        except GitError:
            return False

    @staticmethod
    def _lines(output: str) -> list[str]:
        return [line.strip() for line in output.splitlines() if line.strip()]

    def has_any_tags(self) -> bool:
        try:
            return bool(self._output("tag", "-l").strip())
        except GitError:
            return False

    def tag_exists(self, tag: str) -> bool:
        return self._succeeds("show-ref", "--verify", "--quiet", f"refs/tags/{tag}")

    def list_tags(self, pattern: str) -> list[str]:
        return self._lines(self._output("tag", "--list", pattern, "--sort=-v:refname"))

    def resolve_commit(self, ref: str) -> str | None:
        # ^{commit} peels annotated tags down to the tagged commit
        result = self._run("rev-parse", "--verify", "--quiet", f"{ref}^{{commit}}")
        if result.returncode != 0:
            return None
        return result.stdout.strip() or None

    def is_ancestor(self, ancestor: str, descendant: str) -> bool:
        args = ("merge-base", "--is-ancestor", ancestor, descendant)
        result = self._run(*args)
        if result.returncode == 0:
            return True
        if result.returncode == 1:
            return False
        raise GitError([self.executable, *args], result.returncode, result.stderr)

    def is_repository(self) -> bool:
        return self._succeeds("rev-parse", "--is-inside-work-tree")

    def local_branches(self) -> list[str]:
        branches = []
        for line in self._lines(self._output("branch", "--list")):
            # "* main" marks the checked-out branch, "+ x" one checked out in another worktree
            name = line.lstrip("*+").strip()
            if name and not name.startswith("("):
                branches.append(name)
        return branches

    def remote_branches(self) -> list[str]:
        branches = []
        for line in self._lines(self._output("branch", "-r")):
            if "->" in line:
                continue
            parts = line.split("/")
            if len(parts) >= 2:
                branches.append(parts[-1])
        return branches

    def remote_urls(self) -> dict[str, str]:
        try:
            remotes = self._lines(self._output("remote"))
        except GitError:
            return {}
        urls = {}
        for remote in remotes:
            try:
                urls[remote] = self._output("config", "--get", f"remote.{remote}.url").strip()
            except GitError:
                logger.debug("Remote %s has no url configured", remote)
        return urls

    def fetch(self, remote: str) -> None:
        self._output("fetch", "--no-tags", remote)

    def fetch_tags(self, remote: str) -> None:
        self._output("fetch", "--depth=5", remote, "refs/tags/*:refs/tags/*")

    def create_tag(self, tag: str, ref: str) -> None:
        commit = self._output("rev-parse", ref).strip()
        self._output("tag", tag, commit)

    def push_tag(self, remote: str, tag: str) -> None:
        self._output("push", remote, tag)
