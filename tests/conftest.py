"""Shared test fixtures: an in-memory git repository."""

from fnmatch import fnmatchcase

import pytest

from git_publish.git import GitBackend, GitError


class FakeGit(GitBackend):
    """
    GitBackend over a commit graph held in dicts.
    commits: commit -> list of parent commits
    refs: branch name (local or "origin/<name>") -> commit
    tags: tag -> commit, listed in insertion order unless tag_order is set
    """

    def __init__(self) -> None:
        self.commits: dict[str, list[str]] = {}
        self.refs: dict[str, str] = {}
        self.tags: dict[str, str] = {}
        self.tag_order: list[str] | None = None
        self.remotes: dict[str, str] = {}
        self.repository = True
        self.calls: list[tuple] = []
        self.pushed: list[tuple[str, str]] = []
        self.fetched: list[str] = []
        self.fail: set[str] = set()

    def commit(self, sha: str, *parents: str) -> str:
        self.commits[sha] = list(parents)
        return sha

    def _record(self, name: str, *args) -> None:
        self.calls.append((name, *args))
        if name in self.fail:
            raise GitError(["git", name, *map(str, args)], 128, "simulated failure")

    def call_names(self) -> list[str]:
        return [c[0] for c in self.calls]

    def has_any_tags(self) -> bool:
        self._record("has_any_tags")
        return bool(self.tags)

    def tag_exists(self, tag: str) -> bool:
        self._record("tag_exists", tag)
        return tag in self.tags

    def list_tags(self, pattern: str) -> list[str]:
        self._record("list_tags", pattern)
        order = self.tag_order if self.tag_order is not None else list(self.tags)
        return [t for t in order if fnmatchcase(t, pattern)]

    def resolve_commit(self, ref: str) -> str | None:
        self._record("resolve_commit", ref)
        if ref in self.tags:
            return self.tags[ref]
        return self.refs.get(ref)

    def is_ancestor(self, ancestor: str, descendant: str) -> bool:
        self._record("is_ancestor", ancestor, descendant)
        seen = set()
        stack = [descendant]
        while stack:
            sha = stack.pop()
            if sha == ancestor:
                return True
            if sha in seen:
                continue
            seen.add(sha)
            stack.extend(self.commits.get(sha, []))
        return False

    def is_repository(self) -> bool:
        return self.repository

    def local_branches(self) -> list[str]:
        self._record("local_branches")
        return [name for name in self.refs if "/" not in name]

    def remote_branches(self) -> list[str]:
        self._record("remote_branches")
        return [name.split("/")[-1] for name in self.refs if "/" in name]

    def remote_urls(self) -> dict[str, str]:
        return dict(self.remotes)

    def fetch(self, remote: str) -> None:
        self._record("fetch", remote)
        self.fetched.append(remote)

    def fetch_tags(self, remote: str) -> None:
        self._record("fetch_tags", remote)

    def create_tag(self, tag: str, ref: str) -> None:
        self._record("create_tag", tag, ref)
        commit = self.resolve_commit(ref) or (ref if ref in self.commits else None)
        if commit is None:
            raise GitError(["git", "rev-parse", ref], 128, f"unknown revision {ref}")
        if tag in self.tags:
            raise GitError(["git", "tag", tag], 128, f"tag '{tag}' already exists")
        self.tags[tag] = commit

    def push_tag(self, remote: str, tag: str) -> None:
        self._record("push_tag", remote, tag)
        self.pushed.append((remote, tag))


@pytest.fixture
def fake_git() -> FakeGit:
    """
    History:
        c1 - c2 - c3          master
                \\
                 g1 - g2      origin/gray (no local branch)
    """
    git = FakeGit()
    git.commit("c1")
    git.commit("c2", "c1")
    git.commit("c3", "c2")
    git.commit("g1", "c2")
    git.commit("g2", "g1")
    git.refs["master"] = "c3"
    git.refs["origin/gray"] = "g2"
    return git
