"""Tests against a real git repository in tmp_path."""

import shutil
import subprocess

import pytest

from git_publish.git import GitError, SubprocessGit
from git_publish.resolver import AncestryOracle, TagResolver

pytestmark = pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")


def git(repo, *args: str) -> str:
    return subprocess.run(
        ["git", *args], cwd=repo, check=True, capture_output=True, text=True
    ).stdout.strip()


def commit(repo, name: str) -> str:
    (repo / f"{name}.txt").write_text(name)
    git(repo, "add", f"{name}.txt")
    git(repo, "commit", "-q", "-m", name)
    return git(repo, "rev-parse", "HEAD")


@pytest.fixture
def repo(tmp_path):
    """
    master: one - two - three
    gray:         two - gray-one
    """
    git(tmp_path, "init", "-q", "-b", "master")
    git(tmp_path, "config", "user.name", "Test User")
    git(tmp_path, "config", "user.email", "test@example.com")
    git(tmp_path, "config", "commit.gpgsign", "false")
    git(tmp_path, "config", "tag.gpgsign", "false")
    commit(tmp_path, "one")
    commit(tmp_path, "two")
    git(tmp_path, "checkout", "-q", "-b", "gray")
    commit(tmp_path, "gray-one")
    git(tmp_path, "checkout", "-q", "master")
    commit(tmp_path, "three")
    return tmp_path


def test_queries(repo) -> None:
    backend = SubprocessGit(repo)
    assert backend.is_repository() is True
    assert backend.has_any_tags() is False
    assert sorted(backend.local_branches()) == ["gray", "master"]
    assert backend.remote_urls() == {}
    assert backend.resolve_commit("master") == git(repo, "rev-parse", "master")
    assert backend.resolve_commit("origin/master") is None


def test_not_a_repository(tmp_path) -> None:
    backend = SubprocessGit(tmp_path)
    assert backend.is_repository() is False


def test_annotated_tag_resolves_to_commit(repo) -> None:
    git(repo, "tag", "-a", "v1.0.0", "-m", "release", "master~1")
    backend = SubprocessGit(repo)
    assert backend.tag_exists("v1.0.0") is True
    assert backend.tag_exists("v1.0") is False
    assert backend.resolve_commit("v1.0.0") == git(repo, "rev-parse", "master~1")


def test_resolve_last_orders_numerically(repo) -> None:
    git(repo, "tag", "g1.9.9", "master~2")
    git(repo, "tag", "g1.9.10", "master~1")
    git(repo, "tag", "g1.10.0", "gray")
    backend = SubprocessGit(repo)
    assert backend.list_tags("g*") == ["g1.10.0", "g1.9.10", "g1.9.9"]

    resolver = TagResolver(backend)
    assert resolver.resolve_last("master", "g0.0.0") == "g1.9.10"
    assert resolver.resolve_last("gray", "g0.0.0") == "g1.10.0"
    assert resolver.resolve_last("master", "v0.0.0") is None


def test_is_on_branch(repo) -> None:
    git(repo, "tag", "v0.1.0", "master~2")
    git(repo, "tag", "v0.2.0", "gray")
    oracle = AncestryOracle(SubprocessGit(repo))
    assert oracle.is_on_branch("v0.1.0", "master") is True
    assert oracle.is_on_branch("v0.1.0", "gray") is True
    assert oracle.is_on_branch("v0.2.0", "master") is False
    assert oracle.is_on_branch("v0.2.0", "no-such-branch") is False
    assert oracle.is_on_branch("v9.9.9", "master") is False


def test_create_tag_on_other_branch(repo) -> None:
    backend = SubprocessGit(repo)
    backend.create_tag("g0.0.0", "gray")
    assert git(repo, "rev-parse", "g0.0.0^{commit}") == git(repo, "rev-parse", "gray")
    assert git(repo, "rev-parse", "--abbrev-ref", "HEAD") == "master"
    with pytest.raises(GitError):
        backend.create_tag("g0.0.0", "gray")


def test_push_to_missing_remote_fails(repo) -> None:
    backend = SubprocessGit(repo)
    backend.create_tag("v1.0.0", "master")
    with pytest.raises(GitError):
        backend.push_tag("origin", "v1.0.0")
