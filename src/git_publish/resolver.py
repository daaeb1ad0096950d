"""Finding the last tag of a branch."""

import logging

from .git import GitBackend, GitError
from .versioning import extract_prefix, is_valid_tag

logger = logging.getLogger(__name__)

REMOTE_PREFIX = "origin/"


class AncestryOracle:
    """Decides whether a tag belongs to a branch's history."""

    def __init__(self, git: GitBackend) -> None:
        self.git = git

    def branch_commit(self, branch: str) -> str | None:
        """Commit of the local branch, falling back to origin/<branch>."""
        commit = self.git.resolve_commit(branch)
        if commit is None:
            commit = self.git.resolve_commit(REMOTE_PREFIX + branch)
        return commit

    def is_on_branch(self, tag: str, branch: str) -> bool:
        """
        True if the commit of tag is the tip of branch or one of its ancestors.
        Missing tags, unresolvable branches and git failures all answer False.
        """
        try:
            if not self.git.tag_exists(tag):
                return False
            tag_commit = self.git.resolve_commit(tag)
            if tag_commit is None:
                return False
            branch_commit = self.branch_commit(branch)
            if branch_commit is None:
                logger.debug("Branch %s resolves neither locally nor on origin", branch)
                return False
            if tag_commit == branch_commit:
                return True
            return self.git.is_ancestor(tag_commit, branch_commit)
        except GitError as e:
            logger.debug("Treating %s as not on %s: %s", tag, branch, e)
            return False


class TagResolver:
    """Finds the most recent well-formed tag reachable from a branch."""

    def __init__(self, git: GitBackend, oracle: AncestryOracle | None = None) -> None:
        self.git = git
        self.oracle = oracle or AncestryOracle(git)

    def resolve_last(self, branch: str, tag_format: str) -> str | None:
        """
        Last tag on branch matching tag_format, or None if there is none yet.

        Candidates are taken in the order git lists them (descending version) and the
        first one that is on the branch and has the <prefix>N.N.N shape wins.
        """
        if not self.git.has_any_tags():
            return None

        prefix = extract_prefix(tag_format)
        try:
            candidates = self.git.list_tags(prefix + "*")
        except GitError as e:
            logger.warning("Error getting tags: %s", e)
            return None

        for tag in candidates:
            if not tag:
                continue
            if is_valid_tag(tag, prefix) and self.oracle.is_on_branch(tag, branch):
                logger.debug("Last tag on %s is %s", branch, tag)
                return tag
        return None
