# src/regionbuild/gitscm.py: Git-backed SCM collaborator.
# Implements the ScmSource/ScmFileSystem interfaces against a local clone.
# The excluded branch is looked up on the remote-tracking ref of the
# configured remote, or of the first remote when none is configured.

from pathlib import Path
from typing import List, Optional

from .gitwrap import (
    git_commit_exists,
    git_is_work_tree,
    git_log_changesets,
    git_remote_names,
    git_rev_parse,
)
from .models import Changeset, Head, PlainRevision, PullRequestRevision, Revision
from .scm import ScmFileSystem, ScmSource
from .util.errors import GitError, ResolutionError
from .util.log import get_logger

logger = get_logger(__name__)


def commit_of(revision: Revision) -> str:
    """The commit a revision points at; a pull request resolves to its own tip."""
    match revision:
        case PullRequestRevision(pull=pull):
            return pull.hash
        case PlainRevision(hash=commit):
            return commit
    raise TypeError(f"Unsupported revision type: {type(revision).__name__}")


class GitFileSystem(ScmFileSystem):
    def __init__(self, repo_path: Path, commit: str):
        self.repo_path = repo_path
        self.commit = commit

    def changesets_since(self, head: Head, since: Revision) -> List[Changeset]:
        return git_log_changesets(self.repo_path, commit_of(since), self.commit)


class GitScmSource(ScmSource):
    def __init__(self, repo_path: Path, remote: Optional[str] = None):
        self.repo_path = Path(repo_path)
        self.remote = remote

    def owner(self) -> Optional[str]:
        try:
            if git_is_work_tree(self.repo_path):
                return str(self.repo_path)
        except GitError as e:
            logger.warning(f"Cannot inspect repository at {self.repo_path}: {e}")
        return None

    def build_filesystem(self, head: Head, revision: Revision, owner: str) -> Optional[GitFileSystem]:
        commit = commit_of(revision)
        if not git_commit_exists(self.repo_path, commit):
            logger.warning(f"Commit {commit} for {head} is not present in {owner}")
            return None
        return GitFileSystem(self.repo_path, commit)

    def _remote(self) -> str:
        if self.remote:
            return self.remote
        remotes = git_remote_names(self.repo_path)
        if not remotes:
            raise ResolutionError(f"Repository at {self.repo_path} has no remotes")
        return remotes[0]

    def resolve_branch_tip(self, branch: str) -> PlainRevision:
        ref = f"{self._remote()}/{branch}"
        return PlainRevision(head=Head(branch), hash=git_rev_parse(self.repo_path, ref))
