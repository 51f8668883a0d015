# src/regionbuild/scm.py: SCM collaborator interfaces.
# The decision engine never talks to a version-control system directly. A
# source resolves owners, filesystem views and branch tips; a filesystem view
# walks history. Implementations live alongside (see gitscm.py) or in the host.

from abc import ABC, abstractmethod
from typing import List, Optional

from .models import Changeset, Head, PlainRevision, Revision


class ScmFileSystem(ABC):
    """A view of the repository pinned at one revision."""

    @abstractmethod
    def changesets_since(self, head: Head, since: Revision) -> List[Changeset]:
        """
        Lists the changesets after `since` (exclusive) up to this view's revision.
        """
        pass


class ScmSource(ABC):
    @abstractmethod
    def owner(self) -> Optional[str]:
        """The owner the source belongs to, or None if it cannot be resolved."""
        pass

    @abstractmethod
    def build_filesystem(self, head: Head, revision: Revision, owner: str) -> Optional[ScmFileSystem]:
        """A filesystem view of `head` at `revision`, or None if one cannot be built."""
        pass

    @abstractmethod
    def resolve_branch_tip(self, branch: str) -> PlainRevision:
        """
        Resolves a named branch to its current revision.

        Raises:
            ResolutionError: If the branch cannot be resolved.
        """
        pass
