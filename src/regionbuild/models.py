# src/regionbuild/models.py: Core value types for build decisions.
# Heads, revisions and changesets are immutable values handed to the decision
# engine by an SCM collaborator. Revisions form a small sum type so that the
# pull-request case is resolved by pattern matching rather than type probing.

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, NamedTuple, Optional, Tuple, Union


@dataclass(frozen=True)
class Head:
    """A line of development: a branch, or a pull request when `target` is set."""
    name: str
    target: Optional["Head"] = None

    @property
    def is_pull_request(self) -> bool:
        return self.target is not None

    def __str__(self) -> str:
        if self.target is not None:
            return f"{self.name} -> {self.target.name}"
        return self.name


@dataclass(frozen=True)
class PlainRevision:
    """A single commit on a head."""
    head: Head
    hash: str

    def __str__(self) -> str:
        return self.hash


@dataclass(frozen=True)
class PullRequestRevision:
    """The state of a pull request: its own tip plus the tip of the branch it targets."""
    head: Head
    pull: PlainRevision
    target: PlainRevision

    def __str__(self) -> str:
        return f"{self.pull}+{self.target}"


Revision = Union[PlainRevision, PullRequestRevision]


@dataclass(frozen=True)
class Changeset:
    revision: str
    paths: Tuple[str, ...] = field(default_factory=tuple)


class CacheKey(NamedTuple):
    previous: Revision
    current: Revision
    excluded_branch: str


def affected_files(changesets: Iterable[Changeset]) -> List[str]:
    """Collects every path touched by the changesets, first-seen order, no duplicates."""
    seen = dict.fromkeys(path for cs in changesets for path in cs.paths)
    return list(seen)


def parse_regions(text: Optional[str]) -> List[str]:
    """
    Splits a multi-line region string into trimmed patterns.

    Lines that are blank after trimming are dropped, so a configuration made
    only of whitespace yields an empty list.
    """
    if not text:
        return []
    regions = (line.strip() for line in text.splitlines())
    return [region for region in regions if region]
