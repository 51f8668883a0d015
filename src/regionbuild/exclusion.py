# src/regionbuild/exclusion.py: Excluded-branch changeset filtering.

from typing import Iterable, List

from .models import Changeset


def filter_changesets(base: Iterable[Changeset], excluded_side: Iterable[Changeset]) -> List[Changeset]:
    """
    Keeps the changesets of `base` whose revision also appears in `excluded_side`.

    `excluded_side` is the history walked from the excluded branch's tip, so
    the result is the intersection of both histories by revision id, in the
    order of `base`. Paths are never compared: two unrelated commits touching
    the same file stay distinct.
    """
    revisions = {changeset.revision for changeset in excluded_side}
    return [changeset for changeset in base if changeset.revision in revisions]
