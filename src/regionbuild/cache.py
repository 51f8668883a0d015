# src/regionbuild/cache.py: Memoized changed-file lists.
# Computing the files changed between two revisions means walking history
# through the SCM, so results are kept per (previous, current, excluded
# branch) key. Eviction is least-recently-used with an optional time-to-live;
# failures are never stored.

import threading
import time
from collections import OrderedDict
from typing import Callable, Dict, Hashable, List, Optional, Tuple

from .util.log import get_logger

logger = get_logger(__name__)


class ChangeSetCache:
    """
    Bounded LRU cache of changed-file lists.

    The lock only protects the bookkeeping; `compute` always runs outside it,
    so a slow computation never holds up lookups for other keys. Two callers
    missing on the same key at once may both compute.
    """

    def __init__(
        self,
        capacity: int = 256,
        ttl: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self.capacity = capacity
        self.ttl = ttl
        self._clock = clock
        self._entries: "OrderedDict[Hashable, Tuple[float, List[str]]]" = OrderedDict()
        self._lock = threading.Lock()

    def _lookup(self, key: Hashable) -> Optional[List[str]]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            stored_at, files = entry
            if self.ttl is not None and self._clock() - stored_at >= self.ttl:
                del self._entries[key]
                return None
            self._entries.move_to_end(key)
            return files

    def _store(self, key: Hashable, files: List[str]) -> None:
        with self._lock:
            self._entries[key] = (self._clock(), files)
            self._entries.move_to_end(key)
            while len(self._entries) > self.capacity:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug(f"Evicted changed-file entry {evicted}")

    def get_or_compute(self, key: Hashable, compute: Callable[[], List[str]]) -> List[str]:
        """Returns the cached list for `key`, computing and storing it on a miss."""
        files = self._lookup(key)
        if files is not None:
            logger.debug(f"Changed-file cache hit for {key}")
            return list(files)

        files = list(compute())
        self._store(key, files)
        return list(files)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: Hashable) -> bool:
        """Membership check; leaves recency and expired entries alone."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return False
            return self.ttl is None or self._clock() - entry[0] < self.ttl

    def snapshot(self) -> Dict[Hashable, List[str]]:
        with self._lock:
            return {key: list(files) for key, (_, files) in self._entries.items()}
