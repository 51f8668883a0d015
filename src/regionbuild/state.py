# src/regionbuild/state.py: Last-built revision store.
# A polling host needs the revision each head was last built at to ask the
# engine about the next update. Revisions are kept in a small JSON file; a
# file lock serialises writers from concurrent CLI runs.

import json
import os
from pathlib import Path
from typing import Dict, Optional

from filelock import FileLock, Timeout

from .util.errors import RegionBuildError
from .util.paths import get_default_state_path


class RevisionStore:
    def __init__(self, path: Optional[Path] = None, timeout: float = 10):
        self.path = Path(path) if path else get_default_state_path()
        self._lock = FileLock(f"{self.path}.lock", timeout=timeout)

    def _read(self) -> Dict[str, str]:
        if not self.path.is_file():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise RegionBuildError(f"Corrupt revision store '{self.path}': {e}") from e
        except OSError as e:
            raise RegionBuildError(f"Cannot read revision store '{self.path}': {e}") from e
        if not isinstance(data, dict):
            raise RegionBuildError(
                f"Corrupt revision store '{self.path}': expected an object, got {type(data).__name__}"
            )
        return data

    def all(self) -> Dict[str, str]:
        if not self.path.parent.is_dir():
            return {}
        try:
            with self._lock:
                return self._read()
        except Timeout as e:
            raise RegionBuildError(f"Revision store '{self.path}' is locked by another process: {e}") from e

    def get(self, head: str) -> Optional[str]:
        return self.all().get(head)

    def record(self, head: str, revision: str) -> None:
        """
        Remember `revision` as the last build of `head`.

        Raises:
            RegionBuildError: If the store is locked by another writer or cannot be written.
        """
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self._lock:
                data = self._read()
                data[head] = revision
                temp_path = f"{self.path}.tmp"
                with open(temp_path, "w", encoding="utf-8") as f:
                    json.dump(data, f, indent=2, sort_keys=True)
                os.replace(temp_path, self.path)
        except Timeout as e:
            raise RegionBuildError(f"Revision store '{self.path}' is locked by another process: {e}") from e
        except OSError as e:
            raise RegionBuildError(f"Cannot write revision store '{self.path}': {e}") from e
