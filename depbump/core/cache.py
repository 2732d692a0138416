"""Time-bounded on-disk cache of registry answers.

The cache maps a package name to the latest version the registry
reported for it, together with the time the answer was stored. An entry
older than the store's TTL is treated as absent.

Lifecycle within one run:

1. :meth:`VersionCache.load` reads the file once at start-up.
2. :meth:`VersionCache.get` is consulted before every registry lookup.
3. :meth:`VersionCache.set` buffers fresh answers in memory.
4. :meth:`VersionCache.flush` writes the buffered answers once the
   resolution pass has completed successfully.

Cached values are bare version numbers (``"1.3.0"``), never range
strings; the range operator always comes from the manifest being
updated.

File format::

    {
        "left-pad": {"value": "1.3.0", "storedAt": 1700000000.0}
    }

The file is not locked. Two concurrent runs may overwrite each other's
entries.
"""

from __future__ import annotations

import json
import time
import tempfile
from pathlib import Path
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Union

from depbump.utils.logger import get_logger
from depbump.exceptions import FileOperationError
from depbump.utils.filesystem import safe_read_file, safe_write_file
from depbump.constants import CACHE_FILE_NAME, DEFAULT_CACHE_TTL

logger = get_logger("cache")

__all__ = ["CacheEntry", "VersionCache", "default_cache_path"]


def default_cache_path() -> Path:
    """Return the shared cache location inside the system temp directory."""
    return Path(tempfile.gettempdir()) / CACHE_FILE_NAME


@dataclass(frozen=True)
class CacheEntry:
    """One cached registry answer.

    Attributes:
        value: Bare version number.
        stored_at: Epoch seconds at which the value was stored.
    """

    value: str
    stored_at: float

    def is_fresh(self, now: float, ttl: float) -> bool:
        """Return True while the entry is younger than ``ttl`` seconds.

        An entry stored in the future (clock skew or a hand-edited file)
        counts as expired.
        """
        return self.stored_at <= now and now - self.stored_at < ttl

    def to_json(self) -> Dict[str, Any]:
        return {"value": self.value, "storedAt": self.stored_at}

    @classmethod
    def from_json(cls, raw: Any) -> Optional["CacheEntry"]:
        """Build an entry from its JSON form, or ``None`` if malformed."""
        if not isinstance(raw, dict):
            return None
        value = raw.get("value")
        stored_at = raw.get("storedAt")
        if not isinstance(value, str) or not value:
            return None
        if isinstance(stored_at, bool) or not isinstance(stored_at, (int, float)):
            return None
        return cls(value=value, stored_at=float(stored_at))


class VersionCache:
    """JSON-file backed name → version cache with expiry.

    Args:
        path: Cache file location. Defaults to :func:`default_cache_path`.
        ttl: Maximum entry age in seconds.
        clock: Source of the current epoch time.

    Example::

        cache = VersionCache()
        cache.load()
        if cache.get("left-pad") is None:
            cache.set("left-pad", "1.3.0")
        cache.flush()
    """

    def __init__(
        self,
        path: Optional[Union[str, Path]] = None,
        *,
        ttl: float = DEFAULT_CACHE_TTL,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.path = Path(path) if path is not None else default_cache_path()
        self.ttl = ttl
        self._clock = clock

        # Entries read from disk
        self._entries: Dict[str, CacheEntry] = {}

        # Answers resolved during this run, written by flush()
        self._pending: Dict[str, CacheEntry] = {}

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def load(self) -> None:
        """Read the cache file.

        A missing file yields an empty cache. An unreadable or corrupt
        file is logged and ignored; it is replaced on the next flush.
        """
        self._entries = {}

        if not self.path.exists():
            logger.debug("No cache file at %s", self.path)
            return

        try:
            raw = json.loads(safe_read_file(self.path))
        except (FileOperationError, ValueError) as exc:
            logger.warning("Ignoring unreadable cache %s: %s", self.path, exc)
            return

        if not isinstance(raw, dict):
            logger.warning("Ignoring malformed cache %s", self.path)
            return

        for name, item in raw.items():
            entry = CacheEntry.from_json(item)
            if entry is not None:
                self._entries[name] = entry

        logger.debug("Loaded %d cache entries from %s", len(self._entries), self.path)

    def flush(self) -> int:
        """Persist answers buffered with :meth:`set`.

        Expired entries are pruned from the file while it is rewritten.

        Returns:
            Number of newly written entries.

        Raises:
            FileOperationError: The cache file could not be written.
        """
        if not self._pending:
            return 0

        now = self._clock()
        merged = {
            name: entry
            for name, entry in self._entries.items()
            if entry.is_fresh(now, self.ttl)
        }
        merged.update(self._pending)

        payload = {name: entry.to_json() for name, entry in merged.items()}
        safe_write_file(self.path, json.dumps(payload, indent=2) + "\n")

        written = len(self._pending)
        self._entries = merged
        self._pending = {}
        logger.debug("Flushed %d cache entries to %s", written, self.path)
        return written

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get(self, name: str) -> Optional[str]:
        """Return the cached version for ``name`` if present and fresh."""
        entry = self._entries.get(name)
        if entry is None:
            return None
        if not entry.is_fresh(self._clock(), self.ttl):
            logger.debug("Cache entry for %s expired", name)
            return None
        return entry.value

    def set(self, name: str, version: str) -> None:
        """Buffer a freshly resolved version for the next :meth:`flush`."""
        self._pending[name] = CacheEntry(value=version, stored_at=self._clock())

    @property
    def pending(self) -> Dict[str, str]:
        """Names and versions waiting to be flushed."""
        return {name: entry.value for name, entry in self._pending.items()}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.get(name) is not None
