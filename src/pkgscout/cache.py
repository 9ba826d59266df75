"""Session cache of resolved manager executables."""

import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

from pkgscout.models import DiscoveryMethod, SearchResult


@dataclass
class CacheEntry:
    """What the cache remembers about one manager."""

    path: Optional[str] = None
    method: Optional[DiscoveryMethod] = None
    has_path: bool = False  # True once set_path ran, even for a negative entry
    available: Optional[bool] = None
    cached_at: float = field(default_factory=time.monotonic)


def _key(manager: Union[str, Enum]) -> str:
    return manager.value if isinstance(manager, Enum) else str(manager)


class PathCache:
    """
    In-memory memo of executable paths and availability per manager.

    Entries live for the session (the lifetime of this object) unless a TTL
    in seconds is given. Safe to populate from several threads; writes for the
    same manager are last-write-wins.
    """

    def __init__(self, ttl: Optional[float] = None):
        self.ttl = ttl
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def _get(self, manager) -> Optional[CacheEntry]:
        key = _key(manager)
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self.ttl is not None and time.monotonic() - entry.cached_at >= self.ttl:
            del self._entries[key]
            return None
        return entry

    def get_path(self, manager) -> Optional[str]:
        """Cached path, or None when absent or negatively cached."""
        with self._lock:
            entry = self._get(manager)
            return entry.path if entry else None

    def has_path(self, manager) -> bool:
        """Whether a path (including a negative entry) has been recorded."""
        with self._lock:
            entry = self._get(manager)
            return bool(entry and entry.has_path)

    def set_path(
        self,
        manager,
        path: Optional[str],
        method: Optional[DiscoveryMethod] = None,
    ) -> None:
        """Record a resolved path, or None for "searched and not found"."""
        with self._lock:
            entry = self._get(manager) or CacheEntry()
            entry.path = path
            entry.method = method if path is not None else None
            entry.has_path = True
            entry.cached_at = time.monotonic()
            self._entries[_key(manager)] = entry

    def get_availability(self, manager) -> Optional[bool]:
        """Last-known availability, or None if never recorded."""
        with self._lock:
            entry = self._get(manager)
            return entry.available if entry else None

    def set_availability(self, manager, available: bool) -> None:
        with self._lock:
            entry = self._get(manager) or CacheEntry()
            entry.available = available
            self._entries[_key(manager)] = entry

    def get_result(self, manager) -> Optional[SearchResult]:
        """Cached SearchResult equivalent, or None."""
        with self._lock:
            entry = self._get(manager)
            if entry is None or entry.path is None or entry.method is None:
                return None
            return SearchResult(path=entry.path, method=entry.method)

    def clear(self) -> None:
        """Forget everything."""
        with self._lock:
            self._entries.clear()
