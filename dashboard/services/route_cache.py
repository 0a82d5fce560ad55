"""In-process cache of data rendered by dashboard routes."""

from __future__ import annotations

import threading
from collections import OrderedDict
from typing import Any, Callable, Dict, Hashable

DEFAULT_MAX_ENTRIES = 256


class RouteCache:
    """Memoise per-route data until the route is invalidated.

    Entries are grouped by route path so that a mutation can mark every
    cached variant of a page (different filters, pages, page sizes) stale in
    one call.  Each path keeps at most ``max_entries`` variants and evicts the
    least recently used one beyond that.  The cache lives in the worker
    process; deployments run a single worker (see ``gunicorn.conf.py``).
    """

    def __init__(self, max_entries: int = DEFAULT_MAX_ENTRIES) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.max_entries = max_entries
        self._entries: Dict[str, "OrderedDict[Hashable, Any]"] = {}
        self._generations: Dict[str, int] = {}
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    def fetch(self, path: str, key: Hashable, loader: Callable[[], Any]) -> Any:
        """Return the cached value for ``key`` under ``path``, loading it once."""
        with self._lock:
            entries = self._entries.get(path)
            if entries is not None and key in entries:
                entries.move_to_end(key)
                return entries[key]
            generation = self._generations.get(path, 0)

        value = loader()
        with self._lock:
            # Skip storing data loaded before an invalidation that raced it.
            if self._generations.get(path, 0) == generation:
                entries = self._entries.setdefault(path, OrderedDict())
                entries[key] = value
                entries.move_to_end(key)
                while len(entries) > self.max_entries:
                    entries.popitem(last=False)
        return value

    # ------------------------------------------------------------------
    def invalidate(self, path: str) -> None:
        """Drop every cached entry for ``path``."""
        with self._lock:
            self._entries.pop(path, None)
            self._generations[path] = self._generations.get(path, 0) + 1

    # ------------------------------------------------------------------
    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def size(self, path: str) -> int:
        with self._lock:
            return len(self._entries.get(path, ()))

    def __contains__(self, path: str) -> bool:
        with self._lock:
            return bool(self._entries.get(path))
