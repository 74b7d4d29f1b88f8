"""View State Containers — explicit query cache, page loader tokens and the view context.

Invariants:
    - No module-level mutable state: every container is created by its owner and passed down
    - QueryCache entries change only through put() and invalidate()
    - PageLoader applies a result only if its token is the latest one issued and the
      page is still mounted; stale or post-unmount results are discarded

Design Decisions:
    - These containers model the web client's state. GET /api/v1/views/resolve builds
      a fresh ViewContext per request, so within the API the cache only de-duplicates
      fetches inside one resolve and nothing needs invalidating there
    - invalidate() and unmount() are for owners that keep a context across navigations
      or mutations (the client); such an owner invalidates the key prefix a mutation touches
"""

from dataclasses import dataclass, field
from typing import Any

from fedlink.core.tab_state import TabState


class QueryCache:
    """Keyed by API path (e.g. "/api/v1/instances/5")."""

    def __init__(self):
        self._entries: dict[str, Any] = {}

    def get(self, key: str) -> Any | None:
        return self._entries.get(key)

    def has(self, key: str) -> bool:
        return key in self._entries

    def put(self, key: str, value: Any) -> None:
        self._entries[key] = value

    def invalidate(self, prefix: str) -> int:
        """Drop every entry whose key starts with prefix. Returns the number dropped."""
        stale = [k for k in self._entries if k.startswith(prefix)]
        for k in stale:
            del self._entries[k]
        return len(stale)

    def __len__(self) -> int:
        return len(self._entries)


class PageLoader:
    """Tracks the in-flight fetch for one mounted page."""

    def __init__(self):
        self._generation = 0
        self._mounted = True
        self.result: Any | None = None

    @property
    def mounted(self) -> bool:
        return self._mounted

    def begin(self) -> int:
        """Start a fetch (mount or route-parameter change). Returns its token."""
        self._generation += 1
        self._mounted = True
        return self._generation

    def complete(self, token: int, result: Any) -> bool:
        """Apply result if token is current and the page is mounted."""
        if not self._mounted or token != self._generation:
            return False
        self.result = result
        return True

    def unmount(self) -> None:
        self._mounted = False
        self.result = None


@dataclass
class ViewContext:
    """State scoped to one client subtree; handed to the page resolver explicitly."""
    cache: QueryCache = field(default_factory=QueryCache)
    tabs: TabState = field(default_factory=TabState)
    loader: PageLoader = field(default_factory=PageLoader)
