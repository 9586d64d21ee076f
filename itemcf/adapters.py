# itemcf/adapters.py
from __future__ import annotations
import fnmatch
import threading
import time
from collections import defaultdict
from datetime import timedelta
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .ports import Cache, InteractionLoader, SimilarityStore
from .types import Interaction, SimilarityResult


# ---------------- Loaders ----------------

class SequenceLoader(InteractionLoader):
    """Pages an in-memory list of interactions."""
    def __init__(self, interactions: Sequence[Interaction]):
        self.interactions = list(interactions)

    def load_batch(self, offset: int, limit: int) -> List[Interaction]:
        return self.interactions[offset:offset + limit]


# ---------------- Similarity store ----------------

class InMemorySimilarityStore(SimilarityStore):
    """
    Thread-safe store: item_id1 -> list of edges.
    Readers get a snapshot, so find_similar is safe while save_all is running.
    """
    def __init__(self) -> None:
        self._edges: Dict[int, List[SimilarityResult]] = defaultdict(list)
        self._lock = threading.Lock()

    def save_all(self, results: Sequence[SimilarityResult]) -> None:
        with self._lock:
            for r in results:
                self._edges[r.item_id1].append(r)

    def find_similar(self, item_id: int, top_k: int) -> List[SimilarityResult]:
        with self._lock:
            edges = list(self._edges.get(item_id, ()))
        edges.sort(key=lambda r: r.score, reverse=True)
        return edges[:top_k]

    def delete_all(self) -> None:
        with self._lock:
            self._edges.clear()

    def size(self) -> int:
        """Total number of stored edges."""
        with self._lock:
            return sum(len(v) for v in self._edges.values())


# ---------------- Caches ----------------

class NoOpCache(Cache):
    """Caching disabled: always a miss, writes and evictions do nothing."""

    def get(self, key: str) -> Optional[Any]:
        return None

    def put(self, key: str, value: Any, ttl: timedelta) -> None:
        pass

    def evict_by_pattern(self, pattern: str) -> None:
        pass


class InMemoryCache(Cache):
    """Process-local TTL cache. Expired entries are dropped lazily on read."""
    def __init__(self, clock=time.monotonic) -> None:
        self._clock = clock
        self._entries: Dict[str, Tuple[float, Any]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            hit = self._entries.get(key)
            if hit is None:
                return None
            expires_at, value = hit
            if self._clock() >= expires_at:
                del self._entries[key]
                return None
            return value

    def put(self, key: str, value: Any, ttl: timedelta) -> None:
        if ttl.total_seconds() < 0:
            raise ValueError(f"ttl must not be negative, got: {ttl}")
        with self._lock:
            self._entries[key] = (self._clock() + ttl.total_seconds(), value)

    def evict_by_pattern(self, pattern: str) -> None:
        with self._lock:
            for key in [k for k in self._entries if fnmatch.fnmatchcase(k, pattern)]:
                del self._entries[key]

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
