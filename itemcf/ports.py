# itemcf/ports.py
"""
Contracts for the three collaborators the engine talks to.
Hosts supply their own implementations (database reader, similarity table, redis...);
itemcf.adapters has in-memory ones.
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from datetime import timedelta
from typing import Any, Optional, Sequence

from .types import Interaction, SimilarityResult


class InteractionLoader(ABC):

    @abstractmethod
    def load_batch(self, offset: int, limit: int) -> Sequence[Interaction]:
        """
        Return up to `limit` interactions starting at row `offset`.
        A page shorter than `limit` (empty included) must be returned exactly when no
        more data follows. A loader that keeps returning full pages never terminates
        the matrix build; that is the caller's obligation, not checked here.
        """


class SimilarityStore(ABC):

    @abstractmethod
    def save_all(self, results: Sequence[SimilarityResult]) -> None:
        """Append results. Not idempotent: saving the same edges twice duplicates them."""

    @abstractmethod
    def find_similar(self, item_id: int, top_k: int) -> Sequence[SimilarityResult]:
        """Edges leaving `item_id`, highest score first, at most `top_k`."""

    @abstractmethod
    def delete_all(self) -> None:
        """Drop every stored edge."""


class Cache(ABC):

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """Cached value or None on miss."""

    @abstractmethod
    def put(self, key: str, value: Any, ttl: timedelta) -> None:
        ...

    @abstractmethod
    def evict_by_pattern(self, pattern: str) -> None:
        """Evict keys matching a glob pattern, e.g. "itemcf:user:*"."""
