# itemcf/engine.py
"""
Item-based collaborative filtering engine.

Offline:  loader -> InteractionMatrix -> calculator.compute -> store (chunked) -> cache eviction
Online:   cache -> (miss) store.find_similar -> aggregate/sort -> cache populate

similar_items(item, limit):
    neighbours of `item` as stored, top `top_k_similar` cached, `limit` returned.
recommendations_for_user(user, history, limit):
    score(j) = sum of sim(i, j) over items i in history, j not in history.
    Same scoring rule as an ItemKNN "sum of sims to seen items" scorer.

No locking beyond the store's own: a query running during recompute() may see an
empty or partly written store.
"""
from __future__ import annotations
import logging
import time
from dataclasses import dataclass
from datetime import timedelta
from typing import AbstractSet, Any, Dict, List, Optional, Tuple

from . import calculator
from .config import RecommendationConfig
from .errors import RecomputeError
from .matrix import InteractionMatrix
from .ports import InteractionLoader, SimilarityStore
from .types import RecommendationResult, ranked

log = logging.getLogger(__name__)

CACHE_PREFIX_SIMILAR = "itemcf:similar:"
CACHE_PREFIX_USER = "itemcf:user:"

CACHE_TTL_SIMILAR = timedelta(hours=24)
CACHE_TTL_USER = timedelta(hours=6)


@dataclass(frozen=True)
class RecomputeStats:
    item_count: int
    interaction_count: int
    pair_count: int        # edges written (2 per similar pair)
    seconds: float

    @property
    def empty(self) -> bool:
        return self.item_count == 0


def _check_limit(limit: int) -> None:
    if limit < 0:
        raise ValueError(f"limit must be >= 0, got: {limit}")


class RecommendationEngine:
    def __init__(self, loader: InteractionLoader, store: SimilarityStore,
                 config: Optional[RecommendationConfig] = None, progress: bool = False):
        if loader is None or store is None:
            raise TypeError("loader and store must not be None")
        self.loader = loader
        self.store = store
        self.config = config if config is not None else RecommendationConfig()
        self.cache = self.config.cache
        self.progress = progress

    # ---------------- Offline recompute ----------------

    def recompute(self) -> RecomputeStats:
        """
        Full rebuild: delete_all -> load matrix -> pairwise -> chunked save -> evict caches.
        Any failure before the caches are evicted raises RecomputeError; edges already
        written are not rolled back.
        """
        cfg = self.config
        log.info("ItemCF: starting full similarity recalculation")
        start = time.perf_counter()

        try:
            self.store.delete_all()
            log.debug("ItemCF: cleared existing similarity store")

            matrix = InteractionMatrix().load(self.loader, cfg.batch_size)
            if matrix.is_empty():
                log.warning("ItemCF: no interactions found, aborting similarity calculation")
                return RecomputeStats(0, 0, 0, time.perf_counter() - start)

            log.info("ItemCF: loaded %d interactions across %d items",
                     matrix.total_interactions(), matrix.item_count())

            results = calculator.compute(matrix.matrix, cfg.strategy, cfg.similarity_threshold,
                                         cfg.min_common_users, progress=self.progress)

            step = cfg.save_batch_size
            for i in range(0, len(results), step):
                self.store.save_all(results[i:i + step])
            log.info("ItemCF: saved %d similarity edges to store", len(results))
        except Exception as exc:
            log.exception("ItemCF: similarity recalculation failed")
            raise RecomputeError("Similarity recalculation failed") from exc

        self._evict(CACHE_PREFIX_SIMILAR + "*")
        self._evict(CACHE_PREFIX_USER + "*")

        stats = RecomputeStats(matrix.item_count(), matrix.total_interactions(),
                               len(results), time.perf_counter() - start)
        log.info("ItemCF: recalculation complete in %.2fs (%d items, %d edges)",
                 stats.seconds, stats.item_count, stats.pair_count)
        return stats

    # ---------------- Online queries ----------------

    def similar_items(self, item_id: int, limit: int) -> List[RecommendationResult]:
        """Items most similar to `item_id`, highest score first, at most `limit`."""
        _check_limit(limit)
        key = f"{CACHE_PREFIX_SIMILAR}{item_id}"
        cached = self._cache_get(key)
        if cached is not None:
            log.debug("ItemCF: cache hit for similar items of item %s", item_id)
            return list(cached)[:limit]

        edges = self.store.find_similar(item_id, self.config.top_k_similar)
        results = ranked(
            RecommendationResult(e.item_id2 if e.item_id1 == item_id else e.item_id1, e.score)
            for e in edges
        )
        # cache the full top-K so any `limit` can be served from one entry
        if results:
            self._cache_put(key, tuple(results), CACHE_TTL_SIMILAR)
        return results[:limit]

    def recommendations_for_user(self, user_id: int, interacted_items: AbstractSet[int],
                                 limit: int) -> List[RecommendationResult]:
        """
        Rank items the user has not interacted with by summed similarity to the items
        they have. An empty history yields [] without touching the store.
        """
        _check_limit(limit)
        key = f"{CACHE_PREFIX_USER}{user_id}"
        cached = self._cache_get(key)
        if cached is not None:
            log.debug("ItemCF: cache hit for user recommendations of user %s", user_id)
            return list(cached)[:limit]

        if not interacted_items:
            log.debug("ItemCF: user %s has no interaction history, returning empty list", user_id)
            return []

        seen = frozenset(interacted_items)
        acc: Dict[int, float] = {}
        for item_id in seen:
            for e in self.store.find_similar(item_id, self.config.top_k_similar):
                cand = e.item_id2 if e.item_id1 == item_id else e.item_id1
                if cand in seen:
                    continue
                acc[cand] = acc.get(cand, 0.0) + e.score

        if not acc:
            log.debug("ItemCF: no similar items found for user %s, returning empty list", user_id)
            return []

        recs = ranked(RecommendationResult(i, s) for i, s in acc.items())[:limit]
        self._cache_put(key, tuple(recs), CACHE_TTL_USER)
        log.debug("ItemCF: generated %d recommendations for user %s", len(recs), user_id)
        return recs

    # ---------------- Cache (best effort) ----------------

    def _cache_get(self, key: str) -> Optional[Any]:
        try:
            return self.cache.get(key)
        except Exception:
            log.warning("ItemCF: cache read failed for %s, falling back to store", key, exc_info=True)
            return None

    def _cache_put(self, key: str, value: Tuple[RecommendationResult, ...], ttl: timedelta) -> None:
        try:
            self.cache.put(key, value, ttl)
        except Exception:
            log.warning("ItemCF: cache write failed for %s", key, exc_info=True)

    def _evict(self, pattern: str) -> None:
        try:
            self.cache.evict_by_pattern(pattern)
        except Exception:
            log.warning("ItemCF: cache eviction failed for %s", pattern, exc_info=True)
