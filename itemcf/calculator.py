# itemcf/calculator.py
from __future__ import annotations
import logging
from typing import List, Mapping
from tqdm import tqdm

from .similarity import SimilarityStrategy, Vector
from .types import SimilarityResult

log = logging.getLogger(__name__)


def count_common_users(v1: Vector, v2: Vector, min_common_users: int) -> int:
    """
    Shared users between two item vectors, counting only up to `min_common_users`.
    Walks the smaller vector and looks each user up in the larger one.
    """
    small, large = (v1, v2) if len(v1) <= len(v2) else (v2, v1)
    count = 0
    for u in small:
        if u in large:
            count += 1
            if count >= min_common_users:
                break
    return count


def compute(
    matrix: Mapping[int, Mapping[int, float]],
    strategy: SimilarityStrategy,
    threshold: float,
    min_common_users: int,
    progress: bool = False,
) -> List[SimilarityResult]:
    """
    All-pairs item similarity.
      - pairs with fewer than `min_common_users` shared users are skipped before the
        strategy is called
      - pairs scoring >= threshold (and > 0) are emitted as two edges, i->j and j->i
    Output order is unspecified.
    """
    item_ids = list(matrix.keys())
    n = len(item_ids)
    results: List[SimilarityResult] = []

    log.debug("Computing pairwise similarities for %d items (%d pairs)", n, n * (n - 1) // 2)

    for a in tqdm(range(n), desc="ItemCF (pairwise)", disable=not progress):
        id1 = item_ids[a]
        v1 = matrix[id1]
        for b in range(a + 1, n):
            id2 = item_ids[b]
            v2 = matrix[id2]

            if count_common_users(v1, v2, min_common_users) < min_common_users:
                continue

            sim = float(strategy(v1, v2))
            if sim >= threshold and sim > 0.0:
                results.append(SimilarityResult(id1, id2, sim))
                results.append(SimilarityResult(id2, id1, sim))

    log.debug("Found %d qualifying similarity edges (bidirectional) from %d items", len(results), n)
    return results
