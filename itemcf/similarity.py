# itemcf/similarity.py
from __future__ import annotations
from typing import Callable, Dict, Mapping, Union
import numpy as np

from .errors import ConfigError

# sparse item vector: user_id -> score
Vector = Mapping[int, float]
SimilarityStrategy = Callable[[Vector, Vector], float]


def _l2(v: Vector) -> float:
    return float(np.linalg.norm(np.fromiter(v.values(), dtype=np.float64, count=len(v))))


def cosine(v1: Vector, v2: Vector) -> float:
    """
    Cosine similarity between two sparse item vectors.
    Dot product runs over common users only; each norm runs over ALL users of its vector.
    """
    common = [u for u in v1 if u in v2]
    if not common:
        return 0.0

    a = np.fromiter((v1[u] for u in common), dtype=np.float64, count=len(common))
    b = np.fromiter((v2[u] for u in common), dtype=np.float64, count=len(common))
    dot = float(a @ b)

    norm1, norm2 = _l2(v1), _l2(v2)
    if norm1 == 0.0 or norm2 == 0.0:
        return 0.0
    # round-off can land identical vectors just above 1.0
    return min(dot / (norm1 * norm2), 1.0)


def jaccard(v1: Vector, v2: Vector) -> float:
    """|A ∩ B| / |A ∪ B| over the users of each item; scores are ignored."""
    union = len(v1.keys() | v2.keys())
    if union == 0:
        return 0.0
    return len(v1.keys() & v2.keys()) / union


STRATEGIES: Dict[str, SimilarityStrategy] = {
    "cosine": cosine,
    "jaccard": jaccard,
}


def get_strategy(strategy: Union[str, SimilarityStrategy]) -> SimilarityStrategy:
    if callable(strategy):
        return strategy
    try:
        return STRATEGIES[strategy]
    except KeyError:
        raise ConfigError(f"unknown similarity strategy {strategy!r}; "
                          f"expected one of {sorted(STRATEGIES)}") from None
