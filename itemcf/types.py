# itemcf/types.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, List


@dataclass(frozen=True)
class Interaction:
    """One user-item interaction; `score` is the interaction strength (> 0)."""
    user_id: int
    item_id: int
    score: float

    def __post_init__(self):
        if not self.score > 0:
            raise ValueError(f"Interaction score must be > 0, got: {self.score}")


@dataclass(frozen=True)
class SimilarityResult:
    """
    Directed similarity edge item_id1 -> item_id2.
    Each unordered pair is stored as two edges with the same score.
    """
    item_id1: int
    item_id2: int
    score: float

    def __post_init__(self):
        if self.item_id1 == self.item_id2:
            raise ValueError("item_id1 and item_id2 must be different")
        if not 0.0 < self.score <= 1.0:
            raise ValueError(f"Score must be in range (0, 1], got: {self.score}")


@dataclass(frozen=True)
class RecommendationResult:
    item_id: int
    score: float

    # natural order: highest score first
    def __lt__(self, other: "RecommendationResult") -> bool:
        if not isinstance(other, RecommendationResult):
            return NotImplemented
        return self.score > other.score


def ranked(results: Iterable[RecommendationResult]) -> List[RecommendationResult]:
    """Sort by descending score. Ties keep no particular order."""
    return sorted(results)
