# itemcf/config.py
from __future__ import annotations
import json
from dataclasses import dataclass, field, fields
from typing import Any, Mapping

from .adapters import NoOpCache
from .errors import ConfigError
from .ports import Cache
from .similarity import SimilarityStrategy, cosine, get_strategy

DEFAULT_SIMILARITY_THRESHOLD = 0.15
DEFAULT_MIN_COMMON_USERS = 2
DEFAULT_TOP_K_SIMILAR = 50
DEFAULT_BATCH_SIZE = 1000
DEFAULT_SAVE_BATCH_SIZE = 1000


@dataclass(frozen=True)
class RecommendationConfig:
    """
    similarity_threshold: minimum score for a pair to be stored, in [0, 1]
    min_common_users:     users who must have interacted with both items (>= 1)
    top_k_similar:        neighbours read per item at query time (>= 1)
    batch_size:           interactions requested per loader page (>= 1)
    save_batch_size:      edges written per store.save_all call (>= 1)
    strategy:             callable or registered name ("cosine", "jaccard")
    cache:                query cache; NoOpCache disables caching
    """
    similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD
    min_common_users: int = DEFAULT_MIN_COMMON_USERS
    top_k_similar: int = DEFAULT_TOP_K_SIMILAR
    batch_size: int = DEFAULT_BATCH_SIZE
    save_batch_size: int = DEFAULT_SAVE_BATCH_SIZE
    strategy: SimilarityStrategy = cosine
    cache: Cache = field(default_factory=NoOpCache)

    def __post_init__(self):
        if not 0.0 <= self.similarity_threshold <= 1.0:
            raise ConfigError(f"similarity_threshold must be in [0,1], got: {self.similarity_threshold}")
        for name in ("min_common_users", "top_k_similar", "batch_size", "save_batch_size"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise ConfigError(f"{name} must be an integer >= 1, got: {value!r}")
        if self.cache is None:
            raise ConfigError("cache must not be None; use NoOpCache() to disable caching")
        # frozen: resolve named strategies in place
        object.__setattr__(self, "strategy", get_strategy(self.strategy))

    @classmethod
    def from_dict(cls, d: Mapping[str, Any], **overrides) -> "RecommendationConfig":
        known = {f.name for f in fields(cls)}
        unknown = set(d) - known
        if unknown:
            raise ConfigError(f"unknown config keys: {sorted(unknown)}")
        kwargs = {**d, **{k: v for k, v in overrides.items() if v is not None}}
        return cls(**kwargs)


def load_config(path: str, **overrides) -> RecommendationConfig:
    """Read a JSON config file; non-None keyword overrides win over file values."""
    with open(path) as f:
        cfg = json.load(f)
    if "config" in cfg:   # allow {"config": {...}} like saved run metadata
        cfg = cfg["config"]
    return RecommendationConfig.from_dict(cfg, **overrides)
