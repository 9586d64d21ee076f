# itemcf/matrix.py
from __future__ import annotations
import logging
from types import MappingProxyType
from typing import Dict, Mapping

from .ports import InteractionLoader

log = logging.getLogger(__name__)


class InteractionMatrix:
    """
    Sparse item -> (user -> score) matrix built from paginated interactions.
    Duplicate (user, item) rows keep the max score. One instance per recompute.
    """
    def __init__(self):
        self._matrix: Dict[int, Dict[int, float]] = {}
        self._total = 0
        self._batches = 0

    def load(self, loader: InteractionLoader, batch_size: int) -> "InteractionMatrix":
        offset = 0
        while True:
            batch = loader.load_batch(offset, batch_size)
            if not batch:
                break

            for it in batch:
                users = self._matrix.setdefault(it.item_id, {})
                old = users.get(it.user_id)
                if old is None or it.score > old:
                    users[it.user_id] = it.score

            # every row counts, merged or not
            self._total += len(batch)
            self._batches += 1
            offset += batch_size

            # short page = end of data
            if len(batch) < batch_size:
                break

        log.debug("Loaded %d interactions across %d batches into item-user matrix (%d unique items)",
                  self._total, self._batches, len(self._matrix))
        return self

    @property
    def matrix(self) -> Mapping[int, Mapping[int, float]]:
        return MappingProxyType(self._matrix)

    def is_empty(self) -> bool:
        return not self._matrix

    def item_count(self) -> int:
        return len(self._matrix)

    def total_interactions(self) -> int:
        return self._total

    def batch_count(self) -> int:
        return self._batches
