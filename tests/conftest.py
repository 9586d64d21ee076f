import pytest

from itemcf.adapters import InMemorySimilarityStore, SequenceLoader
from itemcf.config import RecommendationConfig
from itemcf.engine import RecommendationEngine
from itemcf.types import Interaction

# item10 "jacket": users 1,2,3
# item20 "sweater": users 1,2      -> close to item10
# item30 "shorts": users 4,5       -> shares nobody with item10/item20
# item40 "sandals": users 1,3      -> partly close to item10
SCENARIO = [
    Interaction(1, 10, 5.0), Interaction(2, 10, 4.0), Interaction(3, 10, 3.0),
    Interaction(1, 20, 5.0), Interaction(2, 20, 4.0),
    Interaction(4, 30, 5.0), Interaction(5, 30, 4.0),
    Interaction(1, 40, 4.0), Interaction(3, 40, 3.0),
]


class PagedLoader:
    """Serves pre-cut pages by offset // limit and records every call."""
    def __init__(self, pages):
        self.pages = pages
        self.calls = []

    def load_batch(self, offset, limit):
        self.calls.append((offset, limit))
        idx = offset // limit
        return self.pages[idx] if idx < len(self.pages) else []


class CountingStore(InMemorySimilarityStore):
    def __init__(self):
        super().__init__()
        self.find_calls = []
        self.save_calls = []

    def find_similar(self, item_id, top_k):
        self.find_calls.append((item_id, top_k))
        return super().find_similar(item_id, top_k)

    def save_all(self, results):
        self.save_calls.append(len(results))
        super().save_all(results)


@pytest.fixture
def scenario_config():
    return RecommendationConfig(similarity_threshold=0.10, min_common_users=2,
                                top_k_similar=20, batch_size=100)


@pytest.fixture
def store():
    return CountingStore()


@pytest.fixture
def engine(store, scenario_config):
    eng = RecommendationEngine(SequenceLoader(SCENARIO), store, scenario_config)
    eng.recompute()
    return eng
