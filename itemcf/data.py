# itemcf/data.py
from __future__ import annotations
import os, logging
from typing import List
import pandas as pd

from .ports import InteractionLoader
from .types import Interaction

log = logging.getLogger(__name__)


# ---------------- Read interaction tables ----------------

def read_interactions(path: str) -> pd.DataFrame:
    """Load an interaction table from .parquet or .csv."""
    ext = os.path.splitext(path)[1].lower()
    if ext in (".parquet", ".pq"):
        return pd.read_parquet(path)
    if ext in (".csv", ".txt"):
        return pd.read_csv(path)
    raise ValueError(f"Unsupported interaction file type: {path}")


# ---------------- DataFrame-backed loader ----------------

class DataFrameInteractionLoader(InteractionLoader):
    """
    Pages a (user, item, score) DataFrame by row position.
    Rows with a non-positive or missing score are dropped up front.
    """
    def __init__(self, df: pd.DataFrame, user_col: str = "user_id",
                 item_col: str = "item_id", score_col: str = "score"):
        required = {user_col, item_col, score_col}
        if not required.issubset(df.columns):
            raise ValueError(f"DataFrame must contain columns {sorted(required)}, "
                             f"found {sorted(map(str, df.columns))}")

        df = df[[user_col, item_col, score_col]].dropna()
        keep = df[score_col].astype(float) > 0
        dropped = int((~keep).sum())
        if dropped:
            log.warning("Dropped %d interactions with non-positive score", dropped)

        df = df[keep]
        self.users = df[user_col].to_numpy(dtype="int64")
        self.items = df[item_col].to_numpy(dtype="int64")
        self.scores = df[score_col].to_numpy(dtype="float64")

    def __len__(self) -> int:
        return len(self.scores)

    def load_batch(self, offset: int, limit: int) -> List[Interaction]:
        sl = slice(offset, offset + limit)
        return [Interaction(int(u), int(i), float(s))
                for u, i, s in zip(self.users[sl], self.items[sl], self.scores[sl])]
