# itemcf/run.py
from __future__ import annotations
import os, json, argparse
import pandas as pd

from .adapters import InMemoryCache, InMemorySimilarityStore
from .config import RecommendationConfig, load_config
from .data import DataFrameInteractionLoader, read_interactions
from .engine import RecommendationEngine
from .logs import setup_logging
from .similarity import STRATEGIES


def build_engine(args) -> tuple[RecommendationEngine, InMemorySimilarityStore]:
    overrides = dict(
        similarity_threshold=args.threshold, min_common_users=args.min_common_users,
        top_k_similar=args.top_k, batch_size=args.batch_size,
        save_batch_size=args.save_batch_size, strategy=args.strategy,
    )
    if args.config:
        cfg = load_config(args.config, cache=InMemoryCache(), **overrides)
    else:
        cfg = RecommendationConfig.from_dict({}, cache=InMemoryCache(), **overrides)

    df = read_interactions(args.interactions)
    loader = DataFrameInteractionLoader(df, args.user_col, args.item_col, args.score_col)
    store = InMemorySimilarityStore()
    return RecommendationEngine(loader, store, cfg, progress=args.progress), store


def dump_edges(store: InMemorySimilarityStore, item_ids, top_k: int, path: str):
    rows = [(e.item_id1, e.item_id2, e.score)
            for i in item_ids for e in store.find_similar(int(i), top_k)]
    pd.DataFrame(rows, columns=["item_id1", "item_id2", "score"]).to_csv(path, index=False)


def main(argv=None):
    ap = argparse.ArgumentParser(description="Item-based CF: recompute similarities and query them")
    ap.add_argument("--interactions", required=True, help="CSV/parquet with user, item, score columns")
    ap.add_argument("--config", default=None, help="JSON file with RecommendationConfig fields")
    ap.add_argument("--user_col", default="user_id")
    ap.add_argument("--item_col", default="item_id")
    ap.add_argument("--score_col", default="score")

    # config overrides (None = keep config/default)
    ap.add_argument("--threshold", type=float, default=None)
    ap.add_argument("--min_common_users", type=int, default=None)
    ap.add_argument("--top_k", type=int, default=None)
    ap.add_argument("--batch_size", type=int, default=None)
    ap.add_argument("--save_batch_size", type=int, default=None)
    ap.add_argument("--strategy", default=None, choices=sorted(STRATEGIES))

    # query
    ap.add_argument("--query", default="recompute", choices=["recompute", "similar", "recommend"])
    ap.add_argument("--item", type=int, default=None, help="item id for --query similar")
    ap.add_argument("--user", type=int, default=None, help="user id for --query recommend")
    ap.add_argument("--history", type=str, default="", help="comma-separated item ids the user interacted with")
    ap.add_argument("--limit", type=int, default=10)
    ap.add_argument("--out", default=None, help="write similarity edges to this CSV")
    ap.add_argument("--progress", action="store_true")
    ap.add_argument("--log_level", default=None, help="DEBUG, INFO, WARNING... (default: LOG_LEVEL env or INFO)")
    args = ap.parse_args(argv)

    if args.query == "similar" and args.item is None:
        ap.error("--query similar needs --item")
    if args.query == "recommend" and args.user is None:
        ap.error("--query recommend needs --user")
    if args.limit < 0:
        ap.error("--limit must be >= 0")

    log = setup_logging(args.log_level)
    engine, store = build_engine(args)
    stats = engine.recompute()

    out = {"recompute": {"items": stats.item_count, "interactions": stats.interaction_count,
                         "edges": stats.pair_count, "seconds": round(stats.seconds, 3)}}

    if args.query == "similar":
        res = engine.similar_items(args.item, args.limit)
        out["similar"] = {"item": args.item, "results": [{"item_id": r.item_id, "score": r.score} for r in res]}
    elif args.query == "recommend":
        history = {int(x) for x in args.history.split(",") if x.strip()}
        res = engine.recommendations_for_user(args.user, history, args.limit)
        out["recommend"] = {"user": args.user, "history": sorted(history),
                            "results": [{"item_id": r.item_id, "score": r.score} for r in res]}

    if args.out:
        os.makedirs(os.path.dirname(os.path.abspath(args.out)), exist_ok=True)
        item_ids = sorted(set(engine.loader.items.tolist()))
        dump_edges(store, item_ids, engine.config.top_k_similar, args.out)
        log.info("Saved similarity edges to %s", args.out)

    print(json.dumps(out, indent=2))
    return out


if __name__ == "__main__":
    main()
