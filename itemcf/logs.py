# itemcf/logs.py
from __future__ import annotations
import os, sys, logging

FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def setup_logging(level: str | None = None) -> logging.Logger:
    """
    Route "itemcf.*" records to stdout for command-line runs.
    Level: `level`, else LOG_LEVEL, else INFO. Safe to call more than once.
    """
    logger = logging.getLogger("itemcf")
    name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    logger.setLevel(getattr(logging, name, logging.INFO))
    if not logger.handlers:
        handler = logging.StreamHandler(stream=sys.stdout)
        handler.setFormatter(logging.Formatter(FORMAT))
        logger.addHandler(handler)
    return logger
