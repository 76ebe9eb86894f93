"""
Edge sources: stream (from, to) pairs out of CSV edge lists.

The CSV is read in chunks so a multi-GB export never sits in memory as a
whole; only the two endpoint columns are loaded, as strings. Cleaning is
left to coresna.sanitize.
"""

import logging
from typing import Iterator, Tuple

import pandas as pd
from tqdm.auto import tqdm

from coresna.errors import MalformedInputError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 25_000


def _pairs(df: pd.DataFrame, source_col: str, target_col: str) -> Iterator[Tuple[str, str]]:
    _check_columns(df, source_col, target_col)
    # NaN (an empty cell) becomes "", which the sanitizer treats as a sentinel.
    cols = df[[source_col, target_col]].astype("string").fillna("")
    for src, tgt in cols.itertuples(index=False, name=None):
        yield str(src), str(tgt)


def edges_from_frame(
    df: pd.DataFrame, source_col: str = "from", target_col: str = "to"
) -> Iterator[Tuple[str, str]]:
    """Yield raw pairs from an in-memory edge-list DataFrame."""
    yield from _pairs(df, source_col, target_col)


def read_edge_csv(
    path: str,
    source_col: str = "from",
    target_col: str = "to",
    chunk_size: int = CHUNK_SIZE,
    progress: bool = True,
) -> Iterator[Tuple[str, str]]:
    """Yield raw (from, to) pairs from a CSV file, chunk by chunk."""
    probe = pd.read_csv(path, nrows=0)
    _check_columns(probe, source_col, target_col)

    reader = pd.read_csv(
        path,
        usecols=[source_col, target_col],
        chunksize=chunk_size,
        dtype=str,
        engine="c",
        keep_default_na=False,
    )
    rows = 0
    for chunk in tqdm(reader, desc="  Chunks", disable=not progress):
        rows += len(chunk)
        yield from _pairs(chunk, source_col, target_col)
    logger.info("read %d edge rows from %s", rows, path)


def _check_columns(df: pd.DataFrame, source_col: str, target_col: str) -> None:
    missing = [c for c in (source_col, target_col) if c not in df.columns]
    if missing:
        raise MalformedInputError(
            f"edge list has no column(s) {', '.join(missing)}", list(df.columns)
        )
