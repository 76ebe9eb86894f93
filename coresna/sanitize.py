"""
Edge sanitization: raw (from, to) pairs in, valid directed edges out.

Two filters run in order, and each one's drop count is reported:
  1. sentinel endpoints  — "no address" placeholders such as 0 or ""
  2. self-loops          — a sender writing to themselves

Nothing is deduplicated; every surviving pair is one message.
"""

import logging
import numbers
from dataclasses import dataclass
from typing import Any, Iterable, List, NamedTuple, Optional, Tuple, Union

from coresna.errors import MalformedInputError

logger = logging.getLogger(__name__)

NodeId = Union[int, str]

DEFAULT_SENTINELS: Tuple[NodeId, ...] = (0, "0", "")


class Edge(NamedTuple):
    source: NodeId
    target: NodeId


@dataclass(frozen=True)
class SanitizeReport:
    total: int = 0
    dropped_sentinel: int = 0
    dropped_self_loop: int = 0

    @property
    def kept(self) -> int:
        return self.total - self.dropped_sentinel - self.dropped_self_loop


def parse_node_id(value: Any, record: Any = None, position: Optional[int] = None) -> NodeId:
    """Return *value* as a node identifier or raise MalformedInputError.

    Integers (numpy ones included) and strings are accepted; strings are
    stripped. Floats are refused even when integral, so a column that
    pandas widened to float because of a missing value is caught here
    instead of being silently renamed.
    """
    if isinstance(value, bool):
        raise MalformedInputError("boolean is not a node identifier", record, position)
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, str):
        return value.strip()
    raise MalformedInputError(
        f"unsupported identifier type {type(value).__name__}", record, position
    )


def _split_pair(raw: Any, position: int) -> Tuple[Any, Any]:
    if isinstance(raw, (str, bytes)):
        raise MalformedInputError("expected a (from, to) pair", raw, position)
    try:
        src, tgt = raw
    except (TypeError, ValueError):
        raise MalformedInputError("expected a (from, to) pair", raw, position) from None
    return src, tgt


def sanitize_with_report(
    raw_edges: Iterable[Any],
    sentinels: Iterable[NodeId] = DEFAULT_SENTINELS,
) -> Tuple[List[Edge], SanitizeReport]:
    """Filter *raw_edges* and return the surviving edges with drop counts."""
    sentinel_set = frozenset(sentinels)
    edges: List[Edge] = []
    total = n_sentinel = n_loop = 0

    for position, raw in enumerate(raw_edges):
        total += 1
        src, tgt = _split_pair(raw, position)
        src = parse_node_id(src, raw, position)
        tgt = parse_node_id(tgt, raw, position)

        if src in sentinel_set or tgt in sentinel_set:
            n_sentinel += 1
            continue
        if src == tgt:
            n_loop += 1
            continue
        edges.append(Edge(src, tgt))

    report = SanitizeReport(total, n_sentinel, n_loop)
    logger.info(
        "sanitized %d raw edges: %d sentinel, %d self-loop dropped, %d kept",
        report.total, report.dropped_sentinel, report.dropped_self_loop, report.kept,
    )
    return edges, report


def sanitize(
    raw_edges: Iterable[Any],
    sentinels: Iterable[NodeId] = DEFAULT_SENTINELS,
) -> List[Edge]:
    edges, _ = sanitize_with_report(raw_edges, sentinels)
    return edges
