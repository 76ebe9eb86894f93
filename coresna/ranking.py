"""Top-K selection: rank participants by a metric, keep the induced subgraph."""

import logging
from typing import Dict, List, Mapping, Tuple

from coresna.errors import InsufficientNodesError
from coresna.graph import Graph, node_sort_key
from coresna.sanitize import NodeId

logger = logging.getLogger(__name__)


def rank_nodes(g: Graph, metric: Mapping[NodeId, float]) -> List[NodeId]:
    """Nodes of *g* by *metric* descending; equal scores by ascending NodeId."""
    missing = [n for n in g.nodes if n not in metric]
    if missing:
        raise ValueError(f"metric has no value for {len(missing)} node(s), e.g. {missing[0]!r}")
    return sorted(g.nodes, key=lambda n: (-metric[n], node_sort_key(n)))


def select_top_k(
    g: Graph, metric: Mapping[NodeId, float], k: int
) -> Tuple[Graph, Dict[int, NodeId]]:
    """Induced subgraph of the *k* best-ranked nodes.

    Returns the subgraph together with its index -> NodeId mapping;
    index 0 is the highest-ranked participant.
    """
    if k < 0:
        raise ValueError(f"k must be non-negative, got {k}")
    if k > g.number_of_nodes():
        raise InsufficientNodesError(k, g.number_of_nodes())

    top = rank_nodes(g, metric)[:k]
    sub = g.induced_subgraph(top)
    logger.info(
        "selected top %d of %d nodes (%d of %d edges kept)",
        k, g.number_of_nodes(), sub.number_of_edges(), g.number_of_edges(),
    )
    return sub, sub.index.as_dict()
