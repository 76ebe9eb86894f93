"""
Centrality suite for a communication graph (or a ranked subgraph of it).

Conventions, applied everywhere in this module:

  degree       in + out, every parallel edge counts once, so the values
               sum to 2 * |E|.
  betweenness  Brandes over the directed graph with parallel edges
               collapsed; normalized by (n-1)(n-2) unless asked not to.
  eigenvector  shifted power iteration on the undirected presence
               adjacency (direction and multiplicity dropped), scaled to
               unit Euclidean norm.
  coreness     degeneracy peeling on the same undirected adjacency;
               ties go to the smallest NodeId.

Each metric is a plain function of an immutable Graph, so the three
expensive ones can share a thread pool.
"""

import heapq
import logging
import warnings
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import community as community_louvain
import networkx as nx
import numpy as np
import pandas as pd

from coresna.config import AnalysisConfig
from coresna.errors import NonConvergentMetricWarning
from coresna.graph import Graph, node_sort_key
from coresna.sanitize import NodeId

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class NodeMetrics:
    degree: int
    betweenness: float
    eigenvector: float
    coreness: int


@dataclass
class EigenvectorResult:
    values: Dict[NodeId, float]
    converged: bool
    iterations: int

    def __getitem__(self, node: NodeId) -> float:
        return self.values[node]


@dataclass
class MetricsReport:
    """Per-node metric records for one graph."""
    nodes: Dict[NodeId, NodeMetrics] = field(default_factory=dict)
    eigenvector_converged: bool = True
    eigenvector_iterations: int = 0

    def __getitem__(self, node: NodeId) -> NodeMetrics:
        return self.nodes[node]

    def __len__(self) -> int:
        return len(self.nodes)

    def metric(self, name: str) -> Dict[NodeId, float]:
        """One column of the report as a NodeId -> value mapping."""
        return {n: getattr(m, name) for n, m in self.nodes.items()}

    def to_frame(self) -> pd.DataFrame:
        df = pd.DataFrame(
            [
                {"node": n, "degree": m.degree, "betweenness": m.betweenness,
                 "eigenvector": m.eigenvector, "coreness": m.coreness}
                for n, m in self.nodes.items()
            ],
            columns=["node", "degree", "betweenness", "eigenvector", "coreness"],
        )
        return df.set_index("node")


# ---------------------------------------------------------------------------
# Degree
# ---------------------------------------------------------------------------

def degree(g: Graph) -> Dict[NodeId, int]:
    return {n: d for n, d in g.nx.degree()}


def in_degree(g: Graph) -> Dict[NodeId, int]:
    return {n: d for n, d in g.nx.in_degree()}


def out_degree(g: Graph) -> Dict[NodeId, int]:
    return {n: d for n, d in g.nx.out_degree()}


# ---------------------------------------------------------------------------
# Betweenness
# ---------------------------------------------------------------------------

def betweenness(g: Graph, normalized: bool = True) -> Dict[NodeId, float]:
    """Shortest-path betweenness over ordered (s, t) pairs.

    Parallel edges are one hop. Pairs with no path contribute nothing.
    """
    scores = nx.betweenness_centrality(g.simple_digraph(), normalized=normalized)
    return {n: float(scores[n]) for n in g.nodes}


# ---------------------------------------------------------------------------
# Eigenvector
# ---------------------------------------------------------------------------

def eigenvector(g: Graph, tol: float = 1e-8, max_iter: int = 1000) -> EigenvectorResult:
    """Principal eigenvector of the undirected adjacency by power iteration.

    Iterates x <- (A + I) x; the shift keeps bipartite graphs (a lone
    edge pair, a star) from oscillating and leaves the eigenvectors of A
    unchanged. If *max_iter* is reached the last estimate is returned
    with ``converged=False`` and a NonConvergentMetricWarning is issued.
    """
    nodes = list(g.nodes)
    n = len(nodes)
    if n == 0:
        return EigenvectorResult({}, True, 0)

    A = nx.to_numpy_array(g.undirected(), nodelist=nodes, weight=None, dtype=float)
    M = A + np.eye(n)
    x = np.full(n, 1.0 / np.sqrt(n))

    converged = False
    iterations = 0
    for iterations in range(1, max_iter + 1):
        x_next = M @ x
        x_next /= np.linalg.norm(x_next)
        delta = np.abs(x_next - x).max()
        x = x_next
        if delta < tol:
            converged = True
            break

    if not converged:
        logger.warning("eigenvector centrality did not converge in %d iterations", max_iter)
        warnings.warn(
            f"eigenvector centrality did not converge in {max_iter} iterations; "
            "returning the last estimate",
            NonConvergentMetricWarning,
            stacklevel=2,
        )

    x = np.clip(x, 0.0, None)
    return EigenvectorResult(
        {node: float(v) for node, v in zip(nodes, x)}, converged, iterations
    )


# ---------------------------------------------------------------------------
# Coreness
# ---------------------------------------------------------------------------

def peel_order(g: Graph) -> List[Tuple[NodeId, int]]:
    """Degeneracy peeling; returns (node, core level) in removal order.

    The node removed next is always one of minimum remaining degree,
    smallest NodeId first. Levels never decrease along the list.
    """
    und = g.undirected()
    remaining = {n: und.degree(n) for n in g.nodes}
    heap = [(d, node_sort_key(n), n) for n, d in remaining.items()]
    heapq.heapify(heap)

    order: List[Tuple[NodeId, int]] = []
    level = 0
    while heap:
        d, _, node = heapq.heappop(heap)
        if node not in remaining or remaining[node] != d:
            continue  # stale entry
        del remaining[node]
        level = max(level, d)
        order.append((node, level))
        for nb in und[node]:
            if nb in remaining:
                remaining[nb] -= 1
                heapq.heappush(heap, (remaining[nb], node_sort_key(nb), nb))
    return order


def coreness(g: Graph) -> Dict[NodeId, int]:
    levels = dict(peel_order(g))
    return {n: levels[n] for n in g.nodes}


# ---------------------------------------------------------------------------
# Communities
# ---------------------------------------------------------------------------

def communities(g: Graph, seed: int = 42) -> Dict[NodeId, int]:
    """Louvain partition of the undirected adjacency, node -> community id."""
    und = g.undirected()
    if und.number_of_edges() == 0:
        # Louvain has nothing to optimise; every participant is alone.
        return {n: i for i, n in enumerate(g.nodes)}
    partition = community_louvain.best_partition(nx.Graph(und), random_state=seed)
    return {n: int(partition[n]) for n in g.nodes}


# ---------------------------------------------------------------------------
# Full suite
# ---------------------------------------------------------------------------

def compute_metrics(
    g: Graph,
    config: Optional[AnalysisConfig] = None,
    workers: Optional[int] = None,
) -> MetricsReport:
    """Degree, betweenness, eigenvector and coreness for every node of *g*."""
    config = config or AnalysisConfig()
    workers = workers or config.workers

    jobs = {
        "betweenness": lambda: betweenness(g, normalized=config.normalized_betweenness),
        "eigenvector": lambda: eigenvector(g, tol=config.eigen_tol, max_iter=config.eigen_max_iter),
        "coreness":    lambda: coreness(g),
    }
    if workers > 1:
        with ThreadPoolExecutor(max_workers=workers) as ex:
            futures = {name: ex.submit(fn) for name, fn in jobs.items()}
            results = {name: fut.result() for name, fut in futures.items()}
    else:
        results = {name: fn() for name, fn in jobs.items()}

    deg = degree(g)
    bet = results["betweenness"]
    eig: EigenvectorResult = results["eigenvector"]
    core = results["coreness"]

    report = MetricsReport(
        nodes={
            n: NodeMetrics(deg[n], bet[n], eig.values[n], core[n])
            for n in g.nodes
        },
        eigenvector_converged=eig.converged,
        eigenvector_iterations=eig.iterations,
    )
    logger.debug("computed metrics for %d nodes", len(report))
    return report
