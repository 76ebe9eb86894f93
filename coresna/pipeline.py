"""
============================================================
CORE-GROUP ANALYSIS PIPELINE
============================================================
Finds the densely connected "core" of an e-mail network:

  1. sanitize            — drop sentinel and self-addressed pairs
  2. build_graph         — directed multigraph, one edge per message
  3. rank                — keep the top-K participants by degree
  4. compute_metrics     — degree / betweenness / eigenvector / coreness
  5. find_cliques        — maximal cliques, size census, core set
  6. detect_communities  — Louvain partition of the subgraph

Every stage reads the previous stage's result and writes its own
attribute; nothing is written to disk here. Callers decide whether to
export the AnalysisResult (see coresna.__main__).
============================================================
"""

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, Optional

import pandas as pd

from coresna.cliques import CliqueAnalysis, analyze_cliques
from coresna.config import AnalysisConfig
from coresna.graph import Graph, build_graph
from coresna.metrics import MetricsReport, communities, compute_metrics, degree
from coresna.ranking import select_top_k
from coresna.sanitize import Edge, NodeId, SanitizeReport, sanitize_with_report


@dataclass
class AnalysisResult:
    graph: Graph
    sanitize_report: SanitizeReport
    subgraph: Graph
    mapping: Dict[int, NodeId]
    metrics: MetricsReport
    cliques: CliqueAnalysis
    communities: Dict[NodeId, int] = field(default_factory=dict)

    @property
    def core_set(self) -> FrozenSet[NodeId]:
        return self.cliques.core_set

    def summary(self) -> Dict[str, Any]:
        largest = max(self.cliques.census, default=0)
        return {
            "raw_edges":             self.sanitize_report.total,
            "dropped_sentinel":      self.sanitize_report.dropped_sentinel,
            "dropped_self_loop":     self.sanitize_report.dropped_self_loop,
            "total_nodes":           self.graph.number_of_nodes(),
            "total_edges":           self.graph.number_of_edges(),
            "density":               round(self.graph.density(), 6),
            "subgraph_nodes":        self.subgraph.number_of_nodes(),
            "subgraph_edges":        self.subgraph.number_of_edges(),
            "subgraph_density":      round(self.subgraph.density(), 6),
            "n_cliques":             len(self.cliques.enumeration),
            "cliques_complete":      self.cliques.complete,
            "largest_clique":        largest,
            "core_size":             len(self.core_set),
            "n_communities":         len(set(self.communities.values())),
            "eigenvector_converged": self.metrics.eigenvector_converged,
        }

    def nodes_frame(self) -> pd.DataFrame:
        """One row per subgraph node, in rank order, ready to tabulate."""
        df = self.metrics.to_frame()
        df.insert(0, "rank", [self.subgraph.index_of(n) for n in df.index])
        df["community"] = [self.communities.get(n, -1) for n in df.index]
        df["in_core"] = [n in self.core_set for n in df.index]
        return df.sort_values("rank")

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready view of the subgraph, its metrics and its cliques."""
        nodes_out = [
            {
                "id":          n,
                "rank":        self.subgraph.index_of(n),
                "degree":      m.degree,
                "betweenness": round(m.betweenness, 6),
                "eigenvector": round(m.eigenvector, 6),
                "coreness":    m.coreness,
                "community":   self.communities.get(n, -1),
                "in_core":     n in self.core_set,
            }
            for n, m in self.metrics.nodes.items()
        ]
        edges_out = [
            {"source": u, "target": v, "count": self.subgraph.edge_count(u, v)}
            for u, v in self.subgraph.simple_digraph().edges()
        ]
        return {
            "nodes": nodes_out,
            "edges": edges_out,
            "cliques": [sorted(c, key=str) for c in self.cliques.cliques],
            "census": {str(k): v for k, v in self.cliques.census.items()},
            "core_set": sorted(self.core_set, key=str),
            "stats": self.summary(),
        }


class CoreGroupAnalyzer:
    """
    Staged pipeline from raw (from, to) pairs to the core group.

    Stages can be run one by one (each reads the attributes set by the
    previous one) or all at once with run().
    """

    def __init__(self, raw_edges: Iterable[Any], config: Optional[AnalysisConfig] = None,
                 verbose: bool = True):
        self.raw_edges = raw_edges
        self.config    = config or AnalysisConfig()
        self.verbose   = verbose

        # ── Populated by the stages ───────────────────────────────────────
        self.edges: list[Edge]                 = []
        self.sanitize_report: Optional[SanitizeReport] = None
        self.G: Optional[Graph]                = None   # full communication graph
        self.G_top: Optional[Graph]            = None   # ranked induced subgraph
        self.mapping: Dict[int, NodeId]        = {}
        self.metrics: Optional[MetricsReport]  = None
        self.clique_analysis: Optional[CliqueAnalysis] = None
        self.partition: Dict[NodeId, int]      = {}

    def _say(self, msg: str) -> None:
        if self.verbose:
            print(msg)

    # ------------------------------------------------------------------
    # Stage 1: Sanitize
    # ------------------------------------------------------------------

    def sanitize(self):
        self._say("🧹 Sanitizing edges …")
        self.edges, self.sanitize_report = sanitize_with_report(
            self.raw_edges, self.config.sentinels
        )
        r = self.sanitize_report
        self._say(f"   {r.kept:,} edges kept from {r.total:,} "
                  f"({r.dropped_sentinel:,} sentinel, {r.dropped_self_loop:,} self-loop)")

    # ------------------------------------------------------------------
    # Stage 2: Graph construction
    # ------------------------------------------------------------------

    def build_graph(self):
        self._say("📊 Building graph …")
        self.G = build_graph(self.edges)
        self._say(f"   {self.G.number_of_nodes():,} nodes, {self.G.number_of_edges():,} edges")

    # ------------------------------------------------------------------
    # Stage 3: Ranking
    # ------------------------------------------------------------------

    def rank(self):
        k = self.config.top_k
        self._say(f"🏅 Selecting top {k} participants by degree …")
        self.G_top, self.mapping = select_top_k(self.G, degree(self.G), k)
        self._say(f"   subgraph: {self.G_top.number_of_nodes()} nodes, "
                  f"{self.G_top.number_of_edges():,} edges")

    # ------------------------------------------------------------------
    # Stage 4: Centralities
    # ------------------------------------------------------------------

    def compute_metrics(self):
        self._say("📐 Computing centralities …")
        self.metrics = compute_metrics(self.G_top, self.config)
        if not self.metrics.eigenvector_converged:
            self._say(f"   ⚠️  eigenvector centrality stopped at "
                      f"{self.metrics.eigenvector_iterations} iterations (best estimate)")

    # ------------------------------------------------------------------
    # Stage 5: Cliques and the core set
    # ------------------------------------------------------------------

    def find_cliques(self):
        self._say("🔺 Enumerating maximal cliques …")
        self.clique_analysis = analyze_cliques(self.G_top, self.config)
        ca = self.clique_analysis
        self._say(f"   {len(ca.enumeration):,} cliques, census {ca.census}")
        if not ca.complete:
            self._say("   ⚠️  enumeration budget exhausted; census is partial")
        self._say(f"   core set: {len(ca.core_set)} nodes "
                  f"(clique size {ca.target_size})")

    # ------------------------------------------------------------------
    # Stage 6: Communities
    # ------------------------------------------------------------------

    def detect_communities(self):
        self._say("🏘️  Louvain communities …")
        self.partition = communities(self.G_top, seed=self.config.community_seed)
        self._say(f"   {len(set(self.partition.values()))} communities")

    # ------------------------------------------------------------------
    # Orchestration
    # ------------------------------------------------------------------

    def result(self) -> AnalysisResult:
        return AnalysisResult(
            graph=self.G,
            sanitize_report=self.sanitize_report,
            subgraph=self.G_top,
            mapping=self.mapping,
            metrics=self.metrics,
            cliques=self.clique_analysis,
            communities=self.partition,
        )

    def run(self) -> AnalysisResult:
        """Execute the full pipeline."""
        self.sanitize()
        self.build_graph()
        self.rank()
        self.compute_metrics()
        self.find_cliques()
        self.detect_communities()
        return self.result()
