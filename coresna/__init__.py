"""Core-group analysis of e-mail communication networks.

Usage::

    from coresna import CoreGroupAnalyzer, AnalysisConfig

    result = CoreGroupAnalyzer(pairs, AnalysisConfig(top_k=50)).run()
    result.cliques.census      # {size: count}
    result.core_set            # participants of the largest cliques
    result.nodes_frame()       # per-node metrics as a DataFrame
"""

from coresna.cliques import (
    CliqueAnalysis,
    CliqueEnumeration,
    analyze_cliques,
    census,
    derive_core_set,
    enumerate_maximal_cliques,
)
from coresna.config import AnalysisConfig
from coresna.errors import (
    CoreSNAError,
    InsufficientNodesError,
    MalformedInputError,
    NonConvergentMetricWarning,
)
from coresna.graph import Graph, NodeIndex, build_graph
from coresna.metrics import (
    EigenvectorResult,
    MetricsReport,
    NodeMetrics,
    betweenness,
    communities,
    compute_metrics,
    coreness,
    degree,
    eigenvector,
    peel_order,
)
from coresna.pipeline import AnalysisResult, CoreGroupAnalyzer
from coresna.ranking import rank_nodes, select_top_k
from coresna.sanitize import Edge, SanitizeReport, sanitize, sanitize_with_report

__all__ = [
    "AnalysisConfig",
    "AnalysisResult",
    "CliqueAnalysis",
    "CliqueEnumeration",
    "CoreGroupAnalyzer",
    "CoreSNAError",
    "Edge",
    "EigenvectorResult",
    "Graph",
    "InsufficientNodesError",
    "MalformedInputError",
    "MetricsReport",
    "NodeIndex",
    "NodeMetrics",
    "NonConvergentMetricWarning",
    "SanitizeReport",
    "analyze_cliques",
    "betweenness",
    "build_graph",
    "census",
    "communities",
    "compute_metrics",
    "coreness",
    "degree",
    "derive_core_set",
    "eigenvector",
    "enumerate_maximal_cliques",
    "peel_order",
    "rank_nodes",
    "sanitize",
    "sanitize_with_report",
    "select_top_k",
]
