"""
Directed multigraph of who-wrote-to-whom.

A Graph is built once from sanitized edges and never changes. The
NetworkX object underneath is frozen, and every node carries a dense
index in [0, n) assigned in first-appearance order, so "node 7" means
the same participant for as long as the Graph lives. Subgraphs get a
fresh NodeIndex of their own; the original identifiers travel with
them instead of being re-derived from positions.
"""

from functools import cached_property
from typing import Dict, Iterable, Iterator, List, Sequence, Tuple

import networkx as nx

from coresna.sanitize import Edge, NodeId


def node_sort_key(node: NodeId) -> Tuple[bool, NodeId]:
    """Ascending NodeId order that also works for mixed int/str graphs."""
    return isinstance(node, str), node


class NodeIndex:
    """Bidirectional NodeId <-> dense index lookup."""

    def __init__(self, nodes: Iterable[NodeId]):
        self._nodes: Tuple[NodeId, ...] = tuple(nodes)
        self._positions: Dict[NodeId, int] = {n: i for i, n in enumerate(self._nodes)}
        if len(self._positions) != len(self._nodes):
            raise ValueError("node identifiers must be unique")

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[NodeId]:
        return iter(self._nodes)

    def __contains__(self, node) -> bool:
        return node in self._positions

    def index_of(self, node: NodeId) -> int:
        return self._positions[node]

    def node_at(self, index: int) -> NodeId:
        if index < 0:
            raise IndexError(index)
        return self._nodes[index]

    def as_dict(self) -> Dict[int, NodeId]:
        """index -> NodeId, the mapping handed to reporting code."""
        return dict(enumerate(self._nodes))


class Graph:
    """Immutable directed multigraph over sanitized edges.

    Parameters
    ----------
    nodes:
        Node identifiers in index order.
    edges:
        Directed edges in input order; parallel edges are kept.
    """

    def __init__(self, nodes: Sequence[NodeId], edges: Sequence[Edge]):
        self.index = NodeIndex(nodes)
        self.edges: Tuple[Edge, ...] = tuple(Edge(*e) for e in edges)

        g = nx.MultiDiGraph()
        g.add_nodes_from(self.index)
        for src, tgt in self.edges:
            if src not in self.index or tgt not in self.index:
                raise KeyError(f"edge {src!r} -> {tgt!r} references an unknown node")
            if src == tgt:
                raise ValueError(f"self-loop on {src!r}; sanitize edges first")
            g.add_edge(src, tgt)
        self.nx: nx.MultiDiGraph = nx.freeze(g)

    @classmethod
    def from_edges(cls, edges: Iterable[Edge]) -> "Graph":
        edges = [Edge(*e) for e in edges]
        order: Dict[NodeId, None] = {}
        for src, tgt in edges:
            order.setdefault(src, None)
            order.setdefault(tgt, None)
        return cls(list(order), edges)

    # -- basic shape ----------------------------------------------------------

    @property
    def nodes(self) -> Tuple[NodeId, ...]:
        return tuple(self.index)

    def number_of_nodes(self) -> int:
        return len(self.index)

    def number_of_edges(self) -> int:
        return len(self.edges)

    def __len__(self) -> int:
        return len(self.index)

    def __contains__(self, node) -> bool:
        return node in self.index

    def __iter__(self) -> Iterator[NodeId]:
        return iter(self.index)

    def __repr__(self) -> str:
        return f"<Graph nodes={self.number_of_nodes()} edges={self.number_of_edges()}>"

    def index_of(self, node: NodeId) -> int:
        return self.index.index_of(node)

    def node_at(self, index: int) -> NodeId:
        return self.index.node_at(index)

    # -- adjacency queries ----------------------------------------------------

    def successors(self, node: NodeId) -> List[NodeId]:
        return list(self.nx.successors(node))

    def predecessors(self, node: NodeId) -> List[NodeId]:
        return list(self.nx.predecessors(node))

    def neighbors(self, node: NodeId) -> List[NodeId]:
        """Peers reached by an edge in either direction, in index order."""
        return sorted(self.undirected()[node], key=self.index.index_of)

    def has_edge(self, source: NodeId, target: NodeId) -> bool:
        return self.nx.has_edge(source, target)

    def adjacent(self, u: NodeId, v: NodeId) -> bool:
        return self.nx.has_edge(u, v) or self.nx.has_edge(v, u)

    def edge_count(self, source: NodeId, target: NodeId) -> int:
        return self.nx.number_of_edges(source, target)

    # -- derived views --------------------------------------------------------

    @cached_property
    def _undirected(self) -> nx.Graph:
        g = nx.Graph()
        g.add_nodes_from(self.index)
        g.add_edges_from(self.nx.edges())
        return nx.freeze(g)

    def undirected(self) -> nx.Graph:
        """Simple undirected view: direction and multiplicity collapsed."""
        return self._undirected

    @cached_property
    def _simple_digraph(self) -> nx.DiGraph:
        g = nx.DiGraph()
        g.add_nodes_from(self.index)
        g.add_edges_from(self.nx.edges())
        return nx.freeze(g)

    def simple_digraph(self) -> nx.DiGraph:
        """Directed view with parallel edges collapsed to one."""
        return self._simple_digraph

    def density(self) -> float:
        return nx.density(self.simple_digraph())

    # -- subgraphs ------------------------------------------------------------

    def induced_subgraph(self, nodes: Iterable[NodeId]) -> "Graph":
        """Graph on exactly *nodes*, indexed in the order given."""
        nodes = list(nodes)
        for n in nodes:
            if n not in self.index:
                raise KeyError(n)
        keep = set(nodes)
        edges = [e for e in self.edges if e.source in keep and e.target in keep]
        return Graph(nodes, edges)


def build_graph(edges: Iterable[Edge]) -> Graph:
    """Build the communication graph from sanitized edges."""
    return Graph.from_edges(edges)
