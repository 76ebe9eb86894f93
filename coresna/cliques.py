"""
Maximal cliques of the ranked subgraph and the "core" group they imply.

Two participants are adjacent when either has written to the other.
Enumeration is Bron–Kerbosch with pivoting (networkx.find_cliques).
Clique counts can grow exponentially with the subgraph; a count or time
budget turns the run into a partial result instead of a hang.
"""

import logging
import time
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, Iterator, List, Optional, Union

import networkx as nx

from coresna.config import AnalysisConfig
from coresna.graph import Graph, node_sort_key
from coresna.sanitize import NodeId

logger = logging.getLogger(__name__)

Clique = FrozenSet[NodeId]


@dataclass
class CliqueEnumeration:
    cliques: List[Clique] = field(default_factory=list)
    complete: bool = True

    def __iter__(self) -> Iterator[Clique]:
        return iter(self.cliques)

    def __len__(self) -> int:
        return len(self.cliques)

    def __getitem__(self, i: int) -> Clique:
        return self.cliques[i]


@dataclass
class CliqueAnalysis:
    enumeration: CliqueEnumeration
    census: Dict[int, int]
    core_set: FrozenSet[NodeId]
    target_size: Optional[int]

    @property
    def cliques(self) -> List[Clique]:
        return self.enumeration.cliques

    @property
    def complete(self) -> bool:
        return self.enumeration.complete


def _clique_order(clique: Clique):
    return -len(clique), [node_sort_key(n) for n in sorted(clique, key=node_sort_key)]


def enumerate_maximal_cliques(
    g: Graph,
    min_size: int = 1,
    max_cliques: Optional[int] = None,
    time_budget: Optional[float] = None,
) -> CliqueEnumeration:
    """All maximal cliques of *g* with at least *min_size* members.

    Largest cliques come first, equal sizes ordered by their members.
    When *max_cliques* or *time_budget* (seconds) is exceeded the
    cliques found so far are returned with ``complete=False``.
    """
    found: List[Clique] = []
    complete = True
    started = time.monotonic()

    for members in nx.find_cliques(g.undirected()):
        if len(members) >= min_size:
            if max_cliques is not None and len(found) >= max_cliques:
                complete = False
                break
            found.append(frozenset(members))
        if time_budget is not None and time.monotonic() - started > time_budget:
            complete = False
            break

    if not complete:
        logger.warning(
            "clique enumeration abandoned after %d cliques (%.1fs); result is partial",
            len(found), time.monotonic() - started,
        )
    found.sort(key=_clique_order)
    return CliqueEnumeration(found, complete)


def census(cliques: Iterable[Clique]) -> Dict[int, int]:
    """Clique size -> number of cliques of that size, smallest size first."""
    sizes = Counter(len(c) for c in cliques)
    return dict(sorted(sizes.items()))


def derive_core_set(
    cliques: Iterable[Clique],
    target_size: Union[int, str] = "largest",
    limit: Optional[int] = None,
) -> FrozenSet[NodeId]:
    """Union of the cliques of *target_size* ('largest' = biggest observed).

    *limit* caps how many matching cliques are merged, in the order
    given. No matching clique gives an empty set.
    """
    cliques = list(cliques)
    if not cliques:
        return frozenset()
    size = max(len(c) for c in cliques) if target_size == "largest" else int(target_size)

    matching = [c for c in cliques if len(c) == size]
    if limit is not None:
        matching = matching[:limit]
    return frozenset().union(*matching)


def analyze_cliques(g: Graph, config: Optional[AnalysisConfig] = None) -> CliqueAnalysis:
    config = config or AnalysisConfig()
    enumeration = enumerate_maximal_cliques(
        g,
        min_size=config.clique_min_size,
        max_cliques=config.max_cliques,
        time_budget=config.clique_time_budget,
    )
    core = derive_core_set(enumeration, config.clique_target, config.core_clique_limit)

    if config.clique_target == "largest":
        target = max((len(c) for c in enumeration), default=None)
    else:
        target = config.clique_target
    if not core:
        logger.info("no clique of size %s found; core set is empty", target)
    return CliqueAnalysis(enumeration, census(enumeration), core, target)
