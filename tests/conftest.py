"""Shared synthetic communication networks.

  - "triangle"  — three people who all wrote to each other
  - "two_stars" — a 5-person office where A and B carry the traffic
  - "office"    — a 4-person inner circle, three outsiders and some noise
"""

import pytest

from coresna.graph import build_graph
from coresna.sanitize import Edge


@pytest.fixture
def triangle_edges():
    return [Edge(1, 2), Edge(2, 1), Edge(1, 3), Edge(2, 3), Edge(3, 1)]


@pytest.fixture
def triangle(triangle_edges):
    return build_graph(triangle_edges)


@pytest.fixture
def two_stars():
    """A and B exchange most mail; C, D, E hang off them.

    Degrees: A=6, B=5, C=2, D=2, E=1.
    """
    return build_graph([
        Edge("A", "B"), Edge("A", "B"), Edge("A", "B"), Edge("B", "A"),
        Edge("A", "C"), Edge("A", "D"), Edge("B", "E"), Edge("C", "D"),
    ])


@pytest.fixture
def office_raw():
    """Raw pairs: a fully connected a/b/c/d circle (two mails each way per
    pair), three outsiders, a sentinel record and a self-addressed one."""
    core = ["a", "b", "c", "d"]
    raw = []
    for u in core:
        for v in core:
            if u != v:
                raw += [(u, v), (u, v)]
    raw += [("e", "a"), ("f", "b"), ("g", "c"), ("e", "f")]
    raw += [("0", "a"), ("a", "a")]
    return raw
