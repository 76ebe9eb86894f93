"""Tests for coresna.metrics — degree, betweenness, eigenvector, coreness."""

import math

import pytest

from coresna.config import AnalysisConfig
from coresna.errors import NonConvergentMetricWarning
from coresna.graph import Graph, build_graph
from coresna.metrics import (
    betweenness,
    communities,
    compute_metrics,
    coreness,
    degree,
    eigenvector,
    in_degree,
    out_degree,
    peel_order,
)
from coresna.sanitize import Edge


def _graph(*pairs):
    return build_graph([Edge(u, v) for u, v in pairs])


class TestDegree:
    def test_triangle_degrees(self, triangle):
        assert degree(triangle) == {1: 4, 2: 3, 3: 3}

    def test_sum_is_twice_edge_count(self, two_stars):
        assert sum(degree(two_stars).values()) == 2 * two_stars.number_of_edges()

    def test_parallel_edges_each_count(self, two_stars):
        assert degree(two_stars)["A"] == 6
        assert out_degree(two_stars)["A"] == 5
        assert in_degree(two_stars)["B"] == 3

    def test_in_plus_out(self, two_stars):
        ins, outs, both = in_degree(two_stars), out_degree(two_stars), degree(two_stars)
        for n in two_stars.nodes:
            assert ins[n] + outs[n] == both[n]


class TestBetweenness:
    def test_triangle(self, triangle):
        # The only shortest path 3 -> 2 runs through 1.
        scores = betweenness(triangle)
        assert scores[1] == pytest.approx(0.5)
        assert scores[2] == pytest.approx(0.0)
        assert scores[3] == pytest.approx(0.0)

    def test_unnormalized(self, triangle):
        assert betweenness(triangle, normalized=False)[1] == pytest.approx(1.0)

    def test_directed_path(self):
        g = _graph(("a", "b"), ("b", "c"))
        scores = betweenness(g, normalized=False)
        assert scores == pytest.approx({"a": 0.0, "b": 1.0, "c": 0.0})

    def test_parallel_edges_are_one_hop(self):
        single = betweenness(_graph(("a", "b"), ("b", "c")))
        multi = betweenness(_graph(("a", "b"), ("a", "b"), ("b", "c"), ("b", "c")))
        assert single == pytest.approx(multi)

    def test_disconnected_pairs_contribute_zero(self):
        scores = betweenness(_graph((1, 2), (3, 4)))
        assert all(v == 0.0 for v in scores.values())

    def test_non_negative(self, two_stars):
        assert all(v >= 0 for v in betweenness(two_stars).values())


class TestEigenvector:
    def test_single_edge_pair_equal_positive(self):
        result = eigenvector(_graph(("a", "b"), ("b", "a")))
        assert result.converged
        assert result["a"] == pytest.approx(result["b"])
        assert result["a"] > 0
        assert result["a"] == pytest.approx(1 / math.sqrt(2))

    def test_unit_norm(self, two_stars):
        values = eigenvector(two_stars).values
        assert math.sqrt(sum(v * v for v in values.values())) == pytest.approx(1.0)
        assert all(0.0 <= v <= 1.0 for v in values.values())

    def test_triangle_uniform(self, triangle):
        values = eigenvector(triangle).values
        assert values[1] == pytest.approx(values[2])
        assert values[2] == pytest.approx(values[3])

    def test_star_center_highest(self):
        g = _graph(("hub", "x"), ("y", "hub"), ("hub", "z"))
        result = eigenvector(g)
        assert result.converged
        assert result["hub"] > result["x"]
        assert result["x"] == pytest.approx(result["y"])

    def test_non_convergence_is_a_flag_not_an_error(self):
        g = _graph((1, 2), (2, 3))
        with pytest.warns(NonConvergentMetricWarning):
            result = eigenvector(g, max_iter=1)
        assert not result.converged
        assert result.iterations == 1
        assert set(result.values) == {1, 2, 3}
        assert result[2] > result[1]

    def test_empty_graph(self):
        result = eigenvector(build_graph([]))
        assert result.values == {}
        assert result.converged


class TestCoreness:
    def test_triangle_is_2_core(self, triangle):
        assert coreness(triangle) == {1: 2, 2: 2, 3: 2}

    def test_pendant_node(self):
        g = _graph((1, 2), (2, 3), (3, 1), (4, 1))
        assert coreness(g) == {1: 2, 2: 2, 3: 2, 4: 1}

    def test_peel_order_tie_break_by_node_id(self):
        g = _graph((1, 2), (2, 3), (3, 1), (4, 1))
        assert peel_order(g) == [(4, 1), (1, 2), (2, 2), (3, 2)]

    def test_levels_non_decreasing(self, two_stars):
        levels = [level for _, level in peel_order(two_stars)]
        assert levels == sorted(levels)

    def test_multiplicity_ignored(self):
        g = _graph(("a", "b"), ("a", "b"), ("b", "a"))
        assert coreness(g) == {"a": 1, "b": 1}

    def test_isolated_nodes_are_zero_core(self):
        g = Graph(["a", "b"], [])
        assert coreness(g) == {"a": 0, "b": 0}


class TestCommunities:
    def test_two_triangles_split(self):
        g = _graph(
            (1, 2), (2, 3), (3, 1),
            (4, 5), (5, 6), (6, 4),
            (3, 4),
        )
        parts = communities(g)
        assert parts[1] == parts[2] == parts[3]
        assert parts[4] == parts[5] == parts[6]
        assert parts[1] != parts[4]

    def test_edgeless_graph(self):
        parts = communities(Graph(["a", "b"], []))
        assert parts["a"] != parts["b"]


class TestComputeMetrics:
    def test_report_covers_every_node(self, two_stars):
        report = compute_metrics(two_stars)
        assert set(report.nodes) == set(two_stars.nodes)
        assert report["A"].degree == 6
        assert report.eigenvector_converged

    def test_threaded_matches_sequential(self, two_stars):
        seq = compute_metrics(two_stars, AnalysisConfig(workers=1))
        par = compute_metrics(two_stars, workers=3)
        for n in two_stars.nodes:
            assert seq[n].degree == par[n].degree
            assert seq[n].coreness == par[n].coreness
            assert seq[n].betweenness == pytest.approx(par[n].betweenness)
            assert seq[n].eigenvector == pytest.approx(par[n].eigenvector)

    def test_non_convergence_flagged_in_report(self, two_stars):
        cfg = AnalysisConfig(eigen_max_iter=1, workers=3)
        with pytest.warns(NonConvergentMetricWarning):
            report = compute_metrics(two_stars, cfg)
        assert report.eigenvector_converged is False
        assert report.eigenvector_iterations == 1
        assert set(report.nodes) == set(two_stars.nodes)

    def test_config_reaches_the_metrics(self, triangle):
        report = compute_metrics(triangle, AnalysisConfig(normalized_betweenness=False))
        assert report[1].betweenness == pytest.approx(1.0)

    def test_to_frame(self, triangle):
        df = compute_metrics(triangle).to_frame()
        assert list(df.columns) == ["degree", "betweenness", "eigenvector", "coreness"]
        assert df.loc[1, "degree"] == 4
        assert len(df) == 3

    def test_metric_column(self, triangle):
        assert compute_metrics(triangle).metric("degree") == degree(triangle)
