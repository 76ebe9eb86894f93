"""Tests for coresna.config and coresna.sources."""

import pandas as pd
import pytest
from pydantic import ValidationError

from coresna.config import AnalysisConfig
from coresna.errors import MalformedInputError
from coresna.sanitize import Edge, sanitize
from coresna.sources import edges_from_frame, read_edge_csv


class TestAnalysisConfig:
    def test_defaults(self):
        cfg = AnalysisConfig()
        assert cfg.top_k == 50
        assert cfg.clique_target == "largest"
        assert cfg.core_clique_limit == 2
        assert cfg.eigen_tol == 1e-8
        assert cfg.eigen_max_iter == 1000
        assert cfg.sentinels == (0, "0", "")

    def test_numeric_clique_target_string(self):
        assert AnalysisConfig(clique_target="3").clique_target == 3

    @pytest.mark.parametrize("bad", ["biggest", 0, -2])
    def test_bad_clique_target(self, bad):
        with pytest.raises(ValidationError):
            AnalysisConfig(clique_target=bad)

    def test_bounds(self):
        with pytest.raises(ValidationError):
            AnalysisConfig(top_k=-1)
        with pytest.raises(ValidationError):
            AnalysisConfig(eigen_tol=0)

    def test_frozen(self):
        cfg = AnalysisConfig()
        with pytest.raises(ValidationError):
            cfg.top_k = 3

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("CORESNA_TOP_K", "7")
        monkeypatch.setenv("CORESNA_CLIQUE_TARGET", "4")
        monkeypatch.setenv("CORESNA_NORMALIZED_BETWEENNESS", "false")
        cfg = AnalysisConfig.from_env()
        assert cfg.top_k == 7
        assert cfg.clique_target == 4
        assert cfg.normalized_betweenness is False

    def test_from_env_none_clears_optional_field(self, monkeypatch):
        monkeypatch.setenv("CORESNA_CORE_CLIQUE_LIMIT", "none")
        monkeypatch.setenv("CORESNA_MAX_CLIQUES", "None")
        cfg = AnalysisConfig.from_env()
        assert cfg.core_clique_limit is None
        assert cfg.max_cliques is None

    def test_from_env_none_rejected_for_required_field(self, monkeypatch):
        monkeypatch.setenv("CORESNA_TOP_K", "none")
        with pytest.raises(ValidationError):
            AnalysisConfig.from_env()

    def test_overrides_beat_env(self, monkeypatch):
        monkeypatch.setenv("CORESNA_TOP_K", "7")
        assert AnalysisConfig.from_env(top_k=9).top_k == 9


class TestSources:
    def test_edges_from_frame(self):
        df = pd.DataFrame({"from": ["a", "b", None], "to": ["b", "c", "a"]})
        pairs = list(edges_from_frame(df))
        assert pairs == [("a", "b"), ("b", "c"), ("", "a")]
        assert sanitize(pairs) == [Edge("a", "b"), Edge("b", "c")]

    def test_custom_columns(self):
        df = pd.DataFrame({"sender": [1], "recipient": [2]})
        assert list(edges_from_frame(df, "sender", "recipient")) == [("1", "2")]

    def test_missing_column(self):
        df = pd.DataFrame({"from": ["a"]})
        with pytest.raises(MalformedInputError):
            list(edges_from_frame(df))

    def test_read_edge_csv_in_chunks(self, tmp_path):
        path = tmp_path / "edges.csv"
        path.write_text("from,to,subject\nx,y,hi\n0,y,\ny,,re\nz,x,fw\n")
        pairs = list(read_edge_csv(str(path), chunk_size=2, progress=False))
        assert pairs == [("x", "y"), ("0", "y"), ("y", ""), ("z", "x")]
        assert sanitize(pairs) == [Edge("x", "y"), Edge("z", "x")]

    def test_read_edge_csv_missing_column(self, tmp_path):
        path = tmp_path / "edges.csv"
        path.write_text("sender,to\nx,y\n")
        with pytest.raises(MalformedInputError):
            list(read_edge_csv(str(path), progress=False))
