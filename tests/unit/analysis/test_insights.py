"""
Unit tests for network insights.
"""

import pytest

from hipsweb.analysis.insights import NetworkInsights, compute_insights
from hipsweb.core.classify import classify_edges


class TestComputeInsights:

    @pytest.fixture
    def insights(self, small_hazards) -> NetworkInsights:
        return compute_insights(small_hazards, classify_edges(small_hazards))

    def test_degrees(self, insights):
        assert insights.avg_degree == pytest.approx(8 / 5)
        assert insights.avg_declared_degree == pytest.approx(4 / 5)
        assert insights.std_dev > 0

    def test_most_connected(self, insights):
        assert insights.most_connected.id == "a"
        assert insights.most_connected.degree == 3
        assert insights.most_connected.declared_degree == 1

    def test_isolated_and_inferred_only(self, insights):
        assert insights.isolated_nodes == ["d", "e"]
        assert insights.inferred_only_nodes == []
        assert set(insights.inferred_edge_node_ids) == {"a", "c"}

    def test_rates(self, insights):
        assert insights.reciprocation_rate == pytest.approx(0.5)
        assert insights.cross_category_ratio == pytest.approx(1.0)
        assert insights.reference_coverage == pytest.approx(0.2)
        assert "d" not in insights.unreferenced_nodes

    def test_top_category(self, insights):
        assert insights.top_category.name == "Meteorological and Hydrological"
        assert insights.top_category.edge_count == 3
        assert insights.top_category.node_ids == ["a"]

    def test_densest_cluster(self, make_hazard):
        hazards = [
            make_hazard("x", cluster="Grid", causes=["y"]),
            make_hazard("y", cluster="Grid", causes=["z"]),
            make_hazard("z", cluster="Grid"),
            make_hazard("p", cluster="Pipes", causes=["q"]),
            make_hazard("q", cluster="Pipes"),
        ]
        insights = compute_insights(hazards, classify_edges(hazards))
        assert insights.densest_cluster.name == "Pipes"
        assert insights.densest_cluster.density == pytest.approx(1.0)

    def test_inferred_only(self, make_hazard):
        hazards = [make_hazard("x", causes=["y"]), make_hazard("y")]
        insights = compute_insights(hazards, classify_edges(hazards))
        assert insights.inferred_only_nodes == ["x", "y"]
        assert insights.reciprocation_rate == 0.0

    def test_empty(self):
        insights = compute_insights([], [])
        assert insights == NetworkInsights()
        assert insights.avg_degree == 0.0

    def test_hazards_without_edges(self, make_hazard):
        insights = compute_insights([make_hazard("x")], [])
        assert insights.cross_category_ratio == 0.0
        assert insights.isolated_nodes == ["x"]
