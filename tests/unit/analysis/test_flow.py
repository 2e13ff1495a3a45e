"""
Unit tests for the category flow matrix.
"""

from hipsweb.analysis.flow import compute_flow_matrix
from hipsweb.core.classify import classify_edges


class TestFlowMatrix:

    def test_categories_sorted(self, small_hazards):
        flow = compute_flow_matrix(small_hazards, classify_edges(small_hazards))
        assert flow.categories == [
            "Geological",
            "Meteorological and Hydrological",
            "Societal",
            "Technological",
        ]

    def test_counts(self, small_hazards):
        flow = compute_flow_matrix(small_hazards, classify_edges(small_hazards))
        assert flow.count("Meteorological and Hydrological", "Technological") == 1
        assert flow.count("Technological", "Geological") == 1
        assert flow.count("Geological", "Meteorological and Hydrological") == 1
        assert flow.count("Technological", "Meteorological and Hydrological") == 0
        assert flow.count("Chemical", "Geological") == 0
        assert sum(map(sum, flow.matrix)) == 4

    def test_cells_hold_edge_keys(self, small_hazards):
        flow = compute_flow_matrix(small_hazards, classify_edges(small_hazards))
        row = flow.categories.index("Technological")
        col = flow.categories.index("Geological")
        assert flow.cells[(row, col)] == ["b->c"]
        assert flow.to_dict()["cells"][f"{row},{col}"] == ["b->c"]

    def test_empty(self):
        flow = compute_flow_matrix([], [])
        assert flow.categories == []
        assert flow.matrix == []
