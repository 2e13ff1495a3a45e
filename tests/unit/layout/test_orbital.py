"""
Unit tests for the orbital corridor layout.
"""

import math

import pytest

from hipsweb.core.classify import classify_edges
from hipsweb.core.types import HazardCategory
from hipsweb.layout.orbital import (
    OrbitalConfig,
    OrbitalCorridorLayout,
    Point,
    assign_orbits,
    compute_sectors,
    corridor_anchor,
    detect_corridors,
    fan_offset,
    seeded_jitter,
)


class TestOrbits:

    def test_quantile_buckets(self, make_hazard):
        hazards = [make_hazard(f"h{i}", causes=[f"x{j}" for j in range(10 - i)]) for i in range(10)]
        orbits = assign_orbits(hazards)
        assert [orbits[f"h{i}"] for i in range(10)] == [1, 1, 2, 2, 3, 3, 4, 4, 5, 5]

    def test_isolated_hazards_on_rim(self, make_hazard):
        orbits = assign_orbits([make_hazard("lonely"), make_hazard("busy", causes=["x"])])
        assert orbits == {"busy": 1, "lonely": 6}

    def test_partition(self, tl0405_hazards):
        orbits = assign_orbits(tl0405_hazards)
        assert set(orbits) == {h.id for h in tl0405_hazards}
        assert set(orbits.values()) <= {1, 2, 3, 4, 5, 6}

    def test_most_connected_in_core(self, tl0405_hazards):
        assert assign_orbits(tl0405_hazards)["TL0405"] == 1


class TestSectors:

    def test_proportional_with_padding(self, small_hazards):
        sectors = compute_sectors(small_hazards)
        tech = sectors[HazardCategory.TECHNOLOGICAL]
        geo = sectors[HazardCategory.GEOLOGICAL]

        full_tech = 2 / 5 * 2 * math.pi
        assert tech.span == pytest.approx(full_tech * 0.9)
        assert geo.span == pytest.approx(tech.span / 2)

    def test_empty_category_has_zero_width(self, small_hazards):
        chemical = compute_sectors(small_hazards)[HazardCategory.CHEMICAL]
        assert chemical.span == 0.0
        assert chemical.start_angle == chemical.center

    def test_sectors_cover_circle_without_overlap(self, small_hazards):
        sectors = compute_sectors(small_hazards, padding=0.0)
        nonempty = sorted((s for s in sectors.values() if s.span > 0), key=lambda s: s.start_angle)
        assert sum(s.span for s in nonempty) == pytest.approx(2 * math.pi)
        for left, right in zip(nonempty, nonempty[1:]):
            assert left.end_angle == pytest.approx(right.start_angle)

    def test_empty_input(self):
        sectors = compute_sectors([])
        assert all(s.span == 0.0 for s in sectors.values())


class TestFanOffset:

    def test_centre_for_first_and_singleton(self):
        assert fan_offset(0, 5) == 0.5
        assert fan_offset(0, 1) == 0.5

    def test_alternates_outward(self):
        assert fan_offset(1, 4) == pytest.approx(0.5 - 1 / 6)
        assert fan_offset(2, 4) == pytest.approx(0.5 + 1 / 6)
        assert fan_offset(3, 4) == pytest.approx(0.5 - 1 / 3)

    def test_stays_inside_sector(self):
        for size in range(1, 30):
            for rank in range(size):
                assert 0.0 < fan_offset(rank, size) < 1.0


class TestJitter:

    def test_known_values(self):
        assert seeded_jitter("a") == pytest.approx(-0.806)
        assert seeded_jitter("ab") == pytest.approx(-0.79)

    def test_deterministic_and_bounded(self, tl0405_hazards):
        for hazard in tl0405_hazards:
            value = seeded_jitter(hazard.id)
            assert value == seeded_jitter(hazard.id)
            assert -1.0 <= value < 1.0

    def test_handles_astral_characters(self):
        assert -1.0 <= seeded_jitter("\U0001F30A flood") < 1.0


class TestOrbitalCorridorLayout:

    def test_every_visible_hazard_placed(self, small_hazards):
        result = OrbitalCorridorLayout().compute(small_hazards, classify_edges(small_hazards))
        assert set(result.positions) == {h.id for h in small_hazards}

    def test_radius_within_jitter_band(self, tl0405_hazards):
        config = OrbitalConfig()
        result = OrbitalCorridorLayout(config).compute(tl0405_hazards, classify_edges(tl0405_hazards))
        for node_id, point in result.positions.items():
            orbit = result.orbits[node_id]
            radius = math.hypot(point.x, point.y)
            assert abs(radius - config.orbit_radii[orbit]) <= config.orbit_jitter[orbit] + 1e-9

    def test_idempotent(self, tl0405_hazards):
        edges = classify_edges(tl0405_hazards)
        first = OrbitalCorridorLayout().compute(tl0405_hazards, edges)
        second = OrbitalCorridorLayout().compute(tl0405_hazards, edges)
        assert first.positions == second.positions
        assert first.to_dict() == second.to_dict()

    def test_hidden_categories(self, small_hazards):
        result = OrbitalCorridorLayout().compute(
            small_hazards,
            classify_edges(small_hazards),
            hidden_categories=frozenset({HazardCategory.SOCIETAL}),
        )
        assert "d" not in result.positions

    def test_config_requires_all_orbits(self):
        with pytest.raises(ValueError):
            OrbitalConfig(orbit_radii=(0, 100))


class TestCorridors:

    @pytest.fixture
    def bridged(self, make_hazard):
        """g0 -> t0, t1, t2 and t0 -> g1: four Geological/Technological edges."""
        return [
            make_hazard("g0", "Geological", causes=["t0", "t1", "t2"]),
            make_hazard("g1", "Geological"),
            make_hazard("t0", "Technological", causes=["g1"]),
            make_hazard("t1", "Technological"),
            make_hazard("t2", "Technological"),
        ]

    def test_detected_at_threshold(self, bridged):
        config = OrbitalConfig(edge_threshold=4, bridge_min=2)
        result = OrbitalCorridorLayout(config).compute(bridged, classify_edges(bridged))

        assert len(result.corridors) == 1
        corridor = result.corridors[0]
        assert corridor.categories == (HazardCategory.GEOLOGICAL, HazardCategory.TECHNOLOGICAL)
        assert corridor.edge_count == 4
        assert corridor.bridge_node_ids == ["g0", "t0"]
        assert corridor.label == "Geological \u2014 Technological"
        assert sorted(corridor.edge_keys) == ["g0->t0", "g0->t1", "g0->t2", "t0->g1"]

    def test_below_threshold(self, bridged):
        config = OrbitalConfig(edge_threshold=5)
        assert OrbitalCorridorLayout(config).compute(bridged, classify_edges(bridged)).corridors == []

    def test_bridges_meet_minimum(self, tl0405_hazards):
        config = OrbitalConfig(edge_threshold=10, bridge_min=3)
        hazards = {h.id: h for h in tl0405_hazards}
        edges = classify_edges(tl0405_hazards)
        corridors = detect_corridors(tl0405_hazards, edges, compute_sectors(tl0405_hazards), config=config)

        assert corridors
        for corridor in corridors:
            assert corridor.edge_count >= config.edge_threshold
            for node_id in corridor.bridge_node_ids:
                others = set(corridor.categories) - {hazards[node_id].category}
                cross = sum(
                    1 for e in edges
                    if node_id in (e.source, e.target)
                    and hazards[e.target if e.source == node_id else e.source].category in others
                )
                assert cross >= config.bridge_min

    def test_sorted_and_capped(self, tl0405_hazards):
        config = OrbitalConfig(edge_threshold=1, max_corridors=1)
        corridors = detect_corridors(
            tl0405_hazards, classify_edges(tl0405_hazards), compute_sectors(tl0405_hazards), config=config
        )
        assert len(corridors) == 1
        assert corridors[0].categories == (HazardCategory.GEOLOGICAL, HazardCategory.TECHNOLOGICAL)
        assert corridors[0].edge_count == 39

    def test_same_category_edges_ignored(self, make_hazard):
        hazards = [make_hazard("x", causes=["y"]), make_hazard("y", causes=["x"])]
        config = OrbitalConfig(edge_threshold=1)
        assert detect_corridors(hazards, classify_edges(hazards), compute_sectors(hazards), config=config) == []

    def test_anchor_mean_of_bridges(self):
        positions = {"a": Point(x=0.0, y=10.0), "b": Point(x=10.0, y=0.0)}
        anchor = corridor_anchor(["a", "b", "unplaced"], 0.0, positions)
        assert (anchor.x, anchor.y) == (5.0, 5.0)

    def test_anchor_fallback(self):
        anchor = corridor_anchor([], math.pi / 2, {})
        assert anchor.x == pytest.approx(0.0, abs=1e-9)
        assert anchor.y == pytest.approx(600.0)
