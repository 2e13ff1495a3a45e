"""
Orbital Corridor Layout.

Positions hazards on concentric orbits by connectivity:
    Orbit 1 (core):  top fifth of connected hazards
    Orbits 2-5:      the remaining connectivity quintiles
    Orbit 6 (rim):   hazards with no connections

Each category owns an angular sector sized by its membership. Within an
(orbit, category) cell the most connected hazard sits at the sector centre
and the rest fan outward alternately. Radii are jittered by a hash of the
hazard id, so a hazard lands in the same place on every re-layout.

Dense cross-category corridors ("hyper-routes") are detected from the
visible edges and returned alongside the positions.
"""

import logging
import math
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple

from pydantic import BaseModel, Field

from ..config import (
    CATEGORY_ORDER,
    CONNECTED_ORBITS,
    HYPER_ROUTE_BRIDGE_MIN,
    HYPER_ROUTE_EDGE_THRESHOLD,
    HYPER_ROUTE_LABEL_FALLBACK_RADIUS,
    ISOLATED_ORBIT,
    MAX_HYPER_ROUTES,
    ORBIT_JITTER,
    ORBIT_RADII,
    SECTOR_PADDING,
    category_style,
)
from ..core.types import CausalEdge, Hazard, HazardCategory

logger = logging.getLogger(__name__)


class Point(BaseModel):
    x: float
    y: float


class Sector(BaseModel):
    """Angular sector in radians. Empty categories get start == end == center."""
    start_angle: float
    end_angle: float
    center: float

    @property
    def span(self) -> float:
        return self.end_angle - self.start_angle


class Corridor(BaseModel):
    """A category pair with heavy cross-category traffic."""
    categories: Tuple[HazardCategory, HazardCategory]
    edge_count: int
    bridge_node_ids: List[str]
    edge_keys: List[str]
    label: str
    mid_angle: float
    anchor: Point


class OrbitalConfig(BaseModel):
    """Tunables for the orbital layout and corridor detection."""
    orbit_radii: Tuple[float, ...] = Field(default=ORBIT_RADII, min_length=ISOLATED_ORBIT + 1)
    orbit_jitter: Tuple[float, ...] = Field(default=ORBIT_JITTER, min_length=ISOLATED_ORBIT + 1)
    sector_padding: float = Field(default=SECTOR_PADDING, ge=0.0, lt=0.5)
    edge_threshold: int = Field(default=HYPER_ROUTE_EDGE_THRESHOLD, ge=1)
    bridge_min: int = Field(default=HYPER_ROUTE_BRIDGE_MIN, ge=1)
    max_corridors: int = Field(default=MAX_HYPER_ROUTES, ge=0)
    label_fallback_radius: float = HYPER_ROUTE_LABEL_FALLBACK_RADIUS


@dataclass
class OrbitalLayout:
    orbits: Dict[str, int]
    sectors: Dict[HazardCategory, Sector]
    positions: Dict[str, Point]
    corridors: List[Corridor]

    def to_dict(self) -> Dict[str, object]:
        return {
            "orbits": dict(self.orbits),
            "sectors": {k.value: v.model_dump() for k, v in self.sectors.items()},
            "positions": {k: v.model_dump() for k, v in self.positions.items()},
            "corridors": [c.model_dump(mode="json") for c in self.corridors],
        }


# =============================================================================
# Deterministic Jitter
# =============================================================================

def _utf16_units(text: str) -> Iterable[int]:
    for ch in text:
        code = ord(ch)
        if code > 0xFFFF:
            code -= 0x10000
            yield 0xD800 + (code >> 10)
            yield 0xDC00 + (code & 0x3FF)
        else:
            yield code


def seeded_jitter(node_id: str) -> float:
    """
    Hash a hazard id to a stable value in [-1, 1).

    32-bit `h * 31 + c` over UTF-16 code units, so ids hash identically to
    the browser renderer that consumes these positions.
    """
    h = 0
    for unit in _utf16_units(node_id):
        h = (h * 31 + unit) & 0xFFFFFFFF
    return ((h & 0x7FFFFFFF) % 1000) / 500 - 1


# =============================================================================
# Orbits & Sectors
# =============================================================================

def assign_orbits(hazards: Iterable[Hazard]) -> Dict[str, int]:
    """
    Map hazard id -> orbit (1-6).

    Connected hazards are ranked by connection count and split into five
    buckets of ceil(n / 5); zero-connection hazards go to orbit 6.
    """
    connected: List[Hazard] = []
    isolated: List[Hazard] = []
    for hazard in hazards:
        (connected if hazard.connection_count > 0 else isolated).append(hazard)

    connected.sort(key=lambda h: h.connection_count, reverse=True)
    bucket_size = math.ceil(len(connected) / CONNECTED_ORBITS)

    orbits: Dict[str, int] = {}
    for i, hazard in enumerate(connected):
        orbits[hazard.id] = min(i // bucket_size + 1, CONNECTED_ORBITS)
    for hazard in isolated:
        orbits[hazard.id] = ISOLATED_ORBIT
    return orbits


def compute_sectors(
    hazards: Iterable[Hazard],
    padding: float = SECTOR_PADDING,
    category_order: List[HazardCategory] = CATEGORY_ORDER,
) -> Dict[HazardCategory, Sector]:
    """Angular sector per category, proportional to its member count."""
    counts: Dict[HazardCategory, int] = {c: 0 for c in category_order}
    total = 0
    for hazard in hazards:
        total += 1
        if hazard.category in counts:
            counts[hazard.category] += 1
    total = total or 1

    sectors: Dict[HazardCategory, Sector] = {}
    angle = 0.0
    for category in category_order:
        count = counts[category]
        if count == 0:
            sectors[category] = Sector(start_angle=angle, end_angle=angle, center=angle)
            continue
        arc = count / total * 2 * math.pi
        pad = arc * padding
        sectors[category] = Sector(
            start_angle=angle + pad,
            end_angle=angle + arc - pad,
            center=angle + arc / 2,
        )
        angle += arc
    return sectors


def fan_offset(rank: int, group_size: int) -> float:
    """
    Fractional position within a sector for the `rank`-th most connected
    member: 0.5 is the centre, odd ranks step left, even ranks step right.
    """
    if group_size == 1 or rank == 0:
        return 0.5
    half = math.ceil(group_size / 2)
    step = math.ceil(rank / 2) / (half + 1) * 0.5
    return 0.5 - step if rank % 2 == 1 else 0.5 + step


def place_nodes(
    hazards: Iterable[Hazard],
    orbits: Dict[str, int],
    sectors: Dict[HazardCategory, Sector],
    config: OrbitalConfig,
) -> Dict[str, Point]:
    groups: Dict[Tuple[int, HazardCategory], List[Hazard]] = defaultdict(list)
    for hazard in hazards:
        groups[(orbits[hazard.id], hazard.category)].append(hazard)

    positions: Dict[str, Point] = {}
    for (orbit, category), group in groups.items():
        sector = sectors.get(category)
        if sector is None:
            continue

        group.sort(key=lambda h: h.connection_count, reverse=True)
        radius = config.orbit_radii[orbit]
        jitter = config.orbit_jitter[orbit]

        for rank, hazard in enumerate(group):
            angle = sector.start_angle + sector.span * fan_offset(rank, len(group))
            r = radius + jitter * seeded_jitter(hazard.id)
            positions[hazard.id] = Point(x=r * math.cos(angle), y=r * math.sin(angle))
    return positions


# =============================================================================
# Corridor Detection
# =============================================================================

def _pair_key(a: HazardCategory, b: HazardCategory) -> Tuple[HazardCategory, HazardCategory]:
    return (a, b) if a.value < b.value else (b, a)


def detect_corridors(
    hazards: Iterable[Hazard],
    edges: Iterable[CausalEdge],
    sectors: Dict[HazardCategory, Sector],
    positions: Optional[Dict[str, Point]] = None,
    config: Optional[OrbitalConfig] = None,
) -> List[Corridor]:
    """
    Find category pairs whose cross-category edge count reaches the
    threshold, with the hazards that individually bridge them.
    """
    config = config or OrbitalConfig()
    positions = positions or {}
    hazard_map = {hazard.id: hazard for hazard in hazards}

    pair_counts: Dict[Tuple[HazardCategory, HazardCategory], int] = {}
    pair_edges: Dict[Tuple[HazardCategory, HazardCategory], List[str]] = defaultdict(list)
    node_cross: Dict[str, Dict[HazardCategory, int]] = {}

    for edge in edges:
        source = hazard_map.get(edge.source)
        target = hazard_map.get(edge.target)
        if source is None or target is None or source.category is target.category:
            continue

        key = _pair_key(source.category, target.category)
        pair_counts[key] = pair_counts.get(key, 0) + 1
        pair_edges[key].append(edge.key)

        for node_id, other in ((source.id, target.category), (target.id, source.category)):
            per_node = node_cross.setdefault(node_id, {})
            per_node[other] = per_node.get(other, 0) + 1

    candidates: List[Corridor] = []
    for (first, second), count in pair_counts.items():
        if count < config.edge_threshold:
            continue

        bridges = []
        for node_id, cross in node_cross.items():
            category = hazard_map[node_id].category
            if category is first and cross.get(second, 0) >= config.bridge_min:
                bridges.append(node_id)
            elif category is second and cross.get(first, 0) >= config.bridge_min:
                bridges.append(node_id)

        s1, s2 = sectors.get(first), sectors.get(second)
        mid_angle = (s1.center + s2.center) / 2 if s1 and s2 else 0.0

        candidates.append(Corridor(
            categories=(first, second),
            edge_count=count,
            bridge_node_ids=bridges,
            edge_keys=pair_edges[(first, second)],
            label=f"{category_style(first).short} \u2014 {category_style(second).short}",
            mid_angle=mid_angle,
            anchor=corridor_anchor(bridges, mid_angle, positions, config.label_fallback_radius),
        ))

    candidates.sort(key=lambda c: c.edge_count, reverse=True)
    return candidates[:config.max_corridors]


def corridor_anchor(
    bridge_ids: List[str],
    mid_angle: float,
    positions: Dict[str, Point],
    fallback_radius: float = HYPER_ROUTE_LABEL_FALLBACK_RADIUS,
) -> Point:
    """Mean bridge-node position, or a point on `mid_angle` when none is placed."""
    placed = [positions[node_id] for node_id in bridge_ids if node_id in positions]
    if placed:
        return Point(
            x=sum(p.x for p in placed) / len(placed),
            y=sum(p.y for p in placed) / len(placed),
        )
    return Point(x=fallback_radius * math.cos(mid_angle), y=fallback_radius * math.sin(mid_angle))


# =============================================================================
# Facade
# =============================================================================

class OrbitalCorridorLayout:
    """Orbit assignment, sector allocation, placement and corridor detection."""

    def __init__(self, config: Optional[OrbitalConfig] = None):
        self.config = config or OrbitalConfig()

    def compute(
        self,
        hazards: Iterable[Hazard],
        edges: Iterable[CausalEdge],
        hidden_categories: FrozenSet[HazardCategory] = frozenset(),
    ) -> OrbitalLayout:
        visible = [h for h in hazards if h.category not in hidden_categories]
        visible_ids = {h.id for h in visible}
        visible_edges = [e for e in edges if e.source in visible_ids and e.target in visible_ids]

        orbits = assign_orbits(visible)
        sectors = compute_sectors(visible, padding=self.config.sector_padding)
        positions = place_nodes(visible, orbits, sectors, self.config)
        corridors = detect_corridors(visible, visible_edges, sectors, positions, self.config)

        logger.debug(
            f"Orbital layout: {len(positions)} positioned, {len(corridors)} corridors "
            f"from {len(visible_edges)} visible edges"
        )
        return OrbitalLayout(orbits=orbits, sectors=sectors, positions=positions, corridors=corridors)
