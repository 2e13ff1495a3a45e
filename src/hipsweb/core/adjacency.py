"""
Adjacency indices for the cascade explorer.

Two per-hazard neighbour lists are built from the classified edges:
- effects:  what a hazard causes      (forward, source -> targets)
- triggers: what causes a hazard      (reverse, target -> sources)

Each list is ordered by the neighbour's connection count, most connected
first, so a truncated cascade branch shows the hubs before the long tail.
"""

import logging
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Dict, Iterable, List, Optional

from .types import CausalEdge, Hazard

logger = logging.getLogger(__name__)


class Direction(StrEnum):
    """Cascade expansion direction."""
    EFFECTS = "effects"
    TRIGGERS = "triggers"


@dataclass(frozen=True)
class Neighbor:
    id: str
    declared: bool

    def to_dict(self) -> Dict[str, object]:
        return {"id": self.id, "declared": self.declared}


@dataclass(frozen=True)
class AdjacencyIndex:
    """Forward and reverse neighbour lists plus the hazard lookup."""
    effects: Dict[str, List[Neighbor]] = field(default_factory=dict)
    triggers: Dict[str, List[Neighbor]] = field(default_factory=dict)
    hazards: Dict[str, Hazard] = field(default_factory=dict)

    def neighbors(self, node_id: str, direction: Direction) -> List[Neighbor]:
        index = self.effects if direction is Direction.EFFECTS else self.triggers
        return index.get(node_id, [])

    def get_hazard(self, node_id: str) -> Optional[Hazard]:
        return self.hazards.get(node_id)

    def to_dict(self) -> Dict[str, Dict[str, List[Dict[str, object]]]]:
        return {
            "effects": {k: [n.to_dict() for n in v] for k, v in self.effects.items()},
            "triggers": {k: [n.to_dict() for n in v] for k, v in self.triggers.items()},
        }


def build_adjacency_index(hazards: Iterable[Hazard], edges: Iterable[CausalEdge]) -> AdjacencyIndex:
    """
    Build effects/triggers indices from classified edges.

    Sorting is stable, so neighbours with equal connection counts keep the
    order in which their edges were classified.
    """
    hazard_map = {hazard.id: hazard for hazard in hazards}

    effects: Dict[str, List[Neighbor]] = {}
    triggers: Dict[str, List[Neighbor]] = {}

    for edge in edges:
        effects.setdefault(edge.source, []).append(Neighbor(edge.target, edge.declared))
        triggers.setdefault(edge.target, []).append(Neighbor(edge.source, edge.declared))

    def connectivity(neighbor: Neighbor) -> int:
        hazard = hazard_map.get(neighbor.id)
        return hazard.connection_count if hazard else 0

    for index in (effects, triggers):
        for node_id, neighbors in index.items():
            index[node_id] = sorted(neighbors, key=connectivity, reverse=True)

    logger.debug(f"Built adjacency index: {len(effects)} sources, {len(triggers)} targets")
    return AdjacencyIndex(effects=effects, triggers=triggers, hazards=hazard_map)
