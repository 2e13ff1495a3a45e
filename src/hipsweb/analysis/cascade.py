"""
Cascade Tree Builder.

Expands a bounded-depth, bounded-fan-out tree of consequences (effects) or
precursors (triggers) from a root hazard. The causal network is full of
cycles, so every branch tracks the ids on its own root-to-node path: a
hazard met again on that path becomes a "ghost" leaf instead of being
expanded a second time.
"""

import logging
from typing import Iterator, List, Optional, Set

from pydantic import BaseModel, Field

from ..config import DEFAULT_CASCADE_DEPTH, MAX_CASCADE_CHILDREN, MAX_CASCADE_DEPTH
from ..core.adjacency import AdjacencyIndex, Direction
from ..core.types import Hazard, HazardCategory

logger = logging.getLogger(__name__)


class CascadeNode(BaseModel):
    """
    One hazard in a cascade tree.

    `truncated` counts neighbours left out by the fan-out cap and
    `total_children` is the full neighbour count before the cap. Both are 0
    for ghosts and for nodes at the depth limit, which are not expanded.
    """
    id: str
    label: str
    category: HazardCategory
    cluster_name: str = ""
    connection_count: int = 0
    children: List["CascadeNode"] = Field(default_factory=list)
    ghost: bool = False
    truncated: int = 0
    total_children: int = 0
    expanded: bool = False
    declared: Optional[bool] = None

    def iter_nodes(self) -> Iterator["CascadeNode"]:
        """Pre-order walk of this node and its descendants."""
        yield self
        for child in self.children:
            yield from child.iter_nodes()

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "label": self.label,
            "typeName": self.category.value,
            "clusterName": self.cluster_name,
            "connectionCount": self.connection_count,
            "ghost": self.ghost,
            "truncated": self.truncated,
            "totalChildren": self.total_children,
            "expanded": self.expanded,
            "declared": self.declared,
            "children": [child.to_dict() for child in self.children],
        }


class BidirectionalCascade(BaseModel):
    """Root hazard with its effects tree and its triggers tree."""
    root: Hazard
    effects: CascadeNode
    triggers: CascadeNode

    def to_dict(self) -> dict:
        return {
            "root": {"id": self.root.id, "label": self.root.display_label},
            "effects": self.effects.to_dict(),
            "triggers": self.triggers.to_dict(),
        }


class CascadeConfig(BaseModel):
    """Depth and fan-out limits for cascade expansion."""
    default_depth: int = Field(default=DEFAULT_CASCADE_DEPTH, ge=0)
    max_depth: int = Field(default=MAX_CASCADE_DEPTH, ge=0)
    max_children: int = Field(default=MAX_CASCADE_CHILDREN, ge=1)


class CascadeTreeBuilder:
    """
    Builds cascade trees over an adjacency index.

    The builder holds no traversal state between calls; every `build` works
    on its own copy of the visited set.
    """

    def __init__(self, index: AdjacencyIndex, config: Optional[CascadeConfig] = None):
        self.index = index
        self.config = config or CascadeConfig()

    def clamp_depth(self, depth: Optional[int]) -> int:
        if depth is None:
            depth = self.config.default_depth
        return max(0, min(depth, self.config.max_depth))

    def build(
        self,
        root_id: str,
        direction: Direction,
        depth: Optional[int] = None,
        visited: Optional[Set[str]] = None,
    ) -> Optional[CascadeNode]:
        """
        Expand `root_id` in `direction` up to `depth` levels.

        Ids in `visited` count as already on the path, so a neighbour with one
        of those ids becomes a ghost. The caller's set is never mutated.
        Returns None when the root is not a known hazard.
        """
        root = self.index.get_hazard(root_id)
        if root is None:
            logger.debug(f"Cascade root not found: {root_id}")
            return None

        max_depth = self.clamp_depth(depth)
        path = set(visited) if visited else set()
        return self._expand(root, direction, 0, max_depth, path, declared=None)

    def build_bidirectional(
        self,
        root_id: str,
        depth: Optional[int] = None,
        visited: Optional[Set[str]] = None,
    ) -> Optional[BidirectionalCascade]:
        """Effects and triggers trees for one root, from independent visited sets."""
        root = self.index.get_hazard(root_id)
        if root is None:
            return None

        seed = set(visited) if visited else set()
        effects = self.build(root_id, Direction.EFFECTS, depth, set(seed))
        triggers = self.build(root_id, Direction.TRIGGERS, depth, set(seed))
        return BidirectionalCascade(root=root, effects=effects, triggers=triggers)

    def _expand(
        self,
        hazard: Hazard,
        direction: Direction,
        level: int,
        max_depth: int,
        path: Set[str],
        declared: Optional[bool],
    ) -> CascadeNode:
        node = CascadeNode(
            id=hazard.id,
            label=hazard.display_label,
            category=hazard.category,
            cluster_name=hazard.cluster_name,
            connection_count=hazard.connection_count,
            declared=declared,
        )

        if hazard.id in path:
            node.ghost = True
            return node
        if level >= max_depth:
            return node

        neighbors = [
            n for n in self.index.neighbors(hazard.id, direction)
            if self.index.get_hazard(n.id) is not None
        ]
        shown = neighbors[:self.config.max_children]

        node.expanded = True
        node.total_children = len(neighbors)
        node.truncated = len(neighbors) - len(shown)

        path.add(hazard.id)
        try:
            for neighbor in shown:
                child = self.index.get_hazard(neighbor.id)
                node.children.append(
                    self._expand(child, direction, level + 1, max_depth, path, neighbor.declared)
                )
        finally:
            path.discard(hazard.id)
        return node
