"""
Hierarchical Edge Bundling Layout.

Places every hazard on a ring and routes each causal edge through the
containment hierarchy, so links between the same two regions of the ring
share a common backbone.

Tree structure:
    root
      category      (curated order, empty categories omitted)
        subcategory (alphabetical, empty subcategories omitted)
          hazard    (connection count, descending)

Leaf angles come from a cluster (dendrogram) layout whose separation
function widens the gaps at subcategory and category boundaries. Each edge's
control points are the tree path source -> LCA -> target, straightened
towards the chord by the bundling tension.
"""

import logging
import math
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Callable, Dict, FrozenSet, Iterable, Iterator, List, Optional, Tuple

from pydantic import BaseModel, Field

from ..config import (
    CATEGORY_ORDER,
    CLUSTER_GAP_MULTIPLIER,
    DEFAULT_RING_RADIUS,
    DEFAULT_TENSION,
    SINGLE_LEAF_ARC_SPACING,
    TYPE_GAP_MULTIPLIER,
    category_style,
)
from ..core.classify import filter_edges
from ..core.types import CausalEdge, Hazard, HazardCategory

logger = logging.getLogger(__name__)

Coordinate = Tuple[float, float]


class TreeLevel(StrEnum):
    ROOT = "root"
    CATEGORY = "category"
    SUBCATEGORY = "subcategory"
    HAZARD = "hazard"


@dataclass(eq=False)
class TreeNode:
    """
    A node in the containment tree.

    After layout, `x` is the angle in degrees and `y` the distance from the
    centre.
    """
    name: str
    label: str
    level: TreeLevel
    category: Optional[HazardCategory] = None
    connection_count: int = 0
    children: List["TreeNode"] = field(default_factory=list)
    parent: Optional["TreeNode"] = field(default=None, repr=False)
    x: float = 0.0
    y: float = 0.0

    def add_child(self, child: "TreeNode") -> "TreeNode":
        child.parent = self
        self.children.append(child)
        return child

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def iter_post_order(self) -> Iterator["TreeNode"]:
        """Children (left to right) before their parent."""
        for child in self.children:
            yield from child.iter_post_order()
        yield self

    def leaves(self) -> List["TreeNode"]:
        return [node for node in self.iter_post_order() if node.is_leaf]

    def ancestors(self) -> List["TreeNode"]:
        """This node followed by each parent up to the root."""
        chain = []
        node: Optional[TreeNode] = self
        while node is not None:
            chain.append(node)
            node = node.parent
        return chain

    def path_to(self, other: "TreeNode") -> List["TreeNode"]:
        """Nodes from this node up to the lowest common ancestor and down to `other`."""
        other_chain = other.ancestors()
        other_set = {id(node) for node in other_chain}

        up: List[TreeNode] = []
        ancestor: Optional[TreeNode] = self
        while ancestor is not None and id(ancestor) not in other_set:
            up.append(ancestor)
            ancestor = ancestor.parent
        if ancestor is None:
            raise ValueError(f"{self.name} and {other.name} are not in the same tree")
        up.append(ancestor)

        down: List[TreeNode] = []
        for node in other_chain:
            if node is ancestor:
                break
            down.append(node)
        return up + list(reversed(down))

    def find_leaf(self, name: str) -> Optional["TreeNode"]:
        for leaf in self.leaves():
            if leaf.name == name:
                return leaf
        return None

    def to_dict(self) -> Dict[str, object]:
        data: Dict[str, object] = {
            "name": self.name,
            "label": self.label,
            "level": self.level.value,
            "angle": self.x,
            "radius": self.y,
        }
        if self.category is not None:
            data["category"] = self.category.value
            data["color"] = category_style(self.category).color
        if self.level is TreeLevel.HAZARD:
            data["connectionCount"] = self.connection_count
        if self.children:
            data["children"] = [child.to_dict() for child in self.children]
        return data


class RadialPosition(BaseModel):
    angle: float
    radius: float


class Arc(BaseModel):
    """Angular extent (degrees) of a category or subcategory on the ring."""
    start_angle: float
    end_angle: float
    center_angle: float
    label: str
    color: str
    node_count: int


class BundledEdge(BaseModel):
    source: str
    target: str
    declared: bool
    path: List[str]
    control_points: List[Coordinate]


class BundlingConfig(BaseModel):
    """Tunables for the hierarchical bundling layout."""
    tension: float = Field(default=DEFAULT_TENSION, ge=0.0, le=1.0)
    radius: float = Field(default=DEFAULT_RING_RADIUS, gt=0.0)
    cluster_gap: float = Field(default=CLUSTER_GAP_MULTIPLIER, gt=0.0)
    type_gap: float = Field(default=TYPE_GAP_MULTIPLIER, gt=0.0)


@dataclass
class HierarchyLayout:
    tree: TreeNode
    leaf_positions: Dict[str, RadialPosition]
    category_arcs: Dict[HazardCategory, Arc]
    subcategory_arcs: Dict[str, Arc]
    edge_paths: List[BundledEdge]
    tension: float

    def to_dict(self) -> Dict[str, object]:
        return {
            "tension": self.tension,
            "tree": self.tree.to_dict(),
            "leafPositions": {k: v.model_dump() for k, v in self.leaf_positions.items()},
            "categoryArcs": {k.value: v.model_dump() for k, v in self.category_arcs.items()},
            "subcategoryArcs": {k: v.model_dump() for k, v in self.subcategory_arcs.items()},
            "edgePaths": [e.model_dump() for e in self.edge_paths],
        }


# =============================================================================
# Tree Construction
# =============================================================================

def build_containment_tree(
    hazards: Iterable[Hazard],
    hidden_categories: FrozenSet[HazardCategory] = frozenset(),
    category_order: List[HazardCategory] = CATEGORY_ORDER,
) -> TreeNode:
    """Group hazards into root -> category -> subcategory -> hazard."""
    grouped: Dict[HazardCategory, Dict[str, List[Hazard]]] = {c: {} for c in category_order}
    for hazard in hazards:
        if hazard.category in hidden_categories:
            continue
        grouped.setdefault(hazard.category, {}).setdefault(hazard.subcategory, []).append(hazard)

    root = TreeNode(name="root", label="root", level=TreeLevel.ROOT)
    for category in category_order:
        clusters = grouped.get(category)
        if not clusters:
            continue

        category_node = root.add_child(TreeNode(
            name=f"type:{category.value}",
            label=category.value,
            level=TreeLevel.CATEGORY,
            category=category,
        ))
        for cluster_name in sorted(clusters):
            cluster_node = category_node.add_child(TreeNode(
                name=f"cluster:{category.value}:{cluster_name}",
                label=cluster_name,
                level=TreeLevel.SUBCATEGORY,
                category=category,
            ))
            members = sorted(clusters[cluster_name], key=lambda h: h.connection_count, reverse=True)
            for hazard in members:
                cluster_node.add_child(TreeNode(
                    name=hazard.id,
                    label=hazard.display_label,
                    level=TreeLevel.HAZARD,
                    category=category,
                    connection_count=hazard.connection_count,
                ))
    return root


# =============================================================================
# Cluster Layout
# =============================================================================

Separation = Callable[[TreeNode, TreeNode], float]


def boundary_separation(cluster_gap: float = CLUSTER_GAP_MULTIPLIER,
                        type_gap: float = TYPE_GAP_MULTIPLIER) -> Separation:
    """
    Separation between adjacent leaves: 1 for siblings, `cluster_gap`
    across a subcategory boundary, `type_gap` across a category boundary.
    """
    def separation(a: TreeNode, b: TreeNode) -> float:
        if a.parent is b.parent:
            return 1.0
        a_grand = a.parent.parent if a.parent else None
        b_grand = b.parent.parent if b.parent else None
        if a_grand is b_grand:
            return cluster_gap
        return type_gap
    return separation


def cluster_layout(root: TreeNode, width: float, height: float, separation: Separation) -> TreeNode:
    """
    Dendrogram layout: leaves at equal depth, spaced by `separation`.

    Internal nodes sit at the mean x of their children and at a depth one
    above their deepest child. Coordinates are then normalized so x spans
    [0, width) with half a separation of margin at each end, and y runs from
    0 at the root to `height` at the leaves.
    """
    previous: Optional[TreeNode] = None
    x = 0.0
    for node in root.iter_post_order():
        if node.children:
            node.x = sum(child.x for child in node.children) / len(node.children)
            node.y = 1 + max(child.y for child in node.children)
        else:
            if previous is not None:
                x += separation(node, previous)
                node.x = x
            else:
                node.x = 0.0
            node.y = 0.0
            previous = node

    left = _leaf_left(root)
    right = _leaf_right(root)
    x0 = left.x - separation(left, right) / 2
    x1 = right.x + separation(right, left) / 2
    span = x1 - x0
    root_depth = root.y

    for node in root.iter_post_order():
        node.x = (node.x - x0) / span * width
        node.y = (1 - (node.y / root_depth if root_depth else 1)) * height
    return root


def _leaf_left(node: TreeNode) -> TreeNode:
    while node.children:
        node = node.children[0]
    return node


def _leaf_right(node: TreeNode) -> TreeNode:
    while node.children:
        node = node.children[-1]
    return node


# =============================================================================
# Arcs
# =============================================================================

def _arc_for(group: TreeNode, label: str) -> Optional[Arc]:
    leaves = group.leaves()
    if not leaves:
        return None

    angles = [leaf.x for leaf in leaves]
    min_angle, max_angle = min(angles), max(angles)
    if len(leaves) > 1:
        spacing = (max_angle - min_angle) / (len(leaves) - 1)
    else:
        spacing = SINGLE_LEAF_ARC_SPACING
    padding = spacing * 0.5

    return Arc(
        start_angle=min_angle - padding,
        end_angle=max_angle + padding,
        center_angle=(min_angle + max_angle) / 2,
        label=label,
        color=category_style(group.category or HazardCategory.UNKNOWN).color,
        node_count=len(leaves),
    )


def compute_arcs(root: TreeNode) -> Tuple[Dict[HazardCategory, Arc], Dict[str, Arc]]:
    """Category and subcategory arcs, padded by half the mean leaf spacing."""
    category_arcs: Dict[HazardCategory, Arc] = {}
    subcategory_arcs: Dict[str, Arc] = {}

    for category_node in root.children:
        arc = _arc_for(category_node, category_node.label)
        if arc is not None and category_node.category is not None:
            category_arcs[category_node.category] = arc
        for cluster_node in category_node.children:
            sub_arc = _arc_for(cluster_node, cluster_node.label)
            if sub_arc is not None:
                subcategory_arcs[cluster_node.name] = sub_arc

    return category_arcs, subcategory_arcs


# =============================================================================
# Edge Bundling
# =============================================================================

def polar_to_cartesian(angle: float, radius: float) -> Coordinate:
    """Angle in degrees, 0 at twelve o'clock, increasing clockwise."""
    rad = math.radians(angle - 90)
    return (radius * math.cos(rad), radius * math.sin(rad))


def bundle_points(points: List[Coordinate], tension: float) -> List[Coordinate]:
    """
    Straighten a control polygon towards its chord.

    tension=1 keeps the hierarchy path as-is; tension=0 collapses every
    point onto the straight line between the endpoints.
    """
    j = len(points) - 1
    if j <= 0:
        return list(points)

    x0, y0 = points[0]
    dx = points[j][0] - x0
    dy = points[j][1] - y0
    bundled = []
    for i, (x, y) in enumerate(points):
        t = i / j
        bundled.append((
            tension * x + (1 - tension) * (x0 + t * dx),
            tension * y + (1 - tension) * (y0 + t * dy),
        ))
    return bundled


def compute_edge_paths(root: TreeNode, edges: Iterable[CausalEdge], tension: float) -> List[BundledEdge]:
    """Route each edge through the lowest common ancestor of its endpoints."""
    leaf_map = {leaf.name: leaf for leaf in root.leaves() if leaf.level is TreeLevel.HAZARD}

    paths: List[BundledEdge] = []
    for edge in edges:
        source_leaf = leaf_map.get(edge.source)
        target_leaf = leaf_map.get(edge.target)
        if source_leaf is None or target_leaf is None:
            continue

        tree_path = source_leaf.path_to(target_leaf)
        polygon = [polar_to_cartesian(node.x, node.y) for node in tree_path]
        paths.append(BundledEdge(
            source=edge.source,
            target=edge.target,
            declared=edge.declared,
            path=[node.name for node in tree_path],
            control_points=bundle_points(polygon, tension),
        ))
    return paths


# =============================================================================
# Facade
# =============================================================================

class HierarchicalBundlingLayout:
    """Builds the radial tree, arcs and bundled edge paths in one pass."""

    def __init__(self, config: Optional[BundlingConfig] = None):
        self.config = config or BundlingConfig()

    def compute(
        self,
        hazards: Iterable[Hazard],
        edges: Iterable[CausalEdge],
        tension: Optional[float] = None,
        hidden_categories: FrozenSet[HazardCategory] = frozenset(),
        declared_only: bool = False,
    ) -> HierarchyLayout:
        tension = self.config.tension if tension is None else tension
        if not 0.0 <= tension <= 1.0:
            raise ValueError(f"tension must be within [0, 1], got {tension}")

        visible = [h for h in hazards if h.category not in hidden_categories]
        tree = build_containment_tree(visible)
        cluster_layout(
            tree,
            width=360.0,
            height=self.config.radius,
            separation=boundary_separation(self.config.cluster_gap, self.config.type_gap),
        )

        leaf_positions = {
            leaf.name: RadialPosition(angle=leaf.x, radius=leaf.y)
            for leaf in tree.leaves()
            if leaf.level is TreeLevel.HAZARD
        }
        category_arcs, subcategory_arcs = compute_arcs(tree)

        visible_edges = filter_edges(edges, set(leaf_positions), declared_only=declared_only)
        edge_paths = compute_edge_paths(tree, visible_edges, tension)

        logger.debug(
            f"Hierarchy layout: {len(leaf_positions)} leaves, {len(category_arcs)} categories, "
            f"{len(edge_paths)} bundled edges (tension={tension})"
        )
        return HierarchyLayout(
            tree=tree,
            leaf_positions=leaf_positions,
            category_arcs=category_arcs,
            subcategory_arcs=subcategory_arcs,
            edge_paths=edge_paths,
            tension=tension,
        )
