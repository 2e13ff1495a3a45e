"""
Network insights.

Summary statistics ("factoids") over a classified edge set: degree
distribution, attestation, cross-category traffic, cluster density and
reference coverage.
"""

import math
from collections import Counter
from typing import Dict, Iterable, List

from pydantic import BaseModel, Field

from ..config import REFERENCE_FIELDS
from ..core.classify import degree_counts
from ..core.types import CausalEdge, Hazard


class MostConnected(BaseModel):
    id: str | None = None
    label: str = ""
    degree: int = 0
    declared_degree: int = 0


class TopCategory(BaseModel):
    name: str = ""
    edge_count: int = 0
    node_ids: List[str] = Field(default_factory=list)


class DensestCluster(BaseModel):
    name: str = ""
    density: float = 0.0
    node_ids: List[str] = Field(default_factory=list)


class NetworkInsights(BaseModel):
    avg_degree: float = 0.0
    avg_declared_degree: float = 0.0
    std_dev: float = 0.0
    avg_nodes: List[str] = Field(default_factory=list)
    most_connected: MostConnected = Field(default_factory=MostConnected)
    isolated_nodes: List[str] = Field(default_factory=list)
    inferred_only_nodes: List[str] = Field(default_factory=list)
    inferred_edge_node_ids: List[str] = Field(default_factory=list)
    reciprocation_rate: float = 0.0
    cross_category_ratio: float = 0.0
    cross_category_edge_keys: List[str] = Field(default_factory=list)
    top_category: TopCategory = Field(default_factory=TopCategory)
    densest_cluster: DensestCluster = Field(default_factory=DensestCluster)
    reference_coverage: float = 0.0
    unreferenced_nodes: List[str] = Field(default_factory=list)


def _has_reference(hazard: Hazard) -> bool:
    return any(getattr(hazard, name) for name in REFERENCE_FIELDS)


def _densest_cluster(hazards: List[Hazard], edges: List[CausalEdge]) -> DensestCluster:
    members: Dict[str, List[str]] = {}
    for hazard in hazards:
        if hazard.cluster_name:
            members.setdefault(hazard.cluster_name, []).append(hazard.id)

    best = DensestCluster()
    for name, ids in members.items():
        if len(ids) < 2:
            continue
        id_set = set(ids)
        internal = sum(1 for e in edges if e.source in id_set and e.target in id_set)
        density = internal / (len(ids) * (len(ids) - 1) / 2)
        if density > best.density:
            best = DensestCluster(name=name, density=density, node_ids=ids)
    return best


def compute_insights(hazards: Iterable[Hazard], edges: Iterable[CausalEdge]) -> NetworkInsights:
    """Compute network-level insights. Empty input yields an all-zero result."""
    hazard_list = list(hazards)
    hazard_map = {h.id: h for h in hazard_list}
    edge_list = [e for e in edges if e.source in hazard_map and e.target in hazard_map]

    n = len(hazard_list)
    if n == 0:
        return NetworkInsights()

    degree = degree_counts(edge_list)
    declared_degree = degree_counts(edge_list, declared_only=True)
    degrees = [degree[h.id] for h in hazard_list]

    avg_degree = sum(degrees) / n
    std_dev = math.sqrt(sum((d - avg_degree) ** 2 for d in degrees) / n)
    avg_nodes = [h.id for h in hazard_list if abs(degree[h.id] - avg_degree) <= std_dev]

    most_connected = MostConnected()
    for hazard in hazard_list:
        if degree[hazard.id] > most_connected.degree:
            most_connected = MostConnected(
                id=hazard.id,
                label=hazard.display_label,
                degree=degree[hazard.id],
                declared_degree=declared_degree[hazard.id],
            )

    declared_edges = 0
    inferred_edge_nodes: Dict[str, None] = {}
    cross_keys: List[str] = []
    category_edges: Counter = Counter()
    for edge in edge_list:
        source, target = hazard_map[edge.source], hazard_map[edge.target]
        if edge.declared:
            declared_edges += 1
        else:
            inferred_edge_nodes[edge.source] = None
            inferred_edge_nodes[edge.target] = None
        if source.category is not target.category:
            cross_keys.append(edge.key)
        category_edges[source.category.value] += 1
        category_edges[target.category.value] += 1

    top_category = TopCategory()
    for name, count in category_edges.items():
        if count > top_category.edge_count:
            top_category = TopCategory(name=name, edge_count=count)
    if top_category.name:
        top_category.node_ids = [h.id for h in hazard_list if h.category.value == top_category.name]

    unreferenced = [h.id for h in hazard_list if not _has_reference(h)]
    edge_total = len(edge_list)

    return NetworkInsights(
        avg_degree=avg_degree,
        avg_declared_degree=sum(declared_degree[h.id] for h in hazard_list) / n,
        std_dev=std_dev,
        avg_nodes=avg_nodes,
        most_connected=most_connected,
        isolated_nodes=[h.id for h in hazard_list if degree[h.id] == 0],
        inferred_only_nodes=[
            h.id for h in hazard_list if degree[h.id] > 0 and declared_degree[h.id] == 0
        ],
        inferred_edge_node_ids=list(inferred_edge_nodes),
        reciprocation_rate=declared_edges / edge_total if edge_total else 0.0,
        cross_category_ratio=len(cross_keys) / edge_total if edge_total else 0.0,
        cross_category_edge_keys=cross_keys,
        top_category=top_category,
        densest_cluster=_densest_cluster(hazard_list, edge_list),
        reference_coverage=(n - len(unreferenced)) / n,
        unreferenced_nodes=unreferenced,
    )
