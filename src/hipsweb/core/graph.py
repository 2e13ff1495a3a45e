"""
Causal graph backed by rustworkx.

Holds the hazards and classified edges of one snapshot and answers the
interactive queries the explorer needs:
- O(1) hazard lookup via an id <-> index bimap
- Search and id resolution for user input
- Graph degree vs. declared degree
- Undirected k-hop neighbourhoods
- Shortest directed causal paths
"""

import logging
from collections import deque
from typing import Any, Dict, Iterable, Iterator, List, Optional, Set

import rustworkx as rx

from .exceptions import NodeNotFoundError
from .types import CausalEdge, Hazard, HazardCategory

logger = logging.getLogger(__name__)


class CausalGraph:
    """
    Directed hazard graph.

    Node payloads are `Hazard` models; edge payloads are `CausalEdge`
    models. The graph is not a multigraph: a (source, target) pair appears
    at most once.
    """

    def __init__(self):
        self._graph = rx.PyDiGraph(multigraph=False)
        self._id_to_idx: Dict[str, int] = {}
        self._idx_to_id: Dict[int, str] = {}

    @classmethod
    def from_edges(cls, hazards: Iterable[Hazard], edges: Iterable[CausalEdge]) -> "CausalGraph":
        graph = cls()
        for hazard in hazards:
            graph.add_hazard(hazard)
        for edge in edges:
            graph.add_edge(edge)
        logger.debug(f"Built causal graph: {graph.node_count} nodes, {graph.edge_count} edges")
        return graph

    def add_hazard(self, hazard: Hazard) -> None:
        """Add or replace a hazard node."""
        if hazard.id in self._id_to_idx:
            self._graph[self._id_to_idx[hazard.id]] = hazard
            return
        idx = self._graph.add_node(hazard)
        self._id_to_idx[hazard.id] = idx
        self._idx_to_id[idx] = hazard.id

    def add_edge(self, edge: CausalEdge) -> None:
        """Add a classified edge; edges touching unknown hazards are ignored."""
        if edge.source not in self._id_to_idx or edge.target not in self._id_to_idx:
            return
        self._graph.add_edge(self._id_to_idx[edge.source], self._id_to_idx[edge.target], edge)

    def get_hazard(self, node_id: str) -> Optional[Hazard]:
        idx = self._id_to_idx.get(node_id)
        if idx is None:
            return None
        return self._graph[idx]

    def has_node(self, node_id: str) -> bool:
        return node_id in self._id_to_idx

    def has_edge(self, source_id: str, target_id: str) -> bool:
        if source_id not in self._id_to_idx or target_id not in self._id_to_idx:
            return False
        return self._graph.has_edge(self._id_to_idx[source_id], self._id_to_idx[target_id])

    def node_id(self, idx: int) -> str:
        """Translate a backend node index into a hazard id."""
        return self._idx_to_id[idx]

    @property
    def backend(self) -> rx.PyDiGraph:
        """The underlying rustworkx graph, for algorithm calls."""
        return self._graph

    # =========================================================================
    # Search
    # =========================================================================

    def find_nodes(self, pattern: str) -> List[str]:
        """Find hazards whose id, label or identifier contains `pattern`."""
        pattern_lower = pattern.lower()
        results = []
        for hazard in self.iter_hazards():
            haystacks = (hazard.id, hazard.label, hazard.identifier)
            if any(pattern_lower in h.lower() for h in haystacks if h):
                results.append(hazard.id)
        return results

    def resolve(self, query: str) -> Optional[str]:
        """
        Resolve user input to a hazard id.

        Tries an exact id, then an exact identifier (e.g. "TL0405"), then an
        exact label, then the first substring match.
        """
        if self.has_node(query):
            return query

        query_lower = query.lower()
        for hazard in self.iter_hazards():
            if hazard.identifier and hazard.identifier.lower() == query_lower:
                return hazard.id
        for hazard in self.iter_hazards():
            if hazard.label and hazard.label.lower() == query_lower:
                return hazard.id

        matches = self.find_nodes(query)
        return matches[0] if matches else None

    def require(self, query: str) -> str:
        """Resolve `query` like `resolve`, raising NodeNotFoundError on a miss."""
        node_id = self.resolve(query)
        if node_id is None:
            raise NodeNotFoundError(query)
        return node_id

    # =========================================================================
    # Degree & Neighbourhood
    # =========================================================================

    def degree(self, node_id: str) -> int:
        """All incident classified edges."""
        idx = self._id_to_idx.get(node_id)
        if idx is None:
            return 0
        return self._graph.in_degree(idx) + self._graph.out_degree(idx)

    def declared_degree(self, node_id: str) -> int:
        """Incident edges that are mutually attested."""
        idx = self._id_to_idx.get(node_id)
        if idx is None:
            return 0
        incident = list(self._graph.in_edges(idx)) + list(self._graph.out_edges(idx))
        return sum(1 for _, _, edge in incident if edge.declared)

    def neighbors(self, node_id: str) -> Set[str]:
        """Hazards linked to `node_id` in either direction."""
        idx = self._id_to_idx.get(node_id)
        if idx is None:
            return set()
        return {self._idx_to_id[n] for n in self._graph.neighbors_undirected(idx)}

    def k_hop_neighborhood(self, node_id: str, hops: int) -> Set[str]:
        """
        Hazards within `hops` undirected steps, including the start node.

        Unknown ids yield an empty set.
        """
        if hops < 0:
            raise ValueError(f"hops must be non-negative, got {hops}")
        if node_id not in self._id_to_idx:
            return set()

        visited = {node_id}
        frontier = deque([(node_id, 0)])
        while frontier:
            current, depth = frontier.popleft()
            if depth >= hops:
                continue
            for neighbor in self.neighbors(current):
                if neighbor not in visited:
                    visited.add(neighbor)
                    frontier.append((neighbor, depth + 1))
        return visited

    # =========================================================================
    # Paths
    # =========================================================================

    def shortest_path(self, source_id: str, target_id: str) -> Optional[List[str]]:
        """
        Shortest directed causal chain from source to target (unit weights).

        Returns None when either id is unknown or no directed path exists.
        """
        if source_id not in self._id_to_idx or target_id not in self._id_to_idx:
            return None
        if source_id == target_id:
            return [source_id]

        src_idx = self._id_to_idx[source_id]
        tgt_idx = self._id_to_idx[target_id]
        paths = rx.digraph_dijkstra_shortest_paths(
            self._graph, src_idx, target=tgt_idx, default_weight=1.0
        )
        if tgt_idx not in paths:
            return None
        return [self._idx_to_id[idx] for idx in paths[tgt_idx]]

    # =========================================================================
    # Iteration & Stats
    # =========================================================================

    def iter_hazards(self) -> Iterator[Hazard]:
        return iter(self._graph.nodes())

    def iter_edges(self) -> Iterator[CausalEdge]:
        return iter(self._graph.edges())

    @property
    def node_count(self) -> int:
        return self._graph.num_nodes()

    @property
    def edge_count(self) -> int:
        return self._graph.num_edges()

    def get_stats(self) -> Dict[str, Any]:
        nodes_by_category: Dict[str, int] = {}
        for hazard in self.iter_hazards():
            nodes_by_category[hazard.category.value] = nodes_by_category.get(hazard.category.value, 0) + 1

        declared = sum(1 for edge in self.iter_edges() if edge.declared)
        isolated = sum(
            1 for idx in self._graph.node_indices()
            if self._graph.in_degree(idx) == 0 and self._graph.out_degree(idx) == 0
        )
        unknown = nodes_by_category.get(HazardCategory.UNKNOWN.value, 0)

        return {
            "total_nodes": self.node_count,
            "total_edges": self.edge_count,
            "declared_edges": declared,
            "inferred_edges": self.edge_count - declared,
            "nodes_by_category": nodes_by_category,
            "isolated_nodes": isolated,
            "unknown_category_nodes": unknown,
        }
