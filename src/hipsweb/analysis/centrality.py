"""
Centrality metrics over the causal graph.

Betweenness and PageRank come straight from rustworkx. Closeness is computed
on outgoing distances (how quickly a hazard reaches the rest of the network)
as reachable count over total distance, which rustworkx's built-in
incoming-distance closeness does not provide.
"""

import logging
from typing import Dict, List

import rustworkx as rx
from pydantic import BaseModel

from ..config import PAGERANK_DAMPING
from ..core.graph import CausalGraph

logger = logging.getLogger(__name__)


class CentralityMetrics(BaseModel):
    id: str
    betweenness: float = 0.0
    pagerank: float = 0.0
    closeness: float = 0.0
    betweenness_rank: int = 0
    pagerank_rank: int = 0
    closeness_rank: int = 0


def _add_ranks(metrics: Dict[str, CentralityMetrics], value_key: str, rank_key: str) -> None:
    """Rank 1 is the highest value; ties keep graph order."""
    ordered = sorted(metrics.values(), key=lambda m: getattr(m, value_key), reverse=True)
    for rank, metric in enumerate(ordered, start=1):
        setattr(metric, rank_key, rank)


def _closeness(graph: CausalGraph) -> Dict[int, float]:
    lengths = rx.digraph_all_pairs_dijkstra_path_lengths(graph.backend, lambda _: 1.0)
    closeness: Dict[int, float] = {}
    for idx in graph.backend.node_indices():
        distances = lengths[idx] if idx in lengths else {}
        reachable = [d for target, d in distances.items() if target != idx]
        total = sum(reachable)
        closeness[idx] = len(reachable) / total if total else 0.0
    return closeness


def compute_centrality(graph: CausalGraph, damping: float = PAGERANK_DAMPING) -> Dict[str, CentralityMetrics]:
    """Betweenness, PageRank and closeness per hazard, with 1-based ranks."""
    backend = graph.backend
    if graph.node_count == 0:
        return {}

    betweenness = rx.betweenness_centrality(backend, normalized=False)
    pagerank = rx.pagerank(backend, alpha=damping)
    closeness = _closeness(graph)

    metrics: Dict[str, CentralityMetrics] = {}
    for idx in backend.node_indices():
        node_id = graph.node_id(idx)
        metrics[node_id] = CentralityMetrics(
            id=node_id,
            betweenness=betweenness[idx],
            pagerank=pagerank[idx],
            closeness=closeness[idx],
        )

    _add_ranks(metrics, "betweenness", "betweenness_rank")
    _add_ranks(metrics, "pagerank", "pagerank_rank")
    _add_ranks(metrics, "closeness", "closeness_rank")

    logger.debug(f"Computed centrality for {len(metrics)} hazards")
    return metrics


def top_by(metrics: Dict[str, CentralityMetrics], key: str, limit: int = 10) -> List[CentralityMetrics]:
    """The `limit` highest-ranked hazards for one metric."""
    if key not in ("betweenness", "pagerank", "closeness"):
        raise ValueError(f"Unknown centrality metric: {key}")
    return sorted(metrics.values(), key=lambda m: getattr(m, f"{key}_rank"))[:limit]
