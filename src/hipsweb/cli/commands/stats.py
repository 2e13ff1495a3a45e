"""
Stats Command - Network summary for a snapshot.
"""

import logging
from typing import Any, Dict

import click
from pydantic import BaseModel, Field
from rich.console import Console

from ...analysis.flow import compute_flow_matrix
from ...analysis.insights import NetworkInsights, compute_insights
from ..formatting import format_stats
from ..utils import load_dataset_or_exit, snapshot_option

logger = logging.getLogger(__name__)
console = Console()


# --- API Models ---
class StatsResponse(BaseModel):
    total_nodes: int
    total_edges: int
    declared_edges: int
    inferred_edges: int
    isolated_nodes: int
    unknown_category_nodes: int
    nodes_by_category: Dict[str, int] = Field(default_factory=dict)
    insights: NetworkInsights
    flow: Dict[str, Any] = Field(default_factory=dict)


@click.command()
@snapshot_option
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def stats(snapshot_path: str, as_json: bool) -> None:
    """
    Summarize the causal network.

    Shows hazard and edge counts, the declared/inferred split and
    network-level insights.
    """
    dataset = load_dataset_or_exit(snapshot_path)
    graph_stats = dataset.graph.get_stats()
    insights = compute_insights(dataset.hazards, dataset.edges)

    if as_json:
        flow = compute_flow_matrix(dataset.hazards, dataset.edges)
        response = StatsResponse(**graph_stats, insights=insights, flow=flow.to_dict())
        click.echo(response.model_dump_json(indent=2))
        return

    for table in format_stats(graph_stats, insights):
        console.print(table)
    if graph_stats["unknown_category_nodes"]:
        console.print(
            f"[yellow]⚠ {graph_stats['unknown_category_nodes']} hazards have an unmapped type[/yellow]"
        )
