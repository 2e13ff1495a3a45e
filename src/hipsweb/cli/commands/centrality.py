"""
Centrality Command - Rank hazards by network position.
"""

from typing import List

import click
from pydantic import BaseModel
from rich.console import Console

from ...analysis.centrality import CentralityMetrics, compute_centrality, top_by
from ..formatting import format_centrality
from ..utils import load_dataset_or_exit, snapshot_option

console = Console()


# --- API Models ---
class CentralityResponse(BaseModel):
    metric: str
    hazards: List[CentralityMetrics]


@click.command()
@snapshot_option
@click.option("--top", "limit", type=int, default=10, show_default=True, help="Rows to show")
@click.option("--by", "metric", type=click.Choice(["pagerank", "betweenness", "closeness"]),
              default="pagerank", show_default=True, help="Metric to rank by")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def centrality(snapshot_path: str, limit: int, metric: str, as_json: bool) -> None:
    """Rank hazards by PageRank, betweenness or closeness."""
    dataset = load_dataset_or_exit(snapshot_path)
    metrics = compute_centrality(dataset.graph)
    rows = top_by(metrics, metric, limit)

    if as_json:
        click.echo(CentralityResponse(metric=metric, hazards=rows).model_dump_json(indent=2))
        return

    labels = {h.id: h.display_label for h in dataset.hazards}
    table = format_centrality(rows, labels)
    table.title = f"Top {len(rows)} by {metric}"
    console.print(table)
