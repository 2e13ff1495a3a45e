"""
Path Command - Shortest causal chain between two hazards.
"""

import sys
from typing import List

import click
from pydantic import BaseModel, Field

from ...config import category_style
from ...core.types import HazardCategory
from ..utils import echo_error, load_dataset_or_exit, resolve_hazard_or_exit, snapshot_option


# --- API Models ---
class PathStep(BaseModel):
    id: str
    label: str
    category: str
    declared: bool | None = None


class PathResponse(BaseModel):
    source: str
    target: str
    found: bool
    steps: List[PathStep] = Field(default_factory=list)


@click.command()
@click.argument("source")
@click.argument("target")
@snapshot_option
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def path(source: str, target: str, snapshot_path: str, as_json: bool) -> None:
    """
    Find the shortest chain by which SOURCE can cause TARGET.

    Each link follows a `causes` declaration; links the target does not
    confirm are marked as inferred.
    """
    dataset = load_dataset_or_exit(snapshot_path)
    source_id = resolve_hazard_or_exit(dataset, source)
    target_id = resolve_hazard_or_exit(dataset, target)

    chain = dataset.graph.shortest_path(source_id, target_id)
    declared = {(e.source, e.target): e.declared for e in dataset.edges}

    steps: List[PathStep] = []
    for i, node_id in enumerate(chain or []):
        hazard = dataset.graph.get_hazard(node_id)
        steps.append(PathStep(
            id=node_id,
            label=hazard.display_label,
            category=hazard.category.value,
            declared=declared.get((chain[i - 1], node_id)) if i else None,
        ))

    if as_json:
        response = PathResponse(source=source_id, target=target_id, found=chain is not None, steps=steps)
        click.echo(response.model_dump_json(indent=2))
        return

    if chain is None:
        echo_error(f"No causal path from {source_id} to {target_id}")
        sys.exit(1)

    click.echo(click.style(f"{len(steps) - 1} step(s)", bold=True))
    for i, step in enumerate(steps):
        icon = category_style(HazardCategory(step.category)).icon
        if i:
            arrow = "──▶" if step.declared else "╌╌▶"
            click.echo(click.style(f"   {arrow}", dim=not step.declared))
        click.echo(f"{icon} {step.label} " + click.style(f"({step.id})", dim=True))
