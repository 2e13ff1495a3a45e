"""
Corridors Command - List dense cross-category hyper-routes.
"""

from typing import List

import click
from pydantic import BaseModel
from rich.console import Console

from ...layout.orbital import Corridor, OrbitalCorridorLayout
from ..formatting import format_corridors
from ..utils import config_option, echo_info, load_dataset_or_exit, load_settings_or_exit, snapshot_option

console = Console()


# --- API Models ---
class CorridorsResponse(BaseModel):
    threshold: int
    corridors: List[Corridor]


@click.command()
@snapshot_option
@config_option
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def corridors(snapshot_path: str, config_path: str, as_json: bool) -> None:
    """Show category pairs with heavy cross-category traffic."""
    settings = load_settings_or_exit(config_path)
    dataset = load_dataset_or_exit(snapshot_path)
    result = OrbitalCorridorLayout(settings.orbital).compute(dataset.hazards, dataset.edges)

    if as_json:
        response = CorridorsResponse(threshold=settings.orbital.edge_threshold, corridors=result.corridors)
        click.echo(response.model_dump_json(indent=2))
        return

    if not result.corridors:
        echo_info(f"No category pair reaches {settings.orbital.edge_threshold} edges")
        return
    console.print(format_corridors(result.corridors))
