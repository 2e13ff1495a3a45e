"""
Cascade Command - Triggers and effects of one hazard.

Usage:
    hipsweb cascade TL0405
    hipsweb cascade "Flash flood" --depth 3
"""

import json

import click
from rich.console import Console

from ...analysis.cascade import CascadeTreeBuilder
from ..formatting import format_cascade
from ..utils import (
    config_option,
    load_dataset_or_exit,
    load_settings_or_exit,
    resolve_hazard_or_exit,
    snapshot_option,
)

console = Console()


@click.command()
@click.argument("root")
@snapshot_option
@config_option
@click.option("-d", "--depth", type=int, default=None,
              help="Expansion depth (clamped to the configured maximum)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def cascade(root: str, snapshot_path: str, config_path: str, depth: int, as_json: bool) -> None:
    """
    Show what ROOT can trigger and what can trigger it.

    ROOT may be a hazard id, an identifier such as TL0405, or a label.
    Hazards that reappear on their own branch are shown as ↺ and not
    expanded again.
    """
    settings = load_settings_or_exit(config_path)
    dataset = load_dataset_or_exit(snapshot_path)
    node_id = resolve_hazard_or_exit(dataset, root)

    builder = CascadeTreeBuilder(dataset.index, settings.cascade)
    result = builder.build_bidirectional(node_id, depth)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
        return

    console.print(format_cascade(result))
