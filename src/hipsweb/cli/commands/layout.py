"""
Layout Command - Compute a layout and dump it as JSON.

Usage:
    hipsweb layout bundle -o bundle.json --tension 0.6
    hipsweb layout orbital --hide-type Societal --declared-only
"""

import json
import sys
from pathlib import Path

import click

from ...core.types import HazardCategory
from ...layout.hierarchy import HierarchicalBundlingLayout
from ...layout.orbital import OrbitalCorridorLayout
from ..utils import (
    config_option,
    echo_error,
    echo_success,
    load_dataset_or_exit,
    load_settings_or_exit,
    snapshot_option,
)

CATEGORY_CHOICES = [c.value for c in HazardCategory]


@click.command()
@click.argument("kind", type=click.Choice(["bundle", "orbital"]))
@snapshot_option
@config_option
@click.option("-o", "--output", type=click.Path(dir_okay=False), default=None,
              help="Write the layout to FILE instead of stdout")
@click.option("--hide-type", "hidden", multiple=True, type=click.Choice(CATEGORY_CHOICES),
              help="Hide a hazard category (repeatable)")
@click.option("--declared-only", is_flag=True, help="Only use mutually attested edges")
@click.option("--tension", type=float, default=None, help="Bundle tension in [0, 1]")
def layout(kind: str, snapshot_path: str, config_path: str, output: str,
           hidden: tuple, declared_only: bool, tension: float) -> None:
    """
    Compute the bundle or orbital layout.

    The output holds positions, arcs or sectors and the edge geometry a
    renderer needs.
    """
    settings = load_settings_or_exit(config_path)
    dataset = load_dataset_or_exit(snapshot_path)
    hidden_categories = frozenset(HazardCategory(name) for name in hidden)

    if kind == "bundle":
        try:
            result = HierarchicalBundlingLayout(settings.bundling).compute(
                dataset.hazards,
                dataset.edges,
                tension=tension,
                hidden_categories=hidden_categories,
                declared_only=declared_only,
            )
        except ValueError as e:
            echo_error(str(e))
            sys.exit(1)
    else:
        edges = [e for e in dataset.edges if e.declared] if declared_only else dataset.edges
        result = OrbitalCorridorLayout(settings.orbital).compute(
            dataset.hazards, edges, hidden_categories=hidden_categories
        )

    payload = json.dumps(result.to_dict(), indent=2, ensure_ascii=False)
    if output is None:
        click.echo(payload)
        return

    Path(output).write_text(payload, encoding="utf-8")
    echo_success(f"Wrote {kind} layout to {output}")
