"""
CLI Utilities - Shared helper functions for command line operations.

Formatted printing, the shared snapshot and config options, and the loading
logic every command starts with.
"""

import sys
from pathlib import Path
from typing import Callable, Optional

import click

from ..config import DEFAULT_SNAPSHOT_PATH
from ..core.exceptions import ConfigError, NodeNotFoundError
from ..core.snapshot import load_snapshot
from ..explorer import Dataset
from ..settings import Settings, load_settings


def echo_success(message: str) -> None:
    """Print a success message with a green checkmark."""
    click.echo(click.style(f"✅ {message}", fg="green"))


def echo_error(message: str) -> None:
    """
    Print an error message with a red cross.

    Args:
        message (str): The error message to display.
    """
    click.echo(click.style(f"❌ {message}", fg="red"), err=True)


def echo_warning(message: str) -> None:
    click.echo(click.style(f"⚠️  {message}", fg="yellow"))


def echo_info(message: str) -> None:
    click.echo(click.style(f"   {message}", dim=True))


def snapshot_option(func: Callable) -> Callable:
    """Attach the `--snapshot` option shared by every command."""
    return click.option("-s", "--snapshot", "snapshot_path", default=str(DEFAULT_SNAPSHOT_PATH),
                        type=click.Path(dir_okay=False), show_default=True,
                        help="Path to the HIPs snapshot JSON")(func)


def config_option(func: Callable) -> Callable:
    """Attach `--config` to commands whose output depends on settings."""
    return click.option("--config", "config_path", default=None, type=click.Path(dir_okay=False),
                        help="Path to a settings YAML file")(func)


def load_dataset(snapshot_path: str) -> Optional[Dataset]:
    """
    Load and classify a snapshot, printing the failure reason if it fails.

    Returns:
        Optional[Dataset]: The classified dataset, or None if loading failed.
    """
    result = load_snapshot(snapshot_path).map(Dataset.from_snapshot)
    if result.is_err():
        error = result.unwrap_err()
        echo_error(str(error))
        if not Path(snapshot_path).exists():
            click.echo("Download a snapshot first, or pass --snapshot.", err=True)
        return None
    return result.unwrap()


def load_settings_or_exit(config_path: Optional[str]) -> Settings:
    try:
        return load_settings(Path(config_path) if config_path else None)
    except ConfigError as e:
        echo_error(str(e))
        sys.exit(1)


def load_dataset_or_exit(snapshot_path: str) -> Dataset:
    dataset = load_dataset(snapshot_path)
    if dataset is None:
        sys.exit(1)
    return dataset


def resolve_hazard_or_exit(dataset: Dataset, query: str) -> str:
    """Resolve an id, identifier or label; exit with a message when nothing matches."""
    try:
        return dataset.graph.require(query)
    except NodeNotFoundError as e:
        echo_error(str(e))
        sys.exit(1)
