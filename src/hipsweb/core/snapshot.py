"""
Snapshot loading and validation.

Fetching and caching the upstream dataset happen elsewhere; this module only
turns an already-downloaded snapshot file into validated `Snapshot` models.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict

from pydantic import ValidationError

from .exceptions import SnapshotError
from .result import Err, Ok, Result
from .types import Snapshot

logger = logging.getLogger(__name__)


def parse_snapshot(data: Any, path: str | None = None) -> Snapshot:
    """
    Validate a decoded snapshot document.

    Raises:
        SnapshotError: If `nodes` or `edges` is missing or a node is malformed.
    """
    if not isinstance(data, dict):
        raise SnapshotError("Invalid data: expected a JSON object", path)
    if not isinstance(data.get("nodes"), list):
        raise SnapshotError("Invalid data: missing nodes array", path)
    if not isinstance(data.get("edges"), list):
        raise SnapshotError("Invalid data: missing edges array", path)

    try:
        snapshot = Snapshot.model_validate(data)
    except ValidationError as e:
        raise SnapshotError(f"Invalid data: {e.error_count()} validation error(s)\n{e}", path) from e

    _check_meta(snapshot)
    return snapshot


def load_snapshot(path: str | Path) -> Result[Snapshot, SnapshotError]:
    """Read and validate a snapshot JSON file."""
    snapshot_path = Path(path)
    if not snapshot_path.exists():
        return Err(SnapshotError("Snapshot file not found", str(snapshot_path)))

    try:
        data: Dict[str, Any] = json.loads(snapshot_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as e:
        return Err(SnapshotError(f"Failed to read snapshot: {e}", str(snapshot_path)))
    except json.JSONDecodeError as e:
        return Err(SnapshotError(f"Invalid JSON: {e}", str(snapshot_path)))

    try:
        snapshot = parse_snapshot(data, str(snapshot_path))
    except SnapshotError as e:
        return Err(e)

    logger.debug(
        f"Loaded snapshot {snapshot_path}: {len(snapshot.nodes)} nodes, {len(snapshot.edges)} edges"
    )
    return Ok(snapshot)


def _check_meta(snapshot: Snapshot) -> None:
    """Warn when the recorded counts disagree with the payload."""
    meta = snapshot.meta
    if meta.node_count and meta.node_count != len(snapshot.nodes):
        logger.warning(f"Snapshot meta.nodeCount={meta.node_count} but {len(snapshot.nodes)} nodes present")
    if meta.edge_count and meta.edge_count != len(snapshot.edges):
        logger.warning(f"Snapshot meta.edgeCount={meta.edge_count} but {len(snapshot.edges)} edges present")
