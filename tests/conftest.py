"""
Shared fixtures for the hipsweb test suite.
"""

import json
from typing import Callable, List

import pytest

from hipsweb.core.types import Hazard
from hipsweb.explorer import Dataset


@pytest.fixture
def make_hazard() -> Callable[..., Hazard]:
    """Factory for hazards using the snapshot's camelCase field names."""
    def _make(node_id: str, type_name: str = "Technological", cluster: str = "",
              causes=(), caused_by=(), **extra) -> Hazard:
        return Hazard.model_validate({
            "id": node_id,
            "label": extra.pop("label", node_id.title()),
            "typeName": type_name,
            "clusterName": cluster,
            "causes": list(causes),
            "causedBy": list(caused_by),
            **extra,
        })
    return _make


@pytest.fixture
def small_hazards(make_hazard) -> List[Hazard]:
    """
    Five hazards across four categories:

        a -> b  declared (b.causedBy names a)
        a -> c  inferred
        b -> c  declared
        c -> a  inferred
        e -> missing  dangling, dropped
        d       isolated
    """
    return [
        make_hazard("a", "Meteorological and Hydrological", "Flood", causes=["b", "c"], identifier="MH0001"),
        make_hazard("b", "Technological", "Power", causes=["c"], caused_by=["a"], identifier="TL0001"),
        make_hazard("c", "Geological", "Landslide", causes=["a"], caused_by=["b"]),
        make_hazard("d", "Societal", "", sources=["https://example.org/report"]),
        make_hazard("e", "Technological", "Power", causes=["missing"], caused_by=["b"]),
    ]


@pytest.fixture
def small_dataset(small_hazards) -> Dataset:
    return Dataset.from_hazards(small_hazards)


@pytest.fixture
def tl0405_hazards(make_hazard) -> List[Hazard]:
    """
    A hub shaped like TL0405 in the live dataset: 7 causes and 17 causedBy
    entries, all reciprocated, plus 39 hazards that claim to cause the hub
    without the hub listing them.
    """
    effects = [f"eff{i:02d}" for i in range(7)]
    triggers = [f"trg{i:02d}" for i in range(17)]
    claimers = [f"clm{i:02d}" for i in range(39)]

    hub = make_hazard("TL0405", "Technological", "Infrastructure failure",
                      causes=effects, caused_by=triggers, identifier="TL0405",
                      label="Critical infrastructure failure")
    hazards = [hub]
    hazards += [make_hazard(i, "Societal", "Disruption", caused_by=["TL0405"]) for i in effects]
    hazards += [make_hazard(i, "Meteorological and Hydrological", "Storm", causes=["TL0405"])
                for i in triggers]
    hazards += [make_hazard(i, "Geological", "Seismic", causes=["TL0405"]) for i in claimers]
    return hazards


@pytest.fixture
def snapshot_file(tmp_path, small_hazards):
    """The small network written as a snapshot JSON file."""
    nodes = [h.model_dump(by_alias=True, exclude={"category"}) for h in small_hazards]
    edges = [
        {"source": h.id, "target": t, "type": "causes"}
        for h in small_hazards for t in h.causes
    ]
    data = {
        "meta": {"source": "test", "fetchedAt": "2026-01-01T00:00:00Z",
                 "nodeCount": len(nodes), "edgeCount": len(edges)},
        "nodes": nodes,
        "edges": edges,
    }
    path = tmp_path / "hips.json"
    path.write_text(json.dumps(data))
    return path
