"""
Edge Attestation Classifier.

Materializes one causal edge per outgoing declaration and labels it as
mutually attested ("declared") or one-sided ("inferred").

The HIPs dataset is curated by hand and its two declaration lists are
frequently out of sync:
- A's `causes` names B, and B's `caused_by` names A   -> declared edge
- A's `causes` names B, but B's `caused_by` omits A   -> inferred edge
- B's `caused_by` names A, but A's `causes` omits B   -> no edge at all

The source declaration is authoritative for existence; the target only
decides attestation.
"""

import logging
from collections import Counter
from typing import Dict, FrozenSet, Iterable, List, Set, Tuple

from .types import CausalEdge, Hazard

logger = logging.getLogger(__name__)


def classify_edges(hazards: Iterable[Hazard]) -> List[CausalEdge]:
    """
    Build the classified edge list from each hazard's declarations.

    Edges come out in declaration order (hazard order, then `causes`
    order). References to ids outside the hazard set are dropped, and a
    repeated declaration yields a single edge.
    """
    hazard_list = list(hazards)
    caused_by: Dict[str, FrozenSet[str]] = {
        hazard.id: frozenset(hazard.caused_by) for hazard in hazard_list
    }

    edges: List[CausalEdge] = []
    seen: Set[Tuple[str, str]] = set()
    dangling = 0

    for hazard in hazard_list:
        for target_id in hazard.causes:
            target_attestations = caused_by.get(target_id)
            if target_attestations is None:
                dangling += 1
                continue

            pair = (hazard.id, target_id)
            if pair in seen:
                continue
            seen.add(pair)

            edges.append(CausalEdge(
                source=hazard.id,
                target=target_id,
                declared=hazard.id in target_attestations,
            ))

    declared = sum(1 for e in edges if e.declared)
    logger.debug(
        f"Classified {len(edges)} edges ({declared} declared, {len(edges) - declared} inferred); "
        f"dropped {dangling} dangling references"
    )
    return edges


def filter_edges(
    edges: Iterable[CausalEdge],
    node_ids: Set[str] | FrozenSet[str],
    declared_only: bool = False,
) -> List[CausalEdge]:
    """Keep edges whose endpoints are both visible, optionally declared only."""
    return [
        e for e in edges
        if e.source in node_ids
        and e.target in node_ids
        and (e.declared or not declared_only)
    ]


def degree_counts(edges: Iterable[CausalEdge], declared_only: bool = False) -> Counter:
    """
    Count incident edges per hazard.

    With `declared_only`, only mutually attested edges contribute, so for
    every hazard the declared degree never exceeds the graph degree.
    """
    counts: Counter = Counter()
    for e in edges:
        if declared_only and not e.declared:
            continue
        counts[e.source] += 1
        counts[e.target] += 1
    return counts
