"""Category-to-category flow matrix."""

from typing import Dict, Iterable, List, Tuple

from pydantic import BaseModel, Field

from ..core.types import CausalEdge, Hazard


class FlowMatrix(BaseModel):
    """
    Directed edge counts between categories.

    `matrix[row][col]` counts edges from `categories[row]` to
    `categories[col]`; `cells` keeps the contributing edge keys per
    non-empty cell.
    """
    categories: List[str] = Field(default_factory=list)
    matrix: List[List[int]] = Field(default_factory=list)
    cells: Dict[Tuple[int, int], List[str]] = Field(default_factory=dict)

    def count(self, source_category: str, target_category: str) -> int:
        try:
            row = self.categories.index(source_category)
            col = self.categories.index(target_category)
        except ValueError:
            return 0
        return self.matrix[row][col]

    def to_dict(self) -> Dict[str, object]:
        return {
            "categories": list(self.categories),
            "matrix": [list(row) for row in self.matrix],
            "cells": {f"{r},{c}": keys for (r, c), keys in self.cells.items()},
        }


def compute_flow_matrix(hazards: Iterable[Hazard], edges: Iterable[CausalEdge]) -> FlowMatrix:
    """Count edges per (source category, target category) over categories present."""
    hazard_category = {h.id: h.category.value for h in hazards}
    categories = sorted(set(hazard_category.values()))
    position = {name: i for i, name in enumerate(categories)}

    matrix = [[0] * len(categories) for _ in categories]
    cells: Dict[Tuple[int, int], List[str]] = {}
    for edge in edges:
        source = hazard_category.get(edge.source)
        target = hazard_category.get(edge.target)
        if source is None or target is None:
            continue
        row, col = position[source], position[target]
        matrix[row][col] += 1
        cells.setdefault((row, col), []).append(edge.key)

    return FlowMatrix(categories=categories, matrix=matrix, cells=cells)
