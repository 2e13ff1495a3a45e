"""
Explorer controller.

Interactive exploration is a sequence of discrete user actions (filter
changes, tension changes, view switches, selections). Each action is a
command; `reduce` applies one command to an immutable state and rebuilds
exactly the derived structure it affects. `Explorer` holds the current
state and replaces it wholesale on every dispatch, so the latest command
always wins.
"""

import logging
from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import FrozenSet, List, Optional, Union

from .analysis.cascade import BidirectionalCascade, CascadeTreeBuilder
from .config import DEFAULT_TENSION
from .core.adjacency import AdjacencyIndex, build_adjacency_index
from .core.classify import classify_edges, filter_edges
from .core.graph import CausalGraph
from .core.types import CausalEdge, Hazard, HazardCategory, Snapshot
from .layout.hierarchy import HierarchicalBundlingLayout, HierarchyLayout
from .layout.orbital import OrbitalCorridorLayout, OrbitalLayout
from .settings import Settings

logger = logging.getLogger(__name__)


class View(StrEnum):
    BUNDLE = "bundle"
    ORBITAL = "orbital"
    CASCADE = "cascade"


# =============================================================================
# Dataset
# =============================================================================

@dataclass(frozen=True)
class Dataset:
    """Canonical inputs every derived structure is rebuilt from."""
    hazards: List[Hazard]
    edges: List[CausalEdge]
    graph: CausalGraph
    index: AdjacencyIndex

    @classmethod
    def from_hazards(cls, hazards: List[Hazard]) -> "Dataset":
        edges = classify_edges(hazards)
        return cls(
            hazards=list(hazards),
            edges=edges,
            graph=CausalGraph.from_edges(hazards, edges),
            index=build_adjacency_index(hazards, edges),
        )

    @classmethod
    def from_snapshot(cls, snapshot: Snapshot) -> "Dataset":
        return cls.from_hazards(snapshot.nodes)

    def visible_hazards(self, hidden: FrozenSet[HazardCategory]) -> List[Hazard]:
        return [h for h in self.hazards if h.category not in hidden]

    def visible_index(self, hidden: FrozenSet[HazardCategory]) -> AdjacencyIndex:
        if not hidden:
            return self.index
        visible = self.visible_hazards(hidden)
        edges = filter_edges(self.edges, {h.id for h in visible})
        return build_adjacency_index(visible, edges)


# =============================================================================
# State
# =============================================================================

@dataclass(frozen=True)
class LayoutContext:
    view: View = View.BUNDLE
    hidden_categories: FrozenSet[HazardCategory] = frozenset()
    show_edges: bool = True
    declared_only: bool = False
    tension: float = DEFAULT_TENSION
    selected_id: Optional[str] = None
    hops: int = 1
    cascade_depth: Optional[int] = None


@dataclass(frozen=True)
class ExplorerState:
    context: LayoutContext = field(default_factory=LayoutContext)
    layout: Union[HierarchyLayout, OrbitalLayout, None] = None
    cascade: Optional[BidirectionalCascade] = None
    highlighted: FrozenSet[str] = frozenset()


# =============================================================================
# Commands
# =============================================================================

@dataclass(frozen=True)
class FilterTypesChanged:
    hidden_categories: FrozenSet[HazardCategory]


@dataclass(frozen=True)
class EdgesVisibilityChanged:
    show_edges: bool = True
    declared_only: bool = False


@dataclass(frozen=True)
class TensionChanged:
    tension: float


@dataclass(frozen=True)
class NodeSelected:
    node_id: Optional[str]
    depth: Optional[int] = None


@dataclass(frozen=True)
class KHopExpand:
    hops: int


@dataclass(frozen=True)
class ViewChanged:
    view: View


Command = Union[
    FilterTypesChanged, EdgesVisibilityChanged, TensionChanged,
    NodeSelected, KHopExpand, ViewChanged,
]


# =============================================================================
# Reducer
# =============================================================================

def _layout_for(dataset: Dataset, context: LayoutContext, settings: Settings):
    if context.view is View.CASCADE:
        return None

    edges = dataset.edges if context.show_edges else []
    if context.view is View.ORBITAL:
        if context.declared_only:
            edges = [e for e in edges if e.declared]
        return OrbitalCorridorLayout(settings.orbital).compute(
            dataset.hazards, edges, hidden_categories=context.hidden_categories
        )
    return HierarchicalBundlingLayout(settings.bundling).compute(
        dataset.hazards,
        edges,
        tension=context.tension,
        hidden_categories=context.hidden_categories,
        declared_only=context.declared_only,
    )


def _cascade_for(dataset: Dataset, context: LayoutContext, settings: Settings) -> Optional[BidirectionalCascade]:
    if context.selected_id is None:
        return None
    index = dataset.visible_index(context.hidden_categories)
    builder = CascadeTreeBuilder(index, settings.cascade)
    return builder.build_bidirectional(context.selected_id, context.cascade_depth)


def _highlight_for(dataset: Dataset, context: LayoutContext) -> FrozenSet[str]:
    if context.selected_id is None:
        return frozenset()
    visible = {h.id for h in dataset.visible_hazards(context.hidden_categories)}
    if context.selected_id not in visible:
        return frozenset()
    return frozenset(dataset.graph.k_hop_neighborhood(context.selected_id, context.hops) & visible)


def _rebuild_view(dataset: Dataset, state: ExplorerState, context: LayoutContext,
                  settings: Settings) -> ExplorerState:
    if context.view is View.CASCADE:
        return replace(state, context=context, layout=None,
                       cascade=_cascade_for(dataset, context, settings))
    return replace(state, context=context, layout=_layout_for(dataset, context, settings))


def reduce(
    dataset: Dataset,
    state: ExplorerState,
    command: Command,
    settings: Optional[Settings] = None,
) -> ExplorerState:
    """
    Apply one command and return the next state.

    Raises:
        ValueError: For an out-of-range tension or a negative hop count.
        TypeError: For an unrecognized command.
    """
    settings = settings or Settings()
    context = state.context

    if isinstance(command, FilterTypesChanged):
        context = replace(context, hidden_categories=frozenset(command.hidden_categories))
        return replace(_rebuild_view(dataset, state, context, settings),
                       highlighted=_highlight_for(dataset, context))

    if isinstance(command, EdgesVisibilityChanged):
        context = replace(context, show_edges=command.show_edges, declared_only=command.declared_only)
        return replace(state, context=context, layout=_layout_for(dataset, context, settings))

    if isinstance(command, TensionChanged):
        if not 0.0 <= command.tension <= 1.0:
            raise ValueError(f"tension must be within [0, 1], got {command.tension}")
        context = replace(context, tension=command.tension)
        if context.view is not View.BUNDLE:
            return replace(state, context=context)
        return replace(state, context=context, layout=_layout_for(dataset, context, settings))

    if isinstance(command, NodeSelected):
        context = replace(context, selected_id=command.node_id, cascade_depth=command.depth)
        if context.view is View.CASCADE:
            return replace(state, context=context, cascade=_cascade_for(dataset, context, settings))
        return replace(state, context=context, highlighted=_highlight_for(dataset, context))

    if isinstance(command, KHopExpand):
        if command.hops < 0:
            raise ValueError(f"hops must be non-negative, got {command.hops}")
        context = replace(context, hops=command.hops)
        return replace(state, context=context, highlighted=_highlight_for(dataset, context))

    if isinstance(command, ViewChanged):
        context = replace(context, view=View(command.view))
        return _rebuild_view(dataset, state, context, settings)

    raise TypeError(f"Unknown explorer command: {type(command).__name__}")


class Explorer:
    """Owns the dataset and the current state; applies commands in order."""

    def __init__(self, dataset: Dataset, settings: Optional[Settings] = None):
        self.dataset = dataset
        self.settings = settings or Settings()
        context = LayoutContext(tension=self.settings.bundling.tension)
        self._state = ExplorerState(
            context=context,
            layout=_layout_for(dataset, context, self.settings),
        )

    @property
    def state(self) -> ExplorerState:
        return self._state

    def dispatch(self, command: Command) -> ExplorerState:
        self._state = reduce(self.dataset, self._state, command, self.settings)
        logger.debug(f"Dispatched {type(command).__name__}; view={self._state.context.view}")
        return self._state
