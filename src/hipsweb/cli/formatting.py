"""
Rich renderables for human-readable command output.
"""

from typing import Dict, List

from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from ..analysis.cascade import BidirectionalCascade, CascadeNode
from ..analysis.centrality import CentralityMetrics
from ..analysis.insights import NetworkInsights
from ..config import category_style
from ..core.types import HazardCategory
from ..layout.orbital import Corridor


def _node_label(node: CascadeNode) -> str:
    if node.ghost:
        return f"[dim italic]↺ {escape(node.label)}[/dim italic]"
    style = category_style(node.category)
    label = f"[{style.color}]{style.icon}[/] {escape(node.label)} [dim]({node.connection_count})[/dim]"
    if node.declared is False:
        label += " [yellow]inferred[/yellow]"
    return label


def _add_cascade_children(branch: Tree, node: CascadeNode) -> None:
    for child in node.children:
        _add_cascade_children(branch.add(_node_label(child)), child)
    if node.truncated:
        branch.add(f"[dim]… {node.truncated} more[/dim]")


def format_cascade(cascade: BidirectionalCascade) -> Tree:
    """Triggers and effects of one hazard as a two-branch tree."""
    root = cascade.root
    style = category_style(root.category)
    tree = Tree(f"{style.icon} [bold]{escape(root.display_label)}[/bold] [dim]{escape(root.identifier)}[/dim]")

    triggers = tree.add(f"⬆ [bold]Triggers[/bold] [dim]({cascade.triggers.total_children})[/dim]")
    _add_cascade_children(triggers, cascade.triggers)
    if not cascade.triggers.children:
        triggers.add("[dim]None[/dim]")

    effects = tree.add(f"⬇ [bold]Effects[/bold] [dim]({cascade.effects.total_children})[/dim]")
    _add_cascade_children(effects, cascade.effects)
    if not cascade.effects.children:
        effects.add("[dim]None[/dim]")
    return tree


def format_stats(stats: Dict[str, object], insights: NetworkInsights) -> List[Table]:
    counts = Table(title="Network", show_header=False)
    counts.add_column("Metric", style="cyan")
    counts.add_column("Value", justify="right")
    counts.add_row("Hazards", str(stats["total_nodes"]))
    counts.add_row("Causal edges", str(stats["total_edges"]))
    counts.add_row("Declared (mutual)", str(stats["declared_edges"]))
    counts.add_row("Inferred (one-sided)", str(stats["inferred_edges"]))
    counts.add_row("Isolated hazards", str(stats["isolated_nodes"]))
    counts.add_row("Average degree", f"{insights.avg_degree:.2f}")
    counts.add_row("Average declared degree", f"{insights.avg_declared_degree:.2f}")
    counts.add_row("Reciprocation rate", f"{insights.reciprocation_rate:.1%}")
    counts.add_row("Cross-category edges", f"{insights.cross_category_ratio:.1%}")
    counts.add_row("Reference coverage", f"{insights.reference_coverage:.1%}")
    if insights.most_connected.id:
        counts.add_row(
            "Most connected",
            f"{escape(insights.most_connected.label)} ({insights.most_connected.degree})",
        )
    if insights.densest_cluster.name:
        counts.add_row(
            "Densest cluster",
            f"{escape(insights.densest_cluster.name)} ({insights.densest_cluster.density:.2f})",
        )

    categories = Table(title="Hazards by category")
    categories.add_column("Category")
    categories.add_column("Hazards", justify="right")
    by_category = stats["nodes_by_category"]
    for category in HazardCategory:
        count = by_category.get(category.value, 0)
        if count:
            style = category_style(category)
            categories.add_row(f"[{style.color}]{style.icon}[/] {category.value}", str(count))
    return [counts, categories]


def format_corridors(corridors: List[Corridor]) -> Table:
    table = Table(title="Hyper-routes")
    table.add_column("Corridor", style="bold")
    table.add_column("Edges", justify="right")
    table.add_column("Bridges", justify="right")
    table.add_column("Anchor", justify="right", style="dim")
    for corridor in corridors:
        table.add_row(
            corridor.label,
            str(corridor.edge_count),
            str(len(corridor.bridge_node_ids)),
            f"({corridor.anchor.x:.0f}, {corridor.anchor.y:.0f})",
        )
    return table


def format_centrality(rows: List[CentralityMetrics], labels: Dict[str, str]) -> Table:
    table = Table(title="Centrality")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Hazard")
    table.add_column("PageRank", justify="right")
    table.add_column("Betweenness", justify="right")
    table.add_column("Closeness", justify="right")
    for metric in rows:
        table.add_row(
            str(metric.pagerank_rank),
            escape(labels.get(metric.id, metric.id)),
            f"{metric.pagerank:.4f}",
            f"{metric.betweenness:.1f}",
            f"{metric.closeness:.3f}",
        )
    return table
