"""
Global Configuration and Layout Defaults.

This module centralizes the tuned constants used by the layout and
exploration algorithms. Each value was calibrated against the HIPs
snapshot (~281 hazards, ~1,650 causal links) and is overridable through
the pydantic configs in `hipsweb.settings`.
"""

from pathlib import Path
from typing import Dict, List, Tuple

from .core.types import CategoryStyle, HazardCategory

# --- Category Ordering & Styling ---

# Radial/sector ordering chosen to minimize angular distance between the
# most heavily linked category pairs. Technological (the hub) sits between
# Met/Hydro and Geological, its two heaviest partners.
CATEGORY_ORDER: List[HazardCategory] = [
    HazardCategory.METEOROLOGICAL_HYDROLOGICAL,
    HazardCategory.TECHNOLOGICAL,
    HazardCategory.GEOLOGICAL,
    HazardCategory.CHEMICAL,
    HazardCategory.EXTRATERRESTRIAL,
    HazardCategory.SOCIETAL,
    HazardCategory.BIOLOGICAL,
    HazardCategory.ENVIRONMENTAL,
    HazardCategory.UNKNOWN,
]

CATEGORY_STYLES: Dict[HazardCategory, CategoryStyle] = {
    HazardCategory.METEOROLOGICAL_HYDROLOGICAL: CategoryStyle("#2196F3", "Met/Hydro", "🌊"),
    HazardCategory.EXTRATERRESTRIAL: CategoryStyle("#9C27B0", "Extraterrestrial", "☄️"),
    HazardCategory.GEOLOGICAL: CategoryStyle("#795548", "Geological", "🌋"),
    HazardCategory.ENVIRONMENTAL: CategoryStyle("#4CAF50", "Environmental", "🌿"),
    HazardCategory.CHEMICAL: CategoryStyle("#FF9800", "Chemical", "⚗️"),
    HazardCategory.BIOLOGICAL: CategoryStyle("#F44336", "Biological", "🦠"),
    HazardCategory.TECHNOLOGICAL: CategoryStyle("#607D8B", "Technological", "⚙️"),
    HazardCategory.SOCIETAL: CategoryStyle("#E91E63", "Societal", "👥"),
    HazardCategory.UNKNOWN: CategoryStyle("#9E9E9E", "Unknown", "?"),
}

# --- Hierarchical Edge Bundling ---

# 0 = straight lines, 1 = edges hug the hierarchy backbone
DEFAULT_TENSION = 0.85

# Leaf ring radius in layout units
DEFAULT_RING_RADIUS = 400.0

# Separation multipliers relative to sibling spacing (1.0)
CLUSTER_GAP_MULTIPLIER = 1.5
TYPE_GAP_MULTIPLIER = 2.5

# Leaf spacing (degrees) assumed for a single-member arc
SINGLE_LEAF_ARC_SPACING = 2.0

# --- Orbital Layout ---

# Index 0 is the centre (unused); 1-5 are quantile orbits, 6 is the rim
ORBIT_RADII: Tuple[float, ...] = (0, 150, 320, 520, 750, 1000, 1350)
ORBIT_JITTER: Tuple[float, ...] = (0, 25, 30, 35, 40, 45, 60)

CONNECTED_ORBITS = 5
ISOLATED_ORBIT = 6

# Fraction of each sector left empty on either side
SECTOR_PADDING = 0.05

# Minimum cross-category edges for a category pair to be a corridor
HYPER_ROUTE_EDGE_THRESHOLD = 40

# Minimum cross-category edges for a single hazard to be a bridge node
HYPER_ROUTE_BRIDGE_MIN = 3

MAX_HYPER_ROUTES = 5

# Label radius used when a corridor has no positioned bridge nodes
HYPER_ROUTE_LABEL_FALLBACK_RADIUS = 600.0

# --- Cascade Explorer ---

DEFAULT_CASCADE_DEPTH = 1
MAX_CASCADE_DEPTH = 4

# Children shown per branch before truncation
MAX_CASCADE_CHILDREN = 15

# --- Analysis ---

PAGERANK_DAMPING = 0.85

# Node fields that count as external references
REFERENCE_FIELDS: Tuple[str, ...] = (
    "sources",
    "quoted_from",
    "references",
    "influenced_by",
    "conforms_to",
)

# --- Files ---

DEFAULT_SNAPSHOT_PATH = Path("data/hips.json")
DEFAULT_CONFIG_PATH = Path(".hipsweb/config.yaml")
CONFIG_ENV_VAR = "HIPSWEB_CONFIG"


def category_style(category: HazardCategory) -> CategoryStyle:
    """Look up display styling for a category."""
    return CATEGORY_STYLES.get(category, CATEGORY_STYLES[HazardCategory.UNKNOWN])
