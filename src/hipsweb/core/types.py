"""
Core type definitions for hipsweb.

Hazards and causal edges are immutable for the lifetime of a loaded
snapshot. Category resolution happens once, at construction time, so
downstream code never has to guess at a raw type name again.
"""

from enum import StrEnum
from typing import Any, Dict, List, NamedTuple, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

UNCLUSTERED = "Unclustered"


class HazardCategory(StrEnum):
    """The eight HIPs hazard types, plus a fallback for unmapped names."""
    METEOROLOGICAL_HYDROLOGICAL = "Meteorological and Hydrological"
    EXTRATERRESTRIAL = "Extraterrestrial"
    GEOLOGICAL = "Geological"
    ENVIRONMENTAL = "Environmental"
    CHEMICAL = "Chemical"
    BIOLOGICAL = "Biological"
    TECHNOLOGICAL = "Technological"
    SOCIETAL = "Societal"
    UNKNOWN = "Unknown"

    @classmethod
    def resolve(cls, type_name: str | None) -> "HazardCategory":
        """
        Map a raw API type name onto a known category.

        The API spells type names inconsistently, so an exact match is tried
        first, then case-insensitive containment in either direction.
        """
        if not type_name:
            return cls.UNKNOWN

        try:
            return cls(type_name)
        except ValueError:
            pass

        lower = type_name.lower()
        for category in cls:
            if category is cls.UNKNOWN:
                continue
            key = category.value.lower()
            if key in lower or lower in key:
                return category
        return cls.UNKNOWN


class CategoryStyle(NamedTuple):
    """Display attributes for a hazard category."""
    color: str
    short: str
    icon: str


class Hazard(BaseModel):
    """
    A single hazard entity from the snapshot.

    `causes` and `caused_by` are the hazard's own declarations; they are
    not guaranteed to agree with the declarations of the hazards they name.
    """
    id: str
    label: str = ""
    identifier: str = ""
    definition: str = ""
    type_name: str = Field(default="", alias="typeName")
    cluster_name: str = Field(default="", alias="clusterName")
    causes: Tuple[str, ...] = ()
    caused_by: Tuple[str, ...] = Field(default=(), alias="causedBy")

    sources: Tuple[str, ...] = ()
    quoted_from: Tuple[str, ...] = Field(default=(), alias="quotedFrom")
    references: Tuple[str, ...] = ()
    influenced_by: Tuple[str, ...] = Field(default=(), alias="influencedBy")
    conforms_to: Tuple[str, ...] = Field(default=(), alias="conformsTo")

    category: HazardCategory = HazardCategory.UNKNOWN

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    @field_validator("label", "identifier", "definition", "type_name", "cluster_name", mode="before")
    @classmethod
    def _none_to_empty_str(cls, value: Any) -> Any:
        return value or ""

    @field_validator(
        "causes", "caused_by", "sources", "quoted_from", "references",
        "influenced_by", "conforms_to", mode="before",
    )
    @classmethod
    def _none_to_empty_tuple(cls, value: Any) -> Any:
        if value is None:
            return ()
        if isinstance(value, str):
            return (value,)
        return value

    def model_post_init(self, __context) -> None:
        if self.category is HazardCategory.UNKNOWN and self.type_name:
            object.__setattr__(self, "category", HazardCategory.resolve(self.type_name))

    @property
    def connection_count(self) -> int:
        """Total declared links, counting both declaration lists."""
        return len(self.causes) + len(self.caused_by)

    @property
    def display_label(self) -> str:
        return self.label or self.id

    @property
    def subcategory(self) -> str:
        return self.cluster_name or UNCLUSTERED

    def __hash__(self):
        return hash(self.id)

    def __eq__(self, other):
        if isinstance(other, Hazard):
            return self.id == other.id
        return False


class CausalEdge(BaseModel):
    """
    Directed "causes" relationship materialized from a source declaration.

    `declared` is True when the target's own `caused_by` list also names
    the source (mutually attested); False for one-sided links.
    """
    source: str
    target: str
    declared: bool

    model_config = ConfigDict(frozen=True)

    @property
    def key(self) -> str:
        return f"{self.source}->{self.target}"


class RawEdge(BaseModel):
    """Unclassified edge as it appears in the snapshot file."""
    source: str
    target: str
    type: str = "causes"

    model_config = ConfigDict(extra="ignore")


class SnapshotMeta(BaseModel):
    source: str = ""
    fetched_at: str = Field(default="", alias="fetchedAt")
    node_count: int = Field(default=0, alias="nodeCount")
    edge_count: int = Field(default=0, alias="edgeCount")

    model_config = ConfigDict(extra="allow", populate_by_name=True)


class Snapshot(BaseModel):
    """A static, versioned dataset snapshot."""
    meta: SnapshotMeta = Field(default_factory=SnapshotMeta)
    nodes: List[Hazard] = Field(default_factory=list)
    edges: List[RawEdge] = Field(default_factory=list)

    def hazard_map(self) -> Dict[str, Hazard]:
        return {hazard.id: hazard for hazard in self.nodes}
