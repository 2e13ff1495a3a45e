"""
Unit tests for the core hazard models.
"""

import pytest
from pydantic import ValidationError

from hipsweb.core.types import UNCLUSTERED, CausalEdge, Hazard, HazardCategory


class TestHazardCategory:

    def test_exact_match(self):
        assert HazardCategory.resolve("Geological") is HazardCategory.GEOLOGICAL

    def test_containment_match(self):
        """The API sometimes decorates or abbreviates type names."""
        assert HazardCategory.resolve("geological hazards") is HazardCategory.GEOLOGICAL
        assert HazardCategory.resolve("Meteorological") is HazardCategory.METEOROLOGICAL_HYDROLOGICAL

    def test_unmapped_falls_back_to_unknown(self):
        assert HazardCategory.resolve("Cosmic horror") is HazardCategory.UNKNOWN
        assert HazardCategory.resolve("") is HazardCategory.UNKNOWN
        assert HazardCategory.resolve(None) is HazardCategory.UNKNOWN


class TestHazard:

    def test_camel_case_aliases(self):
        hazard = Hazard.model_validate({
            "id": "x",
            "typeName": "Chemical",
            "clusterName": "Spills",
            "causedBy": ["y"],
            "quotedFrom": ["z"],
        })
        assert hazard.type_name == "Chemical"
        assert hazard.cluster_name == "Spills"
        assert hazard.caused_by == ("y",)
        assert hazard.quoted_from == ("z",)

    def test_category_resolved_on_construction(self):
        hazard = Hazard(id="x", type_name="Biological")
        assert hazard.category is HazardCategory.BIOLOGICAL

    def test_nulls_normalized(self):
        hazard = Hazard.model_validate({"id": "x", "label": None, "causes": None, "sources": "one"})
        assert hazard.label == ""
        assert hazard.causes == ()
        assert hazard.sources == ("one",)

    def test_connection_count(self, make_hazard):
        hazard = make_hazard("x", causes=["a", "b"], caused_by=["c"])
        assert hazard.connection_count == 3

    def test_display_label_and_subcategory_fallbacks(self):
        hazard = Hazard(id="x")
        assert hazard.display_label == "x"
        assert hazard.subcategory == UNCLUSTERED

    def test_equality_by_id(self, make_hazard):
        assert make_hazard("x", label="One") == make_hazard("x", label="Two")
        assert len({make_hazard("x"), make_hazard("x")}) == 1

    def test_frozen(self):
        hazard = Hazard(id="x")
        with pytest.raises(ValidationError):
            hazard.label = "changed"

    def test_missing_id_rejected(self):
        with pytest.raises(ValidationError):
            Hazard.model_validate({"label": "no id"})


class TestCausalEdge:

    def test_key(self):
        assert CausalEdge(source="a", target="b", declared=True).key == "a->b"
