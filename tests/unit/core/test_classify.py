"""
Unit tests for edge attestation.
"""

from hipsweb.core.classify import classify_edges, degree_counts, filter_edges


class TestClassifyEdges:

    def test_declared_and_inferred(self, small_hazards):
        edges = {(e.source, e.target): e.declared for e in classify_edges(small_hazards)}
        assert edges == {
            ("a", "b"): True,
            ("a", "c"): False,
            ("b", "c"): True,
            ("c", "a"): False,
        }

    def test_declaration_order(self, small_hazards):
        keys = [e.key for e in classify_edges(small_hazards)]
        assert keys == ["a->b", "a->c", "b->c", "c->a"]

    def test_dangling_references_dropped(self, small_hazards):
        assert all(e.target != "missing" for e in classify_edges(small_hazards))

    def test_incoming_only_declaration_creates_no_edge(self, small_hazards):
        """e lists b in causedBy, but b does not list e in causes."""
        keys = {e.key for e in classify_edges(small_hazards)}
        assert "b->e" not in keys

    def test_duplicate_declarations_deduplicated(self, make_hazard):
        hazards = [make_hazard("a", causes=["b", "b"]), make_hazard("b", caused_by=["a"])]
        edges = classify_edges(hazards)
        assert len(edges) == 1
        assert edges[0].declared is True

    def test_self_loop_is_kept(self, make_hazard):
        edges = classify_edges([make_hazard("a", causes=["a"], caused_by=["a"])])
        assert [(e.source, e.target, e.declared) for e in edges] == [("a", "a", True)]

    def test_empty_input(self):
        assert classify_edges([]) == []

    def test_tl0405_hub(self, tl0405_hazards):
        """A hub whose one-sided incoming claims outnumber its own declarations."""
        edges = classify_edges(tl0405_hazards)
        incident = [e for e in edges if "TL0405" in (e.source, e.target)]
        incoming_inferred = [e for e in incident if e.target == "TL0405" and not e.declared]

        assert len(incident) == 63
        assert len(incoming_inferred) == 39
        assert all(e.source.startswith("clm") for e in incoming_inferred)
        assert degree_counts(edges, declared_only=True)["TL0405"] == 24


class TestDegreeCounts:

    def test_declared_degree_never_exceeds_degree(self, small_hazards, tl0405_hazards):
        for hazards in (small_hazards, tl0405_hazards):
            edges = classify_edges(hazards)
            total = degree_counts(edges)
            declared = degree_counts(edges, declared_only=True)
            for hazard in hazards:
                assert declared[hazard.id] <= total[hazard.id]

    def test_counts(self, small_hazards):
        counts = degree_counts(classify_edges(small_hazards))
        assert counts["a"] == 3
        assert counts["d"] == 0


class TestFilterEdges:

    def test_visibility_and_declared_only(self, small_hazards):
        edges = classify_edges(small_hazards)
        assert {e.key for e in filter_edges(edges, {"a", "b"})} == {"a->b"}
        assert {e.key for e in filter_edges(edges, {"a", "b", "c"}, declared_only=True)} == {"a->b", "b->c"}
