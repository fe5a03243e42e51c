"""
Tests for the similarity signals.

These tests verify:
- Jaccard laws for tag_similarity (identity, symmetry, empty side)
- Bigram text similarity
- Weighted unit similarity
- Lineage adjacency (siblings, direct parent/child only)
"""

import pytest

from hlm.contracts.units import KnowledgeUnit
from hlm.similarity import (
    tag_similarity,
    text_similarity,
    unit_similarity,
    share_lineage,
)


class TestTagSimilarity:

    def test_identical_sets_score_one(self):
        assert tag_similarity(["ml", "nlp"], ["ml", "nlp"]) == 1.0

    def test_normalization_before_comparison(self):
        assert tag_similarity(["ML", " nlp "], ["ml", "nlp"]) == 1.0

    def test_symmetric(self):
        a, b = ["a", "b", "c"], ["b", "c", "d"]
        assert tag_similarity(a, b) == tag_similarity(b, a) == pytest.approx(0.5)

    def test_empty_side_scores_zero(self):
        assert tag_similarity(["a"], []) == 0.0
        assert tag_similarity([], ["a"]) == 0.0
        assert tag_similarity(None, ["a"]) == 0.0

    def test_disjoint_sets_score_zero(self):
        assert tag_similarity(["a"], ["b"]) == 0.0


class TestTextSimilarity:

    def test_exact_match(self):
        assert text_similarity("Graph theory", "graph theory ") == 1.0

    def test_single_character_exact_match(self):
        assert text_similarity("a", "a") == 1.0

    def test_short_or_empty_strings(self):
        assert text_similarity("a", "b") == 0.0
        assert text_similarity("", "abc") == 0.0
        assert text_similarity(None, "abc") == 0.0

    def test_bigram_overlap(self):
        # {ab, bc} vs {ab, bd}
        assert text_similarity("abc", "abd") == pytest.approx(1 / 3)


class TestUnitSimilarity:

    def test_identical_units_score_one(self):
        a = KnowledgeUnit(id="a", tags=("ml",), summary="Same text", domain="ai")
        b = KnowledgeUnit(id="b", tags=("ml",), summary="Same text", domain="ai")
        assert unit_similarity(a, b) == pytest.approx(1.0)

    def test_missing_domain_never_matches(self):
        a = KnowledgeUnit(id="a", tags=("ml",), summary="Same text")
        b = KnowledgeUnit(id="b", tags=("ml",), summary="Same text")
        assert unit_similarity(a, b) == pytest.approx(0.8)

    def test_tags_only(self):
        a = KnowledgeUnit(id="a", tags=("ml",))
        b = KnowledgeUnit(id="b", tags=("ml",))
        assert unit_similarity(a, b) == pytest.approx(0.5)

    def test_missing_unit(self):
        assert unit_similarity(None, KnowledgeUnit(id="a")) == 0.0

    def test_store_records(self):
        a = {"id": "a", "tags": ["ML"], "summary": "same", "domain": "ai"}
        b = {"id": "b", "tags": ["ml"], "human": {"summary": "same"}, "domain": "ai"}
        assert unit_similarity(a, b) == pytest.approx(1.0)

    def test_record_and_unit_mixed(self):
        record = {"id": "a", "tags": ["ml"]}
        assert unit_similarity(record, KnowledgeUnit(id="b", tags=("ml",))) == pytest.approx(0.5)

    @pytest.mark.parametrize("other", [
        {"tags": ["ml"], "summary": "same"},
        KnowledgeUnit(id="", tags=("ml",)),
        "ml",
        42,
    ])
    def test_unusable_side_scores_zero(self, other):
        assert unit_similarity(KnowledgeUnit(id="a", tags=("ml",)), other) == 0.0
        assert unit_similarity(other, KnowledgeUnit(id="a", tags=("ml",))) == 0.0


class TestShareLineage:

    def test_siblings(self):
        a = KnowledgeUnit(id="a", parent_id="p")
        b = KnowledgeUnit(id="b", parent_id="p")
        assert share_lineage(a, b)

    def test_parent_child_both_directions(self):
        parent = KnowledgeUnit(id="p")
        child = KnowledgeUnit(id="c", parent_id="p")
        assert share_lineage(parent, child)
        assert share_lineage(child, parent)

    def test_grandparent_does_not_count(self):
        grandparent = KnowledgeUnit(id="g")
        grandchild = KnowledgeUnit(id="c", parent_id="p")
        assert not share_lineage(grandparent, grandchild)

    def test_parentless_units(self):
        assert not share_lineage(KnowledgeUnit(id="a"), KnowledgeUnit(id="b"))

    def test_store_records(self):
        assert share_lineage({"id": "a", "parentId": "p"}, {"id": "b", "parentId": "p"})
        assert share_lineage({"id": "p"}, {"id": "c", "parent_id": "p"})

    @pytest.mark.parametrize("other", [{"parentId": "p"}, KnowledgeUnit(id="", parent_id="p"), None, 3])
    def test_unusable_side(self, other):
        assert not share_lineage(KnowledgeUnit(id="a", parent_id="p"), other)
        assert not share_lineage(other, KnowledgeUnit(id="a", parent_id="p"))
