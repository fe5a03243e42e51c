"""
Tests for snapshot coercion into KnowledgeUnit values.
"""

from datetime import datetime, timezone

import pytest

from hlm.contracts.units import (
    KnowledgeUnit,
    UnitSnapshot,
    coerce_units,
    normalize_tags,
    ERROR_NOT_SEQUENCE,
)
from utils.datetime_utils import to_utc_datetime


class TestNormalizeTags:

    def test_lowercase_trim_dedupe(self):
        assert normalize_tags([" ML", "ml", "NLP ", ""]) == ("ml", "nlp")

    def test_non_list_is_no_tags(self):
        assert normalize_tags("ml") == ()
        assert normalize_tags(None) == ()
        assert normalize_tags(3) == ()

    def test_non_string_tags_coerced(self):
        assert normalize_tags([2024, "x"]) == ("2024", "x")


class TestKnowledgeUnit:

    def test_raw_and_normalized_tags(self):
        unit = KnowledgeUnit(id="a", raw_tags=(" Machine Learning ", "machine learning"))

        assert unit.raw_tags == ("Machine Learning", "machine learning")
        assert unit.tags == ("machine learning",)
        assert unit.tag_set == frozenset({"machine learning"})

    def test_authority_clamped(self):
        assert KnowledgeUnit(id="a", authority=3).authority == 1.0
        assert KnowledgeUnit(id="a", authority=-1).authority == 0.0
        assert KnowledgeUnit(id="a", authority="high").authority == 0.0
        assert KnowledgeUnit(id="a", authority=float("nan")).authority == 0.0

    def test_tier_normalized(self):
        assert KnowledgeUnit(id="a", tier="MEGA").tier == "mega"
        assert KnowledgeUnit(id="a", tier="legendary").tier == "unknown"

    def test_blank_optional_fields(self):
        unit = KnowledgeUnit(id="a", domain="  ", parent_id="")
        assert unit.domain is None
        assert unit.parent_id is None


class TestFromMapping:

    def test_store_native_keys(self):
        unit = KnowledgeUnit.from_mapping({
            "id": "dtu_1",
            "tags": ["A"],
            "parentId": "dtu_0",
            "createdAt": "2024-05-01T12:00:00Z",
            "human": {"summary": "Human summary"},
            "authority": {"score": 0.75},
            "tier": "hyper",
        })

        assert unit.parent_id == "dtu_0"
        assert unit.created_at == datetime(2024, 5, 1, 12, tzinfo=timezone.utc)
        assert unit.summary == "Human summary"
        assert unit.authority == 0.75
        assert unit.tier == "hyper"

    def test_title_fallback(self):
        assert KnowledgeUnit.from_mapping({"id": "a", "title": "Title"}).summary == "Title"

    @pytest.mark.parametrize("record", [{}, {"id": None}, {"id": 7}, {"id": "   "}])
    def test_missing_id(self, record):
        assert KnowledgeUnit.from_mapping(record) is None

    def test_round_trip_dict(self):
        unit = KnowledgeUnit.from_mapping({"id": "a", "tags": ["X"], "domain": "d"})
        data = unit.to_dict()
        assert data["tags"] == ["X"]
        assert data["created_at"] is None


class TestCoerceUnits:

    def test_skips_and_counts(self, unit):
        snapshot = coerce_units([unit("a"), 5, {"tags": []}, unit("a"), unit("b")])

        assert snapshot.ok
        assert snapshot.ids == ["a", "b"]
        assert snapshot.skipped == 3
        assert len(snapshot) == 2

    def test_accepts_units_and_snapshots(self):
        unit = KnowledgeUnit(id="a")
        snapshot = coerce_units([unit])

        assert snapshot.units == (unit,)
        assert coerce_units(snapshot) is snapshot

    @pytest.mark.parametrize("raw", [None, "abc", b"abc", {"units": []}, 1])
    def test_non_sequence(self, raw):
        snapshot = coerce_units(raw)

        assert isinstance(snapshot, UnitSnapshot)
        assert not snapshot.ok
        assert snapshot.error == ERROR_NOT_SEQUENCE
        assert snapshot.units == ()

    def test_tuple_input(self, unit):
        assert coerce_units((unit("a"),)).ids == ["a"]


class TestTimestamps:

    def test_epoch_seconds_and_millis(self):
        seconds = to_utc_datetime(1_700_000_000)
        millis = to_utc_datetime(1_700_000_000_000)
        assert seconds == millis

    def test_naive_datetime_is_utc(self):
        assert to_utc_datetime(datetime(2024, 1, 1)).tzinfo == timezone.utc

    @pytest.mark.parametrize("value", ["yesterday", "", True, object()])
    def test_unparseable(self, value):
        assert to_utc_datetime(value) is None
