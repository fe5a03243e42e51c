"""
Tests for prefixed artefact ids.
"""

import pytest

from utils.id_generator import (
    PREFIXES,
    generate_id,
    validate_id,
    get_id_type,
    generate_cluster_id,
    generate_pass_id,
)


class TestIdGenerator:

    @pytest.mark.parametrize("artefact_type", sorted(PREFIXES))
    def test_round_trip_type(self, artefact_type):
        artefact_id = generate_id(artefact_type)

        assert validate_id(artefact_id)
        assert get_id_type(artefact_id) == artefact_type

    def test_format(self):
        cluster_id = generate_cluster_id()
        prefix, random_part = cluster_id.split("_")

        assert prefix == "clst"
        assert len(random_part) == 10

    def test_unique(self):
        assert len({generate_pass_id() for _ in range(500)}) == 500

    def test_unknown_type(self):
        with pytest.raises(ValueError):
            generate_id("surface")

    @pytest.mark.parametrize("value", ["", None, "clst_short", "xyz_0123456789", "CLST_0123456789"])
    def test_invalid(self, value):
        assert not validate_id(value)
        assert get_id_type(value) is None
