"""
Pytest configuration for HLM tests.
"""

from datetime import datetime, timezone

import pytest

from hlm.params import EngineParams
from hlm.repositories import PassRepository
from hlm.engine import HLMEngine


def pytest_configure(config):
    """Configure pytest with asyncio marker."""
    config.addinivalue_line(
        "markers", "asyncio: mark test as an async test."
    )


def make_unit(uid, tags=(), **fields):
    """Store-shaped unit record."""
    record = {"id": uid, "tags": list(tags)}
    record.update(fields)
    return record


@pytest.fixture
def unit():
    return make_unit


@pytest.fixture
def reference_time():
    return datetime(2025, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def ml_robotics_units():
    """
    Two ml/nlp units, one ml/vision unit, two robotics units.

    Under the >= 2 shared tags rule only the two ml/nlp units link.
    """
    return [
        make_unit("u1", ["ml", "nlp"], domain="ai"),
        make_unit("u2", ["ml", "nlp"], domain="ai"),
        make_unit("u3", ["ml", "vision"], domain="ai"),
        make_unit("u4", ["robotics"], domain="hardware"),
        make_unit("u5", ["robotics"], domain="hardware"),
    ]


@pytest.fixture
def library_units():
    """
    A small collection with two tag communities, a duplicate pair,
    a unit touching both communities, an orphan and a broken lineage.
    """
    return [
        # Graph community
        make_unit("g1", ["graphs", "algorithms"], domain="cs", summary="Shortest path algorithms"),
        make_unit("g2", ["graphs", "algorithms"], domain="cs", summary="Shortest path algorithms"),
        make_unit("g3", ["graphs", "algorithms", "trees"], domain="cs", summary="Spanning trees"),
        make_unit("g4", ["graphs", "trees"], domain="cs", summary="Tree traversal"),
        # Biology community
        make_unit("b1", ["cells", "genetics"], domain="biology", summary="Cell division"),
        make_unit("b2", ["cells", "genetics"], domain="biology", summary="Gene expression"),
        make_unit("b3", ["cells", "genetics", "proteins"], domain="biology", summary="Protein folding"),
        # One tag from each community
        make_unit("x1", ["graphs", "genetics"], domain="bioinformatics", summary="Gene networks"),
        # Sparsely tagged, no parent
        make_unit("o1", ["genetics"], summary="Loose note"),
        # Points to a parent outside the snapshot
        make_unit("l1", ["misc"], parent_id="missing"),
    ]


@pytest.fixture
def params():
    return EngineParams()


@pytest.fixture
def repository():
    return PassRepository(pass_cap=100, pass_trim_to=50, recommendation_cap=1000, recommendation_trim_to=500)


@pytest.fixture
def engine(params, repository):
    return HLMEngine(params=params, repository=repository)
