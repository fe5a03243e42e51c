"""
Integrity auditors - independent, read-only checks over a snapshot.

Each auditor is a pure function; they share nothing and may run in
any order or in parallel.
"""

from .census import domain_census
from .freshness import freshness_check
from .hierarchy import hierarchy_check
from .tag_normalizer import tag_normalization, canonical_tag
from .lineage import lineage_audit

__all__ = [
    "domain_census",
    "freshness_check",
    "hierarchy_check",
    "tag_normalization",
    "canonical_tag",
    "lineage_audit",
]
