"""
Audit Contracts - Integrity findings over a unit snapshot.

Auditors only report. Nothing here is ever auto-corrected.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from utils.datetime_utils import isoformat_or_none


# =============================================================================
# DOMAIN CENSUS
# =============================================================================

class ImbalanceType(Enum):
    OVER_REPRESENTED = "over_represented"
    UNDER_REPRESENTED = "under_represented"


@dataclass(frozen=True)
class DomainCount:
    domain: str
    count: int
    ratio: float  # share of all units, 3 dp
    tiers: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "domain": self.domain,
            "count": self.count,
            "ratio": self.ratio,
            "tiers": dict(self.tiers),
        }


@dataclass(frozen=True)
class DomainImbalance:
    domain: str
    imbalance_type: ImbalanceType
    count: int
    average: float
    ratio: float  # count / average, 2 dp
    description: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "domain": self.domain,
            "type": self.imbalance_type.value,
            "count": self.count,
            "average": self.average,
            "ratio": self.ratio,
            "description": self.description,
        }


@dataclass(frozen=True)
class CensusResult:
    domains: Tuple[DomainCount, ...] = ()
    imbalances: Tuple[DomainImbalance, ...] = ()
    total_units: int = 0
    ok: bool = True
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ok": self.ok,
            "error": self.error,
            "domains": [d.to_dict() for d in self.domains],
            "imbalances": [i.to_dict() for i in self.imbalances],
            "total_units": self.total_units,
        }


# =============================================================================
# FRESHNESS
# =============================================================================

@dataclass(frozen=True)
class StaleUnit:
    unit_id: str
    domain: str
    tier: str
    age_days: int
    created_at: Optional[datetime]
    authority: float
    tags: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "unit_id": self.unit_id,
            "domain": self.domain,
            "tier": self.tier,
            "age_days": self.age_days,
            "created_at": isoformat_or_none(self.created_at),
            "authority": self.authority,
            "tags": list(self.tags),
        }


@dataclass(frozen=True)
class FreshnessResult:
    stale: Tuple[StaleUnit, ...] = ()  # oldest first
    fresh_count: int = 0
    ok: bool = True
    error: Optional[str] = None

    @property
    def stale_count(self) -> int:
        return len(self.stale)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ok": self.ok,
            "error": self.error,
            "stale": [s.to_dict() for s in self.stale],
            "fresh_count": self.fresh_count,
            "stale_count": self.stale_count,
        }


# =============================================================================
# HIERARCHY
# =============================================================================

class HierarchyIssueType(Enum):
    LOW_AUTHORITY = "low_authority"
    FEW_CHILDREN = "few_children"


@dataclass(frozen=True)
class HierarchyIssue:
    unit_id: str
    tier: str  # "MEGA" / "HYPER"
    issue: HierarchyIssueType
    authority: float
    children: int
    description: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "unit_id": self.unit_id,
            "tier": self.tier,
            "issue": self.issue.value,
            "authority": self.authority,
            "children": self.children,
            "description": self.description,
        }


@dataclass(frozen=True)
class HierarchyResult:
    issues: Tuple[HierarchyIssue, ...] = ()
    ok: bool = True
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"ok": self.ok, "error": self.error, "issues": [i.to_dict() for i in self.issues]}


# =============================================================================
# TAG NORMALIZATION
# =============================================================================

@dataclass(frozen=True)
class TagVariantGroup:
    canonical: str
    variants: Tuple[str, ...]
    count: int

    @property
    def description(self) -> str:
        return (
            f'Tag "{self.canonical}" has {len(self.variants)} variants: '
            f'{", ".join(self.variants)}'
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "canonical": self.canonical,
            "variants": list(self.variants),
            "count": self.count,
            "description": self.description,
        }


@dataclass(frozen=True)
class TagNormalizationResult:
    normalizations: Tuple[TagVariantGroup, ...] = ()
    tag_counts: Dict[str, int] = field(default_factory=dict)
    ok: bool = True
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ok": self.ok,
            "error": self.error,
            "normalizations": [n.to_dict() for n in self.normalizations],
            "tag_counts": dict(self.tag_counts),
        }


# =============================================================================
# LINEAGE
# =============================================================================

class LineageIssueType(Enum):
    BROKEN_PARENT = "broken_parent"
    SELF_PARENT = "self_parent"
    LINEAGE_CYCLE = "lineage_cycle"


@dataclass(frozen=True)
class LineageIssue:
    unit_id: str
    issue: LineageIssueType
    parent_id: Optional[str]
    description: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "unit_id": self.unit_id,
            "issue": self.issue.value,
            "parent_id": self.parent_id,
            "description": self.description,
        }


@dataclass(frozen=True)
class LineageResult:
    issues: Tuple[LineageIssue, ...] = ()
    ok: bool = True
    error: Optional[str] = None

    def of_type(self, issue: LineageIssueType) -> Tuple[LineageIssue, ...]:
        return tuple(i for i in self.issues if i.issue is issue)

    def to_dict(self) -> Dict[str, Any]:
        return {"ok": self.ok, "error": self.error, "issues": [i.to_dict() for i in self.issues]}
