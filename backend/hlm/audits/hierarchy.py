"""
Hierarchy Check - are MEGA / HYPER promotions warranted?

- MEGA:  authority >= 0.5 and >= 2 children
- HYPER: authority >= 0.7 and >= 3 children
Children are units whose parent_id references the unit.
Violations are reported, never corrected.
"""

import logging
from collections import Counter
from typing import List

from ..contracts.units import coerce_units
from ..contracts.audits import HierarchyIssue, HierarchyIssueType, HierarchyResult
from ..params import TIER_REQUIREMENTS

logger = logging.getLogger(__name__)


def hierarchy_check(units) -> HierarchyResult:
    snapshot = coerce_units(units)
    if not snapshot.ok:
        return HierarchyResult(ok=False, error=snapshot.error)

    child_counts = Counter(u.parent_id for u in snapshot.units if u.parent_id)
    issues: List[HierarchyIssue] = []

    for unit in snapshot.units:
        requirement = TIER_REQUIREMENTS.get(unit.tier)
        if requirement is None:
            continue
        min_authority, min_children = requirement
        tier_label = unit.tier.upper()
        children = child_counts.get(unit.id, 0)

        if unit.authority < min_authority:
            issues.append(HierarchyIssue(
                unit_id=unit.id,
                tier=tier_label,
                issue=HierarchyIssueType.LOW_AUTHORITY,
                authority=unit.authority,
                children=children,
                description=(
                    f"{tier_label} DTU {unit.id} has low authority ({unit.authority}), "
                    f"may not warrant {tier_label} status"
                ),
            ))
        if children < min_children:
            issues.append(HierarchyIssue(
                unit_id=unit.id,
                tier=tier_label,
                issue=HierarchyIssueType.FEW_CHILDREN,
                authority=unit.authority,
                children=children,
                description=(
                    f"{tier_label} DTU {unit.id} has only {children} children, "
                    f"expected at least {min_children}"
                ),
            ))

    logger.debug(f"Hierarchy check: {len(issues)} issues")
    return HierarchyResult(issues=tuple(issues))
