"""
Lineage Auditor - parent references must form a forest.

For every unit with a parent reference:
- broken_parent: the parent is not in the snapshot
- self_parent:   the unit is its own parent
- lineage_cycle: walking the parent chain revisits a unit

The walk is bounded by the snapshot size, so it terminates even when
the chain loops. A unit whose chain runs into a loop is flagged too.
"""

import logging
from typing import List

from ..contracts.units import coerce_units
from ..contracts.audits import LineageIssue, LineageIssueType, LineageResult

logger = logging.getLogger(__name__)


def _walk_revisits(start_id: str, parents: dict, limit: int) -> bool:
    visited = set()
    current = start_id
    steps = 0
    while current is not None and steps <= limit:
        if current in visited:
            return True
        visited.add(current)
        current = parents.get(current)
        steps += 1
    return False


def lineage_audit(units) -> LineageResult:
    snapshot = coerce_units(units)
    if not snapshot.ok:
        return LineageResult(ok=False, error=snapshot.error)

    parents = {u.id: u.parent_id for u in snapshot.units}
    issues: List[LineageIssue] = []

    for unit in snapshot.units:
        if not unit.parent_id:
            continue
        if unit.parent_id not in parents:
            issues.append(LineageIssue(
                unit_id=unit.id,
                issue=LineageIssueType.BROKEN_PARENT,
                parent_id=unit.parent_id,
                description=f"DTU {unit.id} references parent {unit.parent_id} which does not exist",
            ))
        if unit.parent_id == unit.id:
            issues.append(LineageIssue(
                unit_id=unit.id,
                issue=LineageIssueType.SELF_PARENT,
                parent_id=unit.parent_id,
                description=f"DTU {unit.id} references itself as parent",
            ))

    limit = len(parents)
    for unit in snapshot.units:
        if unit.parent_id and _walk_revisits(unit.id, parents, limit):
            issues.append(LineageIssue(
                unit_id=unit.id,
                issue=LineageIssueType.LINEAGE_CYCLE,
                parent_id=unit.parent_id,
                description=f"DTU {unit.id} is part of a parent-child cycle",
            ))

    logger.debug(f"Lineage audit: {len(issues)} issues")
    return LineageResult(issues=tuple(issues))
