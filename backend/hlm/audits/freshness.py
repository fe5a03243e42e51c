"""
Freshness Check - units older than the staleness window.

Units without a timestamp are treated as created at the epoch, so they
always come out stale (and oldest).
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from utils.datetime_utils import utc_now, to_utc_datetime

from ..contracts.units import coerce_units
from ..contracts.audits import FreshnessResult, StaleUnit

logger = logging.getLogger(__name__)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
SECONDS_PER_DAY = 24 * 60 * 60
DEFAULT_STALE_DAYS = 90


def freshness_check(
    units,
    stale_days: int = DEFAULT_STALE_DAYS,
    now: Optional[datetime] = None,
) -> FreshnessResult:
    """Split units into stale (sorted oldest first) and fresh.

    Args:
        units: Snapshot
        stale_days: Age in days beyond which a unit is stale
        now: Reference time (defaults to current UTC time)
    """
    snapshot = coerce_units(units)
    if not snapshot.ok:
        return FreshnessResult(ok=False, error=snapshot.error)

    now = to_utc_datetime(now) or utc_now()
    stale: List[StaleUnit] = []
    ages = {}
    fresh = 0

    for unit in snapshot.units:
        created = unit.created_at or EPOCH
        age_days = (now - created).total_seconds() / SECONDS_PER_DAY
        if age_days > stale_days:
            ages[unit.id] = age_days
            stale.append(StaleUnit(
                unit_id=unit.id,
                domain=unit.domain or "unknown",
                tier=unit.tier,
                age_days=round(age_days),
                created_at=unit.created_at,
                authority=unit.authority,
                tags=unit.raw_tags,
            ))
        else:
            fresh += 1

    stale.sort(key=lambda s: ages[s.unit_id], reverse=True)
    logger.debug(f"Freshness check: {len(stale)} stale, {fresh} fresh (window {stale_days}d)")
    return FreshnessResult(stale=tuple(stale), fresh_count=fresh)
