"""
Domain Census - unit counts per domain, and imbalances.

- over-represented: count > 3 x mean count per domain
- under-represented: count < 0.2 x mean, only once there are >= 4 domains
  (small collections are too noisy to call a domain "missing")
Units without a domain count as "unclassified".
"""

import logging
from collections import Counter, defaultdict
from typing import Dict, List

import numpy as np

from ..contracts.units import coerce_units
from ..contracts.audits import (
    CensusResult,
    DomainCount,
    DomainImbalance,
    ImbalanceType,
)

logger = logging.getLogger(__name__)

UNCLASSIFIED = "unclassified"
OVER_FACTOR = 3.0
UNDER_FACTOR = 0.2
MIN_DOMAINS_FOR_UNDER = 4


def domain_census(units) -> CensusResult:
    snapshot = coerce_units(units)
    if not snapshot.ok:
        return CensusResult(ok=False, error=snapshot.error)
    total = len(snapshot.units)
    if total == 0:
        return CensusResult()

    counts: Counter = Counter()
    tiers: Dict[str, Counter] = defaultdict(Counter)
    for unit in snapshot.units:
        domain = unit.domain or UNCLASSIFIED
        counts[domain] += 1
        tiers[domain][unit.tier] += 1

    average = float(np.mean(list(counts.values())))
    domains: List[DomainCount] = []
    imbalances: List[DomainImbalance] = []

    for domain, count in counts.items():
        ratio = count / total
        domains.append(DomainCount(
            domain=domain,
            count=count,
            ratio=round(ratio, 3),
            tiers=dict(tiers[domain]),
        ))

        if count > average * OVER_FACTOR:
            imbalances.append(DomainImbalance(
                domain=domain,
                imbalance_type=ImbalanceType.OVER_REPRESENTED,
                count=count,
                average=round(average, 2),
                ratio=round(count / average, 2),
                description=(
                    f'Domain "{domain}" has {count} DTUs ({round(ratio * 100)}%), '
                    f"significantly above average"
                ),
            ))
        elif count < average * UNDER_FACTOR and len(counts) >= MIN_DOMAINS_FOR_UNDER:
            imbalances.append(DomainImbalance(
                domain=domain,
                imbalance_type=ImbalanceType.UNDER_REPRESENTED,
                count=count,
                average=round(average, 2),
                ratio=round(count / average, 2),
                description=f'Domain "{domain}" has only {count} DTUs, significantly below average',
            ))

    domains.sort(key=lambda d: d.count, reverse=True)
    logger.debug(f"Domain census: {len(domains)} domains, {len(imbalances)} imbalances")
    return CensusResult(domains=tuple(domains), imbalances=tuple(imbalances), total_units=total)
