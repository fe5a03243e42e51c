"""
Tag Normalizer - spelling variants of the same tag.

"Machine Learning", "machine-learning" and "machine_learning" all
normalize to "machine_learning"; any normalized form with more than one
raw spelling is reported as a normalization candidate.
"""

import logging
import re
from collections import Counter
from typing import Dict, List

from ..contracts.units import coerce_units
from ..contracts.audits import TagNormalizationResult, TagVariantGroup

logger = logging.getLogger(__name__)

_SEPARATORS = re.compile(r"[\s_-]+")


def canonical_tag(raw: str) -> str:
    """Lower-case; runs of whitespace, hyphens and underscores → one '_'."""
    return _SEPARATORS.sub("_", str(raw).strip().lower())


def tag_normalization(units) -> TagNormalizationResult:
    snapshot = coerce_units(units)
    if not snapshot.ok:
        return TagNormalizationResult(ok=False, error=snapshot.error)

    counts: Counter = Counter()
    variants: Dict[str, Dict[str, None]] = {}
    for unit in snapshot.units:
        for raw in unit.raw_tags:
            canonical = canonical_tag(raw)
            counts[canonical] += 1
            variants.setdefault(canonical, {}).setdefault(raw, None)

    normalizations: List[TagVariantGroup] = [
        TagVariantGroup(canonical=canonical, variants=tuple(spellings), count=counts[canonical])
        for canonical, spellings in variants.items()
        if len(spellings) > 1
    ]

    logger.debug(f"Tag normalization: {len(counts)} tags, {len(normalizations)} with variants")
    return TagNormalizationResult(normalizations=tuple(normalizations), tag_counts=dict(counts))
