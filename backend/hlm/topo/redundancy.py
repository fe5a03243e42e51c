"""
Redundancy Detector
===================

Near-duplicate sweep over the full snapshot (not per cluster: duplicates
can sit across or outside clusters).

A pair is redundant when unit_similarity >= redundancy_similarity_threshold.
The higher-authority unit is kept, the other proposed for merge; on equal
authority the unit with the smaller id is kept, so the record does not
depend on snapshot order.

Independent of clustering; can run concurrently with it.
"""

import logging
from typing import Iterator, List, Optional, Sequence, Set, Tuple

from utils.datetime_utils import utc_now
from utils.id_generator import generate_redundancy_id

from ..contracts.units import KnowledgeUnit, coerce_units
from ..contracts.topology import Redundancy, RedundancyResult
from ..params import EngineParams, DEFAULT_PARAMS
from ..similarity import unit_similarity
from .index import TagIndex

logger = logging.getLogger(__name__)


def _candidate_pairs(
    units: Sequence[KnowledgeUnit],
    params: EngineParams,
    index: Optional[TagIndex],
) -> Iterator[Tuple[int, int]]:
    if params.use_tag_index and params.redundancy_needs_shared_tag:
        yield from (index or TagIndex(units)).tag_sharing_pairs()
        return
    n = len(units)
    for i in range(n):
        for j in range(i + 1, n):
            yield i, j


def _make_redundancy(a: KnowledgeUnit, b: KnowledgeUnit, similarity: float, detected_at) -> Redundancy:
    first, second = (a, b) if a.id < b.id else (b, a)
    if first.authority >= second.authority:
        keep, merge = first, second
    else:
        keep, merge = second, first
    return Redundancy(
        redundancy_id=generate_redundancy_id(),
        unit_a=first.id,
        unit_b=second.id,
        similarity=round(similarity, 3),
        keep_id=keep.id,
        merge_id=merge.id,
        keep_authority=keep.authority,
        merge_authority=merge.authority,
        detected_at=detected_at,
    )


def redundancy_detection(
    units,
    params: EngineParams = DEFAULT_PARAMS,
    index: Optional[TagIndex] = None,
) -> RedundancyResult:
    """Find near-duplicate unit pairs.

    Each unordered pair is considered at most once.
    """
    snapshot = coerce_units(units)
    if not snapshot.ok:
        return RedundancyResult(ok=False, error=snapshot.error)
    unit_list = snapshot.units
    if len(unit_list) < 2:
        return RedundancyResult()

    threshold = params.redundancy_similarity_threshold
    detected_at = utc_now()
    seen: Set[Tuple[str, str]] = set()
    redundancies: List[Redundancy] = []
    compared = 0

    for i, j in _candidate_pairs(unit_list, params, index):
        a, b = unit_list[i], unit_list[j]
        compared += 1
        sim = unit_similarity(a, b)
        if sim < threshold:
            continue

        pair_key = (a.id, b.id) if a.id < b.id else (b.id, a.id)
        if pair_key in seen:
            continue
        seen.add(pair_key)
        redundancies.append(_make_redundancy(a, b, sim, detected_at))

    logger.debug(
        f"Redundancy sweep: {compared} pairs compared, {len(redundancies)} above {threshold}"
    )
    return RedundancyResult(redundancies=tuple(redundancies))
