"""
Unit Contracts - Kernel input.

KnowledgeUnit is the read-only snapshot of one DTU as the engine sees it.
The engine never mutates units; every output references unit ids.

Snapshots arrive from the unit store as loosely-shaped mappings.
coerce_units() is the single place where that shape is checked:
anything malformed is skipped here, so the analysis steps only
ever see clean, typed units.
"""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime
from functools import cached_property
from typing import Any, Dict, List, Optional, Tuple

from utils.datetime_utils import to_utc_datetime, isoformat_or_none

logger = logging.getLogger(__name__)

KNOWN_TIERS = frozenset({"core", "mega", "hyper", "regular", "shadow"})
UNKNOWN_TIER = "unknown"

ERROR_NOT_SEQUENCE = "units_must_be_sequence"


def normalize_tag(tag: Any) -> str:
    """Comparison form of a tag: lower-cased and trimmed."""
    return str(tag).strip().lower()


def normalize_tags(tags: Any) -> Tuple[str, ...]:
    """Distinct normalized tags in first-appearance order.

    A non-list value (None, a bare string, a number) counts as no tags.
    """
    if not _is_sequence(tags):
        return ()
    seen: Dict[str, None] = {}
    for t in tags:
        norm = normalize_tag(t)
        if norm:
            seen.setdefault(norm, None)
    return tuple(seen)


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (Sequence, set, frozenset)) and not isinstance(
        value, (str, bytes, bytearray)
    )


def _clamp01(value: Any) -> float:
    try:
        v = float(value)
    except (TypeError, ValueError):
        return 0.0
    if v != v:  # NaN
        return 0.0
    return max(0.0, min(1.0, v))


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@dataclass(frozen=True)
class KnowledgeUnit:
    """One knowledge unit (DTU) from the snapshot.

    tags holds the normalized, de-duplicated forms used for every
    comparison; raw_tags keeps the trimmed original spellings for the
    tag normalizer.
    """

    id: str
    tags: Tuple[str, ...] = ()
    raw_tags: Tuple[str, ...] = ()
    domain: Optional[str] = None
    parent_id: Optional[str] = None
    summary: str = ""
    authority: float = 0.0
    tier: str = UNKNOWN_TIER
    created_at: Optional[datetime] = None

    def __post_init__(self):
        """Derive normalized tags from the raw spellings."""
        source = self.raw_tags or self.tags
        raw: Tuple[str, ...] = ()
        if _is_sequence(source):
            raw = tuple(s for s in (str(t).strip() for t in source) if s)
        object.__setattr__(self, "raw_tags", raw)
        object.__setattr__(self, "tags", normalize_tags(raw))
        object.__setattr__(self, "authority", _clamp01(self.authority))
        tier = str(self.tier or "").strip().lower()
        object.__setattr__(self, "tier", tier if tier in KNOWN_TIERS else UNKNOWN_TIER)
        object.__setattr__(self, "domain", _optional_str(self.domain))
        object.__setattr__(self, "parent_id", _optional_str(self.parent_id))
        object.__setattr__(self, "created_at", to_utc_datetime(self.created_at))

    @cached_property
    def tag_set(self) -> frozenset:
        return frozenset(self.tags)

    @classmethod
    def from_mapping(cls, data: Mapping) -> Optional["KnowledgeUnit"]:
        """Build a unit from a store record; None if it has no usable id.

        Accepts snake_case keys as well as the store's native keys
        (parentId, createdAt, human.summary, authority.score).
        """
        unit_id = data.get("id")
        if not isinstance(unit_id, str) or not unit_id.strip():
            return None

        summary = data.get("summary")
        if summary is None:
            human = data.get("human")
            if isinstance(human, Mapping):
                summary = human.get("summary")
        if summary is None:
            summary = data.get("title")

        authority = data.get("authority")
        if isinstance(authority, Mapping):
            authority = authority.get("score")

        parent_id = data.get("parent_id", data.get("parentId"))
        created_at = data.get("created_at", data.get("createdAt"))

        return cls(
            id=unit_id.strip(),
            raw_tags=data.get("tags") or (),
            domain=data.get("domain"),
            parent_id=parent_id,
            summary="" if summary is None else str(summary),
            authority=authority,
            tier=data.get("tier") or UNKNOWN_TIER,
            created_at=created_at,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "tags": list(self.raw_tags or self.tags),
            "domain": self.domain,
            "parent_id": self.parent_id,
            "summary": self.summary,
            "authority": self.authority,
            "tier": self.tier,
            "created_at": isoformat_or_none(self.created_at),
        }


@dataclass(frozen=True)
class UnitSnapshot:
    """Coerced snapshot: clean units plus what was dropped on the way in."""

    units: Tuple[KnowledgeUnit, ...] = ()
    skipped: int = 0
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def ids(self) -> List[str]:
        return [u.id for u in self.units]

    def by_id(self) -> Dict[str, KnowledgeUnit]:
        return {u.id: u for u in self.units}

    def __len__(self) -> int:
        return len(self.units)


def coerce_units(raw: Any) -> UnitSnapshot:
    """Coerce a raw snapshot into typed units.

    - Non-sequence input → empty snapshot with ERROR_NOT_SEQUENCE
    - Non-mapping elements and elements without an id are skipped
    - Duplicate ids keep the first occurrence
    """
    if isinstance(raw, UnitSnapshot):
        return raw
    if not _is_sequence(raw):
        logger.warning(f"Unit snapshot is not a sequence ({type(raw).__name__}), nothing to analyze")
        return UnitSnapshot(error=ERROR_NOT_SEQUENCE)

    units: List[KnowledgeUnit] = []
    seen_ids = set()
    skipped = 0

    for item in raw:
        if isinstance(item, KnowledgeUnit):
            unit = item
        elif isinstance(item, Mapping):
            unit = KnowledgeUnit.from_mapping(item)
        else:
            unit = None

        if unit is None or unit.id in seen_ids:
            skipped += 1
            continue
        seen_ids.add(unit.id)
        units.append(unit)

    if skipped:
        logger.debug(f"Skipped {skipped} malformed or duplicate snapshot entries")

    return UnitSnapshot(units=tuple(units), skipped=skipped)
