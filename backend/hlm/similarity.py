"""
Similarity Engine - pure pairwise signals.

Used by every other component:
- tag_similarity: Jaccard over normalized tag sets
- text_similarity: character-bigram Jaccard over normalized strings
- unit_similarity: 0.5 tag + 0.3 summary text + 0.2 domain match
- share_lineage: siblings, or direct parent/child

All functions are deterministic and symmetric. share_lineage treats the
directed parent relation symmetrically on purpose (siblings and
parent/child pairs cluster together); grandparents do not count.
"""

from collections.abc import Mapping
from typing import Any, Iterable, Optional

from .contracts.units import KnowledgeUnit, normalize_tag
from .params import TAG_WEIGHT, TEXT_WEIGHT, DOMAIN_WEIGHT


def _tag_set(tags: Optional[Iterable]) -> frozenset:
    if not tags or isinstance(tags, (str, bytes)):
        return frozenset()
    return frozenset(n for n in (normalize_tag(t) for t in tags) if n)


def jaccard(a: frozenset, b: frozenset) -> float:
    """|A ∩ B| / |A ∪ B|, 0 when either side is empty."""
    if not a or not b:
        return 0.0
    union = len(a | b)
    return len(a & b) / union if union > 0 else 0.0


def tag_similarity(tags_a: Optional[Iterable], tags_b: Optional[Iterable]) -> float:
    """Jaccard index of two tag collections after normalization."""
    return jaccard(_tag_set(tags_a), _tag_set(tags_b))


def bigrams(text: str) -> frozenset:
    return frozenset(text[i:i + 2] for i in range(len(text) - 1))


def text_similarity(a: Optional[str], b: Optional[str]) -> float:
    """Character-bigram Jaccard index.

    1.0 for an exact (normalized) match, 0 when either string is empty
    or shorter than two characters.
    """
    if not a or not b:
        return 0.0
    sa = str(a).strip().lower()
    sb = str(b).strip().lower()
    if not sa or not sb:
        return 0.0
    if sa == sb:
        return 1.0
    if len(sa) < 2 or len(sb) < 2:
        return 0.0
    return jaccard(bigrams(sa), bigrams(sb))


def as_unit(value: Any) -> Optional[KnowledgeUnit]:
    """Unit for a KnowledgeUnit or store record; None when it has no usable id."""
    if isinstance(value, KnowledgeUnit):
        return value if value.id else None
    if isinstance(value, Mapping):
        return KnowledgeUnit.from_mapping(value)
    return None


def domain_match(a: KnowledgeUnit, b: KnowledgeUnit) -> float:
    return 1.0 if a.domain and a.domain == b.domain else 0.0


def unit_similarity(a, b) -> float:
    """Weighted combination of tag, summary text and domain signals, in [0, 1].

    Either side may be a KnowledgeUnit or a raw store record; anything
    else, or a record without an id, scores 0.
    """
    a, b = as_unit(a), as_unit(b)
    if a is None or b is None:
        return 0.0
    score = (
        TAG_WEIGHT * jaccard(a.tag_set, b.tag_set)
        + TEXT_WEIGHT * text_similarity(a.summary, b.summary)
        + DOMAIN_WEIGHT * domain_match(a, b)
    )
    return max(0.0, min(1.0, score))


def share_lineage(a, b) -> bool:
    """Same (non-null) parent, or one is the direct parent of the other."""
    a, b = as_unit(a), as_unit(b)
    if a is None or b is None:
        return False
    if a.parent_id and a.parent_id == b.parent_id:
        return True
    return a.parent_id == b.id or b.parent_id == a.id


def shared_tag_count(a: KnowledgeUnit, b: KnowledgeUnit) -> int:
    return len(a.tag_set & b.tag_set)
