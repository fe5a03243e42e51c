"""
Candidate-pair index.

Inverted index (normalized tag → unit indices) plus the parent → children
map. Pairwise steps use it to visit only pairs that share a tag or a
lineage edge instead of all n² pairs. It changes cost, never results:
a pair outside the index can neither share tags nor lineage.
"""

from collections import defaultdict
from typing import Dict, Iterator, List, Sequence, Set, Tuple

from ..contracts.units import KnowledgeUnit


class TagIndex:
    """Built once per pass from the coerced snapshot."""

    def __init__(self, units: Sequence[KnowledgeUnit]):
        self.units = units
        self.id_to_index: Dict[str, int] = {u.id: i for i, u in enumerate(units)}
        self.tag_to_units: Dict[str, List[int]] = defaultdict(list)
        self.children: Dict[str, List[int]] = defaultdict(list)

        for i, unit in enumerate(units):
            for tag in unit.tags:
                self.tag_to_units[tag].append(i)
            if unit.parent_id:
                self.children[unit.parent_id].append(i)

    def __len__(self) -> int:
        return len(self.units)

    def tag_neighbors(self, i: int) -> Set[int]:
        """Indices of other units sharing at least one tag with unit i."""
        neighbors: Set[int] = set()
        for tag in self.units[i].tags:
            neighbors.update(self.tag_to_units.get(tag, ()))
        neighbors.discard(i)
        return neighbors

    def shared_tag_counts(self, i: int) -> Dict[int, int]:
        """Shared-tag count for every later unit (j > i) sharing a tag with i."""
        counts: Dict[int, int] = defaultdict(int)
        for tag in self.units[i].tags:
            for j in self.tag_to_units.get(tag, ()):
                if j > i:
                    counts[j] += 1
        return counts

    def lineage_partners(self, i: int) -> Set[int]:
        """Siblings, the direct parent and direct children of unit i."""
        unit = self.units[i]
        partners: Set[int] = set(self.children.get(unit.id, ()))
        if unit.parent_id:
            partners.update(self.children.get(unit.parent_id, ()))
            parent = self.id_to_index.get(unit.parent_id)
            if parent is not None:
                partners.add(parent)
        partners.discard(i)
        return partners

    def tag_sharing_pairs(self) -> Iterator[Tuple[int, int]]:
        """All (i, j), i < j, sharing a tag, in lexicographic order."""
        for i in range(len(self.units)):
            for j in sorted(self.shared_tag_counts(i)):
                yield i, j
