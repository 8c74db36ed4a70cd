"""
SUBISO DOMAIN TABLE - The Mutable Search State

For each pattern vertex, the ascending list of host vertices that are still
possible images ("its domain").

Checkpointing (change-log / trail):
  Every mutation pushes an undo record onto a trail.
  - remove(v, c)    -> ("remove", v, position, c)
  - collapse(v, c)  -> ("replace", v, previous_list)

  checkpoint() returns the current trail length; rollback(marker) pops and
  undoes records down to that length in LIFO order. A search frame therefore
  restores the one domain it collapsed AND everything propagation pruned in
  its subtree, without ever deep-copying the whole table.

Invariants:
- Every domain list is strictly ascending
- Domains only shrink between a checkpoint and its rollback
"""
from bisect import bisect_left
from typing import List, Sequence, Tuple, Union


_REMOVE = 0
_REPLACE = 1


class DomainTable:
    """
    Candidate sets for every pattern vertex.

    Usage:
        domains = DomainTable.full(pattern_count=3, host_count=5)
        marker = domains.checkpoint()
        domains.collapse(0, 2)       # domain(0) == [2]
        domains.remove(1, 4)         # domain(1) == [0, 1, 2, 3]
        domains.rollback(marker)     # back to full lists

    NOT thread-safe; owned by a single search.
    """

    def __init__(self, domains: Sequence[Sequence[int]]):
        """
        Args:
            domains: One candidate sequence per pattern vertex. Each is
                     sorted and de-duplicated on the way in.
        """
        self._domains: List[List[int]] = [sorted(set(d)) for d in domains]
        self._trail: List[Tuple] = []

    @classmethod
    def full(cls, pattern_count: int, host_count: int) -> "DomainTable":
        """Every pattern vertex may map to every host vertex 0..host_count-1."""
        table = cls([])
        everything = list(range(host_count))
        table._domains = [list(everything) for _ in range(pattern_count)]
        return table

    # =========================================================================
    # READS
    # =========================================================================

    def domain(self, vertex: int) -> List[int]:
        """
        The live ascending domain of vertex.

        Callers must not mutate the returned list; use remove/collapse.
        """
        return self._domains[vertex]

    def snapshot(self, vertex: int) -> Tuple[int, ...]:
        """Stable copy of a domain, safe to iterate while the table changes."""
        return tuple(self._domains[vertex])

    def contains(self, vertex: int, candidate: int) -> bool:
        domain = self._domains[vertex]
        position = bisect_left(domain, candidate)
        return position < len(domain) and domain[position] == candidate

    def is_empty(self, vertex: int) -> bool:
        return not self._domains[vertex]

    def has_empty(self) -> bool:
        """True if some pattern vertex has no candidates left."""
        return any(not domain for domain in self._domains)

    def sizes(self) -> List[int]:
        return [len(domain) for domain in self._domains]

    def as_lists(self) -> List[List[int]]:
        """Deep copy of all domains."""
        return [list(domain) for domain in self._domains]

    def __len__(self) -> int:
        return len(self._domains)

    def __repr__(self) -> str:
        return f"DomainTable(sizes={self.sizes()}, trail={len(self._trail)})"

    # =========================================================================
    # MUTATIONS (all recorded on the trail)
    # =========================================================================

    def remove(self, vertex: int, candidate: int) -> bool:
        """
        Remove candidate from domain(vertex).

        Returns:
            True if the candidate was present and removed
        """
        domain = self._domains[vertex]
        position = bisect_left(domain, candidate)
        if position >= len(domain) or domain[position] != candidate:
            return False
        self.remove_at(vertex, position)
        return True

    def remove_at(self, vertex: int, position: int) -> int:
        """Remove the candidate at a list position and return it."""
        candidate = self._domains[vertex].pop(position)
        self._trail.append((_REMOVE, vertex, position, candidate))
        return candidate

    def collapse(self, vertex: int, candidate: int) -> None:
        """Replace domain(vertex) with the singleton [candidate]."""
        self._trail.append((_REPLACE, vertex, self._domains[vertex]))
        self._domains[vertex] = [candidate]

    # =========================================================================
    # CHECKPOINTS
    # =========================================================================

    def checkpoint(self) -> int:
        """Marker for the current state; pass it to rollback()."""
        return len(self._trail)

    def rollback(self, marker: int) -> int:
        """
        Undo every mutation recorded after marker.

        Returns:
            Number of undo records replayed
        """
        undone = 0
        while len(self._trail) > marker:
            record = self._trail.pop()
            if record[0] == _REMOVE:
                _, vertex, position, candidate = record
                self._domains[vertex].insert(position, candidate)
            else:
                _, vertex, previous = record
                self._domains[vertex] = previous
            undone += 1
        return undone

    @property
    def trail_length(self) -> int:
        return len(self._trail)


def as_domain_table(domains: Union[DomainTable, Sequence[Sequence[int]]]) -> DomainTable:
    if isinstance(domains, DomainTable):
        return domains
    return DomainTable(domains)
