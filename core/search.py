"""
SUBISO SEARCH ENGINE - Backtracking with Propagation

Extends a partial assignment one pattern vertex at a time (vertex k is
committed at depth k), interleaving validation and propagation:

    extend(assignment, domains):
      1. Validate   committed pattern edges must exist in the host
      2. Terminal   all pattern vertices committed -> success
      3. Propagate  one pass (or to fixpoint); any empty domain -> dead end
      4. Branch     next = len(assignment); for c in ascending snapshot:
                      - c pruned meanwhile          -> skip
                      - c already used (injective)  -> skip, drop c, propagate
                      - checkpoint, append c, collapse domain(next) to [c]
                      - recurse; success bubbles up untouched
                      - failure: pop c, rollback checkpoint, drop c for
                        good at this level, propagate
      5. Snapshot exhausted -> failure

Tie-break: candidates are always tried in ascending host-vertex order, so
the returned mapping is deterministic (the lexicographically smallest
embedding, since every pruning step is sound).

Strategies:
- recursive: Python call stack; depth == pattern vertex count, so very large
  patterns can hit sys.getrecursionlimit()
- iterative: explicit stack of frames, same visiting order, same events,
  same statistics

There is no timeout or cancellation in here. Wrap the engine from the
outside (infrastructure.deadline) via an observer that raises.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional, Set

from core.domains import DomainTable
from core.graph_model import GraphModel
from core.observer import SearchObserver, NULL_OBSERVER
from core.propagator import prune_pass
from core.schemas import SearchSettings, SearchStats, DEFAULT_SETTINGS
from core.validator import valid_committed_edges

logger = logging.getLogger(__name__)


@dataclass
class _Frame:
    """One branching level of the iterative strategy."""
    vertex: int
    candidates: tuple
    cursor: int = 0
    committed: Optional[int] = None     # Candidate whose subtree is being explored
    marker: int = 0                     # Domain trail length before the commit


class SearchEngine:
    """
    Backtracking subgraph-isomorphism search over a DomainTable.

    Usage:
        engine = SearchEngine(host, pattern)
        domains = DomainTable.full(pattern.vertex_count, host.vertex_count)
        mapping = engine.search(domains)   # List[int] or None
        engine.stats.backtracks

    One engine instance runs one search; create a new one per call.
    """

    def __init__(
        self,
        host: GraphModel,
        pattern: GraphModel,
        settings: SearchSettings = DEFAULT_SETTINGS,
        observer: Optional[SearchObserver] = None,
    ):
        self.host = host
        self.pattern = pattern
        self.settings = settings
        self.stats = SearchStats()
        self._observer = observer or NULL_OBSERVER
        self._pattern_edges = pattern.edges()
        self._fixpoint = settings.propagation == "fixpoint"

    def search(self, domains: DomainTable) -> Optional[List[int]]:
        """
        Run the search from an empty assignment.

        Args:
            domains: Initial domains, one per pattern vertex. Mutated in place.

        Returns:
            The mapping (host vertex per pattern vertex), or None
        """
        assignment: List[int] = []
        used: Set[int] = set()

        if self.settings.strategy == "iterative":
            found = self._extend_iterative(assignment, used, domains)
        else:
            found = self._extend_recursive(assignment, used, domains)

        mapping = list(assignment) if found else None
        self._observer.on_finish(mapping, self.stats)
        return mapping

    # =========================================================================
    # SHARED STEPS
    # =========================================================================

    def _propagate(self, domains: DomainTable) -> None:
        while True:
            removed = prune_pass(domains, self.host, self.pattern)
            self.stats.propagation_passes += 1
            self.stats.candidates_pruned += removed
            if not (self._fixpoint and removed):
                return

    def _enter(self, assignment: List[int], domains: DomainTable) -> Optional[bool]:
        """
        Steps 1-3 for a state.

        Returns:
            True on success, False on a dead end, None if branching is needed
        """
        self.stats.states_visited += 1
        if len(assignment) > self.stats.max_depth:
            self.stats.max_depth = len(assignment)

        if not valid_committed_edges(self.host, self._pattern_edges, assignment):
            return False
        if len(assignment) == self.pattern.vertex_count:
            return True

        self._propagate(domains)
        if domains.has_empty():
            return False
        return None

    def _admit(
        self,
        vertex: int,
        candidate: int,
        assignment: List[int],
        used: Set[int],
        domains: DomainTable,
    ) -> Optional[int]:
        """
        Try to commit candidate for vertex.

        Returns:
            The checkpoint marker if committed, None if the candidate is skipped
        """
        if not domains.contains(vertex, candidate):
            return None

        if candidate in used:
            self.stats.injectivity_skips += 1
            domains.remove(vertex, candidate)
            self._propagate(domains)
            return None

        marker = domains.checkpoint()
        assignment.append(candidate)
        used.add(candidate)
        domains.collapse(vertex, candidate)
        self.stats.commits += 1
        self._observer.on_commit(vertex, candidate, assignment)
        return marker

    def _retreat(
        self,
        vertex: int,
        candidate: int,
        marker: int,
        assignment: List[int],
        used: Set[int],
        domains: DomainTable,
    ) -> None:
        """Undo a failed commit and rule the candidate out at this level."""
        assignment.pop()
        used.discard(candidate)
        domains.rollback(marker)
        self.stats.backtracks += 1
        self._observer.on_backtrack(vertex, candidate, assignment)

        domains.remove(vertex, candidate)
        self._propagate(domains)

    # =========================================================================
    # STRATEGIES
    # =========================================================================

    def _extend_recursive(self, assignment: List[int], used: Set[int], domains: DomainTable) -> bool:
        outcome = self._enter(assignment, domains)
        if outcome is not None:
            return outcome

        vertex = len(assignment)
        self._observer.on_branch(vertex, assignment, domains)

        for candidate in domains.snapshot(vertex):
            marker = self._admit(vertex, candidate, assignment, used, domains)
            if marker is None:
                continue
            if self._extend_recursive(assignment, used, domains):
                return True
            self._retreat(vertex, candidate, marker, assignment, used, domains)

        return False

    def _open_frame(self, assignment: List[int], domains: DomainTable) -> _Frame:
        vertex = len(assignment)
        self._observer.on_branch(vertex, assignment, domains)
        return _Frame(vertex=vertex, candidates=domains.snapshot(vertex))

    def _extend_iterative(self, assignment: List[int], used: Set[int], domains: DomainTable) -> bool:
        outcome = self._enter(assignment, domains)
        if outcome is not None:
            return outcome

        stack = [self._open_frame(assignment, domains)]
        while stack:
            frame = stack[-1]

            # Back from a child frame that exhausted its candidates
            if frame.committed is not None:
                self._retreat(frame.vertex, frame.committed, frame.marker, assignment, used, domains)
                frame.committed = None

            descended = False
            while frame.cursor < len(frame.candidates):
                candidate = frame.candidates[frame.cursor]
                frame.cursor += 1

                marker = self._admit(frame.vertex, candidate, assignment, used, domains)
                if marker is None:
                    continue
                frame.committed = candidate
                frame.marker = marker

                outcome = self._enter(assignment, domains)
                if outcome is True:
                    return True
                if outcome is False:
                    self._retreat(frame.vertex, candidate, marker, assignment, used, domains)
                    frame.committed = None
                    continue

                stack.append(self._open_frame(assignment, domains))
                descended = True
                break

            if not descended:
                stack.pop()

        return False
