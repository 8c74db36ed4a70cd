"""
SUBISO SEARCH OBSERVERS - Injectable Observability

The engine never prints. It notifies an observer at well-defined points:
- on_branch:    a new pattern vertex is about to be branched on; pattern
                vertex k is always branched with k vertices committed, so
                the vertex id doubles as the search depth
- on_commit:    a candidate was tentatively assigned
- on_backtrack: a commit was undone after its subtree failed
- on_finish:    the search returned (mapping or None)

The default observer does nothing, keeping the core a side-effect-free
function. An observer may raise (see infrastructure.deadline) to abort a
search from the outside; the engine does not catch it.
"""
import logging
from typing import List, Optional, Sequence, Iterable

from core.domains import DomainTable
from core.schemas import SearchEvent, SearchStats

logger = logging.getLogger(__name__)


class SearchObserver:
    """No-op observer; subclass and override the hooks you need."""

    def on_branch(self, vertex: int, assignment: Sequence[int], domains: DomainTable) -> None:
        pass

    def on_commit(self, vertex: int, candidate: int, assignment: Sequence[int]) -> None:
        pass

    def on_backtrack(self, vertex: int, candidate: int, assignment: Sequence[int]) -> None:
        pass

    def on_finish(self, mapping: Optional[List[int]], stats: SearchStats) -> None:
        pass


NULL_OBSERVER = SearchObserver()


class LoggingObserver(SearchObserver):
    """Logs every search event at DEBUG (or a chosen level)."""

    def __init__(self, level: int = logging.DEBUG, log: Optional[logging.Logger] = None):
        self.level = level
        self.log = log or logger

    def on_branch(self, vertex, assignment, domains):
        self.log.log(
            self.level,
            f"branch vertex={vertex} candidates={list(domains.domain(vertex))}",
        )

    def on_commit(self, vertex, candidate, assignment):
        self.log.log(self.level, f"commit {vertex} -> {candidate} assignment={list(assignment)}")

    def on_backtrack(self, vertex, candidate, assignment):
        self.log.log(self.level, f"backtrack {vertex} -/-> {candidate} assignment={list(assignment)}")

    def on_finish(self, mapping, stats):
        self.log.log(
            self.level,
            f"finish mapping={mapping} states={stats.states_visited} backtracks={stats.backtracks}",
        )


class RecordingObserver(SearchObserver):
    """
    Keeps every event as a SearchEvent, for tests and offline inspection.

    Usage:
        recorder = RecordingObserver()
        find_subgraph(host, pattern, observer=recorder)
        [e.kind for e in recorder.events]  # ["branch", "commit", ..., "finish"]
    """

    def __init__(self):
        self.events: List[SearchEvent] = []

    def on_branch(self, vertex, assignment, domains):
        self.events.append(SearchEvent(kind="branch", depth=len(assignment), vertex=vertex, assignment=list(assignment)))

    def on_commit(self, vertex, candidate, assignment):
        self.events.append(SearchEvent(
            kind="commit", depth=len(assignment), vertex=vertex,
            candidate=candidate, assignment=list(assignment),
        ))

    def on_backtrack(self, vertex, candidate, assignment):
        self.events.append(SearchEvent(
            kind="backtrack", depth=len(assignment), vertex=vertex,
            candidate=candidate, assignment=list(assignment),
        ))

    def on_finish(self, mapping, stats):
        self.events.append(SearchEvent(
            kind="finish", depth=len(mapping) if mapping is not None else 0,
            assignment=list(mapping) if mapping is not None else [],
        ))

    def kinds(self) -> List[str]:
        return [event.kind for event in self.events]

    def count(self, kind: str) -> int:
        return sum(1 for event in self.events if event.kind == kind)


class CompositeObserver(SearchObserver):
    """Fans every event out to several observers, in order."""

    def __init__(self, observers: Iterable[SearchObserver]):
        self.observers = [o for o in observers if o is not None]

    def on_branch(self, vertex, assignment, domains):
        for observer in self.observers:
            observer.on_branch(vertex, assignment, domains)

    def on_commit(self, vertex, candidate, assignment):
        for observer in self.observers:
            observer.on_commit(vertex, candidate, assignment)

    def on_backtrack(self, vertex, candidate, assignment):
        for observer in self.observers:
            observer.on_backtrack(vertex, candidate, assignment)

    def on_finish(self, mapping, stats):
        for observer in self.observers:
            observer.on_finish(mapping, stats)
