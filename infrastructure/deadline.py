"""
SUBISO DEADLINE - External Timeout & Cancellation

Subgraph isomorphism is NP-complete; worst-case search time is exponential
in the pattern size. The core engine has no timeout of its own. This module
layers one on from the outside through the observer hook:

    DeadlineObserver   raises SearchTimeoutError once a monotonic deadline passes
    CancelObserver     raises SearchCancelledError once a threading.Event is set

Both check at every branch and commit, so the abort latency is one
propagation pass.

Usage:
    from infrastructure.deadline import find_subgraph_with_deadline

    try:
        mapping = find_subgraph_with_deadline(host, pattern, timeout_seconds=2.0)
    except SearchTimeoutError:
        ...

    # Cancel from another thread
    cancel = threading.Event()
    worker = threading.Thread(target=find_subgraph_with_deadline,
                              args=(host, pattern), kwargs={"cancel_event": cancel})
    worker.start()
    cancel.set()
"""
import logging
import threading
from time import monotonic
from typing import Callable, List, Optional

from core.errors import SearchCancelledError, SearchTimeoutError
from core.matcher import GraphInput, match_subgraph
from core.observer import CompositeObserver, SearchObserver
from core.schemas import SearchResult, SearchSettings, DEFAULT_SETTINGS

logger = logging.getLogger(__name__)


class DeadlineObserver(SearchObserver):
    """Aborts the search once timeout_seconds have elapsed since construction."""

    def __init__(self, timeout_seconds: float, clock: Optional[Callable[[], float]] = None):
        self.timeout_seconds = timeout_seconds
        self._clock = clock or monotonic
        self._deadline = self._clock() + timeout_seconds

    def _check(self, depth: int) -> None:
        if self._clock() >= self._deadline:
            raise SearchTimeoutError(self.timeout_seconds, depth=depth)

    def on_branch(self, vertex, assignment, domains):
        self._check(len(assignment))

    def on_commit(self, vertex, candidate, assignment):
        self._check(len(assignment))

    @property
    def remaining_seconds(self) -> float:
        return max(0.0, self._deadline - self._clock())


class CancelObserver(SearchObserver):
    """Aborts the search once the given event is set."""

    def __init__(self, event: threading.Event):
        self.event = event

    def _check(self, depth: int) -> None:
        if self.event.is_set():
            raise SearchCancelledError(depth=depth)

    def on_branch(self, vertex, assignment, domains):
        self._check(len(assignment))

    def on_commit(self, vertex, candidate, assignment):
        self._check(len(assignment))


def match_subgraph_with_deadline(
    host: GraphInput,
    pattern: GraphInput,
    timeout_seconds: Optional[float] = None,
    cancel_event: Optional[threading.Event] = None,
    observer: Optional[SearchObserver] = None,
    settings: Optional[SearchSettings] = None,
) -> SearchResult:
    """
    match_subgraph with an optional deadline and cancel event.

    Args:
        timeout_seconds: Overrides settings.timeout_seconds when given
        cancel_event: Set it (from any thread) to abort the search

    Raises:
        SearchTimeoutError: Deadline exceeded
        SearchCancelledError: cancel_event was set
    """
    settings = settings or DEFAULT_SETTINGS
    if timeout_seconds is None:
        timeout_seconds = settings.timeout_seconds

    guards: List[SearchObserver] = []
    if timeout_seconds is not None:
        guards.append(DeadlineObserver(timeout_seconds))
    if cancel_event is not None:
        guards.append(CancelObserver(cancel_event))
    if observer is not None:
        guards.append(observer)

    combined = CompositeObserver(guards) if guards else None
    try:
        return match_subgraph(host, pattern, observer=combined, settings=settings)
    except (SearchTimeoutError, SearchCancelledError) as e:
        logger.warning(f"Subgraph search aborted: {e}")
        raise


def find_subgraph_with_deadline(
    host: GraphInput,
    pattern: GraphInput,
    timeout_seconds: Optional[float] = None,
    cancel_event: Optional[threading.Event] = None,
    observer: Optional[SearchObserver] = None,
    settings: Optional[SearchSettings] = None,
) -> Optional[List[int]]:
    """find_subgraph with an optional deadline and cancel event."""
    return match_subgraph_with_deadline(
        host,
        pattern,
        timeout_seconds=timeout_seconds,
        cancel_event=cancel_event,
        observer=observer,
        settings=settings,
    ).mapping
