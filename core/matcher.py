"""
SUBISO MATCHER - The Driver

Entry points for subgraph-isomorphism search:

    find_subgraph(host, pattern)   -> List[int] | None
    match_subgraph(host, pattern)  -> SearchResult (mapping + stats + timing)
    SubgraphMatcher(settings)      -> reusable settings/observer holder

Every call starts from the weakest constraint: each pattern vertex may map
to any host vertex 0..|host|-1. Nothing survives between calls.

Edge cases:
- Empty pattern: always [] (also against an empty host)
- Pattern larger than host: fails once injectivity drives a domain empty;
  vertex counts are never special-cased
- Patterns near sys.getrecursionlimit() vertices: use strategy="iterative"
"""
import logging
import time
from typing import List, Optional, Union

import rustworkx as rx

from core.domains import DomainTable
from core.errors import MalformedGraphError
from core.graph_model import GraphModel, as_graph_model
from core.observer import SearchObserver
from core.schemas import SearchResult, SearchSettings, DEFAULT_SETTINGS
from core.search import SearchEngine

logger = logging.getLogger(__name__)

GraphInput = Union[GraphModel, rx.PyDiGraph, rx.PyGraph]


def _check_malformed(graph: GraphModel, settings: SearchSettings) -> None:
    if settings.malformed_edges == "reject" and graph.out_of_range_edges:
        raise MalformedGraphError(graph.out_of_range_edges[0], graph.vertex_count)


def match_subgraph(
    host: GraphInput,
    pattern: GraphInput,
    observer: Optional[SearchObserver] = None,
    settings: Optional[SearchSettings] = None,
) -> SearchResult:
    """
    Search for an embedding of pattern into host.

    Args:
        host: Host graph (GraphModel or rustworkx graph)
        pattern: Pattern graph (GraphModel or rustworkx graph)
        observer: Optional observer notified at branch/commit/backtrack/finish
        settings: Search settings; defaults to single-pass recursive search

    Returns:
        SearchResult with mapping (None if no embedding exists) and stats

    Raises:
        GraphModelError: If a rustworkx input has non-dense node indices
        MalformedGraphError: If settings reject malformed edges and an input
                             carries out-of-range edges
        ConfigError: If settings are invalid
    """
    settings = (settings or DEFAULT_SETTINGS).validate()
    host = as_graph_model(host)
    pattern = as_graph_model(pattern)
    _check_malformed(host, settings)
    _check_malformed(pattern, settings)

    domains = DomainTable.full(pattern.vertex_count, host.vertex_count)
    engine = SearchEngine(host, pattern, settings=settings, observer=observer)

    logger.debug(f"Searching {pattern!r} in {host!r} ({settings.strategy}, {settings.propagation})")
    start = time.perf_counter()
    mapping = engine.search(domains)
    elapsed = time.perf_counter() - start
    logger.debug(
        f"Search {'found ' + str(mapping) if mapping is not None else 'found no embedding'} "
        f"in {elapsed * 1000:.2f}ms after {engine.stats.states_visited} states"
    )

    return SearchResult(
        mapping=mapping,
        stats=engine.stats,
        elapsed_seconds=elapsed,
        host_vertices=host.vertex_count,
        pattern_vertices=pattern.vertex_count,
    )


def find_subgraph(
    host: GraphInput,
    pattern: GraphInput,
    observer: Optional[SearchObserver] = None,
    settings: Optional[SearchSettings] = None,
) -> Optional[List[int]]:
    """
    Find one embedding of pattern into host.

    The default recursive strategy nests one call per pattern vertex; for
    patterns with roughly 1000 vertices or more, pass
    SearchSettings(strategy="iterative") to avoid RecursionError.

    Returns:
        mapping[i] = host vertex for pattern vertex i, or None if no
        injective edge-preserving mapping exists
    """
    return match_subgraph(host, pattern, observer=observer, settings=settings).mapping


class SubgraphMatcher:
    """
    Holds settings and an optional observer for repeated searches.

    Usage:
        matcher = SubgraphMatcher(SearchSettings(strategy="iterative"))
        if matcher.contains(host, triangle):
            mapping = matcher.find(host, triangle)
    """

    def __init__(
        self,
        settings: Optional[SearchSettings] = None,
        observer: Optional[SearchObserver] = None,
    ):
        self.settings = (settings or DEFAULT_SETTINGS).validate()
        self.observer = observer

    def match(self, host: GraphInput, pattern: GraphInput) -> SearchResult:
        return match_subgraph(host, pattern, observer=self.observer, settings=self.settings)

    def find(self, host: GraphInput, pattern: GraphInput) -> Optional[List[int]]:
        return self.match(host, pattern).mapping

    def contains(self, host: GraphInput, pattern: GraphInput) -> bool:
        """True if pattern embeds into host."""
        return self.match(host, pattern).found
