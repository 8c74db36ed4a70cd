"""
SUBISO CORE - Central exports for the subgraph search.

This module provides access to:
- Graph model (GraphModel)
- Search state (DomainTable) and its propagation/validation steps
- The engine (SearchEngine) and the driver (find_subgraph, match_subgraph)
- Observers, settings and result schemas
"""

from core.errors import (
    SubisoError,
    GraphModelError,
    MalformedGraphError,
    ConfigError,
    SearchAbortedError,
    SearchTimeoutError,
    SearchCancelledError,
)
from core.graph_model import GraphModel, as_graph_model
from core.domains import DomainTable
from core.propagator import has_support, propagate, propagate_to_fixpoint, prune_pass
from core.validator import valid_committed_edges, is_embedding
from core.schemas import SearchSettings, SearchStats, SearchResult, SearchEvent
from core.observer import (
    SearchObserver,
    LoggingObserver,
    RecordingObserver,
    CompositeObserver,
)
from core.search import SearchEngine
from core.matcher import find_subgraph, match_subgraph, SubgraphMatcher

__all__ = [
    # Errors
    "SubisoError",
    "GraphModelError",
    "MalformedGraphError",
    "ConfigError",
    "SearchAbortedError",
    "SearchTimeoutError",
    "SearchCancelledError",
    # Model & state
    "GraphModel",
    "as_graph_model",
    "DomainTable",
    # Steps
    "has_support",
    "propagate",
    "propagate_to_fixpoint",
    "prune_pass",
    "valid_committed_edges",
    "is_embedding",
    # Schemas
    "SearchSettings",
    "SearchStats",
    "SearchResult",
    "SearchEvent",
    # Observers
    "SearchObserver",
    "LoggingObserver",
    "RecordingObserver",
    "CompositeObserver",
    # Engine & driver
    "SearchEngine",
    "find_subgraph",
    "match_subgraph",
    "SubgraphMatcher",
]
