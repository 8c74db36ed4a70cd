"""
SUBISO ERRORS - Boundary Exceptions

The search itself never raises: every path returns a mapping or None.
These exceptions live at the edges of the system:
- GraphModelError / MalformedGraphError: rejected input graphs
- ConfigError: invalid search settings
- SearchAbortedError and subclasses: raised by external deadline/cancel
  observers (infrastructure.deadline), never by the core engine
"""
from typing import Optional, Tuple


class SubisoError(Exception):
    """Base exception for all subiso errors."""
    pass


# =============================================================================
# GRAPH INPUT
# =============================================================================

class GraphModelError(SubisoError):
    """Raised when a graph cannot be turned into a dense GraphModel."""
    pass


class MalformedGraphError(GraphModelError):
    """Raised when an edge references a vertex outside the declared range."""
    def __init__(self, edge: Tuple[int, int], num_vertices: int):
        self.edge = edge
        self.num_vertices = num_vertices
        super().__init__(
            f"Edge {edge[0]} -> {edge[1]} references a vertex outside 0..{num_vertices - 1}"
        )


# =============================================================================
# CONFIGURATION
# =============================================================================

class ConfigError(SubisoError):
    """Raised when search settings are invalid."""
    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        super().__init__(message)


# =============================================================================
# EXTERNAL ABORT
# =============================================================================

class SearchAbortedError(SubisoError):
    """Raised by an observer to stop a running search from the outside."""
    def __init__(self, message: str, depth: int = 0):
        self.depth = depth
        super().__init__(message)


class SearchTimeoutError(SearchAbortedError):
    """Raised when a search exceeds its deadline."""
    def __init__(self, timeout_seconds: float, depth: int = 0):
        self.timeout_seconds = timeout_seconds
        super().__init__(
            f"Subgraph search exceeded {timeout_seconds:.3f}s (depth {depth})",
            depth=depth,
        )


class SearchCancelledError(SearchAbortedError):
    """Raised when a search is cancelled through its cancel event."""
    def __init__(self, depth: int = 0):
        super().__init__(f"Subgraph search cancelled (depth {depth})", depth=depth)
