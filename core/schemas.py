"""
SUBISO SCHEMAS - Settings, Results and Events

All structures are msgspec.Struct:
- SearchSettings: how a search runs (strategy, propagation, malformed input)
- SearchStats: counters collected by the engine
- SearchResult: mapping + stats returned by match_subgraph
- SearchEvent: one observer notification, as recorded by RecordingObserver

Design Principles:
1. KW_ONLY: keyword arguments everywhere, no positional mix-ups
2. FROZEN SETTINGS: settings are values, share them freely
3. MUTABLE STATS: the engine increments counters in place during a search
"""
import msgspec
from typing import List, Optional

from core.errors import ConfigError

STRATEGIES = ("recursive", "iterative")
PROPAGATION_MODES = ("single", "fixpoint")
MALFORMED_EDGE_POLICIES = ("skip", "reject")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


# =============================================================================
# SETTINGS
# =============================================================================

class SearchSettings(msgspec.Struct, kw_only=True, frozen=True, forbid_unknown_fields=True):
    """
    Configuration for a subgraph search.

    Attributes:
        strategy: "recursive" uses the call stack, "iterative" an explicit
                  frame stack. Both return the same mapping. Recursion
                  depth grows with the pattern vertex count, so patterns
                  near sys.getrecursionlimit() (about 1000 by default)
                  raise RecursionError under "recursive"; use "iterative"
                  for them.
        propagation: "single" runs one propagation pass per step;
                     "fixpoint" repeats passes until nothing changes.
        malformed_edges: "skip" treats out-of-range edge endpoints as
                         unconstrained, "reject" raises at the boundary.
        timeout_seconds: Optional deadline enforced by the external wrapper
                         (infrastructure.deadline). None = no deadline.
        log_level: Level for the subiso loggers when configured by the harness.
    """
    strategy: str = "recursive"
    propagation: str = "single"
    malformed_edges: str = "skip"
    timeout_seconds: Optional[float] = None
    log_level: str = "WARNING"

    def validate(self) -> "SearchSettings":
        """
        Validate settings values.

        Returns:
            self, so calls can be chained

        Raises:
            ConfigError: If any value is invalid
        """
        if self.strategy not in STRATEGIES:
            raise ConfigError(
                f"strategy must be one of {STRATEGIES}, got {self.strategy!r}",
                field="strategy",
            )
        if self.propagation not in PROPAGATION_MODES:
            raise ConfigError(
                f"propagation must be one of {PROPAGATION_MODES}, got {self.propagation!r}",
                field="propagation",
            )
        if self.malformed_edges not in MALFORMED_EDGE_POLICIES:
            raise ConfigError(
                f"malformed_edges must be one of {MALFORMED_EDGE_POLICIES}, got {self.malformed_edges!r}",
                field="malformed_edges",
            )
        if self.timeout_seconds is not None and self.timeout_seconds <= 0:
            raise ConfigError(
                f"timeout_seconds must be > 0, got {self.timeout_seconds}",
                field="timeout_seconds",
            )
        if self.log_level.upper() not in LOG_LEVELS:
            raise ConfigError(
                f"log_level must be one of {LOG_LEVELS}, got {self.log_level!r}",
                field="log_level",
            )
        return self


DEFAULT_SETTINGS = SearchSettings()


# =============================================================================
# STATISTICS & RESULTS
# =============================================================================

class SearchStats(msgspec.Struct, kw_only=True):
    """Counters collected during one search."""
    states_visited: int = 0         # Calls to the extend step
    commits: int = 0                # Tentative assignments made
    backtracks: int = 0             # Commits undone after a failed subtree
    injectivity_skips: int = 0      # Candidates skipped because already used
    propagation_passes: int = 0     # Single propagation passes executed
    candidates_pruned: int = 0      # Candidates removed by propagation
    max_depth: int = 0              # Deepest committed prefix length


class SearchResult(msgspec.Struct, kw_only=True):
    """
    Outcome of match_subgraph.

    mapping[i] is the host vertex for pattern vertex i, or None when no
    embedding exists.
    """
    mapping: Optional[List[int]]
    stats: SearchStats
    elapsed_seconds: float = 0.0
    host_vertices: int = 0
    pattern_vertices: int = 0

    @property
    def found(self) -> bool:
        return self.mapping is not None


# =============================================================================
# OBSERVER EVENTS
# =============================================================================

class SearchEvent(msgspec.Struct, kw_only=True, frozen=True):
    """One notification delivered to a search observer."""
    kind: str                       # "branch", "commit", "backtrack", "finish"
    depth: int                      # Committed prefix length when emitted
    vertex: Optional[int] = None    # Pattern vertex being branched on
    candidate: Optional[int] = None # Host vertex committed / undone
    assignment: List[int] = []      # Copy of the assignment at emission time
