"""
SUBISO DIAGNOSTICS - Search State & Graph Printing

Human-readable views of what the search is doing:
- format_search_state: per pattern vertex, its committed image and the
  remaining candidates
- format_graph: adjacency listing, optionally relabeled through a mapping
  (shows where a pattern landed inside the host)
- StateDumpObserver: logs format_search_state at every branch
- DepthProfile: counts commits/backtracks per pattern vertex, to spot the
  vertices the search struggles with

Nothing here is required for correctness; attach it as an observer.

Usage:
    from infrastructure.diagnostics import StateDumpObserver, format_graph

    mapping = find_subgraph(host, pattern, observer=StateDumpObserver())
    print(format_graph(pattern, "Embedded pattern", mapping))
"""
import logging
from collections import defaultdict
from typing import Dict, List, Optional, Sequence

from core.domains import DomainTable
from core.graph_model import GraphModel
from core.observer import SearchObserver

logger = logging.getLogger(__name__)

STATE_OPEN = "<" * 30
STATE_CLOSE = ">" * 30


def format_search_state(
    assignment: Sequence[int],
    domains: DomainTable,
    header: str = "",
) -> str:
    """
    Render assignment + domains as a block of text.

    Example:
        <<<<<<<<<<<<<<<<<<<<<<<<<<<<<<
        branch vertex=1
        Vertex 0: assigned to 3
          candidates: 3
        Vertex 1: unassigned
          candidates: none
        >>>>>>>>>>>>>>>>>>>>>>>>>>>>>>
    """
    lines = [STATE_OPEN]
    if header:
        lines.append(header)
    for vertex in range(len(domains)):
        if vertex < len(assignment):
            lines.append(f"Vertex {vertex}: assigned to {assignment[vertex]}")
        else:
            lines.append(f"Vertex {vertex}: unassigned")
        candidates = domains.domain(vertex)
        rendered = " ".join(str(c) for c in candidates) if candidates else "none"
        lines.append(f"  candidates: {rendered}")
    lines.append(STATE_CLOSE)
    return "\n".join(lines)


def format_graph(
    graph: GraphModel,
    name: str,
    mapping: Optional[Sequence[int]] = None,
) -> str:
    """
    Render a graph's adjacency.

    Args:
        graph: Graph to render
        name: Title line
        mapping: If given, every vertex id v is printed as mapping[v]
                 (pattern drawn with host labels)
    """
    def label(vertex: int) -> int:
        return mapping[vertex] if mapping is not None else vertex

    lines = [f"{name}:"]
    if graph.vertex_count == 0:
        lines.append("Empty")
    for vertex in range(graph.vertex_count):
        successors = graph.successors(vertex)
        rendered = ", ".join(str(label(s)) for s in successors) if successors else "Empty"
        lines.append(f"{label(vertex)}'s neighbors: {rendered}")
    return "\n".join(lines)


class StateDumpObserver(SearchObserver):
    """Logs the full search state at every branch."""

    def __init__(self, level: int = logging.DEBUG, log: Optional[logging.Logger] = None):
        self.level = level
        self.log = log or logger

    def on_branch(self, vertex, assignment, domains):
        if self.log.isEnabledFor(self.level):
            self.log.log(self.level, "\n" + format_search_state(
                assignment, domains, header=f"branch vertex={vertex}",
            ))


class DepthProfile(SearchObserver):
    """
    Per pattern vertex commit/backtrack counters.

    A vertex with many backtracks is where the search spends its time;
    renumbering the pattern so such vertices come early often helps.
    """

    def __init__(self):
        self.commits: Dict[int, int] = defaultdict(int)
        self.backtracks: Dict[int, int] = defaultdict(int)
        self.branches: Dict[int, int] = defaultdict(int)

    def on_branch(self, vertex, assignment, domains):
        self.branches[vertex] += 1

    def on_commit(self, vertex, candidate, assignment):
        self.commits[vertex] += 1

    def on_backtrack(self, vertex, candidate, assignment):
        self.backtracks[vertex] += 1

    def hardest_vertices(self, limit: int = 3) -> List[int]:
        """Pattern vertices ordered by backtrack count, most first."""
        ranked = sorted(self.backtracks.items(), key=lambda item: (-item[1], item[0]))
        return [vertex for vertex, _ in ranked[:limit]]

    def summary(self) -> str:
        vertices = sorted(set(self.commits) | set(self.backtracks) | set(self.branches))
        lines = ["vertex  branches  commits  backtracks"]
        for vertex in vertices:
            lines.append(
                f"{vertex:>6}  {self.branches[vertex]:>8}  {self.commits[vertex]:>7}  {self.backtracks[vertex]:>10}"
            )
        return "\n".join(lines)
