"""
SUBISO PARTIAL-ASSIGNMENT VALIDATOR

Checks only what is already known: a pattern edge (u, v) is checked once
both u and v are committed, i.e. u < len(assignment) and v < len(assignment).
Edges with an uncommitted endpoint are skipped.

Malformed input policy: an endpoint outside the pattern range, or an image
outside the host range, makes the edge trivially satisfied. Callers that
prefer rejection construct their graphs with malformed_edges="reject", which
stops such input before a search ever starts.
"""
from typing import Iterable, List, Sequence, Tuple

from core.graph_model import GraphModel


def valid_committed_edges(
    host: GraphModel,
    pattern_edges: Iterable[Tuple[int, int]],
    assignment: Sequence[int],
) -> bool:
    """
    True if every pattern edge between committed vertices exists in the host.

    Args:
        host: Host graph
        pattern_edges: Pattern edges as plain (u, v) pattern-vertex pairs
        assignment: assignment[i] is the host vertex of pattern vertex i
    """
    committed = len(assignment)
    for source, target in pattern_edges:
        if source >= committed or target >= committed:
            continue
        host_source = assignment[source]
        host_target = assignment[target]
        if not (host.contains_vertex(host_source) and host.contains_vertex(host_target)):
            continue
        if host_target not in host.successor_set(host_source):
            return False
    return True


def find_violated_edges(
    host: GraphModel,
    pattern_edges: Iterable[Tuple[int, int]],
    assignment: Sequence[int],
) -> List[Tuple[int, int]]:
    """Pattern edges between committed vertices whose host image is missing."""
    committed = len(assignment)
    violated = []
    for source, target in pattern_edges:
        if source >= committed or target >= committed:
            continue
        host_source = assignment[source]
        host_target = assignment[target]
        if (
            host.contains_vertex(host_source)
            and host.contains_vertex(host_target)
            and not host.has_edge(host_source, host_target)
        ):
            violated.append((source, target))
    return violated


def is_embedding(host: GraphModel, pattern: GraphModel, mapping: Sequence[int]) -> bool:
    """
    Full check of a complete mapping: right length, injective, edge-preserving.

    Unlike valid_committed_edges this is a completeness check, used to verify
    results rather than to steer the search.
    """
    if len(mapping) != pattern.vertex_count:
        return False
    if len(set(mapping)) != len(mapping):
        return False
    if not all(host.contains_vertex(image) for image in mapping):
        return False
    return all(host.has_edge(mapping[u], mapping[v]) for u, v in pattern.edges())
