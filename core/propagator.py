"""
SUBISO CONSTRAINT PROPAGATOR - Arc-Consistency Relaxation

Rule (for every pattern vertex x with at least one pattern successor):

    candidate c stays in domain(x)  iff  for every pattern successor y of x,
    domain(y) holds at least one host successor of c

A single pass visits pattern vertices in ascending order and removes failing
candidates in place, so later checks in the same pass already see earlier
removals. One pass is sound but not a fixpoint; the search engine calls it
after every domain mutation, which drives domains towards (not necessarily
to) full arc consistency.

Pattern vertices without successors are never pruned here; their domains
are narrowed only by injectivity at commit time.
"""
import logging
from typing import Optional

from core.domains import DomainTable
from core.graph_model import GraphModel

logger = logging.getLogger(__name__)


def prune_pass(domains: DomainTable, host: GraphModel, pattern: GraphModel) -> int:
    """
    Run one propagation pass.

    Args:
        domains: Domain table, mutated in place (removals go on its trail)
        host: Host graph
        pattern: Pattern graph

    Returns:
        Number of candidates removed
    """
    removed = 0
    for vertex in range(pattern.vertex_count):
        if not pattern.has_successors(vertex):
            continue
        pattern_successors = pattern.successors(vertex)

        domain = domains.domain(vertex)
        position = 0
        while position < len(domain):
            candidate = domain[position]
            # A candidate dies as soon as one pattern successor has no
            # compatible host successor left in its domain
            supported = all(
                has_support(domains, host, candidate, successor)
                for successor in pattern_successors
            )
            if supported:
                position += 1
            else:
                domains.remove_at(vertex, position)
                removed += 1
    return removed


def has_support(domains: DomainTable, host: GraphModel, candidate: int, successor: int) -> bool:
    """
    True if domain(successor) holds at least one host successor of candidate.

    Scans the shorter side: bisect lookups over the host successors when
    they are fewer than the domain, a set intersection test otherwise.
    """
    host_successors = host.successors(candidate)
    domain = domains.domain(successor)
    if len(host_successors) <= len(domain):
        return any(domains.contains(successor, target) for target in host_successors)
    return not host.successor_set(candidate).isdisjoint(domain)


def propagate(domains: DomainTable, host: GraphModel, pattern: GraphModel) -> bool:
    """
    Shrink domains by one structural-consistency pass.

    Returns:
        True if any candidate was removed. The value is only a hint;
        correctness never depends on it.
    """
    return prune_pass(domains, host, pattern) > 0


def propagate_to_fixpoint(
    domains: DomainTable,
    host: GraphModel,
    pattern: GraphModel,
    max_passes: Optional[int] = None,
) -> int:
    """
    Repeat propagation passes until one removes nothing.

    Iterating only prunes more than a single pass (it stays sound), but it
    costs more per search step.

    Args:
        max_passes: Optional cap on the number of passes

    Returns:
        Number of passes that removed at least one candidate
    """
    changing_passes = 0
    while max_passes is None or changing_passes < max_passes:
        removed = prune_pass(domains, host, pattern)
        if not removed:
            break
        changing_passes += 1
        logger.debug(f"Fixpoint pass {changing_passes} removed {removed} candidate(s)")
    return changing_passes
