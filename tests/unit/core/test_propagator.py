"""
Unit tests for core/propagator.py - structural domain pruning.
"""
import random

import pytest

from core.domains import DomainTable
from core.graph_model import GraphModel
from core.matcher import find_subgraph
from core.propagator import has_support, propagate, propagate_to_fixpoint, prune_pass
from core.schemas import SearchSettings
from forge.topologist import create_erdos_renyi


def _path(n):
    return GraphModel.from_edges([(i, i + 1) for i in range(n - 1)], num_vertices=n)


# =============================================================================
# SINGLE PASS
# =============================================================================

class TestPrunePass:

    def test_sinks_cannot_host_vertices_with_successors(self):
        host = _path(3)
        pattern = _path(2)
        domains = DomainTable.full(pattern.vertex_count, host.vertex_count)

        removed = prune_pass(domains, host, pattern)

        # Host 2 has no successors, so pattern 0 cannot map there
        assert domains.domain(0) == [0, 1]
        # Pattern 1 has no successors and is left alone
        assert domains.domain(1) == [0, 1, 2]
        assert removed == 1

    def test_removals_visible_later_in_same_pass(self):
        # Pattern 0 is checked before pattern 1 loses host 3, so the first
        # pass is not a fixpoint.
        host = _path(4)
        pattern = _path(3)
        domains = DomainTable.full(pattern.vertex_count, host.vertex_count)

        prune_pass(domains, host, pattern)
        assert domains.domain(1) == [0, 1, 2]
        assert domains.domain(0) == [0, 1, 2]

        prune_pass(domains, host, pattern)
        assert domains.domain(0) == [0, 1]

    def test_unsupported_everywhere_empties_domain(self):
        host = GraphModel.from_edges([], num_vertices=3)
        pattern = _path(2)
        domains = DomainTable.full(pattern.vertex_count, host.vertex_count)

        prune_pass(domains, host, pattern)
        assert domains.is_empty(0)
        assert domains.has_empty()

    def test_collapsed_successor_restricts_predecessor(self):
        host = GraphModel.from_edges([(0, 1), (2, 3), (1, 2)])
        pattern = _path(2)
        domains = DomainTable.full(pattern.vertex_count, host.vertex_count)
        domains.collapse(1, 3)

        prune_pass(domains, host, pattern)
        assert domains.domain(0) == [2]

    def test_removals_are_undoable(self):
        host = _path(3)
        pattern = _path(3)
        domains = DomainTable.full(pattern.vertex_count, host.vertex_count)
        marker = domains.checkpoint()

        prune_pass(domains, host, pattern)
        domains.rollback(marker)
        assert domains.as_lists() == [[0, 1, 2]] * 3

    def test_propagate_reports_change(self):
        host = _path(3)
        pattern = _path(2)
        domains = DomainTable.full(pattern.vertex_count, host.vertex_count)

        assert propagate(domains, host, pattern) is True
        assert propagate(domains, host, pattern) is False


# =============================================================================
# FIXPOINT
# =============================================================================

class TestFixpoint:

    def test_fixpoint_reaches_stable_domains(self):
        host = _path(4)
        pattern = _path(3)
        domains = DomainTable.full(pattern.vertex_count, host.vertex_count)

        passes = propagate_to_fixpoint(domains, host, pattern)

        assert passes == 2
        assert domains.domain(0) == [0, 1]
        assert domains.domain(1) == [0, 1, 2]
        assert prune_pass(domains, host, pattern) == 0

    def test_max_passes_caps_work(self):
        host = _path(4)
        pattern = _path(3)
        domains = DomainTable.full(pattern.vertex_count, host.vertex_count)

        assert propagate_to_fixpoint(domains, host, pattern, max_passes=1) == 1
        assert domains.domain(0) == [0, 1, 2]

    def test_fixpoint_never_removes_a_real_image(self, line_graphs):
        host, pattern = line_graphs
        domains = DomainTable.full(pattern.vertex_count, host.vertex_count)

        propagate_to_fixpoint(domains, host, pattern)

        for vertex, image in enumerate([0, 1, 2, 3]):
            assert domains.contains(vertex, image)


# =============================================================================
# SUPPORT CHECK
# =============================================================================

def _reference_pass(domains, host, pattern):
    """Straightforward pass: every host successor against a set of the domain."""
    removed = 0
    for vertex in range(pattern.vertex_count):
        successors = pattern.successors(vertex)
        if not successors:
            continue
        for candidate in domains.snapshot(vertex):
            if not all(
                any(target in set(domains.domain(successor)) for target in host.successors(candidate))
                for successor in successors
            ):
                domains.remove(vertex, candidate)
                removed += 1
    return removed


def _random_domains(rng, pattern_count, host_count, keep):
    return DomainTable([
        sorted(rng.sample(range(host_count), keep))
        for _ in range(pattern_count)
    ])


class TestHasSupport:

    def test_few_host_successors_against_large_domain(self):
        host = GraphModel.from_edges([(0, 5), (0, 7)], num_vertices=10)
        domains = DomainTable([list(range(10)), [1, 2, 3, 4, 7, 8]])

        assert has_support(domains, host, 0, 1)
        domains.remove(1, 7)
        assert not has_support(domains, host, 0, 1)

    def test_many_host_successors_against_small_domain(self):
        host = GraphModel.from_edges([(0, target) for target in range(1, 10)])
        domains = DomainTable([[0], [9]])

        assert has_support(domains, host, 0, 1)
        domains.remove(1, 9)
        assert not has_support(domains, host, 0, 1)

    def test_sink_candidate_has_no_support(self):
        host = GraphModel.from_edges([(0, 1)], num_vertices=3)
        domains = DomainTable([[0, 1, 2], [0, 1, 2]])
        assert not has_support(domains, host, 2, 1)

    @pytest.mark.parametrize("edge_probability,keep", [(0.8, 3), (0.2, 9), (0.5, 6)])
    def test_prune_pass_matches_reference(self, edge_probability, keep):
        for seed in range(12):
            host = create_erdos_renyi(num_nodes=12, edge_probability=edge_probability, seed=seed)
            pattern = create_erdos_renyi(num_nodes=5, edge_probability=0.4, seed=500 + seed)
            rng = random.Random(seed)
            start = _random_domains(rng, pattern.vertex_count, host.vertex_count, keep)

            fast = DomainTable(start.as_lists())
            slow = DomainTable(start.as_lists())
            assert prune_pass(fast, host, pattern) == _reference_pass(slow, host, pattern)
            assert fast.as_lists() == slow.as_lists()

    @pytest.mark.parametrize("strategy", ["recursive", "iterative"])
    def test_long_path_in_itself(self, strategy):
        path = _path(40)
        mapping = find_subgraph(path, path, settings=SearchSettings(strategy=strategy))
        assert mapping == list(range(40))
