"""
Unit tests for core/matcher.py - the find_subgraph driver.

Covers:
- Reference scenarios (paths, squares, reflection, empty, impossible)
- Agreement with a brute-force search on random graphs
- Settings: strategies, fixpoint propagation, malformed edge policy
- rustworkx inputs and the SubgraphMatcher wrapper
"""
import pytest
import rustworkx as rx

from core.errors import ConfigError, GraphModelError, MalformedGraphError
from core.graph_model import GraphModel
from core.matcher import SubgraphMatcher, find_subgraph, match_subgraph
from core.schemas import SearchSettings
from core.validator import is_embedding
from forge.topologist import (
    create_complete,
    create_cycle,
    create_grid,
    induced_subgraph,
    random_permutation,
    relabel,
)


ALL_SETTINGS = [
    SearchSettings(strategy="recursive", propagation="single"),
    SearchSettings(strategy="iterative", propagation="single"),
    SearchSettings(strategy="recursive", propagation="fixpoint"),
    SearchSettings(strategy="iterative", propagation="fixpoint"),
]


# =============================================================================
# REFERENCE SCENARIOS
# =============================================================================

@pytest.mark.parametrize("settings", ALL_SETTINGS, ids=lambda s: f"{s.strategy}-{s.propagation}")
class TestScenarios:

    def test_path_in_path(self, settings, line_graphs):
        host, pattern = line_graphs
        assert find_subgraph(host, pattern, settings=settings) == [0, 1, 2, 3]

    def test_square_in_square_with_diagonals(self, settings, square_graphs):
        host, pattern = square_graphs
        assert find_subgraph(host, pattern, settings=settings) == [0, 1, 2, 3]

    def test_reflection(self, settings, reflection_graphs):
        host, pattern = reflection_graphs
        assert find_subgraph(host, pattern, settings=settings) == [3, 2, 1, 0]

    def test_empty_pattern(self, settings, line_graphs):
        host, _ = line_graphs
        assert find_subgraph(host, GraphModel.empty(), settings=settings) == []

    def test_empty_pattern_in_empty_host(self, settings):
        assert find_subgraph(GraphModel.empty(), GraphModel.empty(), settings=settings) == []

    def test_directed_triangle_not_in_path(self, settings, triangle_vs_path):
        host, pattern = triangle_vs_path
        assert find_subgraph(host, pattern, settings=settings) is None


# =============================================================================
# EDGE CASES
# =============================================================================

class TestEdgeCases:

    def test_pattern_larger_than_host(self):
        host = GraphModel.from_edges([(0, 1)])
        pattern = GraphModel.from_edges([], num_vertices=3)
        assert find_subgraph(host, pattern) is None

    def test_isolated_pattern_vertices_take_smallest_free_hosts(self):
        host = GraphModel.from_edges([(2, 3)], num_vertices=4)
        pattern = GraphModel.from_edges([(1, 2)], num_vertices=3)
        assert find_subgraph(host, pattern) == [0, 2, 3]

    def test_self_loop_needs_host_self_loop(self):
        pattern = GraphModel.from_edges([(0, 0)])
        assert find_subgraph(GraphModel.from_edges([(0, 1)]), pattern) is None
        assert find_subgraph(GraphModel.from_edges([(0, 1), (2, 2)]), pattern) == [2]

    def test_non_induced_match(self):
        # Extra host edges between images are allowed
        host = create_complete(4)
        pattern = GraphModel.from_edges([(0, 1)], num_vertices=3)
        assert find_subgraph(host, pattern) == [0, 1, 2]

    def test_odd_cycle_not_in_bipartite_grid(self):
        host = create_grid(3, 3, directed=False)
        pattern = create_cycle(5, directed=False)
        assert find_subgraph(host, pattern) is None

    def test_deterministic(self, reflection_graphs):
        host, pattern = reflection_graphs
        results = {tuple(find_subgraph(host, pattern)) for _ in range(5)}
        assert results == {(3, 2, 1, 0)}

    def test_hidden_induced_subgraph_is_found(self):
        host = create_grid(4, 4)
        vertices = [5, 6, 9, 10, 14]
        pattern = relabel(induced_subgraph(host, vertices), random_permutation(len(vertices), seed=4))

        mapping = find_subgraph(host, pattern)
        assert mapping is not None
        assert is_embedding(host, pattern, mapping)


# =============================================================================
# BRUTE-FORCE AGREEMENT
# =============================================================================

class TestAgainstBruteForce:

    @pytest.mark.parametrize("settings", ALL_SETTINGS, ids=lambda s: f"{s.strategy}-{s.propagation}")
    def test_same_mapping_as_exhaustive_search(self, settings, small_random_pairs, brute_force):
        for host, pattern in small_random_pairs:
            expected = brute_force(host, pattern)
            assert find_subgraph(host, pattern, settings=settings) == expected

    def test_found_mappings_are_embeddings(self, small_random_pairs):
        for host, pattern in small_random_pairs:
            mapping = find_subgraph(host, pattern)
            if mapping is not None:
                assert is_embedding(host, pattern, mapping)


# =============================================================================
# SETTINGS & INPUTS
# =============================================================================

class TestSettings:

    def test_invalid_settings_rejected(self, line_graphs):
        host, pattern = line_graphs
        with pytest.raises(ConfigError) as excinfo:
            find_subgraph(host, pattern, settings=SearchSettings(strategy="bfs"))
        assert excinfo.value.field == "strategy"

    def test_malformed_edges_skipped_by_default(self):
        host = GraphModel.from_edges([(0, 1)])
        pattern = GraphModel.from_edges([(0, 1), (1, 5)], num_vertices=2)
        assert find_subgraph(host, pattern) == [0, 1]

    def test_malformed_edges_rejected_on_request(self):
        host = GraphModel.from_edges([(0, 1)])
        pattern = GraphModel.from_edges([(0, 1), (1, 5)], num_vertices=2)
        with pytest.raises(MalformedGraphError):
            find_subgraph(host, pattern, settings=SearchSettings(malformed_edges="reject"))

    def test_result_carries_stats_and_sizes(self, line_graphs):
        host, pattern = line_graphs
        result = match_subgraph(host, pattern)

        assert result.found
        assert result.mapping == [0, 1, 2, 3]
        assert result.host_vertices == 6
        assert result.pattern_vertices == 4
        assert result.stats.commits >= 4
        assert result.elapsed_seconds >= 0.0

    def test_fixpoint_prunes_at_least_as_much(self, triangle_vs_path):
        host, pattern = triangle_vs_path
        single = match_subgraph(host, pattern, settings=SearchSettings(propagation="single"))
        fixpoint = match_subgraph(host, pattern, settings=SearchSettings(propagation="fixpoint"))
        assert fixpoint.stats.states_visited <= single.stats.states_visited


class TestInputs:

    def test_rustworkx_graphs_accepted(self):
        host = rx.generators.directed_path_graph(4)
        pattern = rx.generators.directed_path_graph(2)
        assert find_subgraph(host, pattern) == [0, 1]

    def test_undirected_rustworkx_graph(self):
        host = rx.generators.cycle_graph(4)
        pattern = rx.generators.path_graph(3)
        assert find_subgraph(host, pattern) == [0, 1, 2]

    def test_sparse_rustworkx_graph_rejected(self):
        host = rx.generators.directed_path_graph(4)
        host.remove_node(0)
        with pytest.raises(GraphModelError):
            find_subgraph(host, GraphModel.empty())


class TestSubgraphMatcher:

    def test_contains_and_find(self, square_graphs, triangle_vs_path):
        matcher = SubgraphMatcher(SearchSettings(strategy="iterative"))

        host, pattern = square_graphs
        assert matcher.contains(host, pattern)
        assert matcher.find(host, pattern) == [0, 1, 2, 3]

        host, pattern = triangle_vs_path
        assert not matcher.contains(host, pattern)

    def test_invalid_settings_fail_early(self):
        with pytest.raises(ConfigError):
            SubgraphMatcher(SearchSettings(propagation="sometimes"))
