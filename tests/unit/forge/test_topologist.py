"""
Unit tests for forge/topologist.py - Host and Pattern Graph Builders

Tests the topology generation capabilities including:
- Regular families (path, cycle, complete, star, grid)
- Erdos-Renyi random graphs
- Configuration validation
- Deterministic seeding
- Relabeling and induced subgraphs
"""

import pytest

from core.graph_model import GraphModel
from core.validator import is_embedding
from forge.topologist import (
    GraphGenerator,
    TopologyConfig,
    Topologies,
    create_complete,
    create_cycle,
    create_erdos_renyi,
    create_from_config,
    create_grid,
    create_path,
    create_star,
    graph_stats,
    induced_subgraph,
    random_permutation,
    relabel,
)


# =============================================================================
# REGULAR FAMILIES
# =============================================================================

def test_path_directed():
    """
    Test directed path generation.

    Verifies:
    - n vertices, n-1 edges
    - Edges run i -> i+1 only
    """
    graph = create_path(4)

    assert isinstance(graph, GraphModel)
    assert graph.vertex_count == 4
    assert graph.edges() == ((0, 1), (1, 2), (2, 3))


def test_path_undirected_has_both_directions():
    graph = create_path(3, directed=False)
    assert graph.edge_count == 4
    assert graph.has_edge(1, 0)


def test_cycle_closes():
    graph = create_cycle(5)
    assert graph.edge_count == 5
    assert graph.has_edge(4, 0)


def test_complete_has_every_ordered_pair():
    """
    Test complete graph generation.

    Verifies:
    - n * (n-1) directed edges, no self-loops
    - Density of exactly 1.0
    """
    graph = create_complete(5)

    assert graph.edge_count == 20
    assert not any(graph.has_edge(v, v) for v in range(5))
    assert graph_stats(graph)["density"] == 1.0


def test_star_center_is_zero():
    graph = create_star(5)
    assert graph.successors(0) == (1, 2, 3, 4)
    assert all(graph.out_degree(v) == 0 for v in range(1, 5))


def test_grid_dimensions():
    """
    Test grid/lattice generation.

    Verifies:
    - rows * cols vertices
    - Directed grid edges point right and down
    """
    graph = create_grid(3, 4)

    assert graph.vertex_count == 12
    # 3 rows * 3 horizontal + 2 * 4 vertical
    assert graph.edge_count == 17
    assert graph.has_edge(0, 1)
    assert graph.has_edge(0, 4)
    assert not graph.has_edge(1, 0)


def test_undirected_grid_max_degree():
    stats = graph_stats(create_grid(3, 3, directed=False))
    assert stats["max_out_degree"] == 4
    assert stats["min_out_degree"] == 2


def test_zero_nodes_gives_empty_graph():
    assert create_path(0).is_empty
    assert create_complete(0).is_empty


# =============================================================================
# ERDOS-RENYI TESTS
# =============================================================================

def test_erdos_renyi_generation_directed():
    """
    Test Erdos-Renyi random graph generation with directed graph.

    Verifies:
    - Graph is created with correct number of nodes
    - Edge probability affects edge count
    """
    graph = create_erdos_renyi(num_nodes=100, edge_probability=0.1, seed=42)

    assert graph.vertex_count == 100
    # With p=0.1, we expect roughly 100 * 99 * 0.1 = 990 edges (approximate)
    assert 700 < graph.edge_count < 1300


def test_erdos_renyi_undirected_is_symmetric():
    graph = create_erdos_renyi(num_nodes=30, edge_probability=0.2, directed=False, seed=3)
    assert all(graph.has_edge(v, u) for u, v in graph.edges())


def test_erdos_renyi_deterministic_seeding():
    """
    Test that the same seed produces identical graphs.

    Verifies:
    - Two graphs with same seed have identical edges
    - A different seed gives a different graph
    """
    first = create_erdos_renyi(num_nodes=40, edge_probability=0.2, seed=7)
    second = create_erdos_renyi(num_nodes=40, edge_probability=0.2, seed=7)
    other = create_erdos_renyi(num_nodes=40, edge_probability=0.2, seed=8)

    assert first == second
    assert first != other


def test_generator_seed_used_when_config_has_none():
    config = TopologyConfig(topology_type=Topologies.ERDOS_RENYI, num_nodes=25, edge_probability=0.3)
    assert GraphGenerator(seed=5).generate(config) == GraphGenerator(seed=5).generate(config)


# =============================================================================
# CONFIGURATION VALIDATION
# =============================================================================

@pytest.mark.parametrize("kwargs", [
    {"topology_type": "hypercube", "num_nodes": 4},
    {"topology_type": Topologies.PATH, "num_nodes": -1},
    {"topology_type": Topologies.CYCLE, "num_nodes": 2},
    {"topology_type": Topologies.STAR, "num_nodes": 0},
    {"topology_type": Topologies.ERDOS_RENYI, "num_nodes": 5, "edge_probability": 1.5},
    {"topology_type": Topologies.GRID, "grid_rows": 0, "grid_cols": 3},
])
def test_invalid_config_rejected(kwargs):
    with pytest.raises(ValueError):
        TopologyConfig(**kwargs).validate()


def test_create_from_config_dict():
    graph = create_from_config({"topology_type": "grid", "grid_rows": 2, "grid_cols": 2, "directed": False})
    assert graph.vertex_count == 4
    assert graph.edge_count == 8


# =============================================================================
# RELABELING & SUBGRAPHS
# =============================================================================

def test_random_permutation_is_reproducible():
    permutation = random_permutation(10, seed=1)
    assert sorted(permutation) == list(range(10))
    assert permutation == random_permutation(10, seed=1)


def test_relabel_moves_edges():
    graph = create_path(3)
    relabeled = relabel(graph, [2, 0, 1])
    assert relabeled.edges() == ((0, 1), (2, 0))


def test_relabel_rejects_non_permutation():
    with pytest.raises(ValueError):
        relabel(create_path(3), [0, 0, 1])


def test_induced_subgraph_identity_embeds():
    """
    Test that an induced subgraph embeds back through its vertex list.

    Verifies:
    - Renumbering follows the given vertex order
    - Only edges among the chosen vertices survive
    """
    host = create_grid(3, 3)
    vertices = [4, 5, 7, 8]
    sub = induced_subgraph(host, vertices)

    assert sub.vertex_count == 4
    assert sub.edges() == ((0, 1), (0, 2), (1, 3), (2, 3))
    assert is_embedding(host, sub, vertices)


def test_graph_stats_empty():
    stats = graph_stats(GraphModel.empty())
    assert stats["num_nodes"] == 0
    assert stats["density"] == 0
