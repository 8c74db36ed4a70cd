"""
Pytest configuration and shared fixtures for the subiso test suite.
"""
import sys
from itertools import permutations
from pathlib import Path

import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


def first_embedding_by_brute_force(host, pattern):
    """
    Lexicographically smallest embedding, by trying every injective mapping.

    Only usable for tiny graphs; this is the reference the search is
    checked against.
    """
    pattern_edges = pattern.edges()
    for mapping in permutations(range(host.vertex_count), pattern.vertex_count):
        if all(host.has_edge(mapping[u], mapping[v]) for u, v in pattern_edges):
            return list(mapping)
    return None


@pytest.fixture
def brute_force():
    """Reference search: (host, pattern) -> smallest mapping or None."""
    return first_embedding_by_brute_force


@pytest.fixture
def line_graphs():
    """Host path 0-1-2-3-4-5 and pattern path 0-1-2-3."""
    from core.graph_model import GraphModel

    host = GraphModel.from_edges([(0, 1), (1, 2), (2, 3), (3, 4), (4, 5)])
    pattern = GraphModel.from_edges([(0, 1), (1, 2), (2, 3)])
    return host, pattern


@pytest.fixture
def square_graphs():
    """Host square with both diagonals, pattern plain square."""
    from core.graph_model import GraphModel

    host = GraphModel.from_edges([(0, 1), (1, 2), (2, 3), (3, 0), (0, 2), (1, 3)])
    pattern = GraphModel.from_edges([(0, 1), (1, 2), (2, 3), (3, 0)])
    return host, pattern


@pytest.fixture
def reflection_graphs():
    """Host and its relabeled reflection."""
    from core.graph_model import GraphModel

    host = GraphModel.from_edges([(0, 1), (1, 2), (1, 3), (2, 3)])
    pattern = GraphModel.from_edges([(3, 2), (2, 1), (2, 0), (1, 0)])
    return host, pattern


@pytest.fixture
def triangle_vs_path():
    """Host path on 3 vertices, pattern directed triangle."""
    from core.graph_model import GraphModel

    host = GraphModel.from_edges([(0, 1), (1, 2)])
    pattern = GraphModel.from_edges([(0, 1), (1, 2), (2, 0)])
    return host, pattern


@pytest.fixture
def small_random_pairs():
    """Seeded (host, pattern) pairs small enough to brute-force."""
    from forge.topologist import create_erdos_renyi

    pairs = []
    for seed in range(24):
        host = create_erdos_renyi(num_nodes=6, edge_probability=0.35, seed=seed)
        pattern = create_erdos_renyi(num_nodes=4, edge_probability=0.3, seed=1000 + seed)
        pairs.append((host, pattern))
    return pairs
