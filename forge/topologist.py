"""
SUBISO.FORGE.TOPOLOGIST - Graph Builders for Hosts and Patterns

Generates GraphModel instances from rustworkx generators (Rust-accelerated)
with deterministic seeding, for tests, examples and benchmarks.

Architecture:
- Uses rustworkx generators for the regular families
- Uses msgspec.Struct for configuration schemas
- Factory functions for the common shapes
- Seed support for reproducible random graphs and relabelings

Topology Types:
1. path:        0 -> 1 -> ... -> n-1
2. cycle:       path plus n-1 -> 0 (n >= 3)
3. complete:    every ordered pair of distinct vertices
4. star:        0 -> i for every leaf i
5. grid:        rows x cols lattice, right/down edges
6. erdos_renyi: each ordered pair with probability p

directed=False inserts every edge in both directions.

Example Usage:
    from forge.topologist import create_cycle, create_complete, relabel

    host = create_complete(5, directed=False)
    pattern = relabel(create_cycle(4), [2, 0, 3, 1])
"""
import random
from enum import Enum
from typing import List, Optional, Sequence

import msgspec
import rustworkx as rx

from core.graph_model import GraphModel


# =============================================================================
# TOPOLOGY TYPES ENUM
# =============================================================================

class Topologies(str, Enum):
    """Supported graph topology types."""
    PATH = "path"
    CYCLE = "cycle"
    COMPLETE = "complete"
    STAR = "star"
    GRID = "grid"
    ERDOS_RENYI = "erdos_renyi"


# =============================================================================
# CONFIGURATION SCHEMA
# =============================================================================

class TopologyConfig(msgspec.Struct, kw_only=True, frozen=True):
    """
    Configuration for graph generation.

    Attributes:
        topology_type: One of Topologies
        num_nodes: Vertex count (ignored for grid, which uses rows * cols)
        directed: False inserts both directions of every edge
        edge_probability: Erdos-Renyi edge probability (0.0 to 1.0)
        grid_rows / grid_cols: Grid dimensions
        seed: Seed for random topologies
    """
    topology_type: str
    num_nodes: int = 0
    directed: bool = True
    edge_probability: float = 0.1
    grid_rows: int = 1
    grid_cols: int = 1
    seed: Optional[int] = None

    def validate(self) -> None:
        """
        Validate configuration parameters.

        Raises:
            ValueError: If any parameter is invalid
        """
        valid_types = [t.value for t in Topologies]
        if self.topology_type not in valid_types:
            raise ValueError(
                f"topology_type must be one of {valid_types}, got {self.topology_type}"
            )

        if self.num_nodes < 0:
            raise ValueError(f"num_nodes must be >= 0, got {self.num_nodes}")

        if self.topology_type == Topologies.CYCLE and self.num_nodes < 3:
            raise ValueError(f"cycle needs num_nodes >= 3, got {self.num_nodes}")

        if self.topology_type == Topologies.STAR and self.num_nodes < 1:
            raise ValueError(f"star needs num_nodes >= 1, got {self.num_nodes}")

        if self.topology_type == Topologies.ERDOS_RENYI:
            if not (0.0 <= self.edge_probability <= 1.0):
                raise ValueError(
                    f"edge_probability must be between 0.0 and 1.0, got {self.edge_probability}"
                )

        if self.topology_type == Topologies.GRID:
            if self.grid_rows < 1 or self.grid_cols < 1:
                raise ValueError(
                    f"grid_rows and grid_cols must be >= 1, got {self.grid_rows}x{self.grid_cols}"
                )


# =============================================================================
# GRAPH GENERATOR CLASS
# =============================================================================

class GraphGenerator:
    """
    Builds GraphModel instances from TopologyConfig.

    Example:
        gen = GraphGenerator(seed=42)
        host = gen.generate(TopologyConfig(
            topology_type=Topologies.ERDOS_RENYI,
            num_nodes=30,
            edge_probability=0.2,
        ))
    """

    def __init__(self, seed: Optional[int] = None):
        """
        Args:
            seed: Default seed for random topologies (config.seed wins)
        """
        self.seed = seed

    def generate(self, config: TopologyConfig) -> GraphModel:
        """
        Generate a graph based on the provided configuration.

        Raises:
            ValueError: If configuration is invalid
        """
        config.validate()

        if config.topology_type == Topologies.GRID:
            graph = self._grid(config)
        elif config.num_nodes == 0:
            return GraphModel.empty()
        elif config.topology_type == Topologies.PATH:
            graph = self._path(config)
        elif config.topology_type == Topologies.CYCLE:
            graph = self._cycle(config)
        elif config.topology_type == Topologies.COMPLETE:
            graph = self._complete(config)
        elif config.topology_type == Topologies.STAR:
            graph = self._star(config)
        elif config.topology_type == Topologies.ERDOS_RENYI:
            graph = self._erdos_renyi(config)
        else:
            raise ValueError(f"Unknown topology type: {config.topology_type}")

        return GraphModel(graph)

    # PyGraph results are expanded to both directions by GraphModel

    def _path(self, config: TopologyConfig):
        if config.directed:
            return rx.generators.directed_path_graph(config.num_nodes)
        return rx.generators.path_graph(config.num_nodes)

    def _cycle(self, config: TopologyConfig):
        if config.directed:
            return rx.generators.directed_cycle_graph(config.num_nodes)
        return rx.generators.cycle_graph(config.num_nodes)

    def _complete(self, config: TopologyConfig):
        if config.directed:
            return rx.generators.directed_mesh_graph(config.num_nodes)
        return rx.generators.mesh_graph(config.num_nodes)

    def _star(self, config: TopologyConfig):
        if config.directed:
            return rx.generators.directed_star_graph(config.num_nodes)
        return rx.generators.star_graph(config.num_nodes)

    def _grid(self, config: TopologyConfig):
        if config.directed:
            return rx.generators.directed_grid_graph(config.grid_rows, config.grid_cols)
        return rx.generators.grid_graph(config.grid_rows, config.grid_cols)

    def _erdos_renyi(self, config: TopologyConfig):
        seed = config.seed if config.seed is not None else self.seed
        if config.directed:
            return rx.directed_gnp_random_graph(config.num_nodes, config.edge_probability, seed=seed)
        return rx.undirected_gnp_random_graph(config.num_nodes, config.edge_probability, seed=seed)


# =============================================================================
# FACTORY FUNCTIONS (Convenience API)
# =============================================================================

def create_path(num_nodes: int, directed: bool = True) -> GraphModel:
    """Path 0 - 1 - ... - (num_nodes-1)."""
    return GraphGenerator().generate(TopologyConfig(
        topology_type=Topologies.PATH, num_nodes=num_nodes, directed=directed,
    ))


def create_cycle(num_nodes: int, directed: bool = True) -> GraphModel:
    """Cycle on num_nodes >= 3 vertices."""
    return GraphGenerator().generate(TopologyConfig(
        topology_type=Topologies.CYCLE, num_nodes=num_nodes, directed=directed,
    ))


def create_complete(num_nodes: int, directed: bool = True) -> GraphModel:
    """Complete graph; directed=True already holds both directions."""
    return GraphGenerator().generate(TopologyConfig(
        topology_type=Topologies.COMPLETE, num_nodes=num_nodes, directed=directed,
    ))


def create_star(num_nodes: int, directed: bool = True) -> GraphModel:
    """Center 0 with num_nodes - 1 leaves."""
    return GraphGenerator().generate(TopologyConfig(
        topology_type=Topologies.STAR, num_nodes=num_nodes, directed=directed,
    ))


def create_grid(rows: int, cols: int, directed: bool = True) -> GraphModel:
    """rows x cols lattice in row-major vertex order."""
    return GraphGenerator().generate(TopologyConfig(
        topology_type=Topologies.GRID,
        num_nodes=rows * cols,
        grid_rows=rows,
        grid_cols=cols,
        directed=directed,
    ))


def create_erdos_renyi(
    num_nodes: int,
    edge_probability: float = 0.1,
    directed: bool = True,
    seed: Optional[int] = None,
) -> GraphModel:
    """
    Random G(n, p) graph.

    Example:
        host = create_erdos_renyi(num_nodes=40, edge_probability=0.15, seed=42)
    """
    return GraphGenerator(seed=seed).generate(TopologyConfig(
        topology_type=Topologies.ERDOS_RENYI,
        num_nodes=num_nodes,
        edge_probability=edge_probability,
        directed=directed,
    ))


def create_from_config(data: dict) -> GraphModel:
    """Build a graph from a plain dict (e.g. a YAML benchmark case)."""
    return GraphGenerator().generate(msgspec.convert(data, TopologyConfig))


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================

def random_permutation(num_nodes: int, seed: Optional[int] = None) -> List[int]:
    """A reproducible permutation of 0..num_nodes-1."""
    permutation = list(range(num_nodes))
    random.Random(seed).shuffle(permutation)
    return permutation


def relabel(graph: GraphModel, permutation: Sequence[int]) -> GraphModel:
    """
    Rename vertex v to permutation[v].

    The result is isomorphic to graph; useful to hide an embedding's identity.

    Raises:
        ValueError: If permutation is not a permutation of 0..n-1
    """
    if sorted(permutation) != list(range(graph.vertex_count)):
        raise ValueError(f"Not a permutation of 0..{graph.vertex_count - 1}: {list(permutation)}")
    return GraphModel.from_edges(
        [(permutation[u], permutation[v]) for u, v in graph.edges()],
        num_vertices=graph.vertex_count,
    )


def induced_subgraph(graph: GraphModel, vertices: Sequence[int]) -> GraphModel:
    """
    Subgraph on the given vertices, renumbered 0..k-1 in the given order.

    The identity list(vertices) is then an embedding of the result into graph.
    """
    position = {vertex: index for index, vertex in enumerate(vertices)}
    edges = [
        (position[u], position[v])
        for u, v in graph.edges()
        if u in position and v in position
    ]
    return GraphModel.from_edges(edges, num_vertices=len(vertices))


def graph_stats(graph: GraphModel) -> dict:
    """
    Compute basic statistics for a graph.

    Returns:
        Dictionary with vertex/edge counts, out-degree range and density
    """
    num_nodes = graph.vertex_count
    num_edges = graph.edge_count
    degrees = [graph.out_degree(v) for v in range(num_nodes)]

    return {
        "num_nodes": num_nodes,
        "num_edges": num_edges,
        "avg_out_degree": sum(degrees) / len(degrees) if degrees else 0,
        "min_out_degree": min(degrees) if degrees else 0,
        "max_out_degree": max(degrees) if degrees else 0,
        "density": num_edges / (num_nodes * (num_nodes - 1)) if num_nodes > 1 else 0,
    }
