"""
Subiso.Forge - Graph Builders

Host and pattern construction for tests, examples and benchmarks.

Components:
- topologist: regular and random topologies, relabeling, induced subgraphs

Design Philosophy:
1. NO PYDANTIC: All schemas use msgspec.Struct
2. GRAPH-NATIVE: Built on rustworkx generators
3. DETERMINISTIC: Reproducible via seeds
"""

from forge.topologist import (
    GraphGenerator,
    TopologyConfig,
    Topologies,
    create_path,
    create_cycle,
    create_complete,
    create_star,
    create_grid,
    create_erdos_renyi,
    create_from_config,
    random_permutation,
    relabel,
    induced_subgraph,
    graph_stats,
)

__all__ = [
    "GraphGenerator",
    "TopologyConfig",
    "Topologies",
    "create_path",
    "create_cycle",
    "create_complete",
    "create_star",
    "create_grid",
    "create_erdos_renyi",
    "create_from_config",
    "random_permutation",
    "relabel",
    "induced_subgraph",
    "graph_stats",
]
