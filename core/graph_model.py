"""
SUBISO GRAPH MODEL - The Read-Only Structural Input

Both the host and the pattern graph are presented to the search through
GraphModel: a dense-integer-indexed directed adjacency structure backed by
rustworkx.PyDiGraph.

Architecture:
  Caller Layer
  - Builds graphs however it likes (rustworkx, edge lists, forge helpers)

  Model Layer (This File)
  - Copies the structure once into an owned rx.PyDiGraph
  - Precomputes ascending successor tuples + frozensets per vertex
  - Extracts the edge list once as plain (int, int) pairs

  Search Layer
  - Only calls vertex_count, successors(), successor_set(), has_edge(), edges()

Vertex ids are always 0..n-1. A rustworkx graph with holes in its node
indices (left behind by remove_node) is rejected rather than renumbered,
because renumbering would silently change what the returned mapping means.

Malformed edges (endpoint outside a declared vertex range) follow a policy:
- "skip":   the edge is kept aside in out_of_range_edges and never
            constrains the search (treated as trivially satisfied)
- "reject": MalformedGraphError is raised at construction
"""
import logging
from typing import Iterable, List, Optional, Tuple, Union, FrozenSet, Literal

import rustworkx as rx

from core.errors import GraphModelError, MalformedGraphError
from core.schemas import MALFORMED_EDGE_POLICIES

logger = logging.getLogger(__name__)

Edge = Tuple[int, int]
MalformedEdgePolicy = Literal["skip", "reject"]


class GraphModel:
    """
    Immutable dense directed graph used as search input.

    Usage:
        host = GraphModel.from_edges([(0, 1), (1, 2), (2, 0)])
        host.vertex_count          # 3
        host.successors(0)         # (1,)
        host.has_edge(2, 0)        # True

        # From rustworkx directly
        graph = rx.PyDiGraph()
        graph.add_nodes_from([None, None])
        graph.add_edge(0, 1, None)
        model = GraphModel(graph)

    Thread Safety:
        Read-only after construction; safe to share between searches.
    """

    def __init__(
        self,
        graph: Union[rx.PyDiGraph, rx.PyGraph],
        out_of_range_edges: Iterable[Edge] = (),
    ):
        """
        Wrap a rustworkx graph.

        Args:
            graph: PyDiGraph, or PyGraph (each undirected edge is inserted in
                   both directions). The graph is copied, not referenced.
            out_of_range_edges: Edges discarded by from_edges under the skip
                   policy, kept for diagnostics only.

        Raises:
            GraphModelError: If the graph type is unsupported or its node
                             indices are not exactly 0..n-1
        """
        if not isinstance(graph, (rx.PyDiGraph, rx.PyGraph)):
            raise GraphModelError(
                f"Expected rustworkx PyDiGraph or PyGraph, got {type(graph).__name__}"
            )

        num_vertices = graph.num_nodes()
        if list(graph.node_indices()) != list(range(num_vertices)):
            raise GraphModelError(
                "Graph node indices are not dense (0..n-1); "
                "rebuild the graph instead of removing nodes"
            )

        directed = isinstance(graph, rx.PyDiGraph)
        edge_set = set()
        for source, target in graph.edge_list():
            edge_set.add((source, target))
            if not directed:
                edge_set.add((target, source))

        self._num_vertices = num_vertices
        self._edges: Tuple[Edge, ...] = tuple(sorted(edge_set))
        self._out_of_range_edges: Tuple[Edge, ...] = tuple(out_of_range_edges)

        # Owned copy: later mutation of the caller's graph cannot leak in
        self._graph = rx.PyDiGraph(multigraph=False)
        self._graph.add_nodes_from([None] * num_vertices)
        self._graph.add_edges_from_no_data(list(self._edges))

        successors: List[List[int]] = [[] for _ in range(num_vertices)]
        for source, target in self._edges:
            successors[source].append(target)
        self._successors: Tuple[Tuple[int, ...], ...] = tuple(
            tuple(targets) for targets in successors
        )
        self._successor_sets: Tuple[FrozenSet[int], ...] = tuple(
            frozenset(targets) for targets in self._successors
        )

    # =========================================================================
    # CONSTRUCTORS
    # =========================================================================

    @classmethod
    def from_edges(
        cls,
        edges: Iterable[Edge],
        num_vertices: Optional[int] = None,
        undirected: bool = False,
        malformed_edges: MalformedEdgePolicy = "skip",
    ) -> "GraphModel":
        """
        Build a graph from (source, target) pairs.

        Args:
            edges: Iterable of integer pairs
            num_vertices: Declared vertex count. If None, the count grows to
                          cover the largest endpoint (0 when there are no edges).
            undirected: Insert every edge in both directions
            malformed_edges: "skip" or "reject" for endpoints >= num_vertices

        Returns:
            A new GraphModel

        Raises:
            GraphModelError: Negative vertex ids or unknown policy
            MalformedGraphError: Out-of-range endpoint under "reject"
        """
        if malformed_edges not in MALFORMED_EDGE_POLICIES:
            raise GraphModelError(
                f"malformed_edges must be one of {MALFORMED_EDGE_POLICIES}, got {malformed_edges!r}"
            )

        pairs = [(int(source), int(target)) for source, target in edges]
        for source, target in pairs:
            if source < 0 or target < 0:
                raise GraphModelError(f"Negative vertex id in edge {source} -> {target}")

        if num_vertices is None:
            num_vertices = max((max(pair) for pair in pairs), default=-1) + 1
        elif num_vertices < 0:
            raise GraphModelError(f"num_vertices must be >= 0, got {num_vertices}")

        kept: List[Edge] = []
        dropped: List[Edge] = []
        for source, target in pairs:
            if source >= num_vertices or target >= num_vertices:
                if malformed_edges == "reject":
                    raise MalformedGraphError((source, target), num_vertices)
                dropped.append((source, target))
                continue
            kept.append((source, target))
            if undirected:
                kept.append((target, source))

        if dropped:
            logger.warning(
                f"Skipping {len(dropped)} edge(s) outside 0..{num_vertices - 1}: {dropped[:5]}"
            )

        graph = rx.PyDiGraph(multigraph=False)
        graph.add_nodes_from([None] * num_vertices)
        graph.add_edges_from_no_data(kept)
        return cls(graph, out_of_range_edges=dropped)

    @classmethod
    def empty(cls) -> "GraphModel":
        """The zero-vertex graph."""
        return cls(rx.PyDiGraph())

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def vertex_count(self) -> int:
        """Number of vertices (ids are 0..vertex_count-1)."""
        return self._num_vertices

    @property
    def edge_count(self) -> int:
        """Number of distinct directed edges."""
        return len(self._edges)

    @property
    def out_of_range_edges(self) -> Tuple[Edge, ...]:
        """Edges skipped at construction because an endpoint was out of range."""
        return self._out_of_range_edges

    @property
    def is_empty(self) -> bool:
        return self._num_vertices == 0

    # =========================================================================
    # QUERIES
    # =========================================================================

    def contains_vertex(self, vertex: int) -> bool:
        return 0 <= vertex < self._num_vertices

    def successors(self, vertex: int) -> Tuple[int, ...]:
        """Direct successors of vertex in ascending order."""
        return self._successors[vertex]

    def successor_set(self, vertex: int) -> FrozenSet[int]:
        """Direct successors of vertex as a frozenset for O(1) membership."""
        return self._successor_sets[vertex]

    def has_successors(self, vertex: int) -> bool:
        return bool(self._successors[vertex])

    def has_edge(self, source: int, target: int) -> bool:
        """True if the directed edge source -> target exists."""
        if not (self.contains_vertex(source) and self.contains_vertex(target)):
            return False
        return self._graph.has_edge(source, target)

    def edges(self) -> Tuple[Edge, ...]:
        """All directed edges as ascending (source, target) pairs."""
        return self._edges

    def out_degree(self, vertex: int) -> int:
        return len(self._successors[vertex])

    def to_rustworkx(self) -> rx.PyDiGraph:
        """Return an independent rustworkx copy of this graph."""
        return self._graph.copy()

    # =========================================================================
    # DUNDER
    # =========================================================================

    def __len__(self) -> int:
        return self._num_vertices

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GraphModel):
            return NotImplemented
        return self._num_vertices == other._num_vertices and self._edges == other._edges

    def __hash__(self) -> int:
        return hash((self._num_vertices, self._edges))

    def __repr__(self) -> str:
        return f"GraphModel(vertices={self._num_vertices}, edges={len(self._edges)})"


def as_graph_model(graph: Union[GraphModel, rx.PyDiGraph, rx.PyGraph]) -> GraphModel:
    """Accept either a GraphModel or a raw rustworkx graph."""
    if isinstance(graph, GraphModel):
        return graph
    return GraphModel(graph)
