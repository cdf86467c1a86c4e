"""
    Graph model - the mutable graph store.
    Vertices keyed by id (insertion order is enumeration order),
    edges held in an ordered, index-addressed list.
"""
from typing import Any, Dict, List, Optional, Tuple
from copy import deepcopy

from ..exceptions import DuplicateIdError, VertexNotFoundError
from ..types import ValueType, TypeValidator
from .vertex import Vertex, DEFAULT_VERTEX_COLOR, DEFAULT_VERTEX_RADIUS
from .edge import Edge, DEFAULT_EDGE_COLOR, DEFAULT_EDGE_WIDTH


class Graph:
    """
        Class for graph representation.
        Supports mixed directed/undirected edges, self-loops, parallel
        edges and disconnected parts.

        Edge indices are positions in ``edges``; any removal shifts the
        indices of later edges, so callers holding an index must look it
        up again afterwards.
    """

    def __init__(self, graph_id: str = "graph"):
        """
        Initialize a graph.
        Args:
            graph_id: Identifier of the graph
        """
        self.graph_id = graph_id
        self.vertices: Dict[str, Vertex] = {}  # vertex_id -> Vertex
        self.edges: List[Edge] = []

    # ── Vertices ─────────────────────────────────────────────────

    def add_vertex(
            self,
            vertex_id: Any,
            label: Optional[str] = None,
            x: float = 0.0,
            y: float = 0.0,
            color: str = DEFAULT_VERTEX_COLOR,
            radius: float = DEFAULT_VERTEX_RADIUS,
    ) -> Vertex:
        """Add a vertex to the graph"""
        vertex = Vertex(vertex_id, label, x, y, color, radius)
        if vertex.vertex_id in self.vertices:
            raise DuplicateIdError(f"Vertex with id {vertex.vertex_id} already exists")

        self.vertices[vertex.vertex_id] = vertex
        return vertex

    def remove_vertex(self, vertex_id: str) -> None:
        """Remove a vertex and every edge that touches it."""
        vertex_id = str(vertex_id)
        if vertex_id not in self.vertices:
            raise VertexNotFoundError(f"Vertex {vertex_id} not in graph")

        del self.vertices[vertex_id]
        self.edges = [e for e in self.edges if not e.touches(vertex_id)]

    def get_vertex(self, vertex_id: str) -> Optional[Vertex]:
        return self.vertices.get(str(vertex_id))

    def has_vertex(self, vertex_id: Any) -> bool:
        return str(vertex_id) in self.vertices

    def get_all_vertices(self) -> List[Vertex]:
        return list(self.vertices.values())

    def vertex_ids(self) -> List[str]:
        return list(self.vertices.keys())

    def update_vertex(self, vertex_id: str, **fields: Any) -> Vertex:
        """Change label, color, radius or position of a vertex."""
        vertex = self.get_vertex(vertex_id)
        if vertex is None:
            raise VertexNotFoundError(f"Vertex {vertex_id} not in graph")

        for key, value in fields.items():
            if key == 'label':
                vertex.label = str(value)
            elif key == 'color':
                vertex.color = str(value)
            elif key == 'radius':
                vertex.radius = TypeValidator.number(value)
            elif key in ('x', 'y'):
                setattr(vertex, key, TypeValidator.validate_and_convert(value, ValueType.FLOAT))
            else:
                raise ValueError(f"Unknown vertex field: {key}")
        return vertex

    def find_by_label(self, label: str) -> List[Vertex]:
        """All vertices carrying ``label`` (labels need not be unique)."""
        return [v for v in self.vertices.values() if v.label == label]

    def generate_vertex_id(self, base: str) -> str:
        """First free id of the form base, base1, base2, ..."""
        candidate = str(base)
        counter = 1
        while candidate in self.vertices:
            candidate = f"{base}{counter}"
            counter += 1
        return candidate

    # ── Edges ────────────────────────────────────────────────────

    def add_edge(
            self,
            from_id: Any,
            to_id: Any,
            weight: float = 1,
            label: str = "",
            color: str = DEFAULT_EDGE_COLOR,
            width: float = DEFAULT_EDGE_WIDTH,
            directed: bool = False,
    ) -> int:
        """
        Append an edge and return its index.

        Endpoints are not checked here; traversals skip dangling ends.
        """
        self.edges.append(Edge(from_id, to_id, weight, label, color, width, directed))
        return len(self.edges) - 1

    def remove_edge(self, index: int) -> Optional[Edge]:
        """Remove the edge at ``index``; later indices shift down by one."""
        if not 0 <= index < len(self.edges):
            return None  # Safe delete, like removing a missing key
        return self.edges.pop(index)

    def get_edge(self, index: int) -> Optional[Edge]:
        if 0 <= index < len(self.edges):
            return self.edges[index]
        return None

    def get_all_edges(self) -> List[Edge]:
        return list(self.edges)

    def update_edge(self, index: int, **fields: Any) -> Edge:
        """Change weight, label, color, width or direction of an edge."""
        edge = self.get_edge(index)
        if edge is None:
            raise IndexError(f"Edge index {index} out of range")

        for key, value in fields.items():
            if key == 'weight':
                edge.weight = TypeValidator.number(value)
            elif key == 'width':
                edge.width = TypeValidator.number(value)
            elif key == 'directed':
                edge.directed = TypeValidator.validate_and_convert(value, ValueType.BOOL)
            elif key in ('label', 'color'):
                setattr(edge, key, str(value))
            else:
                raise ValueError(f"Unknown edge field: {key}")
        return edge

    # ── Neighbor resolution ──────────────────────────────────────

    def neighbors(self, vertex_id: str, respect_direction: bool = True) -> List[Tuple[str, int]]:
        """
        Traversal neighbors of a vertex as ``(neighbor_id, edge_index)``
        pairs in edge-list order.

        A directed edge leads only from ``from_id`` to ``to_id``; an
        undirected edge leads both ways.  With ``respect_direction=False``
        every edge is treated as undirected.  Endpoints missing from the
        graph are skipped.
        """
        result = []
        for index, edge in enumerate(self.edges):
            neighbor = edge.neighbor_of(vertex_id, respect_direction)
            if neighbor is not None and neighbor in self.vertices:
                result.append((neighbor, index))
        return result

    def adjacency(self, respect_direction: bool = True) -> Dict[str, List[Tuple[str, int]]]:
        """
        Neighbor lists for every vertex in one pass over the edges.
        Same content and ordering as calling ``neighbors`` per vertex.
        """
        adj: Dict[str, List[Tuple[str, int]]] = {vid: [] for vid in self.vertices}
        for index, edge in enumerate(self.edges):
            if edge.from_id not in self.vertices or edge.to_id not in self.vertices:
                continue
            adj[edge.from_id].append((edge.to_id, index))
            if edge.from_id != edge.to_id and (not edge.directed or not respect_direction):
                adj[edge.to_id].append((edge.from_id, index))
        return adj

    # ── Whole-graph operations ───────────────────────────────────

    def clear(self) -> None:
        self.vertices.clear()
        self.edges = []

    def copy(self) -> 'Graph':
        return deepcopy(self)

    def get_number_of_vertices(self) -> int:
        return len(self.vertices)

    def get_number_of_edges(self) -> int:
        return len(self.edges)

    def is_empty(self) -> bool:
        return not self.vertices

    # ── Snapshot ─────────────────────────────────────────────────

    def snapshot(self) -> Dict[str, List[Dict[str, Any]]]:
        """Order-preserving structural snapshot (vertex list + edge list)."""
        return {
            'vertices': [v.to_dict() for v in self.vertices.values()],
            'edges': [e.to_dict() for e in self.edges],
        }

    to_dict = snapshot

    @classmethod
    def from_snapshot(cls, data: Dict[str, Any], graph_id: str = "graph") -> 'Graph':
        """
        Rebuild a graph from a snapshot.

        Missing optional fields receive their defaults and unusable values
        are replaced the same way.  Vertex entries without an id (missing
        or empty, which no graph can hold) are skipped; a repeated id
        raises ``DuplicateIdError``.  For any graph ``g``,
        ``Graph.from_snapshot(g.snapshot()) == g``.
        """
        graph = cls(graph_id)

        for raw in data.get('vertices') or []:
            if not isinstance(raw, dict) or raw.get('id') in (None, ""):
                continue
            graph.add_vertex(
                raw['id'],
                label=raw.get('label'),
                x=TypeValidator.coerce(raw.get('x'), ValueType.FLOAT, 0.0),
                y=TypeValidator.coerce(raw.get('y'), ValueType.FLOAT, 0.0),
                color=raw.get('color'),
                radius=TypeValidator.as_number(
                    TypeValidator.coerce(raw.get('radius'), ValueType.FLOAT, DEFAULT_VERTEX_RADIUS)),
            )

        for raw in data.get('edges') or []:
            if not isinstance(raw, dict) or raw.get('from') is None or raw.get('to') is None:
                continue
            graph.add_edge(
                raw['from'],
                raw['to'],
                weight=TypeValidator.as_number(
                    TypeValidator.coerce(raw.get('weight'), ValueType.FLOAT, 1)),
                label=raw.get('label'),
                color=raw.get('color'),
                width=TypeValidator.as_number(
                    TypeValidator.coerce(raw.get('width'), ValueType.FLOAT, DEFAULT_EDGE_WIDTH)),
                directed=TypeValidator.coerce(raw.get('isDirected'), ValueType.BOOL, False),
            )

        return graph

    def restore(self, data: Dict[str, Any]) -> None:
        """
        Replace the whole content of this graph with a snapshot.
        The snapshot is fully parsed first, so a failure leaves the
        graph untouched.
        """
        rebuilt = Graph.from_snapshot(data, self.graph_id)
        self.vertices = rebuilt.vertices
        self.edges = rebuilt.edges

    def __eq__(self, other) -> bool:
        if not isinstance(other, Graph):
            return False
        return self.snapshot() == other.snapshot()

    __hash__ = None

    def __repr__(self) -> str:
        return f"Graph({self.graph_id}, vertices={len(self.vertices)}, edges={len(self.edges)})"
