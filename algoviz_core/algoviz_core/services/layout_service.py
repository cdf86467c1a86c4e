"""
    Layout engine: repositions vertices.

    Every layout is a pure function of the current vertex order, edge set
    and (for force-directed) current positions.  Positions are written
    back onto the vertices and also returned as ``{vertex_id: (x, y)}``.
    No randomness is involved anywhere, so equal inputs give equal output.
"""
import logging
import math
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple

from algoviz_api.models.graph import Graph

from .base_service import GraphQueryService
from .exceptions import InvalidSelectionError

logger = logging.getLogger(__name__)

Positions = Dict[str, Tuple[float, float]]


class LayoutKind(Enum):
    FORCE = "force"
    CIRCLE = "circle"
    GRID = "grid"
    TREE = "tree"


@dataclass
class LayoutQuery:
    kind: LayoutKind
    root: Optional[str] = None


class LayoutService(GraphQueryService[LayoutQuery, Positions]):
    """
    Usage:
        svc = LayoutService(config.layout)
        svc.force_directed(graph)
        svc.tree(graph, root="A")
    """

    def __init__(self, config=None):
        from algoviz_core.graph_platform.config import LayoutConfig
        self._config = config or LayoutConfig()

    @property
    def config(self):
        return self._config

    @config.setter
    def config(self, value) -> None:
        self._config = value

    # ── Public API ───────────────────────────────────────────────

    def apply(self, graph: Graph, kind: LayoutKind, root: Optional[str] = None) -> Positions:
        return self.execute(graph, LayoutQuery(kind, root))

    def force_directed(self, graph: Graph) -> Positions:
        return self.apply(graph, LayoutKind.FORCE)

    def circular(self, graph: Graph) -> Positions:
        return self.apply(graph, LayoutKind.CIRCLE)

    def grid(self, graph: Graph) -> Positions:
        return self.apply(graph, LayoutKind.GRID)

    def tree(self, graph: Graph, root: str) -> Positions:
        return self.apply(graph, LayoutKind.TREE, root)

    # ── Template Method steps ────────────────────────────────────

    def _validate_query(self, graph: Graph, query: LayoutQuery) -> None:
        if query.kind is LayoutKind.TREE:
            if query.root is None or not graph.has_vertex(query.root):
                raise InvalidSelectionError(f"Tree root '{query.root}' not in graph")

    def _compute(self, graph: Graph, query: LayoutQuery) -> Positions:
        if query.kind is LayoutKind.FORCE:
            self._force_directed(graph)
        elif query.kind is LayoutKind.CIRCLE:
            self._circular(graph)
        elif query.kind is LayoutKind.GRID:
            self._grid(graph)
        else:
            self._tree(graph, str(query.root))

        logger.info("Applied %s layout to %d vertices",
                    query.kind.value, graph.get_number_of_vertices())
        return {vid: v.position for vid, v in graph.vertices.items()}

    # ── Force-directed ───────────────────────────────────────────

    def _force_directed(self, graph: Graph) -> None:
        cfg = self._config
        k = cfg.force_k
        vertices = graph.get_all_vertices()

        for _ in range(cfg.force_iterations):
            forces = {v.vertex_id: [0.0, 0.0] for v in vertices}

            # repulsion between every pair
            for i, v1 in enumerate(vertices):
                for v2 in vertices[i + 1:]:
                    dx = v2.x - v1.x
                    dy = v2.y - v1.y
                    dist = math.hypot(dx, dy) + 0.1
                    force = (k * k) / dist
                    f1, f2 = forces[v1.vertex_id], forces[v2.vertex_id]
                    f1[0] -= force * dx / dist
                    f1[1] -= force * dy / dist
                    f2[0] += force * dx / dist
                    f2[1] += force * dy / dist

            # attraction along edges
            for edge in graph.edges:
                v1 = graph.vertices.get(edge.from_id)
                v2 = graph.vertices.get(edge.to_id)
                if v1 is None or v2 is None:
                    continue
                dx = v2.x - v1.x
                dy = v2.y - v1.y
                dist = math.hypot(dx, dy) + 0.1
                force = (dist * dist) / k
                f1, f2 = forces[v1.vertex_id], forces[v2.vertex_id]
                f1[0] += force * dx / dist
                f1[1] += force * dy / dist
                f2[0] -= force * dx / dist
                f2[1] -= force * dy / dist

            # apply all displacements at once
            for vertex in vertices:
                fx, fy = forces[vertex.vertex_id]
                magnitude = math.hypot(fx, fy)
                if magnitude > 0:
                    step = min(magnitude, cfg.force_max_step)
                    vertex.x += cfg.force_damping * (fx / magnitude) * step
                    vertex.y += cfg.force_damping * (fy / magnitude) * step

    # ── Closed-form layouts ──────────────────────────────────────

    def _circular(self, graph: Graph) -> None:
        vertices = graph.get_all_vertices()
        count = len(vertices)
        if count == 0:
            return
        radius = max(self._config.circle_min_radius, count * self._config.circle_radius_per_vertex)
        for i, vertex in enumerate(vertices):
            angle = (i / count) * math.pi * 2
            vertex.move_to(math.cos(angle) * radius, math.sin(angle) * radius)

    def _grid(self, graph: Graph) -> None:
        vertices = graph.get_all_vertices()
        if not vertices:
            return
        cols = math.ceil(math.sqrt(len(vertices)))
        spacing = self._config.grid_spacing
        for i, vertex in enumerate(vertices):
            vertex.move_to((i % cols - cols / 2) * spacing,
                           (i // cols - cols / 2) * spacing)

    # ── Tree (BFS levels) ────────────────────────────────────────

    def _tree(self, graph: Graph, root: str) -> None:
        levels: List[List[str]] = []
        depth_of: Dict[str, int] = {root: 0}
        queue = deque([root])

        while queue:
            current = queue.popleft()
            depth = depth_of[current]
            if depth == len(levels):
                levels.append([])
            levels[depth].append(current)
            for neighbor, _ in graph.neighbors(current):
                if neighbor not in depth_of:
                    depth_of[neighbor] = depth + 1
                    queue.append(neighbor)

        unreached = [vid for vid in graph.vertices if vid not in depth_of]
        if unreached:
            levels.append(unreached)

        for depth, level in enumerate(levels):
            self._place_row(graph, level, depth * self._config.tree_level_height)

    def _place_row(self, graph: Graph, row: List[str], y: float) -> None:
        spacing = self._config.tree_node_spacing
        x = -((len(row) - 1) * spacing) / 2
        for vid in row:
            graph.vertices[vid].move_to(x, y)
            x += spacing
