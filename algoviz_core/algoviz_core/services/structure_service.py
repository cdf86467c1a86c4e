"""
    Structural analysis: connected components, cut vertices and bridges.

    All three are defined on the underlying undirected structure: every
    edge connects its endpoints both ways, whatever its directed flag.

    Cut vertices and bridges come from a single Tarjan low-link pass.
    The depth-first descent keeps its own stack of frames
    (vertex, edge used to enter it, neighbor cursor) instead of
    recursing, so deep graphs cannot exhaust the interpreter stack.
"""
import logging
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Set, Tuple, Union

from algoviz_api.models.graph import Graph

from .base_service import GraphQueryService
from .exceptions import EmptyGraphError

logger = logging.getLogger(__name__)


class StructureQuery(Enum):
    COMPONENTS = "components"
    CUT_VERTICES = "cut-vertices"
    BRIDGES = "bridges"
    ARTICULATION = "articulation"   # cut vertices and bridges together


@dataclass(frozen=True)
class Bridge:
    """A bridge edge, identified by its index at analysis time."""
    edge_index: int
    from_id: str
    to_id: str


@dataclass
class ArticulationReport:
    """Cut vertices in detection order; bridges ordered by edge index."""
    cut_vertices: List[str] = field(default_factory=list)
    bridges: List[Bridge] = field(default_factory=list)

    @property
    def bridge_indices(self) -> List[int]:
        return [b.edge_index for b in self.bridges]


StructureResult = Union[List[List[str]], List[str], List[Bridge], ArticulationReport]


class StructureService(GraphQueryService[StructureQuery, StructureResult]):
    """
    Read-only structural queries.

    Usage:
        svc = StructureService()
        svc.connected_components(graph)   # [['A', 'B'], ['C', 'D']]
        svc.cut_vertices(graph)           # ['B', 'C']
        svc.bridges(graph)                # [Bridge(0, 'A', 'B'), ...]
    """

    # ── Public API ───────────────────────────────────────────────

    def connected_components(self, graph: Graph) -> List[List[str]]:
        return self.execute(graph, StructureQuery.COMPONENTS)

    def cut_vertices(self, graph: Graph) -> List[str]:
        return self.execute(graph, StructureQuery.CUT_VERTICES)

    def bridges(self, graph: Graph) -> List[Bridge]:
        return self.execute(graph, StructureQuery.BRIDGES)

    def articulation(self, graph: Graph) -> ArticulationReport:
        return self.execute(graph, StructureQuery.ARTICULATION)

    # ── Template Method steps ────────────────────────────────────

    def _validate_query(self, graph: Graph, query: StructureQuery) -> None:
        if graph.is_empty():
            raise EmptyGraphError(f"Cannot compute {query.value} of an empty graph")

    def _compute(self, graph: Graph, query: StructureQuery) -> StructureResult:
        if query is StructureQuery.COMPONENTS:
            components = self._components(graph)
            logger.info("Found %d connected component(s)", len(components))
            return components

        report = self._tarjan(graph)
        logger.info("Found %d cut vertex(es), %d bridge(s)",
                    len(report.cut_vertices), len(report.bridges))
        if query is StructureQuery.CUT_VERTICES:
            return report.cut_vertices
        if query is StructureQuery.BRIDGES:
            return report.bridges
        return report

    # ── Connected components ─────────────────────────────────────

    @staticmethod
    def _components(graph: Graph) -> List[List[str]]:
        adjacency = graph.adjacency(respect_direction=False)
        assigned: Set[str] = set()
        components: List[List[str]] = []

        for start in graph.vertices:
            if start in assigned:
                continue
            assigned.add(start)
            queue = deque([start])
            component: List[str] = []
            while queue:
                vertex = queue.popleft()
                component.append(vertex)
                for neighbor, _ in adjacency[vertex]:
                    if neighbor not in assigned:
                        assigned.add(neighbor)
                        queue.append(neighbor)
            components.append(component)

        return components

    # ── Tarjan low-link (iterative) ──────────────────────────────

    @staticmethod
    def _tarjan(graph: Graph) -> ArticulationReport:
        adjacency = graph.adjacency(respect_direction=False)
        disc: Dict[str, int] = {}
        low: Dict[str, int] = {}
        cut: Dict[str, None] = {}     # ordered set, first detection order
        bridges: List[Bridge] = []
        time = 0

        for root in graph.vertices:
            if root in disc:
                continue

            disc[root] = low[root] = time
            time += 1
            root_children = 0
            # frame: [vertex, parent vertex, edge index used to enter, cursor]
            stack: List[list] = [[root, None, None, 0]]

            while stack:
                frame = stack[-1]
                at, _, entry_edge, cursor = frame
                neighbors: List[Tuple[str, int]] = adjacency[at]

                if cursor < len(neighbors):
                    frame[3] = cursor + 1
                    to, index = neighbors[cursor]
                    if index == entry_edge:
                        # the tree edge back to the parent; parallel
                        # copies have other indices and count as back edges
                        continue
                    if to not in disc:
                        disc[to] = low[to] = time
                        time += 1
                        if at == root:
                            root_children += 1
                        stack.append([to, at, index, 0])
                    else:
                        low[at] = min(low[at], disc[to])
                    continue

                # every neighbor of ``at`` explored: report to the parent
                stack.pop()
                parent: Optional[str] = frame[1]
                if parent is None:
                    continue
                low[parent] = min(low[parent], low[at])
                if low[at] > disc[parent]:
                    edge = graph.edges[entry_edge]
                    bridges.append(Bridge(entry_edge, edge.from_id, edge.to_id))
                if parent != root and low[at] >= disc[parent]:
                    cut[parent] = None

            if root_children > 1:
                cut[root] = None

        bridges.sort(key=lambda b: b.edge_index)
        return ArticulationReport(list(cut), bridges)
