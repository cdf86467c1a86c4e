"""
    Workspace: one editable graph together with its run and analysis state.

    Design Pattern: Memento (simplified)
    ─────────────────────────────────────
    Every edit pushes a snapshot of the graph onto a bounded history
    stack so the user can roll it back with ``undo``.  The snapshot is
    the same plain dict the JSON format uses, so a history entry is
    exactly what "save" would have written at that moment.

    Each workspace holds:
        • graph       – the live graph (edited in place)
        • controller  – the RunController driving traversals on it
        • history     – stack of graph snapshots
        • highlights  – cut vertices / bridges / component colors from
                        the last analysis

    An edit that fails leaves the graph exactly as it was, and edits are
    refused while a traversal run is active.
"""
import uuid
import logging
from typing import Any, Callable, Dict, List, Optional, Set

from algoviz_api.models.graph import Graph
from algoviz_api.models.vertex import Vertex
from algoviz_api.exceptions import VertexNotFoundError
from algoviz_api.types import TypeValidator, ValueType

from algoviz_core.services.exceptions import RunInProgressError
from algoviz_core.services.layout_service import LayoutKind, LayoutService, Positions
from algoviz_core.services.matrix_service import MatrixCodec
from algoviz_core.services.structure_service import Bridge, StructureService
from algoviz_core.services.traversal_service import (
    RunView,
    StepMode,
    TraversalResult,
)

from .config import PlatformConfig
from .run_controller import RunController
from .timers import TimerService

logger = logging.getLogger(__name__)


class Workspace:
    """
    Encapsulates one graph, its undo history and its traversal run.

    Attributes:
        workspace_id: Unique identifier.
        name:         Human-readable label.
        data_source:  Name of the data-source plugin that produced the graph.
        file_path:    Path of the loaded data file.
        on_render:    Called with a ``RunView`` after every run step.
        on_finish:    Called with the ``TraversalResult`` when a run ends.
    """

    def __init__(
        self,
        graph: Optional[Graph] = None,
        data_source: str = "",
        file_path: str = "",
        name: Optional[str] = None,
        config: Optional[PlatformConfig] = None,
        timer_service: Optional[TimerService] = None,
    ):
        self.workspace_id: str = str(uuid.uuid4())
        self.name: str = name or f"Workspace-{self.workspace_id[:8]}"
        self.data_source: str = data_source
        self.file_path: str = file_path

        self._config: PlatformConfig = config or PlatformConfig()
        self._graph: Graph = graph if graph is not None else Graph(self.name)
        self._history: List[Dict[str, Any]] = []
        self._max_history: int = self._config.max_history_depth

        self.on_render: Optional[Callable[[RunView], None]] = None
        self.on_finish: Optional[Callable[[TraversalResult], None]] = None

        self._controller = RunController(
            self._graph,
            timer_service=timer_service,
            on_render=self._handle_render,
            on_finish=self._handle_finish,
            default_delay_ms=self._config.traversal.default_delay_ms,
            on_start=self.reset_highlights,
        )

        # Services (injected by default; can be replaced for testing)
        self._layout_service = LayoutService(self._config.layout)
        self._structure_service = StructureService()
        self._matrix_codec = MatrixCodec(self._config.matrix)

        # Analysis highlights
        self._cut_vertices: Set[str] = set()
        self._bridge_indices: Set[int] = set()
        self._components: List[List[str]] = []
        self._saved_colors: Dict[str, str] = {}

    # ── Properties ───────────────────────────────────────────────

    @property
    def graph(self) -> Graph:
        """The live graph."""
        return self._graph

    @property
    def controller(self) -> RunController:
        return self._controller

    @property
    def history_depth(self) -> int:
        """Number of snapshots in the undo history."""
        return len(self._history)

    @property
    def run_active(self) -> bool:
        return self._controller.is_active

    @property
    def run_view(self) -> RunView:
        return self._controller.view

    @property
    def last_result(self) -> Optional[TraversalResult]:
        return self._controller.last_result

    @property
    def cut_vertices(self) -> Set[str]:
        return set(self._cut_vertices)

    @property
    def bridge_indices(self) -> Set[int]:
        return set(self._bridge_indices)

    @property
    def components(self) -> List[List[str]]:
        return [list(c) for c in self._components]

    # ── Vertex editing ───────────────────────────────────────────

    def add_vertex(
        self,
        vertex_id: Optional[str] = None,
        label: Optional[str] = None,
        x: float = 0.0,
        y: float = 0.0,
        color: Optional[str] = None,
        radius: Optional[float] = None,
    ) -> Vertex:
        """
        Add a vertex.  Without an explicit id one is generated from the
        label (``A``, ``A1``, ``A2`` ...).

        Raises:
            DuplicateIdError:   ``vertex_id`` is taken.
            RunInProgressError: a traversal is running.
        """
        style = self._config.style
        if vertex_id is None:
            vertex_id = self._graph.generate_vertex_id(label or "v")
        vertex = self._edit(
            "add vertex",
            self._graph.add_vertex,
            vertex_id, label,
            TypeValidator.number(x), TypeValidator.number(y),
            color or style.vertex_color,
            style.vertex_radius if radius is None else TypeValidator.number(radius),
        )
        logger.info("Workspace %s: vertex '%s' added", self.workspace_id[:8], vertex.vertex_id)
        return vertex

    def remove_vertex(self, vertex_id: str) -> None:
        """Remove a vertex and all its incident edges."""
        self._edit("delete vertex", self._graph.remove_vertex, vertex_id)
        logger.info("Workspace %s: vertex '%s' removed", self.workspace_id[:8], vertex_id)

    def update_vertex(self, vertex_id: str, **fields: Any) -> Vertex:
        """Change label / color / radius / position of a vertex."""
        return self._edit("edit vertex", self._graph.update_vertex, vertex_id, **fields)

    def move_vertex(self, vertex_id: str, x: float, y: float) -> Vertex:
        return self.update_vertex(vertex_id, x=x, y=y)

    # ── Edge editing ─────────────────────────────────────────────

    def add_edge(
        self,
        from_id: str,
        to_id: str,
        weight: float = 1,
        label: str = "",
        color: Optional[str] = None,
        width: Optional[float] = None,
        directed: bool = False,
    ) -> int:
        """
        Add an edge between two existing vertices.

        Returns:
            The new edge's index.

        Raises:
            VertexNotFoundError: an endpoint does not exist.
        """
        for endpoint in (from_id, to_id):
            if not self._graph.has_vertex(endpoint):
                raise VertexNotFoundError(f"Vertex {endpoint} not in graph")
        style = self._config.style
        index = self._edit(
            "add edge",
            self._graph.add_edge,
            from_id, to_id, TypeValidator.number(weight), label,
            color or style.edge_color,
            style.edge_width if width is None else TypeValidator.number(width),
            TypeValidator.validate_and_convert(directed, ValueType.BOOL),
        )
        logger.info("Workspace %s: edge #%d %s-%s added",
                    self.workspace_id[:8], index, from_id, to_id)
        return index

    def remove_edge(self, index: int) -> bool:
        """
        Remove the edge at ``index``.

        Returns:
            False (and records nothing) when the index is out of range.
        """
        self._ensure_idle("delete edge")
        if self._graph.get_edge(index) is None:
            return False
        self._edit("delete edge", self._graph.remove_edge, index)
        return True

    def update_edge(self, index: int, **fields: Any):
        """Change weight / width / direction / label / color of an edge."""
        return self._edit("edit edge", self._graph.update_edge, index, **fields)

    # ── Whole-graph operations ───────────────────────────────────

    def clear(self) -> None:
        self._edit("clear", self._graph.clear)
        logger.info("Workspace %s: graph cleared", self.workspace_id[:8])

    def load_snapshot(self, data: Dict[str, Any]) -> Graph:
        """Replace the whole graph with a snapshot dict."""
        self._edit("load", self._graph.restore, data)
        logger.info("Workspace %s: snapshot loaded (%d vertices, %d edges)",
                    self.workspace_id[:8], self._graph.get_number_of_vertices(),
                    self._graph.get_number_of_edges())
        return self._graph

    def load_graph(self, graph: Graph) -> Graph:
        """Replace the whole graph with the contents of another one."""
        return self.load_snapshot(graph.snapshot())

    def load_matrix(self, text: str, labels=None, directed: Optional[bool] = None) -> Graph:
        """
        Replace the graph with one built from adjacency-matrix text.

        Raises:
            MalformedMatrixError: the graph is left untouched.
        """
        self._ensure_idle("import matrix")
        imported = self._matrix_codec.parse(text, labels=labels, directed=directed)
        return self.load_graph(imported)

    def export_matrix(self) -> str:
        return self._matrix_codec.render(self._graph)

    def apply_layout(self, kind, root: Optional[str] = None) -> Positions:
        """
        Reposition every vertex with one of the layouts.

        Raises:
            InvalidSelectionError: tree layout with an unknown root.
        """
        kind = LayoutKind(kind)
        return self._edit("layout", self._layout_service.apply, self._graph, kind, root)

    def undo(self) -> Optional[Graph]:
        """
        Revert the last edit.

        Returns:
            The restored graph, or ``None`` if history is empty.
        """
        self._ensure_idle("undo")
        if not self._history:
            logger.warning("Workspace %s: nothing to undo.", self.workspace_id[:8])
            return None

        self.reset_highlights()
        self._graph.restore(self._history.pop())
        logger.info("Workspace %s: undo (%d vertices)",
                    self.workspace_id[:8], self._graph.get_number_of_vertices())
        return self._graph

    # ── Traversal runs ───────────────────────────────────────────

    def start_run(self, kind, source: str, target: Optional[str] = None,
                  mode=None, delay_ms: Optional[float] = None) -> RunView:
        """
        Start BFS / DFS / Dijkstra; see ``RunController.start``.
        Highlights are cleared only once the run is accepted.
        """
        if mode is None:
            mode = self._config.traversal.default_mode
        return self._controller.start(kind, source, target, mode, delay_ms)

    def step(self) -> bool:
        return self._controller.step()

    def cancel_run(self) -> None:
        self._controller.cancel()

    def run_to_completion(self, kind, source: str,
                          target: Optional[str] = None) -> TraversalResult:
        """Run a traversal in manual mode straight to its result."""
        self.start_run(kind, source, target, StepMode.MANUAL)
        return self._controller.run_to_completion()

    def _handle_render(self, view: RunView) -> None:
        if self.on_render is not None:
            self.on_render(view)

    def _handle_finish(self, result: TraversalResult) -> None:
        if self.on_finish is not None:
            self.on_finish(result)

    # ── Analysis ─────────────────────────────────────────────────

    def find_cut_vertices(self) -> List[str]:
        """Compute and highlight the cut vertices."""
        self.reset_highlights()
        cut = self._structure_service.cut_vertices(self._graph)
        self._cut_vertices = set(cut)
        return cut

    def find_bridges(self) -> List[Bridge]:
        """Compute and highlight the bridges (by edge index)."""
        self.reset_highlights()
        bridges = self._structure_service.bridges(self._graph)
        self._bridge_indices = {b.edge_index for b in bridges}
        return bridges

    def find_components(self) -> List[List[str]]:
        """
        Compute the connected components and color each one from the
        palette.  The original colors come back on ``reset_highlights``.
        """
        self.reset_highlights()
        components = self._structure_service.connected_components(self._graph)
        palette = self._config.component_palette
        for i, component in enumerate(components):
            color = palette[i % len(palette)]
            for vertex_id in component:
                vertex = self._graph.get_vertex(vertex_id)
                self._saved_colors[vertex_id] = vertex.color
                vertex.color = color
        self._components = components
        return components

    def reset_highlights(self) -> None:
        """Clear analysis highlights and restore component-colored vertices."""
        for vertex_id, color in self._saved_colors.items():
            vertex = self._graph.get_vertex(vertex_id)
            if vertex is not None:
                vertex.color = color
        self._cut_vertices = set()
        self._bridge_indices = set()
        self._components = []
        self._saved_colors = {}

    # ── Snapshot management ──────────────────────────────────────

    def _ensure_idle(self, action: str) -> None:
        if self._controller.is_active:
            raise RunInProgressError(f"Cannot {action} while a traversal is running")

    def _edit(self, action: str, operation: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        """
        Run one graph mutation with history.  On failure the graph is
        restored from the snapshot taken beforehand and nothing is pushed.
        """
        self._ensure_idle(action)
        self.reset_highlights()
        snapshot = self._graph.snapshot()
        try:
            result = operation(*args, **kwargs)
        except Exception:
            self._graph.restore(snapshot)
            raise
        self._push_snapshot(snapshot)
        return result

    def _push_snapshot(self, snapshot: Dict[str, Any]) -> None:
        if len(self._history) >= self._max_history:
            self._history.pop(0)  # Drop oldest snapshot
        self._history.append(snapshot)

    # ── Convenience ──────────────────────────────────────────────

    def to_dict(self) -> dict:
        """Serialize workspace metadata (not the full graph)."""
        view = self._controller.view
        return {
            'workspace_id': self.workspace_id,
            'name': self.name,
            'data_source': self.data_source,
            'file_path': self.file_path,
            'vertices': self._graph.get_number_of_vertices(),
            'edges': self._graph.get_number_of_edges(),
            'history_depth': self.history_depth,
            'run': view.kind.value if self.run_active else None,
            'mode': view.mode.value,
        }

    def __repr__(self) -> str:
        return (
            f"Workspace(id={self.workspace_id[:8]}, "
            f"name='{self.name}', "
            f"source='{self.data_source}', "
            f"vertices={self._graph.get_number_of_vertices()}, "
            f"edges={self._graph.get_number_of_edges()})"
        )
