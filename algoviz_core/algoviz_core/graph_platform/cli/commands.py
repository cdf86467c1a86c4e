"""
    CLI Commands: concrete command implementations.

    Design Pattern: Command
    ───────────────────────
    Each command encapsulates one user action as an object with
    ``execute(workspace) → CommandResult``.  The workspace is the
    receiver: it owns the graph, the undo history and the traversal
    run, so commands never touch the graph behind its back.

    Supported commands:
    ───────────────────
        create vertex --id=<id> [--property Key=Value ...]
        create edge [--directed] [--property Key=Value ...] <from_id> <to_id>
        edit   vertex --id=<id> --property Key=Value ...
        edit   edge --index=<n> --property Key=Value ...
        delete vertex --id=<id>
        delete edge --index=<n>
        run    bfs|dfs --from=<id> [--auto] [--delay=<ms>]
        run    dijkstra --from=<id> --to=<id> [--auto] [--delay=<ms>]
        step
        stop
        analyze components|cut-vertices|bridges
        layout force|circle|grid|tree [--root=<id>]
        clear
        undo
        info   [vertex <id>|edge <index>]
        list   [vertices|edges]
        help
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, TYPE_CHECKING

from algoviz_api.models.graph import Graph
from algoviz_core.services.layout_service import LayoutKind
from algoviz_core.services.structure_service import StructureQuery
from algoviz_core.services.traversal_service import AlgorithmKind, StepMode

if TYPE_CHECKING:
    from ..workspace import Workspace


# ── Result wrapper ───────────────────────────────────────────────

@dataclass
class CommandResult:
    """
    Value object returned by every command execution.

    Attributes:
        success:  Whether the command completed without error.
        message:  Human-readable output.
        graph:    The graph after the command.
        data:     Optional structured data for programmatic consumers.
    """
    success: bool
    message: str
    graph: Optional[Graph] = None
    data: Optional[Dict[str, Any]] = field(default_factory=dict)


# ── Abstract base ────────────────────────────────────────────────

class Command(ABC):
    """Abstract base for all CLI commands."""

    @abstractmethod
    def execute(self, workspace: Workspace) -> CommandResult:
        ...


def _arrow(directed: bool) -> str:
    return "->" if directed else "--"


# ═════════════════════════════════════════════════════════════════
#  VERTEX COMMANDS
# ═════════════════════════════════════════════════════════════════

class CreateVertexCommand(Command):
    """
    Syntax:
        create vertex --id=A --property label=Start --property x=100
    """

    def __init__(self, vertex_id: Optional[str], properties: Optional[Dict[str, Any]] = None):
        self._vertex_id = vertex_id
        self._properties = properties or {}

    def execute(self, workspace: Workspace) -> CommandResult:
        unknown = set(self._properties) - {'label', 'x', 'y', 'color', 'radius'}
        if unknown:
            return CommandResult(False, f"Unknown vertex field(s): {sorted(unknown)}.", workspace.graph)
        vertex = workspace.add_vertex(self._vertex_id, **self._properties)
        return CommandResult(
            True,
            f"Vertex '{vertex.vertex_id}' created (label '{vertex.label}').",
            workspace.graph,
            data={'vertex': vertex.to_dict()},
        )


class EditVertexCommand(Command):
    """
    Syntax:
        edit vertex --id=A --property color=#ff0000 --property radius=30
    """

    def __init__(self, vertex_id: str, properties: Dict[str, Any]):
        self._vertex_id = str(vertex_id)
        self._properties = properties

    def execute(self, workspace: Workspace) -> CommandResult:
        vertex = workspace.update_vertex(self._vertex_id, **self._properties)
        return CommandResult(
            True,
            f"Vertex '{self._vertex_id}' updated: {list(self._properties.keys())}.",
            workspace.graph,
            data={'vertex': vertex.to_dict()},
        )


class DeleteVertexCommand(Command):
    """
    Delete a vertex together with every edge touching it.

    Syntax:
        delete vertex --id=A
    """

    def __init__(self, vertex_id: str):
        self._vertex_id = str(vertex_id)

    def execute(self, workspace: Workspace) -> CommandResult:
        before = workspace.graph.get_number_of_edges()
        workspace.remove_vertex(self._vertex_id)
        dropped = before - workspace.graph.get_number_of_edges()
        return CommandResult(
            True,
            f"Vertex '{self._vertex_id}' deleted ({dropped} incident edge(s) removed).",
            workspace.graph,
        )


# ═════════════════════════════════════════════════════════════════
#  EDGE COMMANDS
# ═════════════════════════════════════════════════════════════════

class CreateEdgeCommand(Command):
    """
    Syntax:
        create edge A B
        create edge --directed --property weight=4 A B
    """

    def __init__(self, from_id: str, to_id: str, directed: bool = False,
                 properties: Optional[Dict[str, Any]] = None):
        self._from_id = str(from_id)
        self._to_id = str(to_id)
        self._directed = directed
        self._properties = properties or {}

    def execute(self, workspace: Workspace) -> CommandResult:
        unknown = set(self._properties) - {'weight', 'label', 'color', 'width'}
        if unknown:
            return CommandResult(False, f"Unknown edge field(s): {sorted(unknown)}.", workspace.graph)
        index = workspace.add_edge(self._from_id, self._to_id,
                                   directed=self._directed, **self._properties)
        return CommandResult(
            True,
            f"Edge #{index} created: {self._from_id} {_arrow(self._directed)} {self._to_id}.",
            workspace.graph,
            data={'index': index},
        )


class EditEdgeCommand(Command):
    """
    Syntax:
        edit edge --index=0 --property weight=7 --property directed=true
    """

    def __init__(self, index: int, properties: Dict[str, Any]):
        self._index = index
        self._properties = properties

    def execute(self, workspace: Workspace) -> CommandResult:
        workspace.update_edge(self._index, **self._properties)
        return CommandResult(
            True,
            f"Edge #{self._index} updated: {list(self._properties.keys())}.",
            workspace.graph,
        )


class DeleteEdgeCommand(Command):
    """
    Delete an edge.  Later edges move down one index.

    Syntax:
        delete edge --index=0
    """

    def __init__(self, index: int):
        self._index = index

    def execute(self, workspace: Workspace) -> CommandResult:
        if not workspace.remove_edge(self._index):
            return CommandResult(False, f"Edge #{self._index} not found.", workspace.graph)
        return CommandResult(True, f"Edge #{self._index} deleted.", workspace.graph)


# ═════════════════════════════════════════════════════════════════
#  TRAVERSAL COMMANDS
# ═════════════════════════════════════════════════════════════════

class RunCommand(Command):
    """
    Start a traversal.

    Syntax:
        run bfs --from=A
        run dijkstra --from=A --to=C --auto --delay=500
    """

    def __init__(self, kind: AlgorithmKind, source: str, target: Optional[str] = None,
                 mode: StepMode = StepMode.MANUAL, delay_ms: Optional[float] = None):
        self._kind = kind
        self._source = source
        self._target = target
        self._mode = mode
        self._delay_ms = delay_ms

    def execute(self, workspace: Workspace) -> CommandResult:
        view = workspace.start_run(self._kind, self._source, self._target,
                                   self._mode, self._delay_ms)
        hint = "type 'step' to advance" if self._mode is StepMode.MANUAL else "running on a timer"
        return CommandResult(
            True,
            f"{self._kind.value.upper()} started at '{self._source}' ({hint}).",
            workspace.graph,
            data={'next': view.next},
        )


class StepCommand(Command):
    """
    Advance the active run by one vertex.

    Syntax:
        step
    """

    def execute(self, workspace: Workspace) -> CommandResult:
        if not workspace.run_active:
            return CommandResult(False, "No traversal is running.", workspace.graph)

        done = workspace.step()
        view = workspace.run_view
        if not done:
            return CommandResult(
                True,
                f"Visited: {' '.join(view.order)} | current={view.current} next={view.next}",
                workspace.graph,
                data={'order': list(view.order), 'current': view.current, 'next': view.next},
            )
        return _describe_result(workspace)


def _describe_result(workspace: Workspace) -> CommandResult:
    result = workspace.last_result
    data = {'order': list(result.order), 'path': list(result.path), 'distance': result.distance}
    if not result.found:
        return CommandResult(True, f"Finished. {result.error}", workspace.graph, data=data)
    if result.kind is AlgorithmKind.DIJKSTRA:
        message = (f"Finished. Shortest path: {' -> '.join(result.path)} "
                   f"(distance {result.distance})")
    else:
        message = f"Finished. Order: {' '.join(result.order)}"
    return CommandResult(True, message, workspace.graph, data=data)


class StopCommand(Command):
    """
    Syntax:
        stop
    """

    def execute(self, workspace: Workspace) -> CommandResult:
        if not workspace.run_active:
            return CommandResult(False, "No traversal is running.", workspace.graph)
        workspace.cancel_run()
        return CommandResult(True, "Traversal stopped.", workspace.graph)


# ═════════════════════════════════════════════════════════════════
#  ANALYSIS / LAYOUT COMMANDS
# ═════════════════════════════════════════════════════════════════

class AnalyzeCommand(Command):
    """
    Syntax:
        analyze components
        analyze cut-vertices
        analyze bridges
    """

    def __init__(self, query: StructureQuery):
        self._query = query

    def execute(self, workspace: Workspace) -> CommandResult:
        if self._query is StructureQuery.COMPONENTS:
            components = workspace.find_components()
            lines = [f"{len(components)} component(s):"]
            lines += [f"  {i + 1}: {', '.join(c)}" for i, c in enumerate(components)]
            return CommandResult(True, "\n".join(lines), workspace.graph,
                                 data={'components': components})

        if self._query is StructureQuery.CUT_VERTICES:
            cut = workspace.find_cut_vertices()
            message = f"Cut vertices: {', '.join(cut)}" if cut else "No cut vertices."
            return CommandResult(True, message, workspace.graph, data={'cut_vertices': cut})

        bridges = workspace.find_bridges()
        if bridges:
            message = "Bridges: " + ", ".join(
                f"#{b.edge_index} ({b.from_id}-{b.to_id})" for b in bridges)
        else:
            message = "No bridges."
        return CommandResult(True, message, workspace.graph,
                             data={'bridges': [b.edge_index for b in bridges]})


class LayoutCommand(Command):
    """
    Syntax:
        layout force
        layout tree --root=A
    """

    def __init__(self, kind: LayoutKind, root: Optional[str] = None):
        self._kind = kind
        self._root = root

    def execute(self, workspace: Workspace) -> CommandResult:
        positions = workspace.apply_layout(self._kind, self._root)
        return CommandResult(
            True,
            f"Applied {self._kind.value} layout to {len(positions)} vertex(es).",
            workspace.graph,
            data={'positions': positions},
        )


# ═════════════════════════════════════════════════════════════════
#  GRAPH-LEVEL COMMANDS
# ═════════════════════════════════════════════════════════════════

class ClearCommand(Command):
    """
    Remove every vertex and edge.

    Syntax:
        clear
    """

    def execute(self, workspace: Workspace) -> CommandResult:
        workspace.clear()
        return CommandResult(True, "Graph cleared.", workspace.graph)


class UndoCommand(Command):
    """
    Revert the last change to the graph.

    Syntax:
        undo
    """

    def execute(self, workspace: Workspace) -> CommandResult:
        if workspace.undo() is None:
            return CommandResult(False, "Nothing to undo.", workspace.graph)
        return CommandResult(
            True,
            f"Undo successful (history depth: {workspace.history_depth}).",
            workspace.graph,
        )


# ═════════════════════════════════════════════════════════════════
#  INFORMATIONAL COMMANDS (no graph mutation)
# ═════════════════════════════════════════════════════════════════

class InfoCommand(Command):
    """
    Syntax:
        info vertex <id>
        info edge <index>
        info   (shows graph summary)
    """

    def __init__(self, target_type: Optional[str] = None, target: Optional[str] = None):
        self._target_type = target_type      # "vertex", "edge", or None
        self._target = target

    def execute(self, workspace: Workspace) -> CommandResult:
        graph = workspace.graph

        if self._target_type is None:
            view = workspace.run_view
            run = view.kind.value if workspace.run_active else "none"
            msg = (
                f"Graph '{graph.graph_id}': "
                f"{graph.get_number_of_vertices()} vertex(es), "
                f"{graph.get_number_of_edges()} edge(s), "
                f"run={run}, mode={view.mode.value}"
            )
            return CommandResult(True, msg, graph)

        if self._target_type == "vertex":
            vertex = graph.get_vertex(self._target)
            if vertex is None:
                return CommandResult(False, f"Vertex '{self._target}' not found.", graph)
            lines = [f"Vertex '{vertex.vertex_id}':"]
            lines += [f"  {k} = {v}" for k, v in vertex.to_dict().items() if k != 'id']
            neighbors = [n for n, _ in graph.neighbors(vertex.vertex_id)]
            lines.append(f"  neighbors = {', '.join(neighbors) or '(none)'}")
            return CommandResult(True, "\n".join(lines), graph)

        try:
            index = int(self._target)
        except (TypeError, ValueError):
            return CommandResult(False, f"Edge index must be an integer: '{self._target}'.", graph)
        edge = graph.get_edge(index)
        if edge is None:
            return CommandResult(False, f"Edge #{index} not found.", graph)
        lines = [f"Edge #{index}: {edge.from_id} {_arrow(edge.directed)} {edge.to_id}"]
        lines += [f"  {k} = {v}" for k, v in edge.to_dict().items() if k not in ('from', 'to')]
        return CommandResult(True, "\n".join(lines), graph)


class ListCommand(Command):
    """
    Syntax:
        list vertices
        list edges
        list   (lists both)
    """

    def __init__(self, target: Optional[str] = None):
        self._target = target  # "vertices", "edges", or None

    def execute(self, workspace: Workspace) -> CommandResult:
        graph = workspace.graph
        lines: List[str] = []

        if self._target in (None, "vertices"):
            lines.append(f"── Vertices ({graph.get_number_of_vertices()}) ──")
            for vertex in graph.get_all_vertices():
                lines.append(f"  [{vertex.vertex_id}] {vertex.label}  "
                             f"({vertex.x:.1f}, {vertex.y:.1f})")

        if self._target in (None, "edges"):
            lines.append(f"── Edges ({graph.get_number_of_edges()}) ──")
            for index, edge in enumerate(graph.get_all_edges()):
                line = f"  #{index} {edge.from_id} {_arrow(edge.directed)} {edge.to_id}  (weight={edge.weight})"
                if edge.label:
                    line += f"  '{edge.label}'"
                lines.append(line)

        return CommandResult(True, "\n".join(lines), graph)


class HelpCommand(Command):
    """
    Syntax:
        help
    """

    def execute(self, workspace: Workspace) -> CommandResult:
        help_text = """
Available commands:
───────────────────────────────────────────────────────
  create vertex [--id=<id>] [--property Key=Value ...]
      Create a vertex. Keys: label, x, y, color, radius.

  create edge [--directed] [--property Key=Value ...] <from_id> <to_id>
      Create an edge. Keys: weight, label, color, width.

  edit vertex --id=<id> --property Key=Value [...]
  edit edge --index=<n> --property Key=Value [...]
      Update a vertex or an edge (edges also accept directed=true|false).

  delete vertex --id=<id>
      Delete a vertex and every edge touching it.

  delete edge --index=<n>
      Delete an edge; later edges move down one index.

  run bfs|dfs --from=<id> [--auto] [--delay=<ms>]
  run dijkstra --from=<id> --to=<id> [--auto] [--delay=<ms>]
      Start a traversal, stepped by hand or on a timer.

  step
      Advance the running traversal by one vertex.

  stop
      Abort the running traversal.

  analyze components|cut-vertices|bridges
      Structural analysis with highlighting.

  layout force|circle|grid|tree [--root=<id>]
      Reposition the vertices.

  clear
      Remove all vertices and edges.

  undo
      Undo the last change to the graph.

  info [vertex <id>|edge <index>]
      Show details about a vertex, an edge, or the whole graph.

  list [vertices|edges]
      List all vertices, edges, or both.

  help
      Show this help text.
───────────────────────────────────────────────────────
""".strip()
        return CommandResult(True, help_text, workspace.graph)
