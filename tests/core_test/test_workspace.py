# tests/core_test/test_workspace.py
"""
Tests for Workspace (algoviz_core/graph_platform/workspace.py).

Covers:
    • Editing with generated ids and numeric coercion
    • Undo history (bounded, atomic edits)
    • Edits refused while a traversal runs
    • Analysis highlights and component coloring
    • Matrix import / export and layouts through the workspace
"""
import pytest

from algoviz_api.exceptions import DuplicateIdError, InvalidVertexIdError, VertexNotFoundError
from algoviz_api.models.vertex import DEFAULT_VERTEX_COLOR
from algoviz_core.graph_platform.config import PlatformConfig
from algoviz_core.graph_platform.workspace import Workspace
from algoviz_core.services.exceptions import (
    EmptyGraphError,
    InvalidSelectionError,
    MalformedMatrixError,
    RunInProgressError,
)
from algoviz_core.services.traversal_service import StepMode


# ═════════════════════════════════════════════════════════════════
#  EDITING
# ═════════════════════════════════════════════════════════════════

class TestEditing:

    def test_add_vertex_with_id(self, workspace):
        vertex = workspace.add_vertex("E", label="End", x=10, y=20)
        assert workspace.graph.get_vertex("E") is vertex
        assert vertex.label == "End"
        assert vertex.position == (10.0, 20.0)

    def test_generated_ids(self, workspace):
        assert workspace.add_vertex(label="A").vertex_id == "A1"
        assert workspace.add_vertex(label="A").vertex_id == "A2"
        assert workspace.add_vertex().vertex_id == "v"

    def test_numeric_strings_coerced(self, workspace):
        vertex = workspace.add_vertex("E", x="12.5", y="-3", radius="25")
        assert vertex.x == 12.5
        assert vertex.y == -3
        assert vertex.radius == 25

    def test_non_numeric_position_rejected(self, workspace):
        with pytest.raises(ValueError):
            workspace.add_vertex("E", x="left")
        assert not workspace.graph.has_vertex("E")
        assert workspace.history_depth == 0

    def test_style_defaults(self, branching_graph, timers):
        config = PlatformConfig()
        config.style.vertex_color = "#123456"
        config.style.edge_width = 5
        ws = Workspace(branching_graph, config=config, timer_service=timers)
        assert ws.add_vertex("E").color == "#123456"
        index = ws.add_edge("A", "E")
        assert ws.graph.get_edge(index).width == 5

    def test_duplicate_vertex(self, workspace):
        with pytest.raises(DuplicateIdError):
            workspace.add_vertex("A")
        assert workspace.history_depth == 0

    def test_add_edge(self, workspace):
        index = workspace.add_edge("C", "D", weight="4", directed="true")
        edge = workspace.graph.get_edge(index)
        assert index == 3
        assert edge.weight == 4
        assert edge.directed is True

    def test_add_edge_unknown_endpoint(self, workspace):
        with pytest.raises(VertexNotFoundError, match="Z"):
            workspace.add_edge("A", "Z")
        assert workspace.graph.get_number_of_edges() == 3

    def test_remove_vertex_drops_incident_edges(self, workspace):
        workspace.remove_vertex("A")
        assert [(e.from_id, e.to_id) for e in workspace.graph.edges] == [("B", "D")]

    def test_remove_unknown_vertex(self, workspace):
        with pytest.raises(VertexNotFoundError):
            workspace.remove_vertex("Z")
        assert workspace.history_depth == 0

    def test_remove_edge_out_of_range(self, workspace):
        assert workspace.remove_edge(99) is False
        assert workspace.history_depth == 0

    def test_remove_edge_shifts_indices(self, workspace):
        assert workspace.remove_edge(0) is True
        assert (workspace.graph.edges[0].from_id, workspace.graph.edges[0].to_id) == ("A", "C")

    def test_empty_id_rejected(self, workspace):
        before = workspace.graph.snapshot()
        with pytest.raises(InvalidVertexIdError):
            workspace.add_vertex("")
        assert workspace.graph.snapshot() == before
        assert workspace.history_depth == 0

    def test_failed_edit_keeps_every_vertex(self, workspace):
        workspace.add_vertex("E")
        workspace.add_edge("E", "A", label=7)
        before = workspace.graph.snapshot()
        with pytest.raises(DuplicateIdError):
            workspace.add_vertex("E")
        assert workspace.graph.snapshot() == before
        assert workspace.graph.get_edge(3).label == "7"

    def test_failed_update_is_atomic(self, workspace):
        with pytest.raises(ValueError):
            workspace.update_vertex("A", label="Changed", shape="square")
        assert workspace.graph.get_vertex("A").label == "A"
        assert workspace.history_depth == 0

    def test_update_edge(self, workspace):
        edge = workspace.update_edge(1, weight="2.5", directed="yes")
        assert edge.weight == 2.5
        assert edge.directed is True

    def test_move_vertex(self, workspace):
        workspace.move_vertex("B", 300, 400)
        assert workspace.graph.get_vertex("B").position == (300.0, 400.0)

    def test_clear(self, workspace):
        workspace.clear()
        assert workspace.graph.is_empty()
        assert workspace.graph.edges == []


# ═════════════════════════════════════════════════════════════════
#  UNDO
# ═════════════════════════════════════════════════════════════════

class TestUndo:

    def test_undo_restores_previous_graph(self, workspace):
        before = workspace.graph.snapshot()
        workspace.remove_vertex("A")
        workspace.undo()
        assert workspace.graph.snapshot() == before

    def test_undo_steps_back_one_at_a_time(self, workspace):
        workspace.add_vertex("E")
        workspace.add_vertex("F")
        workspace.undo()
        assert workspace.graph.has_vertex("E")
        assert not workspace.graph.has_vertex("F")

    def test_nothing_to_undo(self, workspace):
        assert workspace.undo() is None

    def test_graph_object_kept(self, workspace, branching_graph):
        workspace.clear()
        workspace.undo()
        assert workspace.graph is branching_graph
        assert workspace.controller.graph is branching_graph

    def test_history_is_bounded(self, branching_graph, timers):
        config = PlatformConfig(max_history_depth=3)
        ws = Workspace(branching_graph, config=config, timer_service=timers)
        for vid in "EFGHI":
            ws.add_vertex(vid)
        assert ws.history_depth == 3
        for _ in range(3):
            ws.undo()
        assert ws.undo() is None
        assert ws.graph.has_vertex("F")
        assert not ws.graph.has_vertex("G")

    def test_layout_is_undoable(self, workspace):
        before = workspace.graph.get_vertex("D").position
        workspace.apply_layout("grid")
        assert workspace.graph.get_vertex("D").position == (0.0, 0.0)
        workspace.undo()
        assert workspace.graph.get_vertex("D").position == before


# ═════════════════════════════════════════════════════════════════
#  RUNS
# ═════════════════════════════════════════════════════════════════

class TestRuns:

    def test_default_mode_is_manual(self, workspace, timers):
        view = workspace.start_run("bfs", "A")
        assert view.mode is StepMode.MANUAL
        assert timers.live_count == 0

    def test_edits_refused_while_running(self, workspace):
        workspace.start_run("bfs", "A")
        with pytest.raises(RunInProgressError):
            workspace.add_vertex("E")
        with pytest.raises(RunInProgressError):
            workspace.remove_edge(0)
        with pytest.raises(RunInProgressError):
            workspace.apply_layout("circle")
        with pytest.raises(RunInProgressError):
            workspace.undo()
        assert workspace.graph.get_number_of_vertices() == 4

    def test_edits_allowed_after_cancel(self, workspace):
        workspace.start_run("dfs", "A")
        workspace.cancel_run()
        workspace.add_vertex("E")
        assert workspace.graph.has_vertex("E")

    def test_edits_allowed_after_finish(self, workspace):
        result = workspace.run_to_completion("bfs", "A")
        assert result.order == ["A", "B", "C", "D"]
        workspace.add_vertex("E")
        assert workspace.last_result is result

    def test_auto_run(self, workspace, timers):
        finished = []
        workspace.on_finish = finished.append
        workspace.start_run("bfs", "A", mode="auto", delay_ms=100)
        timers.advance(1000)
        assert not workspace.run_active
        assert finished[0].order == ["A", "B", "C", "D"]
        assert timers.live_count == 0

    def test_render_callback(self, workspace):
        views = []
        workspace.on_render = views.append
        workspace.start_run("bfs", "A")
        workspace.step()
        assert [v.order for v in views] == [(), ("A",)]

    def test_invalid_start(self, workspace):
        with pytest.raises(InvalidSelectionError):
            workspace.start_run("bfs", "Z")
        assert not workspace.run_active


# ═════════════════════════════════════════════════════════════════
#  ANALYSIS HIGHLIGHTS
# ═════════════════════════════════════════════════════════════════

class TestHighlights:

    def test_cut_vertices(self, workspace):
        assert set(workspace.find_cut_vertices()) == {"A", "B"}
        assert workspace.cut_vertices == {"A", "B"}

    def test_bridges(self, workspace):
        bridges = workspace.find_bridges()
        assert workspace.bridge_indices == {0, 1, 2}
        assert len(bridges) == 3

    def test_new_analysis_replaces_old(self, workspace):
        workspace.find_cut_vertices()
        workspace.find_bridges()
        assert workspace.cut_vertices == set()

    def test_edit_clears_highlights(self, workspace):
        workspace.find_cut_vertices()
        workspace.add_edge("C", "D")
        assert workspace.cut_vertices == set()

    def test_run_clears_highlights(self, workspace):
        workspace.find_bridges()
        workspace.start_run("bfs", "A")
        assert workspace.bridge_indices == set()

    def test_rejected_run_keeps_highlights(self, workspace):
        workspace.find_cut_vertices()
        with pytest.raises(InvalidSelectionError):
            workspace.start_run("bfs", "Z")
        with pytest.raises(ValueError):
            workspace.start_run("bfs", "A", mode="auto", delay_ms=0)
        assert workspace.cut_vertices == {"A", "B"}

    def test_rejected_run_keeps_component_colors(self, two_pairs, config, timers):
        ws = Workspace(two_pairs, config=config, timer_service=timers)
        ws.find_components()
        with pytest.raises(InvalidSelectionError):
            ws.start_run("dijkstra", "A")
        assert ws.graph.get_vertex("C").color == config.component_palette[1]

    def test_component_colors(self, two_pairs, config, timers):
        ws = Workspace(two_pairs, config=config, timer_service=timers)
        palette = config.component_palette
        assert ws.find_components() == [["A", "B"], ["C", "D"]]
        assert ws.graph.get_vertex("A").color == palette[0]
        assert ws.graph.get_vertex("D").color == palette[1]

    def test_component_colors_restored(self, two_pairs, config, timers):
        ws = Workspace(two_pairs, config=config, timer_service=timers)
        ws.find_components()
        ws.reset_highlights()
        assert all(v.color == DEFAULT_VERTEX_COLOR for v in ws.graph.get_all_vertices())
        assert ws.components == []

    def test_component_colors_not_recorded_in_history(self, two_pairs, config, timers):
        ws = Workspace(two_pairs, config=config, timer_service=timers)
        ws.find_components()
        ws.add_vertex("E")
        ws.undo()
        assert all(v.color == DEFAULT_VERTEX_COLOR for v in ws.graph.get_all_vertices())

    def test_empty_graph(self, config, timers):
        ws = Workspace(config=config, timer_service=timers)
        with pytest.raises(EmptyGraphError):
            ws.find_components()


# ═════════════════════════════════════════════════════════════════
#  MATRIX / LAYOUT / METADATA
# ═════════════════════════════════════════════════════════════════

class TestWholeGraph:

    def test_load_matrix(self, workspace):
        graph = workspace.load_matrix("0 1\n1 0", labels="P, Q")
        assert graph is workspace.graph
        assert [v.label for v in graph.get_all_vertices()] == ["P", "Q"]
        workspace.undo()
        assert workspace.graph.get_number_of_vertices() == 4

    def test_malformed_matrix_leaves_graph(self, workspace):
        before = workspace.graph.snapshot()
        with pytest.raises(MalformedMatrixError):
            workspace.load_matrix("0 1\n1")
        assert workspace.graph.snapshot() == before
        assert workspace.history_depth == 0

    def test_export_matrix(self, workspace):
        text = workspace.export_matrix()
        assert text.startswith("# labels: A, B, C, D\n")

    def test_tree_layout_unknown_root(self, workspace):
        before = workspace.graph.snapshot()
        with pytest.raises(InvalidSelectionError):
            workspace.apply_layout("tree", "Z")
        assert workspace.graph.snapshot() == before
        assert workspace.history_depth == 0

    def test_load_snapshot(self, workspace, two_pairs):
        workspace.load_snapshot(two_pairs.snapshot())
        assert workspace.graph == two_pairs

    def test_to_dict(self, workspace):
        workspace.start_run("bfs", "A")
        info = workspace.to_dict()
        assert info["name"] == "test"
        assert info["vertices"] == 4
        assert info["edges"] == 3
        assert info["run"] == "bfs"
        assert info["mode"] == "manual"
