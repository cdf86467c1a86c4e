# tests/core_test/test_platform.py
"""
Tests for the GraphPlatform facade (algoviz_core/graph_platform/core.py).

Entry-point discovery is replaced with an empty list so only plugins
registered by hand are visible.
"""
import json

import pytest

from algoviz_core.graph_platform import GraphPlatform, PlatformConfig
from data_source_plugin_json import JsonSnapshotExporter, JsonSnapshotPlugin
from data_source_plugin_matrix import MatrixDataSourcePlugin, MatrixExporter

from tests.conftest import build_graph


@pytest.fixture(autouse=True)
def no_entry_points(monkeypatch):
    monkeypatch.setattr(
        "algoviz_core.graph_platform.plugin_loader._select_entry_points",
        lambda group: [],
    )


@pytest.fixture
def platform(timers):
    p = GraphPlatform(PlatformConfig(), timer_service=timers)
    p.data_source_loader.register("json", JsonSnapshotPlugin())
    p.data_source_loader.register("matrix", MatrixDataSourcePlugin())
    p.exporter_loader.register("json", JsonSnapshotExporter())
    p.exporter_loader.register("matrix", MatrixExporter())
    yield p
    p.shutdown()


@pytest.fixture
def events(platform):
    """Record every event as (name, kwargs)."""
    seen = []
    for name in ("workspace_created", "workspace_switched", "workspace_removed",
                 "graph_updated", "run_step", "run_finished", "analysis_done"):
        platform.subscribe(name, lambda _name=name, **kw: seen.append((_name, kw)))
    return seen


def _names(events):
    return [name for name, _ in events]


# ═════════════════════════════════════════════════════════════════
#  WORKSPACES
# ═════════════════════════════════════════════════════════════════

class TestWorkspaces:

    def test_create_activates(self, platform, events):
        ws = platform.create_workspace(name="first")
        assert platform.get_active_workspace() is ws
        assert _names(events) == ["workspace_created"]

    def test_switch(self, platform, events):
        first = platform.create_workspace()
        platform.create_workspace()
        platform.set_active_workspace(first.workspace_id)
        assert platform.get_active_workspace() is first
        assert _names(events)[-1] == "workspace_switched"

    def test_switch_unknown(self, platform):
        with pytest.raises(ValueError):
            platform.set_active_workspace("nope")

    def test_remove_falls_back_to_remaining(self, platform):
        first = platform.create_workspace()
        second = platform.create_workspace()
        platform.remove_workspace(second.workspace_id)
        assert platform.get_active_workspace() is first
        assert len(platform.list_workspaces()) == 1

    def test_remove_stops_run(self, platform, timers):
        ws = platform.create_workspace(build_graph("AB", [("A", "B")]))
        platform.start_traversal("bfs", "A", mode="auto", delay_ms=100)
        platform.remove_workspace(ws.workspace_id)
        assert timers.live_count == 0

    def test_no_active_workspace(self, platform):
        with pytest.raises(RuntimeError):
            platform.run_command("list")

    def test_explicit_workspace_id(self, platform):
        first = platform.create_workspace()
        platform.create_workspace()
        platform.run_command("create vertex --id=X", workspace_id=first.workspace_id)
        assert first.graph.has_vertex("X")


# ═════════════════════════════════════════════════════════════════
#  COMMANDS / EVENTS
# ═════════════════════════════════════════════════════════════════

class TestCommandsAndEvents:

    def test_mutating_command_notifies(self, platform, events):
        platform.create_workspace()
        result = platform.run_command("create vertex --id=A")
        assert result.success
        assert _names(events) == ["workspace_created", "graph_updated"]

    def test_read_only_command_is_silent(self, platform, events):
        platform.create_workspace(build_graph("AB", [("A", "B")]))
        platform.run_command("list")
        platform.run_command("info vertex A")
        assert "graph_updated" not in _names(events)

    def test_failed_command_is_silent(self, platform, events):
        platform.create_workspace()
        result = platform.run_command("delete vertex --id=Z")
        assert not result.success
        assert "graph_updated" not in _names(events)

    def test_undo_notifies(self, platform, events):
        platform.create_workspace()
        platform.run_command("create vertex --id=A")
        assert platform.undo() is not None
        assert _names(events)[-1] == "graph_updated"
        assert platform.get_active_workspace().graph.is_empty()

    def test_run_events(self, platform, events):
        platform.create_workspace(build_graph("AB", [("A", "B")]))
        platform.start_traversal("bfs", "A")
        while not platform.step():
            pass
        names = _names(events)
        assert names.count("run_step") == 4      # start, A, B, final frame
        assert names[-1] == "run_finished"
        assert events[-1][1]["result"].order == ["A", "B"]
        assert platform.last_result().order == ["A", "B"]

    def test_auto_run_events(self, platform, events, timers):
        platform.create_workspace(build_graph("AB", [("A", "B")]))
        platform.start_traversal("dfs", "B", mode="auto", delay_ms=250)
        timers.advance(1000)
        assert _names(events)[-1] == "run_finished"

    def test_analysis_event(self, platform, events):
        platform.create_workspace(build_graph("ABC", [("A", "B"), ("B", "C")]))
        assert platform.cut_vertices() == ["B"]
        name, kwargs = events[-1]
        assert name == "analysis_done"
        assert kwargs["kind"] == "cut-vertices"
        assert kwargs["result"] == ["B"]

    def test_bridges_and_components(self, platform):
        platform.create_workspace(build_graph("ABCD", [("A", "B"), ("C", "D")]))
        assert [b.edge_index for b in platform.bridges()] == [0, 1]
        assert platform.connected_components() == [["A", "B"], ["C", "D"]]

    def test_layout_notifies(self, platform, events):
        platform.create_workspace(build_graph("AB", [("A", "B")]))
        positions = platform.apply_layout("circle")
        assert positions["A"] == pytest.approx((200.0, 0.0))
        assert _names(events)[-1] == "graph_updated"

    def test_failing_listener_does_not_break_platform(self, platform):
        def boom(**kwargs):
            raise RuntimeError("listener failed")

        platform.subscribe("graph_updated", boom)
        platform.create_workspace()
        assert platform.run_command("create vertex --id=A").success

    def test_unsubscribe(self, platform):
        seen = []
        callback = lambda **kw: seen.append(kw)
        platform.subscribe("workspace_created", callback)
        platform.unsubscribe("workspace_created", callback)
        platform.create_workspace()
        assert seen == []

    def test_shutdown_cancels_timers(self, platform, timers):
        platform.create_workspace(build_graph("AB", [("A", "B")]))
        platform.start_traversal("bfs", "A", mode="auto", delay_ms=100)
        platform.create_workspace(build_graph("CD", [("C", "D")]))
        platform.start_traversal("bfs", "C", mode="auto", delay_ms=100)
        assert timers.live_count == 2
        platform.shutdown()
        assert timers.live_count == 0


# ═════════════════════════════════════════════════════════════════
#  PLUGINS / SERIALIZATION
# ═════════════════════════════════════════════════════════════════

class TestPluginsAndSerialization:

    def test_plugin_names(self, platform):
        assert platform.get_data_source_names() == ["json", "matrix"]
        assert platform.get_exporter_names() == ["json", "matrix"]

    def test_load_graph(self, platform, tmp_path):
        path = tmp_path / "net.txt"
        path.write_text("# labels: A, B\n0 3\n3 0\n", encoding="utf-8")
        ws = platform.load_graph("matrix", str(path), workspace_name="net")
        assert ws.name == "net"
        assert ws.data_source == "matrix"
        assert ws.graph.graph_id == "net"
        assert ws.graph.get_number_of_edges() == 1
        assert platform.get_active_workspace() is ws

    def test_load_graph_unknown_plugin(self, platform):
        with pytest.raises(ValueError, match="not found"):
            platform.load_graph("yaml", "graph.yaml")

    def test_export_default_exporter(self, platform, tmp_path):
        platform.create_workspace(build_graph("AB", [("A", "B")]))
        out = tmp_path / "out.json"
        text = platform.export_graph(file_path=str(out))
        assert json.loads(text)["edges"][0]["from"] == "A"
        assert out.read_text(encoding="utf-8") == text

    def test_export_named(self, platform):
        platform.create_workspace(build_graph("AB", [("A", "B", 2)]))
        assert platform.export_graph("matrix") == "# labels: A, B\n0\t2.00\n2.00\t0\n"

    def test_export_without_exporters(self, timers):
        bare = GraphPlatform(timer_service=timers)
        bare.create_workspace()
        with pytest.raises(ValueError, match="No exporter"):
            bare.export_graph()

    def test_matrix_round_trip(self, platform):
        platform.create_workspace()
        platform.load_matrix("0 1 0\n1 0 1\n0 1 0", labels="A, B, C")
        text = platform.export_matrix()
        assert text.splitlines()[0] == "# labels: A, B, C"

    def test_json_round_trip(self, platform):
        platform.create_workspace(build_graph("ABC", [("A", "B", 2, True), ("B", "C")]))
        text = platform.serialize_graph_json()
        restored = platform.deserialize_graph_json(text)
        assert restored == platform.get_active_workspace().graph

    def test_serialization_config(self, platform):
        from algoviz_core.graph_platform.config import SerializationConfig

        platform.create_workspace(build_graph("AB", [("A", "B")]))
        platform.serialization_config = SerializationConfig(exclude_vertex_fields={"color"})
        assert "color" not in platform.serialize_graph()["vertices"][0]

    def test_load_snapshot(self, platform, events):
        platform.create_workspace()
        graph = platform.load_snapshot({"vertices": [{"id": "Q"}], "edges": []})
        assert list(graph.vertices) == ["Q"]
        assert _names(events)[-1] == "graph_updated"


# ═════════════════════════════════════════════════════════════════
#  SINGLETON
# ═════════════════════════════════════════════════════════════════

class TestSingleton:

    def test_same_instance(self):
        GraphPlatform.reset_instance()
        try:
            assert GraphPlatform.get_instance() is GraphPlatform.get_instance()
        finally:
            GraphPlatform.reset_instance()

    def test_reset_creates_new_instance(self):
        GraphPlatform.reset_instance()
        first = GraphPlatform.get_instance()
        GraphPlatform.reset_instance()
        try:
            assert GraphPlatform.get_instance() is not first
        finally:
            GraphPlatform.reset_instance()
