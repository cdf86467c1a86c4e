import json
import pytest

from algoviz_api.models.edge import DEFAULT_EDGE_WIDTH
from algoviz_api.models.graph import Graph
from algoviz_api.models.vertex import DEFAULT_VERTEX_COLOR, DEFAULT_VERTEX_RADIUS
from algoviz_api.plugins.base import DataSourcePlugin, ExporterPlugin
from algoviz_core.services.traversal_service import AlgorithmKind, TraversalEngine

from data_source_plugin_json.plugin import JsonSnapshotExporter, JsonSnapshotPlugin


@pytest.fixture
def plugin():
    return JsonSnapshotPlugin()

@pytest.fixture
def exporter():
    return JsonSnapshotExporter()

@pytest.fixture
def graph(plugin, snapshot_path):
    return plugin.parse(snapshot_path)


# ── Plugin metadata ───────────────────────────────────────────────────────────

class TestPluginMetadata:
    def test_plugin_name(self, plugin, exporter):
        assert plugin.get_plugin_name() == "JSON Snapshot"
        assert exporter.get_plugin_name() == "JSON Snapshot"

    def test_plugin_types(self, plugin, exporter):
        assert isinstance(plugin, DataSourcePlugin)
        assert isinstance(exporter, ExporterPlugin)


# ── Graph structure ───────────────────────────────────────────────────────────

class TestGraphStructure:
    def test_returns_graph_instance(self, graph):
        assert isinstance(graph, Graph)

    def test_graph_id_is_file_stem(self, graph):
        assert graph.graph_id == "snapshot_graph1"

    def test_vertex_order(self, graph):
        assert list(graph.vertices) == ["A", "B", "C", "D"]

    def test_edge_count(self, graph):
        assert graph.get_number_of_edges() == 4

    def test_labels(self, graph):
        assert graph.get_vertex("A").label == "Start"
        assert graph.get_vertex("D").label == "Goal"

    def test_defaults_for_missing_fields(self, graph):
        assert graph.get_vertex("B").color == DEFAULT_VERTEX_COLOR
        assert graph.get_vertex("B").radius == DEFAULT_VERTEX_RADIUS
        assert graph.edges[0].directed is False
        assert graph.edges[0].width == DEFAULT_EDGE_WIDTH

    def test_string_numbers(self, graph):
        d = graph.get_vertex("D")
        assert d.position == (300.0, 20.0)
        assert d.radius == 30

    def test_directed_flag(self, graph):
        assert graph.edges[2].directed is True
        assert (graph.edges[2].from_id, graph.edges[2].to_id) == ("C", "B")

    def test_edge_width(self, graph):
        assert graph.edges[3].width == 3


# ── Using the loaded graph ────────────────────────────────────────────────────

class TestLoadedGraph:
    def test_shortest_path(self, graph):
        result = TraversalEngine(graph, AlgorithmKind.DIJKSTRA, "A", "D").run_to_completion()
        assert result.path == ["A", "C", "B", "D"]
        assert result.distance == 8

    def test_bfs_respects_direction(self, graph):
        result = TraversalEngine(graph, AlgorithmKind.BFS, "A").run_to_completion()
        assert result.order == ["A", "B", "C", "D"]


# ── Errors ────────────────────────────────────────────────────────────────────

class TestErrors:
    def test_missing_file(self, plugin, tmp_path):
        with pytest.raises(FileNotFoundError):
            plugin.parse(str(tmp_path / "missing.json"))

    def test_broken_json(self, plugin, fixtures_dir):
        with pytest.raises(ValueError):
            plugin.parse(str(fixtures_dir / "broken1.json"))

    def test_top_level_array(self, plugin, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(ValueError):
            plugin.parse(str(path))


# ── Export ────────────────────────────────────────────────────────────────────

class TestExporter:
    def test_export_is_snapshot(self, exporter, graph):
        data = json.loads(exporter.export(graph))
        assert [v["id"] for v in data["vertices"]] == ["A", "B", "C", "D"]
        assert data["edges"][2]["isDirected"] is True

    def test_save_and_reload(self, exporter, plugin, graph, tmp_path):
        path = tmp_path / "copy.json"
        exporter.save(graph, str(path))
        assert plugin.parse(str(path)) == graph
