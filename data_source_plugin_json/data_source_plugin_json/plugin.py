import json
import logging
import os

from algoviz_api.plugins import DataSourcePlugin, ExporterPlugin
from algoviz_api.models.graph import Graph
from algoviz_core.services.serialization_service import GraphSerializer

logger = logging.getLogger(__name__)


class JsonSnapshotPlugin(DataSourcePlugin):
    """
    Loads a ``{"vertices": [...], "edges": [...]}`` snapshot file.

    Missing or unusable optional fields fall back to their defaults;
    a file that is not valid JSON, or whose top level is not an
    object, raises ``ValueError``.
    """

    def __init__(self):
        self._serializer = GraphSerializer()

    def get_plugin_name(self) -> str:
        return "JSON Snapshot"

    def parse(self, file_path: str) -> Graph:
        with open(file_path, "r", encoding="utf-8") as fh:
            data = json.load(fh)

        graph_id = os.path.splitext(os.path.basename(file_path))[0] or "graph"
        graph = self._serializer.deserialize(data, graph_id)
        logger.info("Parsed snapshot '%s': %d vertices, %d edges",
                    file_path, graph.get_number_of_vertices(), graph.get_number_of_edges())
        return graph


class JsonSnapshotExporter(ExporterPlugin):
    """Writes the graph as an indented JSON snapshot."""

    def __init__(self):
        self._serializer = GraphSerializer()

    def get_plugin_name(self) -> str:
        return "JSON Snapshot"

    def export(self, graph: Graph) -> str:
        return self._serializer.to_json(graph)
