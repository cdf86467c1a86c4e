import logging
import os

from algoviz_api.plugins import DataSourcePlugin, ExporterPlugin
from algoviz_api.models.graph import Graph
from algoviz_core.services.matrix_service import MatrixCodec

logger = logging.getLogger(__name__)


class MatrixDataSourcePlugin(DataSourcePlugin):
    """
    Loads an adjacency-matrix text file.

    Labels and direction come from ``# labels: A, B, C`` and
    ``# directed: true`` lines in the file itself; without them the
    vertices are labeled V0..Vn-1 and every edge is undirected.
    """

    def __init__(self):
        self._codec = MatrixCodec()

    def get_plugin_name(self) -> str:
        return "Adjacency Matrix"

    def parse(self, file_path: str) -> Graph:
        with open(file_path, "r", encoding="utf-8") as fh:
            text = fh.read()

        graph_id = os.path.splitext(os.path.basename(file_path))[0] or "matrix"
        graph = self._codec.parse(text, graph_id=graph_id)
        logger.info("Parsed matrix '%s': %d vertices, %d edges",
                    file_path, graph.get_number_of_vertices(), graph.get_number_of_edges())
        return graph


class MatrixExporter(ExporterPlugin):
    """Tab-separated adjacency matrix with a ``# labels:`` header."""

    def __init__(self):
        self._codec = MatrixCodec()

    def get_plugin_name(self) -> str:
        return "Adjacency Matrix"

    def export(self, graph: Graph) -> str:
        return self._codec.render(graph)
