"""
    Abstract base classes for plugins.
    Defines the "Contract" that all plugins must follow.
"""
from abc import ABC, abstractmethod
from ..models.graph import Graph


class DataSourcePlugin(ABC):
    """
        Abstract base class for Data Source plugins.
        Pattern: Strategy (for data loading).
    """

    @abstractmethod
    def get_plugin_name(self) -> str:
        """
            Returns the unique name of the plugin.
            Example: "JSON Snapshot"
        """
        pass

    @abstractmethod
    def parse(self, file_path: str) -> Graph:
        """
        Main method: Parses a file and returns a Graph object.

        Args:
            file_path: Path to the file to be loaded.

        Returns:
            Graph: Graph instance populated with vertices and edges.
        """
        pass


class ExporterPlugin(ABC):
    """
        Abstract base class for Exporter plugins.
        Pattern: Strategy (for saving).
    """

    @abstractmethod
    def get_plugin_name(self) -> str:
        """
            Returns the unique name of the exporter.
            Example: "Adjacency Matrix"
        """
        pass

    @abstractmethod
    def export(self, graph: Graph) -> str:
        """
        Main method: Renders a graph as text ready to be written to a file.

        Args:
            graph: Graph data model.

        Returns:
            str: File content.
        """
        pass

    def save(self, graph: Graph, file_path: str) -> None:
        """Write ``export(graph)`` to ``file_path``."""
        with open(file_path, "w", encoding="utf-8") as fh:
            fh.write(self.export(graph))
