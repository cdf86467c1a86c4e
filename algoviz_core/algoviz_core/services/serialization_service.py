"""
    Snapshot serialization and deserialization for Graph models.

    The snapshot format is ``{"vertices": [...], "edges": [...]}`` with
    vertex fields ``id, label, x, y, color, radius`` and edge fields
    ``from, to, weight, label, color, width, isDirected``.

    Design Pattern: Strategy (serialization strategy is configurable)
    ─────────────────────────────────────────────────────────────────
    The ``SerializationConfig`` decides which optional fields are written
    and how positions are rounded.  Omitted fields come back as their
    defaults on load, so a restricted snapshot still loads cleanly.
"""
import json
from typing import Any, Dict, Optional

from algoviz_api.models.graph import Graph

from algoviz_core.graph_platform.config import SerializationConfig

# Fields that identify structure and can never be excluded
REQUIRED_VERTEX_FIELDS = frozenset({'id'})
REQUIRED_EDGE_FIELDS = frozenset({'from', 'to'})


class GraphSerializer:
    """
    Serialize / deserialize ``Graph`` instances with configurable field control.

    Usage:
        config = SerializationConfig(exclude_vertex_fields={'color'})
        serializer = GraphSerializer(config)
        data = serializer.serialize(graph)       # → dict
        json_str = serializer.to_json(graph)     # → str
        graph = serializer.deserialize(data)     # → Graph
        graph = serializer.from_json(json_str)   # → Graph
    """

    def __init__(self, config: Optional[SerializationConfig] = None):
        self._config = config or SerializationConfig()

    @property
    def config(self) -> SerializationConfig:
        return self._config

    @config.setter
    def config(self, value: SerializationConfig) -> None:
        self._config = value

    # ── Serialization ────────────────────────────────────────────

    def serialize(self, graph: Graph) -> Dict[str, Any]:
        """
        Convert a Graph to a plain snapshot dictionary respecting the
        current SerializationConfig.
        """
        snapshot = graph.snapshot()
        vertex_drop = self._config.exclude_vertex_fields - REQUIRED_VERTEX_FIELDS
        edge_drop = self._config.exclude_edge_fields - REQUIRED_EDGE_FIELDS

        vertices = []
        for raw in snapshot['vertices']:
            entry = {k: v for k, v in raw.items() if k not in vertex_drop}
            if self._config.position_precision is not None:
                for axis in ('x', 'y'):
                    if axis in entry:
                        entry[axis] = round(entry[axis], self._config.position_precision)
            vertices.append(entry)

        edges = [{k: v for k, v in raw.items() if k not in edge_drop}
                 for raw in snapshot['edges']]

        return {'vertices': vertices, 'edges': edges}

    def to_json(self, graph: Graph, *, indent: Optional[int] = None) -> str:
        """Serialize a Graph directly to a JSON string."""
        if indent is None:
            indent = self._config.indent
        return json.dumps(self.serialize(graph), indent=indent, ensure_ascii=False)

    # ── Deserialization ──────────────────────────────────────────

    def deserialize(self, data: Dict[str, Any], graph_id: str = "deserialized") -> Graph:
        """
        Reconstruct a Graph from a snapshot dictionary (inverse of ``serialize``).
        Missing optional fields get their defaults.
        """
        if not isinstance(data, dict):
            raise ValueError("Snapshot must be a JSON object with 'vertices' and 'edges'")
        return Graph.from_snapshot(data, graph_id)

    def from_json(self, json_str: str, graph_id: str = "deserialized") -> Graph:
        """Deserialize a Graph from a JSON string."""
        return self.deserialize(json.loads(json_str), graph_id)

    def load_into(self, graph: Graph, data: Dict[str, Any]) -> Graph:
        """Replace the content of an existing graph with a snapshot."""
        if not isinstance(data, dict):
            raise ValueError("Snapshot must be a JSON object with 'vertices' and 'edges'")
        graph.restore(data)
        return graph
