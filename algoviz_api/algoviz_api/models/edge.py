"""
    Edge model - representation of an edge between vertices.
"""
from typing import Any, Dict, Optional

from ..types import TypeValidator, ValueType

DEFAULT_EDGE_COLOR = "#626c7c"
DEFAULT_EDGE_WIDTH = 2


class Edge:
    """
        Class for an edge between two vertices.

        Direction belongs to the edge, not to the graph: one graph may
        hold directed and undirected edges side by side.  An edge has no
        identity of its own; the graph addresses it by list position.
    """

    def __init__(
            self,
            from_id: Any,
            to_id: Any,
            weight: float = 1,
            label: Optional[str] = "",
            color: Optional[str] = DEFAULT_EDGE_COLOR,
            width: float = DEFAULT_EDGE_WIDTH,
            directed: bool = False,
    ):
        self.from_id = str(from_id)
        self.to_id = str(to_id)
        self.weight = TypeValidator.number(weight)
        self.label = "" if label is None else str(label)
        self.color = DEFAULT_EDGE_COLOR if color is None else str(color)
        self.width = TypeValidator.number(width)
        self.directed = TypeValidator.validate_and_convert(directed, ValueType.BOOL)

    def neighbor_of(self, vertex_id: str, respect_direction: bool = True) -> Optional[str]:
        """
        Neighbor reached from ``vertex_id`` through this edge, or None.

        The edge always leads from ``from_id`` to ``to_id``; it leads back
        only when it is undirected (or direction is being ignored).  A
        self-loop yields the vertex itself, once.
        """
        if self.from_id == vertex_id:
            return self.to_id
        if self.to_id == vertex_id and (not self.directed or not respect_direction):
            return self.from_id
        return None

    def touches(self, vertex_id: str) -> bool:
        """True if either endpoint is ``vertex_id``."""
        return self.from_id == vertex_id or self.to_id == vertex_id

    def __repr__(self) -> str:
        """String representation of edge"""
        arrow = "->" if self.directed else "--"
        return f"Edge({self.from_id} {arrow} {self.to_id}, w={self.weight})"

    def __eq__(self, other) -> bool:
        """Structural equality: every field must match"""
        if not isinstance(other, Edge):
            return False
        return self.to_dict() == other.to_dict()

    __hash__ = None  # mutable and identity-less

    def to_dict(self) -> Dict[str, Any]:
        """Snapshot form of the edge."""
        return {
            'from': self.from_id,
            'to': self.to_id,
            'weight': self.weight,
            'label': self.label,
            'color': self.color,
            'width': self.width,
            'isDirected': self.directed,
        }
