"""
    Vertex model - representation of a vertex in the graph
"""
from typing import Any, Dict, Optional

from ..exceptions import InvalidVertexIdError
from ..types import TypeValidator, ValueType

DEFAULT_VERTEX_COLOR = "#208141"
DEFAULT_VERTEX_RADIUS = 25


class Vertex:
    """
    A vertex with a stable id, a display label, a position owned by the
    layout engine, and cosmetic style (color, radius).

    Style is never read by the algorithms.  Fields are normalised on
    construction (string label and color, finite numbers) so that a
    vertex rebuilt from its ``to_dict`` form compares equal to it.
    """

    def __init__(
            self,
            vertex_id: Any,
            label: Optional[str] = None,
            x: float = 0.0,
            y: float = 0.0,
            color: Optional[str] = DEFAULT_VERTEX_COLOR,
            radius: float = DEFAULT_VERTEX_RADIUS,
    ):
        if vertex_id is None or str(vertex_id) == "":
            raise InvalidVertexIdError("Vertex id must be a non-empty string")
        # Ensure ID is always a string for consistency in comparisons
        self.vertex_id = str(vertex_id)
        self.label = self.vertex_id if label is None else str(label)
        self.x = TypeValidator.validate_and_convert(x, ValueType.FLOAT)
        self.y = TypeValidator.validate_and_convert(y, ValueType.FLOAT)
        self.color = DEFAULT_VERTEX_COLOR if color is None else str(color)
        self.radius = TypeValidator.number(radius)

    @property
    def position(self):
        return self.x, self.y

    def move_to(self, x: float, y: float) -> None:
        self.x = float(x)
        self.y = float(y)

    def __repr__(self) -> str:
        return f"Vertex({self.vertex_id}, label={self.label!r}, x={self.x:.1f}, y={self.y:.1f})"

    def __eq__(self, other) -> bool:
        """Structural equality: every field must match"""
        if not isinstance(other, Vertex):
            return False
        return self.to_dict() == other.to_dict()

    def __hash__(self) -> int:
        """Hash vertex by ID"""
        return hash(self.vertex_id)

    def to_dict(self) -> Dict[str, Any]:
        """Snapshot form of the vertex."""
        return {
            'id': self.vertex_id,
            'label': self.label,
            'x': self.x,
            'y': self.y,
            'color': self.color,
            'radius': self.radius,
        }
