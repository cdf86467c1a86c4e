# algoviz_api/exceptions.py

class AlgoVizError(Exception):
    """Base class for every recoverable error raised by the platform."""
    pass

class DuplicateIdError(AlgoVizError, ValueError):
    """Raised when a vertex id is already taken."""
    pass

class VertexNotFoundError(AlgoVizError, KeyError):
    """Raised when an operation names a vertex that is not in the graph."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message
        return str(self.args[0]) if self.args else ""

class InvalidVertexIdError(AlgoVizError, ValueError):
    """Raised when a vertex id is missing or empty."""
    pass
