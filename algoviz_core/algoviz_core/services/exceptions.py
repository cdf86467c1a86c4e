# algoviz_core/services/exceptions.py
from algoviz_api.exceptions import AlgoVizError

class InvalidSelectionError(AlgoVizError):
    """Raised when an algorithm is requested with unusable parameters
    (too few vertices, unknown source/target/root)."""
    pass

class MalformedMatrixError(AlgoVizError):
    """Raised when an adjacency matrix is non-square, non-numeric,
    out of range, or its label list does not match its size."""
    pass

class NoPathFoundError(AlgoVizError):
    """Dijkstra finished without reaching the target.  Carried in the
    traversal result rather than raised."""
    pass

class EmptyGraphError(AlgoVizError):
    """Raised when a structural query is run on a graph with no vertices."""
    pass

class RunInProgressError(AlgoVizError):
    """Raised when the graph is edited or re-laid out during an active run."""
    pass
