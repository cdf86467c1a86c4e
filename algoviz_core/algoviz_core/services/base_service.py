"""
    Generic base service for read-mostly graph computations.

    Design Pattern: Template Method
    ─────────────────────────────────
    Defines the skeleton of a graph computation (validate → compute),
    letting concrete subclasses (StructureService, LayoutService) override
    the specific steps.  Validation always runs before anything is
    computed or written, so a rejected request leaves the graph untouched.

    Genericity:
    ─────────────────────────
    Uses Generic[TQuery, TResult] so each service explicitly declares its
    query and result types.
"""
from abc import ABC, abstractmethod
from typing import TypeVar, Generic
from algoviz_api.models.graph import Graph

# Generic type variables for the query parameter and the result
TQuery = TypeVar('TQuery')
TResult = TypeVar('TResult')


class GraphQueryService(ABC, Generic[TQuery, TResult]):
    """
    Abstract generic base for all services that run a computation
    over a graph.

    Concrete subclasses must implement:
        - _validate_query(graph, query)   → raise on invalid input
        - _compute(graph, query)          → the result
    """

    def execute(self, graph: Graph, query: TQuery) -> TResult:
        """
        Template Method: validate → compute.

        Args:
            graph:  The input graph.
            query:  Query object (type depends on the concrete service).
        """
        self._validate_query(graph, query)
        return self._compute(graph, query)

    @abstractmethod
    def _validate_query(self, graph: Graph, query: TQuery) -> None:
        """
        Validate the query; raise an appropriate exception on failure.
        """
        ...

    @abstractmethod
    def _compute(self, graph: Graph, query: TQuery) -> TResult:
        """
        Produce the result for a validated query.
        """
        ...
