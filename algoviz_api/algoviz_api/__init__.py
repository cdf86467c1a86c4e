"""
Graph Algorithm Visualizer API: models, errors and plugin contracts.
"""
from .types import ValueType, TypeValidator
from .exceptions import AlgoVizError, DuplicateIdError, InvalidVertexIdError, VertexNotFoundError
from .models.vertex import Vertex
from .models.edge import Edge
from .models.graph import Graph
from .plugins.base import DataSourcePlugin, ExporterPlugin

__all__ = [
    'ValueType',
    'TypeValidator',
    'AlgoVizError',
    'DuplicateIdError',
    'InvalidVertexIdError',
    'VertexNotFoundError',
    'Vertex',
    'Edge',
    'Graph',
    'DataSourcePlugin',
    'ExporterPlugin',
]
