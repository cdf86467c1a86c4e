from .vertex import Vertex
from .edge import Edge
from .graph import Graph

__all__ = ['Vertex', 'Edge', 'Graph']
