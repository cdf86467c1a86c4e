"""
Core services: traversal, structural analysis, layout, matrix codec.

Note: GraphSerializer is intentionally NOT imported eagerly to avoid
circular imports with ``algoviz_core.graph_platform.config``.  Import it
directly: ``from algoviz_core.services.serialization_service import GraphSerializer``.
"""
from .base_service import GraphQueryService
from .traversal_service import (
    AlgorithmKind,
    StepMode,
    TraversalEngine,
    TraversalResult,
    RunView,
)
from .structure_service import StructureService, ArticulationReport, Bridge
from .layout_service import LayoutService, LayoutKind
from .matrix_service import MatrixCodec
from .exceptions import (
    InvalidSelectionError,
    MalformedMatrixError,
    NoPathFoundError,
    EmptyGraphError,
    RunInProgressError,
)

__all__ = [
    'GraphQueryService',
    'AlgorithmKind',
    'StepMode',
    'TraversalEngine',
    'TraversalResult',
    'RunView',
    'StructureService',
    'ArticulationReport',
    'Bridge',
    'LayoutService',
    'LayoutKind',
    'MatrixCodec',
    'InvalidSelectionError',
    'MalformedMatrixError',
    'NoPathFoundError',
    'EmptyGraphError',
    'RunInProgressError',
]
