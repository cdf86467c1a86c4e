"""
    Platform configuration: style defaults, layout constants, run timing,
    matrix bounds and serialization fields.

    Provides typed configuration objects; every constant the algorithms
    and layouts rely on is read from here rather than hard-coded.
"""
from dataclasses import dataclass, field
from typing import List, Optional, Set

from algoviz_api.models.vertex import DEFAULT_VERTEX_COLOR, DEFAULT_VERTEX_RADIUS
from algoviz_api.models.edge import DEFAULT_EDGE_COLOR, DEFAULT_EDGE_WIDTH


@dataclass
class StyleDefaults:
    """Cosmetic defaults applied to newly created vertices and edges."""
    vertex_color: str = DEFAULT_VERTEX_COLOR
    vertex_radius: float = DEFAULT_VERTEX_RADIUS
    edge_color: str = DEFAULT_EDGE_COLOR
    edge_width: float = DEFAULT_EDGE_WIDTH


@dataclass
class LayoutConfig:
    """
    Layout constants.

    Attributes:
        force_iterations:  Simulation rounds for the force-directed layout.
        force_k:           Ideal edge length; repulsion is k²/d, attraction d²/k.
        force_damping:     Fraction of the capped force applied per round.
        force_max_step:    Cap on the force magnitude used for displacement.
        circle_min_radius: Smallest circle radius.
        circle_radius_per_vertex: Radius grows by this much per vertex.
        grid_spacing:      Distance between grid cells.
        tree_level_height: Vertical distance between tree levels.
        tree_node_spacing: Horizontal distance between siblings on a level.
    """
    force_iterations: int = 100
    force_k: float = 100.0
    force_damping: float = 0.1
    force_max_step: float = 50.0
    circle_min_radius: float = 200.0
    circle_radius_per_vertex: float = 30.0
    grid_spacing: float = 150.0
    tree_level_height: float = 150.0
    tree_node_spacing: float = 120.0


@dataclass
class TraversalConfig:
    """Defaults for traversal runs (delay in milliseconds)."""
    default_delay_ms: int = 1000
    default_mode: str = "manual"


@dataclass
class MatrixConfig:
    """Inclusive bounds for non-zero adjacency-matrix weights."""
    min_weight: float = 0
    max_weight: float = 100


@dataclass
class SerializationConfig:
    """
    Controls which optional fields appear in serialized snapshots.

    Attributes:
        exclude_vertex_fields: Vertex keys to skip (``id`` is always kept).
        exclude_edge_fields:   Edge keys to skip (``from``/``to`` are always kept).
        position_precision:    Round x/y to this many decimals; ``None`` keeps them exact.
        indent:                JSON indentation.
    """
    exclude_vertex_fields: Set[str] = field(default_factory=set)
    exclude_edge_fields: Set[str] = field(default_factory=set)
    position_precision: Optional[int] = None
    indent: int = 2


DEFAULT_COMPONENT_PALETTE = [
    '#e6194b', '#3cb44b', '#4363d8', '#f58231', '#911eb4',
    '#46f0f0', '#f032e6', '#bcf60c', '#fabebe', '#008080',
]


@dataclass
class PlatformConfig:
    """
    Top-level configuration for the platform.

    Attributes:
        style:               Default vertex / edge styling.
        layout:              Layout constants.
        traversal:           Run timing defaults.
        matrix:              Adjacency-matrix weight bounds.
        serialization:       Snapshot field control.
        max_history_depth:   How many graph snapshots a Workspace keeps
                             for undo.
        component_palette:   Colors cycled over connected components.
        default_data_source: Entry-point name of the default data source plugin.
        default_exporter:    Entry-point name of the default exporter plugin.
    """
    style: StyleDefaults = field(default_factory=StyleDefaults)
    layout: LayoutConfig = field(default_factory=LayoutConfig)
    traversal: TraversalConfig = field(default_factory=TraversalConfig)
    matrix: MatrixConfig = field(default_factory=MatrixConfig)
    serialization: SerializationConfig = field(default_factory=SerializationConfig)
    max_history_depth: int = 50
    component_palette: List[str] = field(default_factory=lambda: list(DEFAULT_COMPONENT_PALETTE))
    default_data_source: Optional[str] = None
    default_exporter: Optional[str] = None
