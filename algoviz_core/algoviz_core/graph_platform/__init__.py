"""
Graph Platform: core package.

Public API:
    GraphPlatform       – central orchestrator (Facade / Singleton)
    Workspace           – one graph with its history, run and highlights
    RunController       – manual / timed-auto traversal runs
    PlatformConfig      – top-level configuration
    PluginLoader        – generic plugin discovery
"""
from .core import GraphPlatform
from .workspace import Workspace
from .run_controller import RunController
from .timers import TimerService, ThreadingTimerService, ManualTimerService
from .config import (
    PlatformConfig,
    StyleDefaults,
    LayoutConfig,
    TraversalConfig,
    MatrixConfig,
    SerializationConfig,
)
from .plugin_loader import (
    PluginLoader,
    create_data_source_loader,
    create_exporter_loader,
)

__all__ = [
    'GraphPlatform',
    'Workspace',
    'RunController',
    'TimerService',
    'ThreadingTimerService',
    'ManualTimerService',
    'PlatformConfig',
    'StyleDefaults',
    'LayoutConfig',
    'TraversalConfig',
    'MatrixConfig',
    'SerializationConfig',
    'PluginLoader',
    'create_data_source_loader',
    'create_exporter_loader',
]
