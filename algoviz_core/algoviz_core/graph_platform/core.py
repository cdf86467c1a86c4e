"""
    GraphPlatform: the central orchestrator of the application.

    Design Patterns applied
    ───────────────────────
    • Singleton          – one platform instance per process
                           (via ``GraphPlatform.get_instance()``).
    • Strategy           – pluggable data sources and exporters.
    • Repository         – ``_workspaces`` dict hides storage details.
    • Facade             – single entry-point for a front end; hides
                           plugin loading, workspace management, runs,
                           analysis, layout and serialization.
    • Observer (hooks)   – ``_listeners`` dict; the front end subscribes
                           to redraw on graph changes and run steps.
"""
import logging
from typing import Dict, List, Optional, Callable, Any

from algoviz_api.models.graph import Graph
from algoviz_api.plugins.base import DataSourcePlugin, ExporterPlugin
from algoviz_core.services.structure_service import Bridge
from algoviz_core.services.traversal_service import RunView, TraversalResult

from .config import PlatformConfig, SerializationConfig
from .timers import TimerService
from .workspace import Workspace
from .plugin_loader import (
    PluginLoader,
    create_data_source_loader,
    create_exporter_loader,
)

logger = logging.getLogger(__name__)


# ── Observer event types ─────────────────────────────────────────
EVENT_WORKSPACE_CREATED = "workspace_created"
EVENT_WORKSPACE_SWITCHED = "workspace_switched"
EVENT_WORKSPACE_REMOVED = "workspace_removed"
EVENT_GRAPH_UPDATED = "graph_updated"
EVENT_RUN_STEP = "run_step"
EVENT_RUN_FINISHED = "run_finished"
EVENT_ANALYSIS_DONE = "analysis_done"


class GraphPlatform:
    """
    Central orchestrator: Facade for the entire platform.

    Manages:
        • Plugin discovery and loading.
        • Workspace lifecycle (create, switch, remove, list).
        • Graph loading / export, editing through the CLI.
        • Traversal runs, structural analysis, layouts.
        • Serialization / deserialization with configurable fields.
        • Observer hooks for the front end.
    """

    _instance: Optional['GraphPlatform'] = None

    # ── Singleton ────────────────────────────────────────────────

    @classmethod
    def get_instance(cls, config: Optional[PlatformConfig] = None) -> 'GraphPlatform':
        """
        Return the singleton platform instance, creating it on first call.

        Args:
            config: Optional custom config (only used on first call).
        """
        if cls._instance is None:
            cls._instance = cls(config or PlatformConfig())
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Destroy the singleton (useful for testing)."""
        if cls._instance is not None:
            cls._instance.shutdown()
        cls._instance = None

    # ── Constructor ──────────────────────────────────────────────

    def __init__(self, config: Optional[PlatformConfig] = None,
                 timer_service: Optional[TimerService] = None):
        """
        Initialize the platform.  Prefer ``get_instance()`` for singleton access.

        Args:
            config:        Platform configuration.
            timer_service: Shared timer for auto runs; each workspace
                           gets a threading timer when omitted.
        """
        self._config: PlatformConfig = config or PlatformConfig()
        self._timer_service = timer_service

        # Plugin loaders (generic)
        self._ds_loader: PluginLoader[DataSourcePlugin] = create_data_source_loader()
        self._ex_loader: PluginLoader[ExporterPlugin] = create_exporter_loader()

        # Workspace repository
        self._workspaces: Dict[str, Workspace] = {}
        self._active_workspace_id: Optional[str] = None

        # Imported here to avoid circular imports
        from algoviz_core.services.serialization_service import GraphSerializer
        from .cli.command_processor import CommandProcessor

        self._serializer = GraphSerializer(self._config.serialization)
        self._command_processor = CommandProcessor()

        # Observer listeners: event_name → [callback, ...]
        self._listeners: Dict[str, List[Callable[..., Any]]] = {}

        logger.info("GraphPlatform initialized.")

    # ── Configuration ────────────────────────────────────────────

    @property
    def config(self) -> PlatformConfig:
        return self._config

    @property
    def serialization_config(self) -> SerializationConfig:
        return self._config.serialization

    @serialization_config.setter
    def serialization_config(self, value: SerializationConfig) -> None:
        self._config.serialization = value
        self._serializer.config = value

    # ── Plugin discovery ─────────────────────────────────────────

    @property
    def data_source_loader(self) -> PluginLoader[DataSourcePlugin]:
        return self._ds_loader

    @property
    def exporter_loader(self) -> PluginLoader[ExporterPlugin]:
        return self._ex_loader

    def get_data_source_names(self) -> List[str]:
        """Sorted list of installed data-source plugin names."""
        return self._ds_loader.get_names()

    def get_exporter_names(self) -> List[str]:
        """Sorted list of installed exporter plugin names."""
        return self._ex_loader.get_names()

    def reload_plugins(self) -> None:
        """Force re-discovery of all plugins."""
        self._ds_loader.reload()
        self._ex_loader.reload()
        logger.info("Plugins reloaded: %d data sources, %d exporters",
                    len(self._ds_loader), len(self._ex_loader))

    # ── Graph loading / export ───────────────────────────────────

    def load_graph(self, plugin_name: Optional[str], file_path: str,
                   workspace_name: Optional[str] = None) -> Workspace:
        """
        Load a graph through a data-source plugin into a new workspace.

        Raises:
            ValueError: If the plugin is not found.
        """
        plugin_name = plugin_name or self._config.default_data_source
        plugin = self._ds_loader.get(plugin_name) if plugin_name else None
        if plugin is None:
            raise ValueError(
                f"Data source plugin '{plugin_name}' not found. "
                f"Available: {self._ds_loader.get_names()}"
            )

        graph = plugin.parse(file_path)
        ws = self.create_workspace(
            graph,
            data_source=plugin_name,
            file_path=file_path,
            name=workspace_name,
        )
        logger.info("Graph loaded via '%s' from '%s' → workspace %s",
                    plugin_name, file_path, ws.workspace_id[:8])
        return ws

    def export_graph(self, exporter_name: Optional[str] = None,
                     file_path: Optional[str] = None,
                     workspace_id: Optional[str] = None) -> str:
        """
        Render the workspace graph with an exporter plugin, and write it
        to ``file_path`` when one is given.

        Returns:
            The exported text.
        """
        ws = self._resolve_workspace(workspace_id)
        name = exporter_name or self._config.default_exporter
        if name is None:
            names = self._ex_loader.get_names()
            if not names:
                raise ValueError("No exporter plugins installed.")
            name = names[0]

        plugin = self._ex_loader.get(name)
        if plugin is None:
            raise ValueError(
                f"Exporter plugin '{name}' not found. "
                f"Available: {self._ex_loader.get_names()}"
            )

        text = plugin.export(ws.graph)
        if file_path:
            plugin.save(ws.graph, file_path)
            logger.info("Workspace %s exported via '%s' to '%s'",
                        ws.workspace_id[:8], name, file_path)
        return text

    def load_matrix(self, text: str, labels=None, directed: Optional[bool] = None,
                    workspace_id: Optional[str] = None) -> Graph:
        """Replace the workspace graph with adjacency-matrix text."""
        ws = self._resolve_workspace(workspace_id)
        graph = ws.load_matrix(text, labels=labels, directed=directed)
        self._notify(EVENT_GRAPH_UPDATED, workspace=ws, graph=graph)
        return graph

    def export_matrix(self, workspace_id: Optional[str] = None) -> str:
        return self._resolve_workspace(workspace_id).export_matrix()

    # ── Workspace management ─────────────────────────────────────

    def create_workspace(
        self,
        graph: Optional[Graph] = None,
        data_source: str = "",
        file_path: str = "",
        name: Optional[str] = None,
    ) -> Workspace:
        """
        Create and activate a workspace around ``graph`` (empty if None).
        """
        ws = Workspace(
            graph,
            data_source=data_source,
            file_path=file_path,
            name=name,
            config=self._config,
            timer_service=self._timer_service,
        )
        ws.on_render = lambda view, _ws=ws: self._notify(EVENT_RUN_STEP, workspace=_ws, view=view)
        ws.on_finish = lambda result, _ws=ws: self._notify(
            EVENT_RUN_FINISHED, workspace=_ws, result=result)

        self._workspaces[ws.workspace_id] = ws
        self._active_workspace_id = ws.workspace_id
        logger.info("Workspace %s created (%s)", ws.workspace_id[:8], ws.name)
        self._notify(EVENT_WORKSPACE_CREATED, workspace=ws)
        return ws

    def get_workspace(self, workspace_id: str) -> Optional[Workspace]:
        return self._workspaces.get(workspace_id)

    def get_active_workspace(self) -> Optional[Workspace]:
        if self._active_workspace_id is None:
            return None
        return self._workspaces.get(self._active_workspace_id)

    def set_active_workspace(self, workspace_id: str) -> Workspace:
        """
        Switch the active workspace.

        Raises:
            ValueError: If the workspace ID does not exist.
        """
        if workspace_id not in self._workspaces:
            raise ValueError(f"Workspace '{workspace_id}' not found.")
        self._active_workspace_id = workspace_id
        ws = self._workspaces[workspace_id]
        self._notify(EVENT_WORKSPACE_SWITCHED, workspace=ws)
        return ws

    def remove_workspace(self, workspace_id: str) -> None:
        """Remove a workspace, stopping its run first."""
        ws = self._workspaces.pop(workspace_id, None)
        if ws is None:
            return
        ws.cancel_run()
        if self._active_workspace_id == workspace_id:
            self._active_workspace_id = next(iter(self._workspaces), None)
        logger.info("Workspace %s removed", workspace_id[:8])
        self._notify(EVENT_WORKSPACE_REMOVED, workspace_id=workspace_id)

    def list_workspaces(self) -> List[dict]:
        return [ws.to_dict() for ws in self._workspaces.values()]

    def shutdown(self) -> None:
        """Stop every run (and its timer)."""
        for ws in self._workspaces.values():
            ws.cancel_run()

    # ── Editing ──────────────────────────────────────────────────

    def run_command(self, text: str, workspace_id: Optional[str] = None):
        """
        Execute one CLI command on the (active or specified) workspace.

        Returns:
            ``CommandResult``.
        """
        ws = self._resolve_workspace(workspace_id)
        before = ws.graph.snapshot()
        result = self._command_processor.process(text, ws)
        if result.success and ws.graph.snapshot() != before:
            self._notify(EVENT_GRAPH_UPDATED, workspace=ws, graph=ws.graph)
        return result

    def undo(self, workspace_id: Optional[str] = None) -> Optional[Graph]:
        ws = self._resolve_workspace(workspace_id)
        result = ws.undo()
        if result is not None:
            self._notify(EVENT_GRAPH_UPDATED, workspace=ws, graph=result)
        return result

    # ── Traversal runs ───────────────────────────────────────────

    def start_traversal(self, kind, source: str, target: Optional[str] = None,
                        mode=None, delay_ms: Optional[float] = None,
                        workspace_id: Optional[str] = None) -> RunView:
        """Start a run; ``run_step`` / ``run_finished`` events follow."""
        ws = self._resolve_workspace(workspace_id)
        return ws.start_run(kind, source, target, mode, delay_ms)

    def step(self, workspace_id: Optional[str] = None) -> bool:
        return self._resolve_workspace(workspace_id).step()

    def cancel_run(self, workspace_id: Optional[str] = None) -> None:
        self._resolve_workspace(workspace_id).cancel_run()

    def last_result(self, workspace_id: Optional[str] = None) -> Optional[TraversalResult]:
        return self._resolve_workspace(workspace_id).last_result

    # ── Analysis / layout ────────────────────────────────────────

    def connected_components(self, workspace_id: Optional[str] = None) -> List[List[str]]:
        ws = self._resolve_workspace(workspace_id)
        components = ws.find_components()
        self._notify(EVENT_ANALYSIS_DONE, workspace=ws, kind="components", result=components)
        return components

    def cut_vertices(self, workspace_id: Optional[str] = None) -> List[str]:
        ws = self._resolve_workspace(workspace_id)
        cut = ws.find_cut_vertices()
        self._notify(EVENT_ANALYSIS_DONE, workspace=ws, kind="cut-vertices", result=cut)
        return cut

    def bridges(self, workspace_id: Optional[str] = None) -> List[Bridge]:
        ws = self._resolve_workspace(workspace_id)
        bridges = ws.find_bridges()
        self._notify(EVENT_ANALYSIS_DONE, workspace=ws, kind="bridges", result=bridges)
        return bridges

    def apply_layout(self, kind, root: Optional[str] = None,
                     workspace_id: Optional[str] = None):
        ws = self._resolve_workspace(workspace_id)
        positions = ws.apply_layout(kind, root)
        self._notify(EVENT_GRAPH_UPDATED, workspace=ws, graph=ws.graph)
        return positions

    # ── Serialization ────────────────────────────────────────────

    @property
    def serializer(self):
        return self._serializer

    def serialize_graph(self, workspace_id: Optional[str] = None) -> dict:
        return self._serializer.serialize(self._resolve_workspace(workspace_id).graph)

    def serialize_graph_json(self, workspace_id: Optional[str] = None) -> str:
        return self._serializer.to_json(self._resolve_workspace(workspace_id).graph)

    def deserialize_graph(self, data: dict) -> Graph:
        return self._serializer.deserialize(data)

    def deserialize_graph_json(self, json_str: str) -> Graph:
        return self._serializer.from_json(json_str)

    def load_snapshot(self, data: dict, workspace_id: Optional[str] = None) -> Graph:
        """Replace the workspace graph with a snapshot dict."""
        ws = self._resolve_workspace(workspace_id)
        graph = ws.load_snapshot(data)
        self._notify(EVENT_GRAPH_UPDATED, workspace=ws, graph=graph)
        return graph

    # ── Observer pattern ─────────────────────────────────────────

    def subscribe(self, event: str, callback: Callable[..., Any]) -> None:
        """
        Register a callback for a platform event.

        Events:
            - workspace_created / workspace_switched / workspace_removed
            - graph_updated
            - run_step      (``view=RunView``)
            - run_finished  (``result=TraversalResult``)
            - analysis_done (``kind=..., result=...``)
        """
        self._listeners.setdefault(event, []).append(callback)

    def unsubscribe(self, event: str, callback: Callable[..., Any]) -> None:
        listeners = self._listeners.get(event, [])
        if callback in listeners:
            listeners.remove(callback)

    def _notify(self, event: str, **kwargs: Any) -> None:
        """Fire all callbacks registered for the given event."""
        for cb in self._listeners.get(event, []):
            try:
                cb(**kwargs)
            except Exception as exc:
                logger.error("Observer callback failed for '%s': %s", event, exc)

    # ── Internal helpers ─────────────────────────────────────────

    def _resolve_workspace(self, workspace_id: Optional[str] = None) -> Workspace:
        """
        Return the requested workspace or the active one.

        Raises:
            RuntimeError: If no workspace can be resolved.
        """
        wid = workspace_id or self._active_workspace_id
        if wid is None:
            raise RuntimeError("No active workspace. Create or load a graph first.")
        ws = self._workspaces.get(wid)
        if ws is None:
            raise RuntimeError(f"Workspace '{wid}' not found.")
        return ws

    def __repr__(self) -> str:
        return (
            f"GraphPlatform(workspaces={len(self._workspaces)}, "
            f"data_sources={len(self._ds_loader)}, "
            f"exporters={len(self._ex_loader)})"
        )
