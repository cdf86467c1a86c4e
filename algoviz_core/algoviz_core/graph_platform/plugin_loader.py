"""
    Generic plugin discovery and loading via entry_points.

    Design Pattern: Service Locator / Registry
    ────────────────────────────────────────────
    Discovers all installed plugins at runtime by scanning Python
    package entry_points.  Each plugin type (data source, exporter)
    uses a distinct entry-point group.

    PluginLoader[TPlugin] is generic over the plugin base class so the
    same loader works for DataSourcePlugin and ExporterPlugin.
"""
import importlib.metadata
import logging
from typing import TypeVar, Generic, Type, Dict, List, Optional

from algoviz_api.plugins.base import DataSourcePlugin, ExporterPlugin

logger = logging.getLogger(__name__)

TPlugin = TypeVar('TPlugin')

# Entry-point group names (must match the plugin distributions' setup.py)
DATA_SOURCE_EP_GROUP = 'algoviz.data_source'
EXPORTER_EP_GROUP = 'algoviz.exporter'


def _select_entry_points(group: str):
    entry_points = importlib.metadata.entry_points()
    if hasattr(entry_points, 'select'):
        return entry_points.select(group=group)
    # Python 3.8 / 3.9 return a dict of groups
    return entry_points.get(group, [])


class PluginLoader(Generic[TPlugin]):
    """
    Discovers every installed plugin of one type from one entry-point group.

    Usage:
        loader = PluginLoader(DataSourcePlugin, 'algoviz.data_source')
        plugins = loader.load_all()          # Dict[str, DataSourcePlugin]
        matrix = loader.get('matrix')        # Optional[DataSourcePlugin]
    """

    def __init__(self, plugin_base_class: Type[TPlugin], group: str):
        self._base_class = plugin_base_class
        self._group = group
        self._plugins: Dict[str, TPlugin] = {}
        self._loaded = False

    @property
    def group(self) -> str:
        return self._group

    def load_all(self) -> Dict[str, TPlugin]:
        """
        Discover and instantiate every plugin registered under the group.
        A plugin that fails to load, or is not a subclass of the base
        class, is logged and skipped.

        Returns:
            Dict mapping entry-point name → plugin instance.
        """
        if self._loaded:
            return self._plugins

        try:
            eps = list(_select_entry_points(self._group))
        except Exception as exc:
            logger.error("Entry-point discovery failed for '%s': %s", self._group, exc)
            eps = []

        for ep in eps:
            try:
                plugin_cls = ep.load()
            except Exception as exc:
                logger.error("Failed to load plugin '%s': %s", ep.name, exc)
                continue
            if not isinstance(plugin_cls, type) or not issubclass(plugin_cls, self._base_class):
                logger.warning("Plugin '%s' does not subclass %s, skipped.",
                               ep.name, self._base_class.__name__)
                continue
            try:
                self._plugins[ep.name] = plugin_cls()
            except Exception as exc:
                logger.error("Failed to instantiate plugin '%s': %s", ep.name, exc)
                continue
            logger.info("Loaded plugin: %s (%s)", ep.name, plugin_cls.__name__)

        self._loaded = True
        return self._plugins

    def register(self, name: str, plugin: TPlugin) -> None:
        """Add a plugin instance by hand (hosts without installed entry points)."""
        if not isinstance(plugin, self._base_class):
            raise TypeError(f"{plugin!r} is not a {self._base_class.__name__}")
        self.load_all()
        self._plugins[name] = plugin

    def get(self, name: str) -> Optional[TPlugin]:
        return self.load_all().get(name)

    def get_names(self) -> List[str]:
        """Sorted list of all discovered plugin names."""
        return sorted(self.load_all().keys())

    def reload(self) -> Dict[str, TPlugin]:
        """Force re-discovery of plugins."""
        self._plugins.clear()
        self._loaded = False
        return self.load_all()

    def __len__(self) -> int:
        return len(self.load_all())

    def __contains__(self, name: str) -> bool:
        return name in self.load_all()

    def __repr__(self) -> str:
        return (
            f"PluginLoader(base={self._base_class.__name__}, "
            f"group='{self._group}', loaded={len(self._plugins)})"
        )


# ── Convenience factory functions ────────────────────────────────

def create_data_source_loader() -> PluginLoader[DataSourcePlugin]:
    """Create a loader for data source plugins."""
    return PluginLoader(DataSourcePlugin, DATA_SOURCE_EP_GROUP)


def create_exporter_loader() -> PluginLoader[ExporterPlugin]:
    """Create a loader for exporter plugins."""
    return PluginLoader(ExporterPlugin, EXPORTER_EP_GROUP)
