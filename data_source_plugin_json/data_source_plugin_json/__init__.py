from .plugin import JsonSnapshotPlugin, JsonSnapshotExporter

__all__ = ['JsonSnapshotPlugin', 'JsonSnapshotExporter']
