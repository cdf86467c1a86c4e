from .plugin import MatrixDataSourcePlugin, MatrixExporter

__all__ = ['MatrixDataSourcePlugin', 'MatrixExporter']
