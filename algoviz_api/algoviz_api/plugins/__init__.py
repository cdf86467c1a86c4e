"""
Plugin contracts: abstract base classes for DataSource and Exporter plugins.
"""
from .base import DataSourcePlugin, ExporterPlugin

__all__ = ['DataSourcePlugin', 'ExporterPlugin']
