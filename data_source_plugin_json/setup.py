from setuptools import setup, find_packages

setup(
    name='data-source-plugin-json-snapshot',
    version='1.0.0',
    description='JSON snapshot data source and exporter for Graph Algorithm Visualizer',
    packages=find_packages(),
    install_requires=[
        'graph-algorithm-visualizer-api',
        'graph-algorithm-visualizer-core',
    ],
    entry_points={
        'algoviz.data_source': [
            'json = data_source_plugin_json.plugin:JsonSnapshotPlugin',
        ],
        'algoviz.exporter': [
            'json = data_source_plugin_json.plugin:JsonSnapshotExporter',
        ],
    },
    python_requires='>=3.8',
)
