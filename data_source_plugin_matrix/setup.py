from setuptools import setup, find_packages

setup(
    name='data-source-plugin-matrix',
    version='1.0.0',
    description='Adjacency-matrix data source and exporter for Graph Algorithm Visualizer',
    packages=find_packages(),
    install_requires=[
        'graph-algorithm-visualizer-api',
        'graph-algorithm-visualizer-core',
    ],
    entry_points={
        'algoviz.data_source': [
            'matrix = data_source_plugin_matrix.plugin:MatrixDataSourcePlugin',
        ],
        'algoviz.exporter': [
            'matrix = data_source_plugin_matrix.plugin:MatrixExporter',
        ],
    },
    python_requires='>=3.8',
)
