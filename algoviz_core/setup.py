from setuptools import setup, find_packages

setup(
    name='graph-algorithm-visualizer-core',
    version='1.0.0',
    description='Traversal, analysis, layout services and platform for Graph Algorithm Visualizer',
    packages=find_packages(),
    install_requires=[
        'graph-algorithm-visualizer-api',
    ],
    extras_require={
        'test': ['pytest'],
    },
    python_requires='>=3.8',
)
