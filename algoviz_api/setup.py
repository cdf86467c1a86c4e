from setuptools import setup, find_packages

setup(
    name='graph-algorithm-visualizer-api',
    version='1.0.0',
    description='Graph model, errors and plugin contracts for Graph Algorithm Visualizer',
    packages=find_packages(),
    python_requires='>=3.8',
)
