# tests/conftest.py
"""
Shared test fixtures.

Small hand-built graphs whose traversal orders, components and
articulation structure are known, plus a manual timer so that
timed-auto runs can be driven without sleeping.
"""
import pytest

from algoviz_api.models.graph import Graph
from algoviz_core.graph_platform.config import PlatformConfig
from algoviz_core.graph_platform.timers import ManualTimerService
from algoviz_core.graph_platform.workspace import Workspace


def build_graph(vertex_ids, edges, graph_id: str = "test") -> Graph:
    """
    Build a graph from ids and ``(from, to)`` / ``(from, to, weight)`` /
    ``(from, to, weight, directed)`` tuples.  Vertices are spread along
    the x axis so layouts start from distinct positions.
    """
    g = Graph(graph_id)
    for i, vid in enumerate(vertex_ids):
        g.add_vertex(vid, x=i * 50.0, y=(i % 2) * 30.0)
    for edge in edges:
        from_id, to_id = edge[0], edge[1]
        weight = edge[2] if len(edge) > 2 else 1
        directed = edge[3] if len(edge) > 3 else False
        g.add_edge(from_id, to_id, weight=weight, label=str(weight), directed=directed)
    return g


# ── Graph fixtures ───────────────────────────────────────────────

@pytest.fixture
def empty_graph() -> Graph:
    return Graph("empty")


@pytest.fixture
def branching_graph() -> Graph:
    """
        A -- B -- D
        |
        C
    Edge order: A-B, A-C, B-D.
    """
    return build_graph("ABCD", [("A", "B"), ("A", "C"), ("B", "D")], "branching")


@pytest.fixture
def weighted_triangle() -> Graph:
    """A-B (1), B-C (2), A-C (5): the two-hop route is shorter."""
    return build_graph("ABC", [("A", "B", 1), ("B", "C", 2), ("A", "C", 5)], "triangle")


@pytest.fixture
def path_graph() -> Graph:
    """A - B - C - D"""
    return build_graph("ABCD", [("A", "B"), ("B", "C"), ("C", "D")], "path")


@pytest.fixture
def cycle_graph() -> Graph:
    """A - B - C - D - A"""
    return build_graph("ABCD", [("A", "B"), ("B", "C"), ("C", "D"), ("D", "A")], "cycle")


@pytest.fixture
def two_pairs() -> Graph:
    """Two disjoint edges: A-B and C-D."""
    return build_graph("ABCD", [("A", "B"), ("C", "D")], "pairs")


@pytest.fixture
def mixed_graph() -> Graph:
    """
    Mixed directedness:
        A -> B  (directed)
        B -- C  (undirected)
        D -> C  (directed)
    """
    return build_graph(
        "ABCD",
        [("A", "B", 1, True), ("B", "C", 1, False), ("D", "C", 1, True)],
        "mixed",
    )


# ── Platform fixtures ────────────────────────────────────────────

@pytest.fixture
def timers() -> ManualTimerService:
    """Virtual clock: nothing fires until ``timers.advance(ms)``."""
    return ManualTimerService()


@pytest.fixture
def config() -> PlatformConfig:
    return PlatformConfig()


@pytest.fixture
def workspace(branching_graph, config, timers) -> Workspace:
    return Workspace(branching_graph, name="test", config=config, timer_service=timers)
