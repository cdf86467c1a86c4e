"""
    Stepwise traversal engine: BFS, DFS and Dijkstra as one state machine.

    Design Pattern: Strategy
    ─────────────────────────
    ``TraversalEngine`` owns the run state (visited set, visit order,
    current / next markers) and delegates every discipline-specific
    decision to a ``Frontier``:

        • QueueFrontier     – FIFO, vertices marked visited when enqueued (BFS)
        • StackFrontier     – LIFO, vertices marked visited when popped   (DFS)
        • DistanceFrontier  – unvisited set ordered by tentative distance (Dijkstra)

    Every frontier sees neighbors through ``Graph.neighbors``, the one
    place where per-edge direction is interpreted.

    One ``step()`` processes exactly one vertex and reports whether the
    run has terminated.  Nothing here schedules or renders; see
    ``RunController`` for execution modes.
"""
import logging
import math
from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Set, Tuple

from algoviz_api.models.graph import Graph

from .exceptions import InvalidSelectionError, NoPathFoundError

logger = logging.getLogger(__name__)

INFINITY = math.inf


class AlgorithmKind(Enum):
    BFS = "bfs"
    DFS = "dfs"
    DIJKSTRA = "dijkstra"

    @property
    def min_vertices(self) -> int:
        return 2 if self is AlgorithmKind.DIJKSTRA else 1


class StepMode(Enum):
    """How successive steps are triggered."""
    MANUAL = "manual"   # one step per external event (e.g. a key press)
    AUTO = "auto"       # a repeating timer calls step()
    OFF = "off"         # no active run


# ── Result / view value objects ──────────────────────────────────

@dataclass
class TraversalResult:
    """
    Outcome of a finished run.

    Attributes:
        kind:      Algorithm that produced the result.
        source:    Start vertex.
        target:    Dijkstra target (None for BFS / DFS).
        order:     Vertices in the order they were visited / finalized.
        path:      Dijkstra shortest path, source first ([] otherwise).
        distance:  Length of ``path`` (None when there is no path).
        error:     ``NoPathFoundError`` when the target was unreachable.
    """
    kind: AlgorithmKind
    source: str
    target: Optional[str] = None
    order: List[str] = field(default_factory=list)
    path: List[str] = field(default_factory=list)
    distance: Optional[float] = None
    error: Optional[NoPathFoundError] = None

    @property
    def found(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class RunView:
    """Read-only picture of a run, handed to the render callback."""
    kind: Optional[AlgorithmKind]
    mode: StepMode
    current: Optional[str] = None
    next: Optional[str] = None
    order: Tuple[str, ...] = ()
    visited: FrozenSet[str] = frozenset()
    frontier: Tuple[str, ...] = ()
    distances: Dict[str, float] = field(default_factory=dict)
    finished: bool = False


IDLE_VIEW = RunView(kind=None, mode=StepMode.OFF)


# ═════════════════════════════════════════════════════════════════
#  FRONTIER DISCIPLINES
# ═════════════════════════════════════════════════════════════════

class Frontier(ABC):
    """Discovered-but-unprocessed vertices, ordered by a discipline."""

    #: True when a vertex counts as visited as soon as it is discovered.
    marks_on_discovery: bool = False

    @abstractmethod
    def seed(self, graph: Graph, source: str) -> None:
        ...

    @abstractmethod
    def pop(self) -> Optional[str]:
        """Next vertex to process, or None when the run is over."""
        ...

    @abstractmethod
    def expand(self, graph: Graph, at: str,
               neighbors: List[Tuple[str, int]], visited: Set[str]) -> None:
        """Offer the neighbors of the vertex just processed."""
        ...

    @abstractmethod
    def peek(self) -> Optional[str]:
        """The vertex ``pop`` would return next (for the "next" marker)."""
        ...

    @abstractmethod
    def items(self) -> List[str]:
        ...

    def is_goal(self, vertex_id: str) -> bool:
        return False

    def __len__(self) -> int:
        return len(self.items())


class QueueFrontier(Frontier):
    """FIFO queue; a vertex is enqueued at most once."""

    marks_on_discovery = True

    def __init__(self):
        self._queue: deque = deque()

    def seed(self, graph: Graph, source: str) -> None:
        self._queue = deque([source])

    def pop(self) -> Optional[str]:
        return self._queue.popleft() if self._queue else None

    def expand(self, graph, at, neighbors, visited) -> None:
        for neighbor, _ in neighbors:
            if neighbor not in visited:
                visited.add(neighbor)
                self._queue.append(neighbor)

    def peek(self) -> Optional[str]:
        return self._queue[0] if self._queue else None

    def items(self) -> List[str]:
        return list(self._queue)


class StackFrontier(Frontier):
    """
    LIFO stack.  A vertex may be pushed several times before it is
    popped; only the first pop processes it.
    """

    def __init__(self):
        self._stack: List[str] = []

    def seed(self, graph: Graph, source: str) -> None:
        self._stack = [source]

    def pop(self) -> Optional[str]:
        return self._stack.pop() if self._stack else None

    def expand(self, graph, at, neighbors, visited) -> None:
        # reversed so the first neighbor in edge order ends up on top
        for neighbor, _ in reversed(neighbors):
            if neighbor not in visited:
                self._stack.append(neighbor)

    def peek(self) -> Optional[str]:
        return self._stack[-1] if self._stack else None

    def items(self) -> List[str]:
        return list(self._stack)


class DistanceFrontier(Frontier):
    """
    Unvisited vertices keyed by tentative distance.  The minimum is found
    by a linear scan in enumeration order, so ties go to the vertex that
    was added to the graph first.
    """

    def __init__(self, target: Optional[str] = None):
        self.target = target
        self.distances: Dict[str, float] = {}
        self.previous: Dict[str, Optional[str]] = {}
        self._unvisited: Dict[str, None] = {}  # ordered set

    def seed(self, graph: Graph, source: str) -> None:
        self.distances = {vid: (0 if vid == source else INFINITY) for vid in graph.vertices}
        self.previous = {vid: None for vid in graph.vertices}
        self._unvisited = dict.fromkeys(graph.vertices)

    def _closest(self) -> Optional[str]:
        best, best_dist = None, INFINITY
        for vid in self._unvisited:
            if self.distances[vid] < best_dist:
                best, best_dist = vid, self.distances[vid]
        return best

    def pop(self) -> Optional[str]:
        # None covers both an empty set and an unreachable remainder
        closest = self._closest()
        if closest is not None:
            del self._unvisited[closest]
        return closest

    def expand(self, graph, at, neighbors, visited) -> None:
        for neighbor, index in neighbors:
            if neighbor not in self._unvisited:
                continue
            alt = self.distances[at] + graph.edges[index].weight
            if alt < self.distances[neighbor]:
                self.distances[neighbor] = alt
                self.previous[neighbor] = at

    def peek(self) -> Optional[str]:
        return self._closest()

    def items(self) -> List[str]:
        return list(self._unvisited)

    def is_goal(self, vertex_id: str) -> bool:
        return vertex_id == self.target

    def path_to(self, target: str) -> List[str]:
        path: List[str] = []
        cur: Optional[str] = target
        while cur is not None:
            path.insert(0, cur)
            cur = self.previous.get(cur)
        return path


def make_frontier(kind: AlgorithmKind, target: Optional[str] = None) -> Frontier:
    if kind is AlgorithmKind.BFS:
        return QueueFrontier()
    if kind is AlgorithmKind.DFS:
        return StackFrontier()
    return DistanceFrontier(target)


def validate_selection(graph: Graph, kind: AlgorithmKind,
                       source: str, target: Optional[str] = None) -> None:
    """
    Reject a run request that cannot be honoured.

    Raises:
        InvalidSelectionError: too few vertices, or an unknown source /
                               target, or a Dijkstra run without target.
    """
    count = graph.get_number_of_vertices()
    if count < kind.min_vertices:
        raise InvalidSelectionError(
            f"{kind.value} needs at least {kind.min_vertices} vertices, graph has {count}"
        )
    if not graph.has_vertex(source):
        raise InvalidSelectionError(f"Source vertex '{source}' not in graph")
    if kind is AlgorithmKind.DIJKSTRA:
        if target is None:
            raise InvalidSelectionError("Dijkstra needs a target vertex")
        if not graph.has_vertex(target):
            raise InvalidSelectionError(f"Target vertex '{target}' not in graph")


# ═════════════════════════════════════════════════════════════════
#  ENGINE
# ═════════════════════════════════════════════════════════════════

class TraversalEngine:
    """
    The state of one traversal run.

    Usage:
        engine = TraversalEngine(graph, AlgorithmKind.BFS, "A")
        while not engine.step():
            render(engine.view())
        engine.result.order
    """

    def __init__(self, graph: Graph, kind: AlgorithmKind,
                 source: str, target: Optional[str] = None):
        source = str(source)
        target = None if target is None else str(target)
        validate_selection(graph, kind, source, target)

        self.graph = graph
        self.kind = kind
        self.source = source
        self.target = target if kind is AlgorithmKind.DIJKSTRA else None

        self.visited: Set[str] = set()
        self.order: List[str] = []
        self.current: Optional[str] = None
        self.next: Optional[str] = source
        self.steps = 0
        self.finished = False
        self.result: Optional[TraversalResult] = None

        self._frontier = make_frontier(kind, self.target)
        self._frontier.seed(graph, source)
        if self._frontier.marks_on_discovery:
            self.visited.add(source)

    # ── Stepping ─────────────────────────────────────────────────

    def step(self) -> bool:
        """
        Process one vertex.

        Returns:
            True once the run has terminated (further calls are no-ops).
        """
        if self.finished:
            return True

        vertex = self._frontier.pop()
        if vertex is None:
            self._finish()
            return True
        self.steps += 1

        if not self._frontier.marks_on_discovery:
            if vertex in self.visited:
                # stale stack entry: move the marker, emit nothing
                self.current = vertex
                self.next = self._frontier.peek()
                return False
            self.visited.add(vertex)

        self.order.append(vertex)
        self.current = vertex
        self._frontier.expand(self.graph, vertex, self.graph.neighbors(vertex), self.visited)
        self.next = self._frontier.peek()
        logger.debug("%s step %d: current=%s next=%s",
                     self.kind.value, self.steps, self.current, self.next)

        if self._frontier.is_goal(vertex):
            self._finish()
            return True
        return False

    def run_to_completion(self) -> TraversalResult:
        """Step until the run terminates and return its result."""
        while not self.step():
            pass
        return self.result

    def _finish(self) -> None:
        self.finished = True
        self.current = None
        self.next = None
        self.result = self._build_result()
        if self.result.found:
            logger.info("%s from %s finished: %d vertices visited",
                        self.kind.value, self.source, len(self.order))
        else:
            logger.info("%s from %s finished: %s",
                        self.kind.value, self.source, self.result.error)

    def _build_result(self) -> TraversalResult:
        result = TraversalResult(self.kind, self.source, self.target, list(self.order))
        if self.kind is not AlgorithmKind.DIJKSTRA:
            return result

        frontier: DistanceFrontier = self._frontier
        path = frontier.path_to(self.target)
        if not path or path[0] != self.source:
            result.error = NoPathFoundError(
                f"No path from '{self.source}' to '{self.target}'"
            )
        else:
            result.path = path
            result.distance = frontier.distances[self.target]
        return result

    # ── Introspection ────────────────────────────────────────────

    @property
    def distances(self) -> Dict[str, float]:
        if isinstance(self._frontier, DistanceFrontier):
            return dict(self._frontier.distances)
        return {}

    @property
    def predecessors(self) -> Dict[str, Optional[str]]:
        if isinstance(self._frontier, DistanceFrontier):
            return dict(self._frontier.previous)
        return {}

    @property
    def frontier(self) -> List[str]:
        return self._frontier.items()

    def view(self, mode: StepMode = StepMode.OFF) -> RunView:
        return RunView(
            kind=self.kind,
            mode=mode,
            current=self.current,
            next=self.next,
            order=tuple(self.order),
            visited=frozenset(self.visited),
            frontier=tuple(self._frontier.items()),
            distances=dict(self.distances),
            finished=self.finished,
        )

    def __repr__(self) -> str:
        return (f"TraversalEngine({self.kind.value}, source={self.source}, "
                f"steps={self.steps}, finished={self.finished})")
