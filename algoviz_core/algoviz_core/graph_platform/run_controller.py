"""
    RunController: the single owner of the active traversal run.

    Design Pattern: State machine
    ─────────────────────────────
    OFF ──start(mode=MANUAL)──▶ MANUAL ──step()…──▶ OFF
    OFF ──start(mode=AUTO)────▶ AUTO   ──timer…───▶ OFF

    ``start``, ``step`` and ``cancel`` are the only mutators.  At most
    one engine and at most one timer registration exist at any time:
    starting a run cancels the previous timer before scheduling a new
    one, and a finished run cancels its own timer.

    A rejected ``start`` (unknown source, too few vertices) raises
    before anything is discarded, so the previous run keeps going.
"""
import logging
import threading
from typing import Callable, Optional, Union

from algoviz_api.models.graph import Graph
from algoviz_core.services.traversal_service import (
    AlgorithmKind,
    IDLE_VIEW,
    RunView,
    StepMode,
    TraversalEngine,
    TraversalResult,
)

from .timers import TimerHandle, TimerService, ThreadingTimerService

logger = logging.getLogger(__name__)

RenderCallback = Callable[[RunView], None]
StartCallback = Callable[[], None]
FinishCallback = Callable[[TraversalResult], None]


class RunController:
    """
    Drives one traversal at a time in manual-step or timed-auto mode.

    Usage:
        controller = RunController(graph, on_render=draw)
        controller.start("bfs", "A")          # manual
        controller.step()                     # e.g. on each key press

        controller.start("dijkstra", "A", "C", mode="auto", delay_ms=500)
    """

    def __init__(
        self,
        graph: Graph,
        timer_service: Optional[TimerService] = None,
        on_render: Optional[RenderCallback] = None,
        on_finish: Optional[FinishCallback] = None,
        default_delay_ms: int = 1000,
        on_start: Optional[StartCallback] = None,
    ):
        self._graph = graph
        self._timers: TimerService = timer_service or ThreadingTimerService()
        self._on_render = on_render
        self._on_finish = on_finish
        self._on_start = on_start
        self._default_delay_ms = default_delay_ms

        self._engine: Optional[TraversalEngine] = None
        self._mode: StepMode = StepMode.OFF
        self._timer: Optional[TimerHandle] = None
        self._last_result: Optional[TraversalResult] = None
        # timer callbacks may arrive from another thread
        self._lock = threading.RLock()

    # ── Properties ───────────────────────────────────────────────

    @property
    def graph(self) -> Graph:
        return self._graph

    @graph.setter
    def graph(self, value: Graph) -> None:
        with self._lock:
            self.cancel()
            self._graph = value

    @property
    def mode(self) -> StepMode:
        return self._mode

    @property
    def is_active(self) -> bool:
        return self._engine is not None and not self._engine.finished

    @property
    def engine(self) -> Optional[TraversalEngine]:
        return self._engine

    @property
    def last_result(self) -> Optional[TraversalResult]:
        return self._last_result

    @property
    def view(self) -> RunView:
        with self._lock:
            if self._engine is None:
                return IDLE_VIEW
            return self._engine.view(self._mode)

    @property
    def timer_live(self) -> bool:
        return self._timer is not None

    # ── Mutators ─────────────────────────────────────────────────

    def start(
        self,
        kind: Union[AlgorithmKind, str],
        source: str,
        target: Optional[str] = None,
        mode: Union[StepMode, str] = StepMode.MANUAL,
        delay_ms: Optional[float] = None,
    ) -> RunView:
        """
        Begin a new run, discarding any previous one.  ``on_start`` runs
        once the request is accepted, before the first render.

        Raises:
            InvalidSelectionError: the request cannot run on this graph;
                                   the current run is left untouched.
            ValueError:            unknown kind / mode, or a non-positive delay.
        """
        kind = AlgorithmKind(kind)
        mode = StepMode(mode)
        if mode is StepMode.OFF:
            raise ValueError("A run must start in 'manual' or 'auto' mode")
        delay = self._default_delay_ms if delay_ms is None else delay_ms
        if delay <= 0:
            raise ValueError("delay_ms must be positive")

        with self._lock:
            # validates before anything is discarded
            engine = TraversalEngine(self._graph, kind, source, target)

            self._cancel_timer()
            if self._on_start is not None:
                self._on_start()
            self._engine = engine
            self._mode = mode
            self._last_result = None
            logger.info("Run started: %s from %s%s (%s)", kind.value, source,
                        f" to {target}" if target is not None else "", mode.value)
            self._render()

            if mode is StepMode.AUTO:
                self._timer = self._timers.schedule_repeating(delay, self._on_timer)
            return self.view

    def step(self) -> bool:
        """
        Advance the active run by one step.

        Returns:
            True if the run has terminated (or no run is active).
        """
        with self._lock:
            engine = self._engine
            if engine is None or engine.finished:
                return True

            done = engine.step()
            if done:
                self._complete(engine)
            else:
                self._render()
            return done

    def cancel(self) -> None:
        """Abort the active run (if any) and clear its timer."""
        with self._lock:
            self._cancel_timer()
            if self._engine is not None and not self._engine.finished:
                logger.info("Run cancelled: %s", self._engine.kind.value)
            self._engine = None
            self._mode = StepMode.OFF

    def run_to_completion(self) -> Optional[TraversalResult]:
        """Step the active run until it ends; returns its result."""
        with self._lock:
            while not self.step():
                pass
            return self._last_result

    # ── Internals ────────────────────────────────────────────────

    def _on_timer(self, handle: TimerHandle) -> None:
        with self._lock:
            # a tick queued behind the lock may belong to a replaced run
            if handle is not self._timer:
                return
            self.step()

    def _complete(self, engine: TraversalEngine) -> None:
        self._cancel_timer()
        self._mode = StepMode.OFF
        self._last_result = engine.result
        self._render()
        if self._on_finish is not None:
            self._on_finish(engine.result)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timers.cancel(self._timer)
            self._timer = None

    def _render(self) -> None:
        if self._on_render is not None:
            self._on_render(self.view)

    def __repr__(self) -> str:
        kind = self._engine.kind.value if self._engine else None
        return f"RunController(kind={kind}, mode={self._mode.value}, timer={self.timer_live})"
