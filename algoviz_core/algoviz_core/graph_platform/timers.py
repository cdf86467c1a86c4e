"""
    Timer services: the repeating callback used by timed-auto runs.

    The core never sleeps or spawns work on its own; it asks a
    ``TimerService`` to call back every ``delay_ms`` milliseconds and
    cancels that registration when the run ends.  The callback receives
    its own handle, so a tick that was already in flight when the
    registration was replaced can recognise itself as stale.

    • ThreadingTimerService – real wall-clock timer on ``threading.Timer``.
    • ManualTimerService    – virtual clock advanced by the host; used by
                              hosts with their own event loop and by tests.
"""
import logging
import threading
from abc import ABC, abstractmethod
from typing import Callable, Dict, List

logger = logging.getLogger(__name__)

TimerCallback = Callable[["TimerHandle"], None]


class TimerHandle:
    """Opaque registration token returned by ``schedule_repeating``."""

    _next_id = 0
    _id_lock = threading.Lock()

    def __init__(self, delay_ms: float, callback: TimerCallback):
        with TimerHandle._id_lock:
            TimerHandle._next_id += 1
            self.handle_id = TimerHandle._next_id
        self.delay_ms = delay_ms
        self.callback = callback
        self.cancelled = False

    def __repr__(self) -> str:
        state = "cancelled" if self.cancelled else "live"
        return f"TimerHandle(#{self.handle_id}, every {self.delay_ms}ms, {state})"


class TimerService(ABC):
    """Register / cancel repeating callbacks."""

    @abstractmethod
    def schedule_repeating(self, delay_ms: float, callback: TimerCallback) -> TimerHandle:
        ...

    @abstractmethod
    def cancel(self, handle: TimerHandle) -> None:
        ...

    @property
    @abstractmethod
    def live_count(self) -> int:
        """Number of registrations that have not been cancelled."""
        ...


class ThreadingTimerService(TimerService):
    """Fires callbacks from a background ``threading.Timer`` thread."""

    def __init__(self):
        self._timers: Dict[int, threading.Timer] = {}
        self._lock = threading.Lock()

    def schedule_repeating(self, delay_ms, callback) -> TimerHandle:
        handle = TimerHandle(delay_ms, callback)
        self._arm(handle)
        return handle

    def _arm(self, handle: TimerHandle) -> None:
        with self._lock:
            if handle.cancelled:
                return
            timer = threading.Timer(handle.delay_ms / 1000.0, self._fire, args=(handle,))
            timer.daemon = True
            self._timers[handle.handle_id] = timer
            timer.start()

    def _fire(self, handle: TimerHandle) -> None:
        if handle.cancelled:
            return
        try:
            handle.callback(handle)
        except Exception as exc:
            logger.error("Timer callback failed, timer stopped: %s", exc)
            self.cancel(handle)
            return
        self._arm(handle)

    def cancel(self, handle: TimerHandle) -> None:
        with self._lock:
            handle.cancelled = True
            timer = self._timers.pop(handle.handle_id, None)
        if timer is not None:
            timer.cancel()

    @property
    def live_count(self) -> int:
        with self._lock:
            return len(self._timers)


class ManualTimerService(TimerService):
    """
    Virtual clock.  Nothing fires until ``advance(ms)`` is called; every
    live registration then fires once per elapsed period, in
    registration order.
    """

    def __init__(self):
        self._handles: List[TimerHandle] = []
        self._elapsed: Dict[int, float] = {}
        self.now_ms: float = 0

    def schedule_repeating(self, delay_ms, callback) -> TimerHandle:
        if delay_ms <= 0:
            raise ValueError("delay_ms must be positive")
        handle = TimerHandle(delay_ms, callback)
        self._handles.append(handle)
        self._elapsed[handle.handle_id] = 0
        return handle

    def cancel(self, handle: TimerHandle) -> None:
        handle.cancelled = True
        if handle in self._handles:
            self._handles.remove(handle)
            self._elapsed.pop(handle.handle_id, None)

    def advance(self, ms: float) -> int:
        """
        Move the clock forward and fire whatever became due.

        Returns:
            Number of callbacks fired.
        """
        fired = 0
        remaining = ms
        while remaining > 0:
            due = [h for h in self._handles if not h.cancelled]
            if not due:
                break
            # step to the nearest firing time
            tick = min(h.delay_ms - self._elapsed[h.handle_id] for h in due)
            tick = max(min(tick, remaining), 0)
            remaining -= tick
            self.now_ms += tick
            for handle in due:
                if handle.cancelled:
                    continue
                self._elapsed[handle.handle_id] += tick
                if self._elapsed[handle.handle_id] >= handle.delay_ms:
                    self._elapsed[handle.handle_id] = 0
                    handle.callback(handle)
                    fired += 1
        return fired

    @property
    def live_count(self) -> int:
        return len(self._handles)
