"""Periodic tick sources. The coordinator only sees TickSource.start(callback)/stop()."""

import logging
import threading
import weakref
from abc import ABC, abstractmethod
from typing import Callable, Optional

logger = logging.getLogger(__name__)

# Fixed tick period: one tick is one simulated second.
TICK_INTERVAL_SEC = 1.0


def _weak_callable(callback: Callable[[], None]) -> Callable[[], Optional[Callable[[], None]]]:
    """Non-owning handle to callback: bound methods via WeakMethod, plain functions held strongly."""
    if hasattr(callback, "__self__") and hasattr(callback, "__func__"):
        return weakref.WeakMethod(callback)
    return lambda: callback


class TickSource(ABC):
    """Abstract periodic trigger. start() replaces any running schedule; stop() is idempotent."""

    @abstractmethod
    def start(self, callback: Callable[[], None]) -> None:
        ...

    @abstractmethod
    def stop(self, wait: bool = True) -> None:
        ...

    @property
    @abstractmethod
    def is_active(self) -> bool:
        ...


class ThreadTickSource(TickSource):
    """
    Daemon thread that calls callback every `period` seconds until stopped.

    The callback is held weakly when it is a bound method, so the owner can be collected while the
    ticker runs; the thread exits on the first expiry after that. Calls are strictly sequential:
    the next wait starts only after the previous callback returned.
    """

    def __init__(self, period: float = TICK_INTERVAL_SEC, name: str = "intersection-ticker"):
        self._period = period
        self._name = name
        self._lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None
        self._stop_event: Optional[threading.Event] = None

    @property
    def period(self) -> float:
        return self._period

    @property
    def is_active(self) -> bool:
        with self._lock:
            return self._thread is not None and self._thread.is_alive() and not self._stop_event.is_set()

    def start(self, callback: Callable[[], None]) -> None:
        # The replaced thread exits on its own once its event is set.
        self.stop(wait=False)
        stop_event = threading.Event()
        thread = threading.Thread(
            target=self._run,
            args=(_weak_callable(callback), stop_event),
            name=self._name,
            daemon=True,
        )
        with self._lock:
            self._thread = thread
            self._stop_event = stop_event
        thread.start()
        logger.debug("Tick source started (period=%.3fs)", self._period)

    def stop(self, wait: bool = True) -> None:
        """Signal the thread to exit. wait=False returns at once; a callback already running still finishes."""
        with self._lock:
            thread, stop_event = self._thread, self._stop_event
            self._thread = None
            self._stop_event = None
        if thread is None:
            return
        stop_event.set()
        # stop() may be called from inside the callback (presenter toggle during a tick).
        if wait and thread is not threading.current_thread():
            thread.join(timeout=self._period + 1.0)
        logger.debug("Tick source stopped")

    def _run(self, callback_ref, stop_event: threading.Event) -> None:
        while not stop_event.wait(self._period):
            callback = callback_ref()
            if callback is None:
                logger.debug("Tick target collected; ticker exiting")
                return
            try:
                callback()
            except Exception:
                logger.exception("Error in tick callback")
            # Release the target before waiting so it can be collected.
            del callback
