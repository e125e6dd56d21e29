"""Simple in-memory metrics for ticks, dispatches, color changes and all-red ticks."""

import logging
import threading
from typing import Optional

logger = logging.getLogger(__name__)


class Metrics:
    """In-memory counters; log on demand via log_snapshot()."""

    def __init__(self):
        self._lock = threading.Lock()
        self._tick_count = 0
        self._dispatch_count = 0
        self._color_change_count = 0
        self._rollover_count = 0
        self._all_red_tick_count = 0

    def inc_tick_count(self) -> int:
        with self._lock:
            self._tick_count += 1
            return self._tick_count

    @property
    def tick_count(self) -> int:
        with self._lock:
            return self._tick_count

    def inc_dispatch_count(self) -> int:
        with self._lock:
            self._dispatch_count += 1
            return self._dispatch_count

    @property
    def dispatch_count(self) -> int:
        with self._lock:
            return self._dispatch_count

    def inc_color_change_count(self) -> int:
        with self._lock:
            self._color_change_count += 1
            return self._color_change_count

    @property
    def color_change_count(self) -> int:
        with self._lock:
            return self._color_change_count

    def inc_rollover_count(self) -> int:
        with self._lock:
            self._rollover_count += 1
            return self._rollover_count

    @property
    def rollover_count(self) -> int:
        with self._lock:
            return self._rollover_count

    def inc_all_red_tick_count(self) -> int:
        with self._lock:
            self._all_red_tick_count += 1
            return self._all_red_tick_count

    @property
    def all_red_tick_count(self) -> int:
        with self._lock:
            return self._all_red_tick_count

    def log_snapshot(self) -> None:
        """Log current metrics snapshot."""
        with self._lock:
            parts = [
                f"tick_count={self._tick_count}",
                f"dispatch_count={self._dispatch_count}",
                f"color_change_count={self._color_change_count}",
                f"rollover_count={self._rollover_count}",
            ]
            if self._all_red_tick_count:
                parts.append(f"all_red_tick_count={self._all_red_tick_count}")
        logger.info("metrics " + " ".join(parts))


_global_metrics: Optional[Metrics] = None


def get_metrics() -> Metrics:
    global _global_metrics
    if _global_metrics is None:
        _global_metrics = Metrics()
    return _global_metrics
