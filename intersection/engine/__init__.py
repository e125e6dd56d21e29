"""Coordinator and tick sources."""

from intersection.engine.coordinator import TrafficLightsCoordinator
from intersection.engine.ticker import TICK_INTERVAL_SEC, ThreadTickSource, TickSource

__all__ = ["TrafficLightsCoordinator", "ThreadTickSource", "TickSource", "TICK_INTERVAL_SEC"]
