"""Structured logging for signal state, dispatched actions and coordinator FSM transitions."""

import logging
import uuid
from dataclasses import asdict, is_dataclass
from typing import Any, Optional

logger = logging.getLogger(__name__)


def _ensure_trace_id(extra: dict) -> str:
    trace_id = extra.get("trace_id")
    if not trace_id:
        trace_id = str(uuid.uuid4())[:8]
        extra["trace_id"] = trace_id
    return trace_id


def _format(kind: str, extra: dict) -> str:
    return kind + " " + " ".join(f"{k}={v}" for k, v in sorted(extra.items()))


def log_signal_state(
    state: Any,
    trace_id: Optional[str] = None,
    level: int = logging.INFO,
    extra: Optional[dict] = None,
    log: Optional[logging.Logger] = None,
) -> None:
    """Log SignalState as structured key-value (north, east, elapsed_time, active)."""
    extra = extra or {}
    if trace_id:
        extra["trace_id"] = trace_id
    extra.update(state.as_dict())
    active = state.active_position
    extra["active"] = active.value if active is not None else None
    (log or logger).log(level, _format("signal_state", extra))


def log_action(action: Any, trace_id: Optional[str] = None, extra: Optional[dict] = None) -> None:
    """Log a dispatched action at DEBUG: type plus its fields."""
    if not logger.isEnabledFor(logging.DEBUG):
        return
    extra = extra or {}
    if trace_id:
        extra["trace_id"] = trace_id
    _ensure_trace_id(extra)
    extra["action"] = type(action).__name__
    if is_dataclass(action):
        for k, v in asdict(action).items():
            extra[k] = getattr(v, "value", v)
    logger.debug(_format("action", extra))


def log_fsm_transition(
    from_state: str,
    to_state: str,
    event: str,
    trace_id: Optional[str] = None,
    extra: Optional[dict] = None,
) -> None:
    """Log FSM state transition: trace_id, from_state, to_state, event."""
    extra = extra or {}
    if trace_id:
        extra["trace_id"] = trace_id
    _ensure_trace_id(extra)
    extra["from_state"] = from_state
    extra["to_state"] = to_state
    extra["event"] = event
    logger.info(_format("fsm_transition", extra))
