"""Store: owns the current SignalState, applies the reducer on dispatch, notifies observers."""

import logging
import threading
import weakref
from typing import Any, Callable, Dict, List, Optional

from intersection.core.logging_utils import log_action
from intersection.core.reducer import reduce
from intersection.core.state.snapshot import SignalState

logger = logging.getLogger(__name__)

Reducer = Callable[[SignalState, Any], SignalState]


class Store:
    """
    Single writer of SignalState. dispatch() is the only mutation entry point.

    Observers are any objects with present(state). They are held by weak reference keyed by
    identity, so subscribing twice is a no-op and a collected observer drops out of the registry
    without an unsubscribe. Dispatch and notification run under one re-entrant lock: no other
    thread can observe or dispatch mid-update, and an observer may dispatch from present().
    An owner that takes its own lock around dispatches passes it as `lock`, so both share one.
    """

    def __init__(self, state: SignalState, reducer: Reducer = reduce, lock: Optional[threading.RLock] = None):
        self._lock = lock if lock is not None else threading.RLock()
        self._state = state
        self._reducer = reducer
        self._observers: Dict[int, weakref.ref] = {}

    @property
    def state(self) -> SignalState:
        with self._lock:
            return self._state

    @property
    def observer_count(self) -> int:
        return len(self._live_observers())

    def dispatch(self, action: Any) -> SignalState:
        """Apply reducer, replace state, notify all live observers. Returns the new state."""
        with self._lock:
            log_action(action)
            self._state = self._reducer(self._state, action)
            self._notify(self._state)
            return self._state

    def subscribe(self, observer: Optional[Any]) -> None:
        """Register observer (idempotent) and push the current state to it once."""
        if observer is None:
            return
        with self._lock:
            key = id(observer)
            existing = self._observers.get(key)
            if existing is None or existing() is not observer:
                self._observers[key] = weakref.ref(observer, self._make_pruner(key))
                logger.debug("Subscribed observer %s", type(observer).__name__)
            self._present(observer, self._state)

    def unsubscribe(self, observer: Optional[Any]) -> None:
        if observer is None:
            return
        with self._lock:
            ref = self._observers.get(id(observer))
            if ref is not None and ref() is observer:
                del self._observers[id(observer)]
                logger.debug("Unsubscribed observer %s", type(observer).__name__)

    def _make_pruner(self, key: int) -> Callable[[weakref.ref], None]:
        store_ref = weakref.ref(self)

        def _prune(ref: weakref.ref) -> None:
            store = store_ref()
            if store is not None and store._observers.get(key) is ref:
                store._observers.pop(key, None)

        return _prune

    def _live_observers(self) -> List[Any]:
        with self._lock:
            refs = list(self._observers.values())
        return [o for o in (r() for r in refs) if o is not None]

    def _notify(self, state: SignalState) -> None:
        for observer in self._live_observers():
            self._present(observer, state)

    @staticmethod
    def _present(observer: Any, state: SignalState) -> None:
        try:
            observer.present(state)
        except Exception:
            logger.exception("Error in observer %s.present", type(observer).__name__)
