"""TrafficLightsCoordinator: validates config, owns the store, turns elapsed seconds into actions.

Flow: tick source -> tick() -> IncrementTime / ChangeColor dispatched -> Store reduces -> presenters.
Lifecycle (CoordinatorFSM): IDLE -start-> RUNNING -pause-> PAUSED -resume-> RUNNING.
"""

import logging
import threading
import weakref
from typing import Any, Callable, Optional

from intersection.config.settings import CoordinatorConfig, validate_config
from intersection.core.logging_utils import log_signal_state
from intersection.core.metrics import Metrics
from intersection.core.reducer import reduce
from intersection.core.state.enums import Color, Position
from intersection.core.state.snapshot import SignalState
from intersection.core.store import Store
from intersection.engine.ticker import ThreadTickSource, TickSource
from intersection.errors import CoordinatorError, InvalidConfigError
from intersection.fsm.coordinator_fsm import CoordinatorFSM, CoordinatorState
from intersection.fsm.events import ChangeColor, IncrementTime

logger = logging.getLogger(__name__)


class TrafficLightsCoordinator:
    """Drives the two-position signal cycle. start() must be called once before ticks mean anything."""

    def __init__(
        self,
        config: CoordinatorConfig,
        tick_source: Optional[TickSource] = None,
        metrics: Optional[Metrics] = None,
        metrics_log_every: int = 0,
    ):
        try:
            validate_config(config)
        except InvalidConfigError as e:
            logger.error("Invalid coordinator config: %s", e.rule)
            raise

        self._config = config
        # Shared with the store: ticks, lifecycle changes and dispatches all serialize on this lock.
        self._lock = threading.RLock()
        self._store = Store(
            SignalState(signals=config.initial_signals, elapsed_time=config.initial_elapsed_time),
            reduce,
            lock=self._lock,
        )
        self._fsm = CoordinatorFSM()
        self._tick_source = tick_source or ThreadTickSource()
        self._metrics = metrics or Metrics()
        self._metrics_log_every = metrics_log_every
        self._all_red_reported = False
        self._tick_epoch = 0
        # Stop the tick source if the coordinator is collected without close().
        self._finalizer = weakref.finalize(self, self._tick_source.stop)

    @classmethod
    def create(cls, config: CoordinatorConfig, **kwargs: Any) -> Optional["TrafficLightsCoordinator"]:
        """Coordinator for config, or None when config is invalid (rule already logged)."""
        try:
            return cls(config, **kwargs)
        except InvalidConfigError:
            return None

    # 1. Read-only views

    @property
    def config(self) -> CoordinatorConfig:
        return self._config

    @property
    def state(self) -> SignalState:
        return self._store.state

    @property
    def store(self) -> Store:
        return self._store

    @property
    def metrics(self) -> Metrics:
        return self._metrics

    @property
    def lifecycle(self) -> CoordinatorState:
        return self._fsm.current

    @property
    def is_running(self) -> bool:
        return self._fsm.is_running()

    # 2. Lifecycle

    def start(self) -> None:
        """IDLE -> RUNNING: push the initial state with a first tick, then start periodic ticks."""
        with self._lock:
            if self._fsm.is_started():
                raise CoordinatorError("start() must be called exactly once per coordinator")
            self._fsm.transition(CoordinatorState.RUNNING, "start")
            self.tick(first_time=True)
            self._start_ticking()

    def resume(self) -> bool:
        """PAUSED -> RUNNING and (re)start the tick source. While RUNNING only replaces the tick source."""
        with self._lock:
            if not self._fsm.is_started():
                logger.warning("resume() called before start(); ignored")
                return False
            if self._fsm.is_paused():
                self._fsm.transition(CoordinatorState.RUNNING, "resume")
            self._start_ticking()
            return True

    def pause(self) -> bool:
        """RUNNING -> PAUSED and stop the tick source. Returns False when there was nothing to pause."""
        with self._lock:
            paused = self._fsm.is_running() and self._fsm.transition(CoordinatorState.PAUSED, "pause")
            self._stop_ticking()
            return paused

    def toggle(self) -> CoordinatorState:
        """Flip RUNNING <-> PAUSED. Refused while IDLE. The check and the flip are one locked step."""
        with self._lock:
            current = self._fsm.current
            if current == CoordinatorState.IDLE:
                logger.warning("Toggle requested before start(); ignored")
            elif current == CoordinatorState.RUNNING:
                self.pause()
            else:
                self.resume()
            return self._fsm.current

    def close(self) -> None:
        """Teardown: pause and release the tick source."""
        self.pause()
        self._finalizer()

    def __enter__(self) -> "TrafficLightsCoordinator":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _start_ticking(self) -> None:
        self._tick_epoch += 1
        self._tick_source.start(self._make_tick_callback(self._tick_epoch))

    def _stop_ticking(self) -> None:
        # Never waits: the ticker thread may be blocked on self._lock, which the caller holds.
        self._tick_epoch += 1
        self._tick_source.stop(wait=False)

    # 3. Presenters

    def subscribe(self, presenter: Optional[Any]) -> None:
        """Subscribe presenter to the store and install its toggle_time callback."""
        if presenter is None:
            return
        self._store.subscribe(presenter)
        presenter.toggle_time = self._make_toggle()

    def unsubscribe(self, presenter: Optional[Any]) -> None:
        self._store.unsubscribe(presenter)

    def _make_toggle(self) -> Callable[..., None]:
        coordinator_ref = weakref.ref(self)

        def toggle_time(*_args: Any) -> None:
            coordinator = coordinator_ref()
            if coordinator is not None:
                coordinator.toggle()

        return toggle_time

    # 4. Cycle

    def _make_tick_callback(self, epoch: int) -> Callable[[], None]:
        coordinator_ref = weakref.ref(self)

        def on_tick() -> None:
            coordinator = coordinator_ref()
            if coordinator is not None:
                coordinator._on_tick(epoch)

        return on_tick

    def _on_tick(self, epoch: int) -> None:
        with self._lock:
            # A tick can race pause() or a restart; drop it unless it belongs to the live schedule.
            if epoch != self._tick_epoch or not self._fsm.is_running():
                return
            self.tick()

    def tick(self, first_time: bool = False) -> None:
        """
        One elapsed second. Not first: IncrementTime(cycle). Then, with an active position:
        elapsed == 0 (not first) -> next position green (active goes red);
        elapsed == cycle - amber -> active position amber; otherwise the colors hold.
        """
        with self._lock:
            n = self._metrics.inc_tick_count()
            if not first_time:
                self._dispatch(IncrementTime(cycle=self._config.cycle_duration))
            state = self._store.state
            active = state.active_position

            if active is None:
                self._on_all_red(state, first_time)
            else:
                self._all_red_reported = False
                if state.elapsed_time == 0 and not first_time:
                    self._metrics.inc_rollover_count()
                    self._change_color(active.next, Color.GREEN)
                elif state.elapsed_time == self._config.amber_start:
                    self._change_color(active, Color.AMBER)

            if self._metrics_log_every and n % self._metrics_log_every == 0:
                self._metrics.log_snapshot()

    def _on_all_red(self, state: SignalState, first_time: bool) -> None:
        """No active position: report once, count every tick, optionally recover at rollover."""
        self._metrics.inc_all_red_tick_count()
        if not self._all_red_reported:
            self._all_red_reported = True
            log_signal_state(state, level=logging.WARNING, extra={"reason": "all_red"}, log=logger)
            if self._config.all_red_recovery is None:
                logger.warning("All positions red; signal cycle halted until a position is set non-red")
        recovery: Optional[Position] = self._config.all_red_recovery
        if recovery is not None and state.elapsed_time == 0 and not first_time:
            logger.warning("All-red recovery: turning %s green", recovery.value)
            self._change_color(recovery, Color.GREEN)

    def _change_color(self, position: Position, color: Color) -> None:
        self._metrics.inc_color_change_count()
        new_state = self._dispatch(ChangeColor(position=position, new_color=color))
        log_signal_state(new_state, level=logging.DEBUG, extra={"changed": position.value}, log=logger)

    def _dispatch(self, action: Any) -> SignalState:
        self._metrics.inc_dispatch_count()
        return self._store.dispatch(action)
