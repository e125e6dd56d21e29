"""Presenter that writes each state to the log (headless runs, the runner script)."""

import logging
from typing import Optional

from intersection.core.logging_utils import log_signal_state
from intersection.core.state.snapshot import SignalState
from intersection.presenters.base import SignalPresenter

logger = logging.getLogger(__name__)


class LoggingPresenter(SignalPresenter):
    """Logs every presented state; with only_changes, skips states whose colors did not change."""

    def __init__(self, level: int = logging.INFO, only_changes: bool = False, log: Optional[logging.Logger] = None):
        self._level = level
        self._only_changes = only_changes
        self._log = log or logger
        self._last: Optional[SignalState] = None
        self.presented_count = 0

    @property
    def last_state(self) -> Optional[SignalState]:
        return self._last

    def present(self, state: SignalState) -> None:
        changed = self._last is None or dict(self._last.signals) != dict(state.signals)
        self._last = state
        self.presented_count += 1
        if self._only_changes and not changed:
            return
        log_signal_state(state, level=self._level, log=self._log)
