"""SignalPresenter abstract interface: receives every SignalState the store publishes."""

from abc import ABC, abstractmethod
from typing import Callable, Optional

from intersection.core.state.snapshot import SignalState


class SignalPresenter(ABC):
    """Presenter contract consumed by the coordinator.

    present(state) is called synchronously on every state change and once on subscribe.
    toggle_time is set by the coordinator on subscribe; the UI calls it to pause/resume.
    Any object with a present(state) method and a toggle_time attribute works; subclassing is optional.
    """

    toggle_time: Optional[Callable[[], None]] = None

    @abstractmethod
    def present(self, state: SignalState) -> None:
        ...

    def request_toggle(self) -> bool:
        """Invoke toggle_time if the coordinator installed one. Returns True if invoked."""
        if self.toggle_time is None:
            return False
        self.toggle_time()
        return True
