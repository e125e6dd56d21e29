"""Pytest fixtures for intersection signal controller tests."""

import sys
from pathlib import Path
from typing import Callable, List, Optional

import pytest
import yaml

# Ensure project root is in path for intersection imports
_project_root = Path(__file__).resolve().parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from intersection.config.settings import EXAMPLE_CONFIG_PATH, CoordinatorConfig  # noqa: E402
from intersection.core.state.enums import Color, Position  # noqa: E402
from intersection.engine.ticker import TickSource  # noqa: E402


class RecordingPresenter:
    """Presenter stub: keeps every presented state; toggle_time set by the coordinator."""

    def __init__(self):
        self.states: List = []
        self.toggle_time: Optional[Callable[[], None]] = None

    @property
    def last_state(self):
        return self.states[-1] if self.states else None

    def present(self, state) -> None:
        self.states.append(state)


class ManualTickSource(TickSource):
    """Tick source driven by the test: fire() calls the registered callback. The coordinator's
    callback refers to the coordinator weakly, so coordinators can still be collected while "running"."""

    def __init__(self):
        self._callback: Optional[Callable[[], None]] = None
        self.start_count = 0
        self.stop_count = 0

    @property
    def callback(self) -> Optional[Callable[[], None]]:
        return self._callback

    @property
    def is_active(self) -> bool:
        return self.callback is not None

    def start(self, callback: Callable[[], None]) -> None:
        self.start_count += 1
        self._callback = callback

    def stop(self, wait: bool = True) -> None:
        self.stop_count += 1
        self._callback = None

    def fire(self, n: int = 1) -> None:
        for _ in range(n):
            callback = self.callback
            if callback is not None:
                callback()


@pytest.fixture
def project_root() -> Path:
    return _project_root


@pytest.fixture
def config_path(project_root: Path) -> Path:
    """Path to config file. Prefers config/config.yaml, falls back to the packaged example."""
    cfg = project_root / "config" / "config.yaml"
    if cfg.exists():
        return cfg
    return EXAMPLE_CONFIG_PATH


@pytest.fixture
def config(config_path: Path) -> dict:
    """Load config dict from YAML."""
    with open(config_path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


@pytest.fixture
def presenter() -> RecordingPresenter:
    return RecordingPresenter()


@pytest.fixture
def presenter_factory() -> Callable[[], RecordingPresenter]:
    return RecordingPresenter


@pytest.fixture
def tick_source() -> ManualTickSource:
    return ManualTickSource()


@pytest.fixture
def make_config() -> Callable[..., CoordinatorConfig]:
    """Factory: make_config(amber, cycle, {east: .., north: ..}, elapsed)."""

    def _make(amber=5, cycle=30, signals=None, elapsed=0, all_red_recovery=None) -> CoordinatorConfig:
        if signals is None:
            signals = {Position.EAST: Color.RED, Position.NORTH: Color.GREEN}
        return CoordinatorConfig(
            amber_duration=amber,
            cycle_duration=cycle,
            initial_signals=signals,
            initial_elapsed_time=elapsed,
            all_red_recovery=all_red_recovery,
        )

    return _make
