#!/usr/bin/env python3
"""Entry point: run the intersection signal controller with a logging presenter.

Usage: run_intersection.py [config.yaml] [--debug]
SIGUSR1 toggles pause/resume (same path as a presenter's toggle control); Ctrl-C stops.
"""

import logging
import os
import signal
import sys
import threading

# Project root: always resolve relative to script location, not cwd
_PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, _PROJECT_ROOT)

# ANSI color codes
_RESET = "\033[0m"
_BOLD = "\033[1m"
_GRAY = "\033[90m"
_YELLOW = "\033[33m"
_RED = "\033[31m"
_CYAN = "\033[36m"

_LEVEL_COLORS = {
    logging.DEBUG: _GRAY,
    logging.INFO: _CYAN,
    logging.WARNING: _YELLOW,
    logging.ERROR: _RED + _BOLD,
    logging.CRITICAL: _RED + _BOLD,
}


class ColoredFormatter(logging.Formatter):
    """Formatter that adds colors per log level."""

    def format(self, record: logging.LogRecord) -> str:
        color = _LEVEL_COLORS.get(record.levelno, _RESET)
        record.levelname = f"{color}[{record.levelname}]{_RESET}"
        return super().format(record)


def setup_logging(level: str = "INFO", debug: bool = False) -> None:
    """Configure colorful logging with distinct styles per level."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        ColoredFormatter(
            fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    logging.root.handlers.clear()
    logging.root.addHandler(handler)
    numeric = logging.DEBUG if debug else getattr(logging, str(level).upper(), logging.INFO)
    logging.root.setLevel(numeric)


def run(config_path=None, debug: bool = False) -> int:
    from intersection.config.settings import coordinator_config_from_dict, get_logging_config, read_config
    from intersection.core.metrics import get_metrics
    from intersection.engine.coordinator import TrafficLightsCoordinator
    from intersection.errors import InvalidConfigError
    from intersection.presenters.logging_presenter import LoggingPresenter

    raw, path = read_config(config_path)
    log_cfg = get_logging_config(raw)
    setup_logging(log_cfg.get("level", "INFO"), debug=debug)
    logger = logging.getLogger("run_intersection")

    try:
        config = coordinator_config_from_dict(raw)
    except InvalidConfigError as e:
        logger.error("Config %s rejected: %s", path, e.rule)
        return 2
    coordinator = TrafficLightsCoordinator.create(
        config,
        metrics=get_metrics(),
        metrics_log_every=int(log_cfg.get("metrics_every_ticks") or 0),
    )
    if coordinator is None:
        logger.error("Config %s rejected; fix it and restart", path)
        return 2

    presenter = LoggingPresenter(only_changes=not debug)
    stop = threading.Event()

    def _on_stop(signum, frame):
        logger.info("Signal %s received; stopping", signum)
        stop.set()

    def _on_toggle(signum, frame):
        presenter.request_toggle()
        logger.info("Coordinator %s", coordinator.lifecycle.value)

    signal.signal(signal.SIGINT, _on_stop)
    signal.signal(signal.SIGTERM, _on_stop)
    if hasattr(signal, "SIGUSR1"):
        signal.signal(signal.SIGUSR1, _on_toggle)

    with coordinator:
        coordinator.subscribe(presenter)
        coordinator.start()
        logger.info("Intersection running from %s (pid=%s)", path, os.getpid())
        while not stop.wait(0.5):
            pass
        coordinator.unsubscribe(presenter)
        coordinator.metrics.log_snapshot()
    return 0


if __name__ == "__main__":
    args = [a for a in sys.argv[1:] if not a.startswith("--")]
    config_path = args[0] if args else None
    if config_path and not os.path.isabs(config_path):
        config_path = os.path.join(os.getcwd(), config_path)
    sys.exit(run(config_path, debug="--debug" in sys.argv))
