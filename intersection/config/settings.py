"""Coordinator config: CoordinatorConfig value, validation rules, YAML loading.

Defaults: loaded from the packaged intersection/config/config.yaml.example (single source of truth, no code-level defaults).
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

import yaml

from intersection.core.state.enums import Color, Position, coerce_enum
from intersection.core.state.snapshot import non_red_positions
from intersection.errors import InvalidConfigError

logger = logging.getLogger(__name__)

# Shipped inside the package so installed copies find their defaults.
EXAMPLE_CONFIG_PATH = Path(__file__).resolve().parent / "config.yaml.example"
# User config, relative to the working directory.
DEFAULT_CONFIG_PATH = Path("config") / "config.yaml"
CONFIG_ENV_VAR = "INTERSECTION_CONFIG"

# Lazy-loaded example config (single source of truth for defaults)
_EXAMPLE_CONFIG: Optional[Dict[str, Any]] = None


@dataclass(frozen=True)
class CoordinatorConfig:
    """Immutable coordinator input. Validated by validate_config at coordinator construction."""

    amber_duration: int
    cycle_duration: int
    initial_signals: Mapping[Position, Color]
    initial_elapsed_time: int = 0
    all_red_recovery: Optional[Position] = None

    def __post_init__(self):
        signals = {coerce_enum(Position, k): coerce_enum(Color, v) for k, v in self.initial_signals.items()}
        object.__setattr__(self, "initial_signals", MappingProxyType(signals))
        if self.all_red_recovery is not None:
            object.__setattr__(self, "all_red_recovery", coerce_enum(Position, self.all_red_recovery))

    @property
    def amber_start(self) -> int:
        """Elapsed second at which the active position turns amber."""
        return self.cycle_duration - self.amber_duration


def validate_config(config: CoordinatorConfig) -> None:
    """Raise InvalidConfigError naming the first violated rule."""
    if config.cycle_duration <= 0:
        raise InvalidConfigError("Must provide a non-zero cycle length.")
    if config.amber_duration < 0:
        raise InvalidConfigError("Amber duration must not be negative.")
    if config.amber_duration >= config.cycle_duration:
        raise InvalidConfigError(
            "Must provide an amber duration that is less than the total cycle."
        )
    if config.initial_elapsed_time < 0:
        raise InvalidConfigError("Initial elapsed time must not be negative.")
    positions = set(config.initial_signals)
    if positions != set(Position):
        raise InvalidConfigError(
            "Initial signals must name exactly the positions "
            f"{sorted(p.value for p in Position)}; got {sorted(str(getattr(p, 'value', p)) for p in positions)}."
        )
    unknown_colors = [c for c in config.initial_signals.values() if not isinstance(c, Color)]
    if unknown_colors:
        raise InvalidConfigError(f"Unknown initial colors: {unknown_colors!r}.")
    if config.all_red_recovery is not None and not isinstance(config.all_red_recovery, Position):
        raise InvalidConfigError(f"Unknown all_red_recovery position {config.all_red_recovery!r}.")
    if len(non_red_positions(config.initial_signals)) > 1:
        raise InvalidConfigError(
            "Illegal initial configuration. Only a maximum of 1 light can be non-red."
        )


def _load_example_config() -> Dict[str, Any]:
    """Load config.yaml.example as defaults. No code-level defaults."""
    global _EXAMPLE_CONFIG
    if _EXAMPLE_CONFIG is None:
        with open(EXAMPLE_CONFIG_PATH, encoding="utf-8") as f:
            _EXAMPLE_CONFIG = yaml.safe_load(f) or {}
    return _EXAMPLE_CONFIG


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Merge override into base. Override values take precedence."""
    out = dict(base)
    for k, v in override.items():
        if k in out and isinstance(out[k], dict) and isinstance(v, dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out


def _merged_config(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """Merge config with example so missing keys come from config file."""
    return _deep_merge(_load_example_config(), cfg)


def read_config(config_path: Optional[str] = None) -> Tuple[Dict[str, Any], str]:
    """Load YAML config. Path: argument, else $INTERSECTION_CONFIG, else ./config/config.yaml,
    else the packaged example file. Returns (config, resolved_path)."""
    path = config_path or os.environ.get(CONFIG_ENV_VAR) or str(DEFAULT_CONFIG_PATH)
    if not Path(path).exists():
        logger.warning("Config file not found: %s; using %s", path, EXAMPLE_CONFIG_PATH)
        path = str(EXAMPLE_CONFIG_PATH)
    path = str(Path(path).resolve())
    with open(path, "r", encoding="utf-8") as f:
        config = yaml.safe_load(f) or {}
    return config, path


def get_logging_config(config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return logging section (level, metrics_every_ticks)."""
    merged = _merged_config(config or {})
    return dict(merged.get("logging") or {})


def _parse_enum(enum_cls, value: Any, what: str):
    try:
        return enum_cls(str(getattr(value, "value", value)).strip().lower())
    except ValueError:
        allowed = [m.value for m in enum_cls]
        raise InvalidConfigError(f"Unknown {what} {value!r}; expected one of {allowed}.") from None


def _parse_int(value: Any, what: str) -> int:
    if isinstance(value, bool):
        raise InvalidConfigError(f"{what} must be an integer number of seconds, got {value!r}.")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidConfigError(
            f"{what} must be an integer number of seconds, got {value!r}."
        ) from None


def coordinator_config_from_dict(config: Optional[Dict[str, Any]] = None) -> CoordinatorConfig:
    """
    Build CoordinatorConfig from the `intersection` section (missing keys from config.yaml.example).
    Raises InvalidConfigError for unknown position/color names or non-integer durations.
    Rule validation (cycle > 0, amber < cycle, mutual exclusion) happens at coordinator construction.
    """
    merged = _merged_config(config or {})
    section = merged.get("intersection") or {}

    # initial_signals replaces the example mapping instead of merging into it; positions the
    # user leaves out are red.
    user_section = (config or {}).get("intersection") or {}
    raw_signals = user_section.get("initial_signals", section.get("initial_signals")) or {}
    if not isinstance(raw_signals, dict):
        raise InvalidConfigError(f"initial_signals must be a mapping, got {raw_signals!r}.")
    signals = {p: Color.RED for p in Position}
    for k, v in raw_signals.items():
        signals[_parse_enum(Position, k, "position")] = _parse_enum(Color, v, "color")

    recovery = section.get("all_red_recovery")
    all_red_recovery = _parse_enum(Position, recovery, "position") if recovery else None

    return CoordinatorConfig(
        amber_duration=_parse_int(section.get("amber_duration"), "amber_duration"),
        cycle_duration=_parse_int(section.get("cycle_duration"), "cycle_duration"),
        initial_signals=signals,
        initial_elapsed_time=_parse_int(section.get("initial_elapsed_time", 0), "initial_elapsed_time"),
        all_red_recovery=all_red_recovery,
    )


def load_config(config_path: Optional[str] = None) -> CoordinatorConfig:
    """read_config + coordinator_config_from_dict."""
    config, path = read_config(config_path)
    out = coordinator_config_from_dict(config)
    logger.info(
        "Config loaded from %s: amber=%ds cycle=%ds initial=%s elapsed=%ds",
        path,
        out.amber_duration,
        out.cycle_duration,
        {p.value: c.value for p, c in out.initial_signals.items()},
        out.initial_elapsed_time,
    )
    return out
