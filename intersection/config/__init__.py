"""Coordinator configuration and YAML loading."""

from intersection.config.settings import (
    CoordinatorConfig,
    coordinator_config_from_dict,
    get_logging_config,
    load_config,
    read_config,
    validate_config,
)

__all__ = [
    "CoordinatorConfig",
    "coordinator_config_from_dict",
    "get_logging_config",
    "load_config",
    "read_config",
    "validate_config",
]
