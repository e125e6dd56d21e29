"""Exception types raised by the signal controller."""


class IntersectionError(Exception):
    """Base class for controller errors."""


class InvalidConfigError(IntersectionError, ValueError):
    """Coordinator config violates a construction-time rule. Carries the rule text."""

    def __init__(self, rule: str):
        super().__init__(rule)
        self.rule = rule


class CoordinatorError(IntersectionError, RuntimeError):
    """Coordinator lifecycle misuse (e.g. start() called twice)."""
