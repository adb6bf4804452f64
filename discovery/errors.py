"""Exceptions raised by the discovery engine."""


class DiscoveryError(Exception):
    """Base class for discovery engine errors."""


class PhaseTransitionError(DiscoveryError):
    """Raised when a session is asked to move to a phase it cannot reach."""

    def __init__(self, current, target=None, reason: str = ""):
        self.current = current
        self.target = target
        message = f"Cannot advance from {current.name}"
        if target is not None:
            message += f" to {target.name}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
