"""
Exception hierarchy for contextlog.
"""


class ContextLogError(Exception):
    """Base class for all contextlog errors."""


class ConfigError(ContextLogError, ValueError):
    """Raised for unknown or invalid configuration values."""


class ProgressError(ContextLogError):
    """Raised when a progress counter is driven out of order."""

    def __init__(self, name: str, event: str, message: str):
        self.name = name
        self.event = event
        super().__init__(message)


class PrecociousProgressEvent(ProgressError):
    """An iteration or finish arrived for a counter that is not running."""

    def __init__(self, name: str, event: str):
        super().__init__(
            name,
            event,
            f"Progress '{name}' received '{event}' before '{name}_start'"
        )
