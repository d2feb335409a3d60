"""
Configuration for LogManager instances.
"""

import dataclasses
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Union

from .errors import ConfigError

DEFAULT_MESSAGE_SIZE_LIMIT = 2000
DEFAULT_PROGRESS_LOG_EVERY = 1000


@dataclass(frozen=True)
class LogManagerConfig:
    """
    Settings shared by a LogManager and the agent notifier it builds.

    Attributes:
        message_size_limit: Maximum characters kept from a message (and from
            the rendered context data) before it is compacted with "..."
        agent_notifier: Name of the agent notifier backend to build
        progress_log_every: Iteration multiple at which progress is logged
            at info level instead of debug only
        notifier_options: Backend-specific settings (license keys, endpoints)
            passed through untouched to the agent notifier
    """

    message_size_limit: int = DEFAULT_MESSAGE_SIZE_LIMIT
    agent_notifier: str = "null"
    progress_log_every: int = DEFAULT_PROGRESS_LOG_EVERY
    notifier_options: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        for field_name in ('message_size_limit', 'progress_log_every'):
            value = getattr(self, field_name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ConfigError(f"{field_name} must be a positive integer, got {value!r}")

        if not isinstance(self.agent_notifier, str) or not self.agent_notifier:
            raise ConfigError(f"agent_notifier must be a non-empty string, got {self.agent_notifier!r}")

        if not isinstance(self.notifier_options, Mapping):
            raise ConfigError(f"notifier_options must be a mapping, got {self.notifier_options!r}")
        object.__setattr__(self, 'notifier_options', dict(self.notifier_options))

    @classmethod
    def build(
        cls,
        overrides: Optional[Union[Mapping[str, Any], 'LogManagerConfig']] = None
    ) -> 'LogManagerConfig':
        """
        Merge caller overrides into the defaults.

        Keys that are not LogManager settings are collected into
        `notifier_options`, on top of any `notifier_options` given explicitly,
        so agent backends can read their own settings.

        Args:
            overrides: Mapping of setting names to values, or an existing
                config (returned as is)

        Returns:
            The merged configuration

        Raises:
            ConfigError: If a known setting has an invalid value
        """
        if overrides is None:
            return cls()
        if isinstance(overrides, cls):
            return overrides

        known = {f.name for f in dataclasses.fields(cls)}
        settings = {key: value for key, value in overrides.items() if key in known}
        extras = {key: value for key, value in overrides.items() if key not in known}

        explicit = settings.get('notifier_options', {})
        if not isinstance(explicit, Mapping):
            raise ConfigError(f"notifier_options must be a mapping, got {explicit!r}")
        if extras:
            settings['notifier_options'] = {**explicit, **extras}

        return cls(**settings)

    def merge(self, overrides: Optional[Mapping[str, Any]] = None) -> 'LogManagerConfig':
        """Return a copy of this config with `overrides` applied."""
        if not overrides:
            return self
        return LogManagerConfig.build({**self.to_dict(), **overrides})

    def to_dict(self) -> dict:
        return dataclasses.asdict(self)
