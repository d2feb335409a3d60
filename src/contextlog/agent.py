"""
Agent notifiers: sinks for error and trace reports sent to a monitoring agent.

A LogManager never talks to a monitoring client directly. It asks
AgentNotifierFactory for a notifier matching its config and hands every
report to `notice_error`.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping, Optional, Type, Union

import structlog

from .config import LogManagerConfig
from .errors import ConfigError

logger = logging.getLogger(__name__)


class AgentNotifier(ABC):
    """
    Contract for monitoring-agent clients.

    `payload` is either a text message or an exception. Trace-only reports
    are advisory and must not count as hard errors on the agent side.
    """

    def __init__(self, config: Optional[LogManagerConfig] = None):
        self.config = config or LogManagerConfig()

    @abstractmethod
    def notice_error(
        self,
        payload: Union[str, BaseException, None],
        *,
        trace_only: bool = False,
        custom_params: Optional[Mapping[str, Any]] = None
    ) -> None:
        """
        Report an error or trace to the agent.

        Args:
            payload: Message text or exception being reported
            trace_only: True for advisory traces, False for full error reports
            custom_params: Context data attached to the report
        """


class NullAgentNotifier(AgentNotifier):
    """Discards every report. Used when no agent is configured."""

    def notice_error(self, payload, *, trace_only=False, custom_params=None) -> None:
        return None


class StructlogAgentNotifier(AgentNotifier):
    """
    Emits reports as structured log events.

    Useful when the monitoring agent ingests JSON logs: each report becomes
    one `agent_notice` event, logged at warning for traces and at error for
    full reports.
    """

    event_name = "agent_notice"

    def __init__(self, config: Optional[LogManagerConfig] = None, logger_name: str = "contextlog.agent"):
        super().__init__(config)
        self.logger = structlog.get_logger(logger_name)

    def notice_error(self, payload, *, trace_only=False, custom_params=None) -> None:
        fields: Dict[str, Any] = {
            'trace_only': trace_only,
            'custom_params': dict(custom_params or {}),
        }

        if isinstance(payload, BaseException):
            fields['error_class'] = type(payload).__name__
            fields['exc_info'] = payload
        else:
            fields['message'] = payload

        if trace_only:
            self.logger.warning(self.event_name, **fields)
        else:
            self.logger.error(self.event_name, **fields)


class AgentNotifierFactory:
    """
    Builds agent notifiers by name.

    Backends are looked up by `LogManagerConfig.agent_notifier`. Applications
    wrapping a real monitoring client register it once at startup:

        AgentNotifierFactory.register("apm", ApmAgentNotifier)
    """

    _registry: Dict[str, Type[AgentNotifier]] = {
        'null': NullAgentNotifier,
        'structlog': StructlogAgentNotifier,
    }

    @classmethod
    def register(cls, name: str, notifier_class: Type[AgentNotifier]) -> None:
        """
        Register a notifier backend.

        Args:
            name: Backend name used in config
            notifier_class: AgentNotifier subclass accepting the config as
                its only constructor argument
        """
        if not (isinstance(notifier_class, type) and issubclass(notifier_class, AgentNotifier)):
            raise ConfigError(f"{notifier_class!r} is not an AgentNotifier subclass")

        cls._registry[name] = notifier_class

    @classmethod
    def unregister(cls, name: str) -> None:
        cls._registry.pop(name, None)

    @classmethod
    def available(cls):
        return sorted(cls._registry)

    @classmethod
    def build(cls, config: Optional[LogManagerConfig] = None) -> AgentNotifier:
        """
        Build the notifier selected by `config.agent_notifier`.

        Raises:
            ConfigError: If no backend is registered under that name
        """
        config = config or LogManagerConfig()
        try:
            notifier_class = cls._registry[config.agent_notifier]
        except KeyError:
            raise ConfigError(
                f"Unknown agent notifier '{config.agent_notifier}' "
                f"(available: {', '.join(cls.available())})"
            ) from None

        logger.debug(f"Building agent notifier {notifier_class.__name__}")
        return notifier_class(config)
