"""
LogManager: a base logger wrapped with context data and agent reporting.

Every line written through a LogManager ends with the manager's context
data, both halves compacted to the configured message size limit. Errors
and, on request, info/debug lines are also reported to a monitoring agent
through an AgentNotifier.

A LogManager is not thread-safe. Callers sharing one across threads must
synchronise access to its context data themselves.
"""

import logging
from contextlib import contextmanager
from functools import partial
from typing import Any, Callable, Dict, Iterator, Mapping, Optional, Union

from .agent import AgentNotifier, AgentNotifierFactory
from .config import LogManagerConfig
from .formatting import (
    BACKTRACE_SEPARATOR,
    compact,
    exception_backtrace,
    exception_message,
    render_data,
    resolve_message,
)
from .progress import ProgressEvent, ProgressTracker, parse_progress_method

Producer = Callable[[], Any]
ConfigLike = Union[Mapping[str, Any], LogManagerConfig, None]


class LogManager:
    """
    Contextual logger.

    Usage:
        log = LogManager({'account_id': 42}, logger=logging.getLogger("billing"))
        log.info("invoice sent")
        # -> "invoice sent. Data: account_id: 42"

        log.rows_start(total=5000)
        for row in rows:
            log.rows_iteration()
        log.rows_finish()
    """

    def __init__(
        self,
        data: Optional[Dict[str, Any]] = None,
        *,
        logger: Any,
        config: ConfigLike = None,
        agent_notifier: Optional[AgentNotifier] = None
    ):
        """
        Initialize log manager.

        Args:
            data: Initial context data (a new empty dict when omitted)
            logger: Base logger providing info/debug/error and isEnabledFor
            config: Config overrides merged into the defaults
            agent_notifier: Notifier to use instead of building one from config
        """
        if logger is None:
            raise ValueError("LogManager requires a base logger")

        self.data: Dict[str, Any] = data if data is not None else {}
        self.logger = logger
        self.config = LogManagerConfig.build(config)
        self.agent_notifier = agent_notifier or AgentNotifierFactory.build(self.config)

    @classmethod
    def merged(
        cls,
        data: Dict[str, Any],
        other: Optional['LogManager'],
        *,
        logger: Any,
        config: ConfigLike = None
    ) -> 'LogManager':
        """Build a manager from `data` and merge `other` into it."""
        return cls(data, logger=logger, config=config).merge(other)

    def merge(self, other: Optional['LogManager']) -> 'LogManager':
        """
        Merge another manager's context data into this one.

        Keys present in both take the other manager's value.

        Returns:
            self
        """
        if other is None:
            return self

        self.data = {**self.data, **other.data}
        return self

    def info(
        self,
        text: Optional[Any] = None,
        *,
        producer: Optional[Producer] = None,
        notify_agent: bool = False
    ) -> None:
        """
        Log `text` at info level with the context data appended.

        Args:
            text: Message
            producer: Zero-argument callable producing the message
            notify_agent: Also send the message to the agent as a trace
        """
        text = self._produce(text, producer)

        if notify_agent:
            self.agent_notifier.notice_error(text, trace_only=True, custom_params=dict(self.data))

        self.logger.info(self.format_for_log(text))

    def debug(
        self,
        text: Optional[Any] = None,
        *,
        producer: Optional[Producer] = None,
        notify_agent: bool = False
    ) -> None:
        """Like info(), but does nothing at all while debug is disabled."""
        if not self.is_debug_enabled():
            return

        text = self._produce(text, producer)

        if notify_agent:
            self.agent_notifier.notice_error(text, trace_only=True, custom_params=dict(self.data))

        self.logger.debug(self.format_for_log(text))

    def is_debug_enabled(self) -> bool:
        return self.logger.isEnabledFor(logging.DEBUG)

    def is_error_enabled(self) -> bool:
        return self.logger.isEnabledFor(logging.ERROR)

    def error(
        self,
        progname: Optional[str] = None,
        *,
        exception: Optional[BaseException] = None,
        message: Optional[str] = None,
        suppress_notification: bool = False,
        custom_params: Optional[Mapping[str, Any]] = None,
        producer: Optional[Producer] = None
    ) -> None:
        """
        Log an error and report it to the agent.

        The message is the producer's result, else `message`, else the
        exception's message, else `progname`.

        Args:
            progname: Fallback message
            exception: Exception being reported; its class and backtrace are
                included in the log line
            message: Explicit message
            suppress_notification: Log only, do not report to the agent
            custom_params: Data sent to the agent instead of the context data
            producer: Zero-argument callable producing the message
        """
        if not self.is_error_enabled():
            return

        message = resolve_message(progname, exception=exception, message=message, producer=producer)

        self.logger.error(self._format_error(exception, message))

        if suppress_notification:
            return

        self.notify_agent(
            progname,
            exception=exception,
            message=message,
            custom_params=custom_params
        )

    def notify_agent(
        self,
        progname: Optional[str] = None,
        *,
        exception: Optional[BaseException] = None,
        message: Optional[str] = None,
        custom_params: Optional[Mapping[str, Any]] = None,
        trace_only: bool = False,
        producer: Optional[Producer] = None
    ) -> None:
        """
        Send a report to the agent.

        The exception is sent when given; otherwise the message resolved the
        same way error() resolves it. Reports carry `custom_params`, or a
        copy of the context data when none are given.
        """
        params: Dict[str, Any] = {
            'custom_params': custom_params if custom_params is not None else dict(self.data)
        }
        if trace_only:
            params['trace_only'] = True

        if exception is not None:
            self.agent_notifier.notice_error(exception, **params)
        else:
            message = resolve_message(progname, message=message, producer=producer)
            self.agent_notifier.notice_error(message, **params)

    def error_on_agent(
        self,
        progname: Optional[str] = None,
        *,
        exception: Optional[BaseException] = None,
        message: Optional[str] = None,
        custom_params: Optional[Mapping[str, Any]] = None,
        producer: Optional[Producer] = None
    ) -> None:
        """Report an error to the agent without logging it, as a trace."""
        self.notify_agent(
            progname,
            exception=exception,
            message=message,
            custom_params=custom_params,
            trace_only=True,
            producer=producer
        )

    def trace_on_agent(
        self,
        progname: Optional[str] = None,
        *,
        exception: Optional[BaseException] = None,
        message: Optional[str] = None,
        custom_params: Optional[Mapping[str, Any]] = None,
        producer: Optional[Producer] = None
    ) -> None:
        self.notify_agent(
            progname,
            exception=exception,
            message=message,
            custom_params=custom_params,
            trace_only=True,
            producer=producer
        )

    def progress_tracker(self, name: str) -> ProgressTracker:
        return ProgressTracker(name, self)

    def start_progress(self, name: str, total: Optional[Any] = None) -> None:
        self.progress_tracker(name).start(total=total)

    def record_iteration(self, name: str) -> None:
        self.progress_tracker(name).iteration()

    def finish_progress(self, name: str) -> None:
        self.progress_tracker(name).finish()

    @contextmanager
    def progress(self, name: str, total: Optional[Any] = None) -> Iterator[ProgressTracker]:
        """
        Start a counter for the duration of a block.

        Usage:
            with log.progress("rows", total=len(rows)) as tracker:
                for row in rows:
                    tracker.iteration()
        """
        tracker = self.progress_tracker(name)
        tracker.start(total=total)
        with tracker:
            yield tracker

    def supports_method(self, method_name: str) -> bool:
        """True for real attributes and for `<name>_start/_iteration/_finish`."""
        return hasattr(self, method_name)

    def __getattr__(self, method_name: str):
        # Only reached for attributes missing through normal lookup.
        if method_name.startswith('_'):
            raise AttributeError(method_name)

        parsed = parse_progress_method(method_name)
        if parsed is None:
            raise AttributeError(
                f"'{type(self).__name__}' object has no attribute '{method_name}'"
            )

        name, event = parsed
        return partial(self._progress_event, name, event)

    def _progress_event(self, name: str, event: ProgressEvent, total: Optional[Any] = None) -> None:
        self.progress_tracker(name).handle(event, total=total)

    def string(self) -> str:
        """Context data as "key: value" pairs."""
        return render_data(self.data)

    def __str__(self) -> str:
        return self.string()

    def format_for_log(self, text: Any) -> str:
        return f"{self.compact(text)}. Data: {self.compact(self.string())}"

    def compact(self, msg: Any) -> str:
        return compact(msg, self.config.message_size_limit)

    def _format_error(self, exception: Optional[BaseException], message: Optional[str]) -> str:
        if message is None:
            message = exception_message(exception)

        parts = []
        if exception is not None:
            parts.append(f"Exception: {type(exception).__name__}. ")
        parts.append(f"Message: {self.format_for_log(message)}. ")
        if exception is not None:
            parts.append(f"Backtrace: {BACKTRACE_SEPARATOR.join(exception_backtrace(exception))}")

        return "".join(parts)

    @staticmethod
    def _produce(text, producer: Optional[Producer]):
        if producer is not None:
            return producer()
        return text

    def __repr__(self) -> str:
        return f"LogManager(data={self.data!r}, config={self.config!r})"
