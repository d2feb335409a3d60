"""
Base logger setup for applications embedding LogManager.

Configures structlog over stdlib logging with a single stream handler and
returns a logger that satisfies LogManager's base logger contract
(info/debug/error plus isEnabledFor). Where log lines end up afterwards is
the application's business.
"""

import logging
import sys
from typing import Any, Callable, List, Optional, TextIO

import structlog


def configure_logging(
    level: str = "INFO",
    json_output: bool = False,
    stream: Optional[TextIO] = None,
    processors: Optional[List[Callable]] = None,
    logger_name: Optional[str] = None
) -> Any:
    """
    Set up structlog and return a base logger for LogManager.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: Render each entry as one JSON object per line
        stream: Stream written to (stderr when omitted)
        processors: Additional processors, run before the built-in ones
        logger_name: Name of the returned logger

    Returns:
        Configured structlog logger
    """
    numeric_level = getattr(logging, level.upper())

    processor_chain = list(processors or [])
    processor_chain.extend([
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ])

    if json_output:
        processor_chain.append(structlog.processors.format_exc_info)
        processor_chain.append(structlog.processors.JSONRenderer())
    else:
        processor_chain.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processor_chain,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    root_logger = logging.getLogger()
    _remove_handlers(root_logger)
    root_logger.setLevel(numeric_level)

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setLevel(numeric_level)
    handler.setFormatter(logging.Formatter('%(message)s'))
    root_logger.addHandler(handler)

    return structlog.get_logger(logger_name)


def reset_logging() -> None:
    """Undo configure_logging(): structlog defaults, no root handlers, WARNING level."""
    structlog.reset_defaults()

    root_logger = logging.getLogger()
    _remove_handlers(root_logger)
    root_logger.setLevel(logging.WARNING)


def _remove_handlers(logger: logging.Logger) -> None:
    for handler in logger.handlers[:]:
        handler.close()
        logger.removeHandler(handler)
