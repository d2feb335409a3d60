"""
Message formatting helpers: compaction, context rendering and exception text.
"""

import traceback
from types import TracebackType
from typing import Any, Callable, List, Mapping, Optional

BACKTRACE_SEPARATOR = " | "
ELLIPSIS = "..."


def compact(msg: Any, limit: int) -> str:
    """
    Shorten a message that is longer than `limit` characters.

    The result keeps the first `limit` characters and the last `limit`
    characters joined with "...". Messages shorter than twice the limit
    therefore repeat their middle part in both halves.

    Args:
        msg: Message to compact (rendered with str() if not a string)
        limit: Number of characters kept from each end

    Returns:
        The message, unchanged when it fits within the limit
    """
    text = as_text(msg)
    size = len(text)
    if size <= limit:
        return text

    return f"{text[:limit]}{ELLIPSIS}{text[size - limit:]}"


def as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


def render_data(data: Mapping[str, Any]) -> str:
    """Render context data as "key: repr(value)" pairs in insertion order."""
    return ", ".join(f"{key}: {value!r}" for key, value in data.items())


def exception_message(exception: Any) -> Optional[str]:
    """
    Extract a readable message from an exception or exception-like object.

    A non-empty string `message` attribute wins over str(). Falls back to
    repr() when neither yields text, and returns None when there is no
    exception at all.
    """
    if exception is None:
        return None

    message = getattr(exception, 'message', None)
    if not isinstance(message, str) or not message:
        message = str(exception)
    if message:
        return message
    return repr(exception)


def exception_backtrace(exception: Any) -> List[str]:
    """
    Return the exception's traceback frames as "file:line in function" strings.

    Accepts exception-like objects: a `__traceback__` traceback is used when
    present, otherwise a `backtrace` list of frame strings.
    """
    if exception is None:
        return []

    tb = getattr(exception, '__traceback__', None)
    if isinstance(tb, TracebackType):
        return [
            f"{frame.filename}:{frame.lineno} in {frame.name}"
            for frame in traceback.extract_tb(tb)
        ]

    backtrace = getattr(exception, 'backtrace', None)
    if isinstance(backtrace, (list, tuple)):
        return [str(frame) for frame in backtrace]
    return []


def resolve_message(
    progname: Optional[str] = None,
    exception: Optional[BaseException] = None,
    message: Optional[str] = None,
    producer: Optional[Callable[[], Any]] = None
) -> Optional[str]:
    """
    Pick the message for an error report.

    Priority: the producer's result, then `message`, then the exception's
    message, then `progname`.
    """
    if producer is not None:
        produced = producer()
        if produced is not None:
            return produced

    if message is not None:
        return message

    exception_msg = exception_message(exception)
    if exception_msg is not None:
        return exception_msg

    return progname
