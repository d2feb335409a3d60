"""
Progress tracking stored in a LogManager's context data.

A counter named `job` lives in three context keys:

    job        -- number of iterations recorded so far
    job_timer  -- UTC start time while running, "<elapsed> secs" once finished
    job_total  -- optional target used to log a completion percentage

Because the state is ordinary context data, every log line written while a
counter runs carries its current count.
"""

import re
from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional, Tuple

from .errors import PrecociousProgressEvent

if TYPE_CHECKING:
    from .manager import LogManager

PROGRESS_METHOD_PATTERN = re.compile(r"(?P<name>.+)_(?P<event>start|iteration|finish)")


class ProgressEvent(str, Enum):
    START = "start"
    ITERATION = "iteration"
    FINISH = "finish"


def parse_progress_method(method_name: str) -> Optional[Tuple[str, ProgressEvent]]:
    """
    Split a dynamic progress method name into counter name and event.

    >>> parse_progress_method("import_rows_iteration")
    ('import_rows', <ProgressEvent.ITERATION: 'iteration'>)
    >>> parse_progress_method("import_rows") is None
    True
    """
    match = PROGRESS_METHOD_PATTERN.fullmatch(method_name)
    if match is None:
        return None
    return match.group('name'), ProgressEvent(match.group('event'))


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ProgressTracker:
    """
    Drives one named counter through start, iteration and finish.

    The tracker holds no state of its own; it reads and writes the manager's
    context data, so any number of trackers for the same name agree.
    """

    def __init__(self, name: str, manager: 'LogManager'):
        """
        Initialize progress tracker.

        Args:
            name: Counter name, used as the context data key
            manager: LogManager whose data holds the counter and which
                receives the progress log lines
        """
        self.name = name
        self.manager = manager

    @property
    def timer_key(self) -> str:
        return f"{self.name}_timer"

    @property
    def total_key(self) -> str:
        return f"{self.name}_total"

    @property
    def current(self) -> Optional[int]:
        return self.manager.data.get(self.name)

    @property
    def total(self) -> Optional[Any]:
        return self.manager.data.get(self.total_key)

    @property
    def percentage(self) -> Optional[float]:
        """Completion percentage, or None without a usable total."""
        total = self.total
        if not total or self.current is None:
            return None
        return (float(self.current) * 100) / float(total)

    def is_running(self) -> bool:
        """A counter runs from its start until its finish."""
        return isinstance(self.manager.data.get(self.timer_key), datetime)

    def handle(self, event: ProgressEvent, total: Optional[Any] = None) -> None:
        if event is ProgressEvent.START:
            self.start(total=total)
        elif event is ProgressEvent.ITERATION:
            self.iteration()
        else:
            self.finish()

    def start(self, total: Optional[Any] = None) -> None:
        """Reset the counter, start its timer and record the optional total."""
        data = self.manager.data
        data[self.name] = 0
        data[self.timer_key] = utcnow()
        if total is not None:
            data[self.total_key] = total
        else:
            data.pop(self.total_key, None)

        self.manager.info(self._event_line(ProgressEvent.START))

    def iteration(self) -> None:
        """
        Count one iteration.

        Every iteration is logged at debug level. Each time the count reaches
        a multiple of `progress_log_every` it is also logged at info level,
        along with the completion percentage when a total is known.
        """
        self._ensure_running(ProgressEvent.ITERATION)

        data = self.manager.data
        data[self.name] += 1
        milestone = data[self.name] % self.manager.config.progress_log_every == 0

        percentage = self.percentage
        if percentage is not None:
            percent_line = f"{self.name}_percent: {percentage}%"
            if milestone:
                self.manager.info(percent_line)
            self.manager.debug(percent_line)

        iteration_line = self._event_line(ProgressEvent.ITERATION)
        if milestone:
            self.manager.info(iteration_line)
        self.manager.debug(iteration_line)

    def finish(self) -> None:
        """Replace the start time with the elapsed seconds and log the finish."""
        self._ensure_running(ProgressEvent.FINISH)

        data = self.manager.data
        elapsed = (utcnow() - data[self.timer_key]).total_seconds()
        data[self.timer_key] = f"{elapsed} secs"

        self.manager.info(self._event_line(ProgressEvent.FINISH))

    def _ensure_running(self, event: ProgressEvent) -> None:
        if not self.is_running() or not isinstance(self.current, int):
            raise PrecociousProgressEvent(self.name, event.value)

    def _event_line(self, event: ProgressEvent) -> str:
        return f"{self.name}_{event.value}"

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Finish the counter unless the block raised."""
        if exc_type is None and self.is_running():
            self.finish()
        return False

    def __repr__(self) -> str:
        return f"ProgressTracker(name={self.name!r}, current={self.current!r}, total={self.total!r})"
