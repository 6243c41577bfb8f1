"""
Time sources for TOTP.

TOTP reads the current time through a :class:`Clock` so that tests (and
callers replaying a request) can pin it instead of depending on the
wall clock.
"""

import datetime
import math
import threading
import time
from typing import Any, Iterable

from .exceptions import ClockError


def to_timestamp(value: Any) -> int:
    """
    Whole Unix seconds for an ``int``/``float`` timestamp or a ``datetime``.
    Naive datetimes are read as local time, like ``datetime.timestamp()``.

    :raises ClockError: for anything that is not a point in time
    """
    if isinstance(value, datetime.datetime):
        return math.floor(value.timestamp())
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ClockError("time must be a number of seconds or a datetime, got {!r}".format(type(value).__name__))
    try:
        return math.floor(value)
    except (ValueError, OverflowError) as e:
        raise ClockError("time {!r} is not a finite number of seconds".format(value)) from e


class Clock(object):
    """
    Source of the current time, in whole Unix seconds.
    """

    def now(self) -> int:
        raise NotImplementedError


class SystemClock(Clock):
    """
    Reads the real wall clock.
    """

    def now(self) -> int:
        try:
            return int(time.time())
        except OSError as e:
            raise ClockError("could not read the system clock") from e

    def __repr__(self) -> str:
        return "SystemClock()"


class FixedClock(Clock):
    """
    Always returns the same instant.
    """

    def __init__(self, timestamp: Any) -> None:
        self._timestamp = to_timestamp(timestamp)

    def now(self) -> int:
        return self._timestamp

    def __repr__(self) -> str:
        return "FixedClock({})".format(self._timestamp)


class SequenceClock(Clock):
    """
    Returns the given instants one per call, in order.

    Raises ClockError once every instant has been returned.
    """

    def __init__(self, timestamps: Iterable[Any]) -> None:
        self._timestamps = [to_timestamp(t) for t in timestamps]
        self._position = 0
        self._lock = threading.Lock()

    def now(self) -> int:
        with self._lock:
            if self._position >= len(self._timestamps):
                raise ClockError("clock sequence exhausted")
            timestamp = self._timestamps[self._position]
            self._position += 1
            return timestamp
