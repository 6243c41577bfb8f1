import datetime
import logging
from typing import Any, Iterator, Optional

from . import utils
from .clock import Clock, SystemClock, to_timestamp
from .exceptions import ClockError, InvalidTimeStep, InvalidWindow
from .hotp import HOTP
from .otp import MAX_COUNTER, OTP, Algorithm, check_secret

logger = logging.getLogger(__name__)


class TOTP(OTP):
    """
    Handler for time-based OTP counters.

    The counter is the number of whole intervals elapsed since ``epoch``;
    generation and verification delegate to :class:`HOTP` with that counter.
    """

    def __init__(
        self,
        digits: int = 6,
        algorithm: Any = Algorithm.SHA1,
        interval: Any = 30,
        epoch: Any = 0,
        window: int = 1,
        clock: Optional[Clock] = None,
    ) -> None:
        """
        :param digits: number of integers in the OTP. Some apps expect this to be 6 digits, others support more.
        :param algorithm: hash used in the HMAC (expected to be SHA1)
        :param interval: the time interval in seconds for OTP. This defaults to 30.
        :param epoch: Unix time (or datetime) where step 0 starts, defaults to 0
        :param window: number of steps before and after the current one that
            ``verify`` also accepts. The same value bounds both directions.
        :param clock: time source, defaults to the system clock
        """
        super().__init__(digits=digits, algorithm=algorithm)
        self._interval = _check_interval(interval)
        self._epoch = to_timestamp(epoch)
        self._window = _check_window(window)
        self._clock = clock if clock is not None else SystemClock()
        self._hotp = HOTP(digits=self.digits, algorithm=self.algorithm)

    @property
    def interval(self) -> int:
        return self._interval

    @property
    def epoch(self) -> int:
        return self._epoch

    @property
    def window(self) -> int:
        return self._window

    @property
    def clock(self) -> Clock:
        return self._clock

    def timecode(self, for_time: Any) -> int:
        """
        Accepts either a Unix timestamp integer or a datetime object.

        :param for_time: the time to convert to a counter
        :returns: number of whole intervals between the epoch and ``for_time``
        :raises ClockError: if ``for_time`` is before the epoch or its step
            does not fit in 64 bits
        """
        timestamp = to_timestamp(for_time)
        if timestamp < self._epoch:
            raise ClockError("time {} is before the TOTP epoch {}".format(timestamp, self._epoch))
        counter = (timestamp - self._epoch) // self._interval
        if counter > MAX_COUNTER:
            raise ClockError("time {} is past the last 64-bit time step".format(timestamp))
        return counter

    def at(self, secret: bytes, for_time: Any, counter_offset: int = 0) -> str:
        """
        Accepts either a Unix timestamp integer or a datetime object.

        :param secret: raw secret bytes
        :param for_time: the time to generate an OTP for
        :param counter_offset: the amount of ticks to add to the time counter
        :returns: OTP value
        """
        return self._hotp.generate(secret, self.timecode(for_time) + counter_offset)

    def generate(self, secret: bytes) -> str:
        """
        Generate the current time OTP

        :param secret: raw secret bytes
        :returns: OTP value
        """
        return self.at(secret, self._clock.now())

    def verify(self, otp: str, secret: bytes, for_time: Any = None) -> bool:
        """
        Verifies the OTP passed in against the current time OTP, also
        accepting codes up to ``window`` steps early or late.

        Steps are tried nearest first: current, -1, +1, -2, +2, ...

        :param otp: the OTP to check against
        :param secret: raw secret bytes
        :param for_time: time to check OTP at (defaults to the clock's now)
        :returns: True if verification succeeded, False otherwise
        """
        secret = check_secret(secret)
        if for_time is None:
            for_time = self._clock.now()
        counter = self.timecode(for_time)
        otp = utils.code_text(otp)

        for drift in self._drifts():
            candidate = counter + drift
            if candidate < 0 or candidate > MAX_COUNTER:
                continue
            if self._hotp.verify(otp, secret, candidate):
                if drift:
                    logger.debug("TOTP code accepted %+d steps from the current step", drift)
                return True
        return False

    def remaining_seconds(self, for_time: Any = None) -> int:
        """
        Seconds left before the code for ``for_time`` (default: now) expires.

        :returns: a value between 1 and ``interval``
        """
        if for_time is None:
            for_time = self._clock.now()
        timestamp = to_timestamp(for_time)
        self.timecode(timestamp)
        return self._interval - (timestamp - self._epoch) % self._interval

    def _drifts(self) -> Iterator[int]:
        yield 0
        for distance in range(1, self._window + 1):
            yield -distance
            yield distance

    def __repr__(self) -> str:
        return "TOTP(digits={}, algorithm={}, interval={}, epoch={}, window={})".format(
            self.digits, self.algorithm.value, self._interval, self._epoch, self._window
        )


def _check_interval(interval: Any) -> int:
    if isinstance(interval, datetime.timedelta):
        seconds = interval.total_seconds()
        if seconds != int(seconds):
            raise InvalidTimeStep("interval must be a whole number of seconds")
        interval = int(seconds)
    elif isinstance(interval, bool) or not isinstance(interval, int):
        raise InvalidTimeStep("interval must be an integer number of seconds")
    if interval <= 0:
        raise InvalidTimeStep("interval must be positive, got {}".format(interval))
    return interval


def _check_window(window: Any) -> int:
    if isinstance(window, bool) or not isinstance(window, int):
        raise InvalidWindow("window must be an integer")
    if window < 0:
        raise InvalidWindow("window must not be negative, got {}".format(window))
    return window
