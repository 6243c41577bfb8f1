"""Tests for TOTP generation and windowed verification."""

import datetime
import json
import logging

import pytest

from otpcore import (
    TOTP,
    Algorithm,
    Clock,
    ClockError,
    FixedClock,
    InvalidDigits,
    InvalidSecret,
    InvalidTimeStep,
    InvalidWindow,
    SequenceClock,
)

# RFC 6238 Appendix B; the seed length follows the hash
SHA1_SECRET = b"12345678901234567890"
SHA256_SECRET = b"12345678901234567890123456789012"
SHA512_SECRET = b"1234567890123456789012345678901234567890123456789012345678901234"

RFC6238_VECTORS = [
    (59, Algorithm.SHA1, SHA1_SECRET, "94287082"),
    (59, Algorithm.SHA256, SHA256_SECRET, "46119246"),
    (59, Algorithm.SHA512, SHA512_SECRET, "90693936"),
    (1111111109, Algorithm.SHA1, SHA1_SECRET, "07081804"),
    (1111111109, Algorithm.SHA256, SHA256_SECRET, "68084774"),
    (1111111109, Algorithm.SHA512, SHA512_SECRET, "25091201"),
    (1111111111, Algorithm.SHA1, SHA1_SECRET, "14050471"),
    (1111111111, Algorithm.SHA256, SHA256_SECRET, "67062674"),
    (1111111111, Algorithm.SHA512, SHA512_SECRET, "99943326"),
    (2000000000, Algorithm.SHA1, SHA1_SECRET, "69279037"),
    (20000000000, Algorithm.SHA1, SHA1_SECRET, "65353130"),
    (20000000000, Algorithm.SHA256, SHA256_SECRET, "77737706"),
    (20000000000, Algorithm.SHA512, SHA512_SECRET, "47863826"),
]


@pytest.mark.parametrize("timestamp,algorithm,secret,expected", RFC6238_VECTORS)
def test_rfc6238_vectors(timestamp, algorithm, secret, expected):
    totp = TOTP(digits=8, algorithm=algorithm, clock=FixedClock(timestamp))
    assert totp.generate(secret) == expected
    assert totp.verify(expected, secret)


@pytest.mark.parametrize("timestamp,algorithm,secret,expected", RFC6238_VECTORS)
def test_at_matches_vectors(timestamp, algorithm, secret, expected):
    assert TOTP(digits=8, algorithm=algorithm).at(secret, timestamp) == expected


def test_defaults():
    totp = TOTP()
    assert totp.digits == 6
    assert totp.algorithm is Algorithm.SHA1
    assert totp.interval == 30
    assert totp.epoch == 0
    assert totp.window == 1


def test_leading_zero_is_kept():
    code = TOTP(digits=8, clock=FixedClock(1111111109)).generate(SHA1_SECRET)
    assert code == "07081804"
    assert len(code) == 8


def test_datetime_input():
    for_time = datetime.datetime(2005, 3, 18, 1, 58, 29, tzinfo=datetime.timezone.utc)
    assert TOTP(digits=8).at(SHA1_SECRET, for_time) == "07081804"


def test_timecode():
    totp = TOTP()
    assert totp.timecode(0) == 0
    assert totp.timecode(29) == 0
    assert totp.timecode(30) == 1
    assert totp.timecode(59) == 1
    assert totp.timecode(1111111109) == 37037036


def test_at_counter_offset():
    totp = TOTP(digits=8)
    assert totp.at(SHA1_SECRET, 29, counter_offset=1) == totp.at(SHA1_SECRET, 59)


def test_code_is_stable_within_a_step():
    totp = TOTP(digits=8)
    assert totp.at(SHA1_SECRET, 30) == totp.at(SHA1_SECRET, 59)
    assert totp.at(SHA1_SECRET, 59) != totp.at(SHA1_SECRET, 60)


def test_epoch_shifts_counter():
    totp = TOTP(digits=8, epoch=1000, clock=FixedClock(1059))
    assert totp.generate(SHA1_SECRET) == "94287082"


def test_epoch_as_datetime():
    epoch = datetime.datetime(1970, 1, 1, 0, 16, 40, tzinfo=datetime.timezone.utc)
    totp = TOTP(digits=8, epoch=epoch, clock=FixedClock(1059))
    assert totp.epoch == 1000
    assert totp.generate(SHA1_SECRET) == "94287082"


def test_time_before_epoch_rejected():
    totp = TOTP(epoch=1000, clock=FixedClock(999))
    with pytest.raises(ClockError):
        totp.generate(SHA1_SECRET)
    with pytest.raises(ClockError):
        totp.verify("123456", SHA1_SECRET)


def test_interval_as_timedelta():
    totp = TOTP(digits=8, interval=datetime.timedelta(seconds=60))
    assert totp.interval == 60
    assert totp.at(SHA1_SECRET, 59) == TOTP(digits=8).at(SHA1_SECRET, 29)


@pytest.mark.parametrize(
    "interval",
    [0, -30, 1.5, "30", None, True, datetime.timedelta(0), datetime.timedelta(milliseconds=1500)],
)
def test_bad_interval_rejected(interval):
    with pytest.raises(InvalidTimeStep):
        TOTP(interval=interval)


@pytest.mark.parametrize("window", [-1, 1.0, None, True])
def test_bad_window_rejected(window):
    with pytest.raises(InvalidWindow):
        TOTP(window=window)


def test_bad_digits_rejected():
    with pytest.raises(InvalidDigits):
        TOTP(digits=0)


def test_empty_secret_rejected():
    totp = TOTP(clock=FixedClock(59))
    with pytest.raises(InvalidSecret):
        totp.generate(b"")
    with pytest.raises(InvalidSecret):
        totp.verify("123456", b"")


def test_window_tolerance():
    code = TOTP(digits=8, window=1).at(SHA1_SECRET, 59)  # step 1
    assert TOTP(digits=8, window=1, clock=FixedClock(89)).verify(code, SHA1_SECRET)  # step 2
    assert TOTP(digits=8, window=1, clock=FixedClock(29)).verify(code, SHA1_SECRET)  # step 0
    assert not TOTP(digits=8, window=1, clock=FixedClock(119)).verify(code, SHA1_SECRET)  # step 3


def test_window_zero_is_exact():
    code = TOTP(digits=8).at(SHA1_SECRET, 59)
    totp = TOTP(digits=8, window=0)
    assert totp.verify(code, SHA1_SECRET, for_time=59)
    assert not totp.verify(code, SHA1_SECRET, for_time=89)
    assert not totp.verify(code, SHA1_SECRET, for_time=29)


def test_window_is_symmetric():
    totp = TOTP(digits=8, window=2)
    code = totp.at(SHA1_SECRET, 300)  # step 10
    assert totp.verify(code, SHA1_SECRET, for_time=240)  # step 8
    assert totp.verify(code, SHA1_SECRET, for_time=360)  # step 12
    assert not totp.verify(code, SHA1_SECRET, for_time=210)  # step 7
    assert not totp.verify(code, SHA1_SECRET, for_time=390)  # step 13


def test_window_skips_steps_before_zero():
    totp = TOTP(digits=8, window=3)
    code = totp.at(SHA1_SECRET, 0)
    assert totp.verify(code, SHA1_SECRET, for_time=0)
    assert not totp.verify("00000000", SHA1_SECRET, for_time=0)


def test_generate_then_verify_with_sequence_clock():
    totp = TOTP(digits=8, clock=SequenceClock([59, 89, 119]))
    code = totp.generate(SHA1_SECRET)
    assert totp.verify(code, SHA1_SECRET)  # one step later
    assert not totp.verify(code, SHA1_SECRET)  # two steps later


def test_verify_wrong_code():
    totp = TOTP(clock=FixedClock(59))
    assert not totp.verify("000000", SHA1_SECRET)
    assert not totp.verify("", SHA1_SECRET)


def test_verify_logs_drift_without_secret(caplog):
    caplog.set_level(logging.DEBUG, logger="otpcore.totp")
    code = TOTP(digits=8).at(SHA1_SECRET, 59)
    assert TOTP(digits=8, clock=FixedClock(89)).verify(code, SHA1_SECRET)
    assert "-1 steps" in caplog.text
    assert "1234567890" not in caplog.text
    assert code not in caplog.text


class BrokenClock(Clock):
    def now(self):
        return "soon"


def test_bad_clock_value_raises_clock_error():
    totp = TOTP(clock=BrokenClock())
    with pytest.raises(ClockError):
        totp.generate(SHA1_SECRET)


@pytest.mark.parametrize("timestamp,expected", [(0, 30), (29, 1), (59, 1), (60, 30), (75, 15)])
def test_remaining_seconds(timestamp, expected):
    assert TOTP(clock=FixedClock(timestamp)).remaining_seconds() == expected


def test_remaining_seconds_with_epoch():
    totp = TOTP(interval=60, epoch=10)
    assert totp.remaining_seconds(for_time=10) == 60
    assert totp.remaining_seconds(for_time=69) == 1


def test_repr_shows_configuration_only():
    totp = TOTP(digits=8, algorithm="sha512", interval=60, window=2)
    assert repr(totp) == "TOTP(digits=8, algorithm=SHA512, interval=60, epoch=0, window=2)"


def test_verify_lone_surrogate_is_false():
    totp = TOTP(clock=FixedClock(59))
    assert not totp.verify(json.loads('"75522\\ud800"'), SHA1_SECRET)
    assert not totp.verify(json.loads('"\\ud800\\ud800\\ud800\\ud800\\ud800\\ud800"'), SHA1_SECRET)


def test_verify_accepts_bytes_code():
    totp = TOTP(digits=8, clock=FixedClock(59))
    assert totp.verify(b"94287082", SHA1_SECRET)
    assert not totp.verify(b"9428708\xff", SHA1_SECRET)


def test_time_past_last_step_is_clock_error():
    totp = TOTP(interval=1, window=0, clock=FixedClock(2**64 + 5))
    with pytest.raises(ClockError):
        totp.generate(SHA1_SECRET)
    with pytest.raises(ClockError):
        totp.verify("123456", SHA1_SECRET)
    with pytest.raises(ClockError):
        totp.timecode(2**64)


def test_last_step_still_generates():
    totp = TOTP(interval=1, window=1, clock=FixedClock(2**64 - 1))
    code = totp.generate(SHA1_SECRET)
    assert len(code) == 6
    assert totp.verify(code, SHA1_SECRET)
