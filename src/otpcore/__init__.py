from typing import Sequence

from .clock import Clock as Clock
from .clock import FixedClock as FixedClock
from .clock import SequenceClock as SequenceClock
from .clock import SystemClock as SystemClock
from .compat import random
from .exceptions import ClockError as ClockError
from .exceptions import HashFailure as HashFailure
from .exceptions import InvalidAlgorithm as InvalidAlgorithm
from .exceptions import InvalidCounter as InvalidCounter
from .exceptions import InvalidDigits as InvalidDigits
from .exceptions import InvalidSecret as InvalidSecret
from .exceptions import InvalidTimeStep as InvalidTimeStep
from .exceptions import InvalidWindow as InvalidWindow
from .exceptions import OTPError as OTPError
from .hotp import HOTP as HOTP
from .otp import OTP as OTP
from .otp import Algorithm as Algorithm
from .otp import compute_hmac as compute_hmac
from .otp import dynamic_truncate as dynamic_truncate
from .otp import format_code as format_code
from .totp import TOTP as TOTP


def random_base32(length: int = 32, chars: Sequence[str] = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567") -> str:
    """
    Random Base32 text secret; decode it with ``otpcore.utils.byte_secret``.
    """
    # Note: the otpauth scheme DOES NOT use base32 padding for secret lengths not divisible by 8.
    if length < 32:
        raise InvalidSecret("Secrets should be at least 160 bits")

    return "".join(random.choice(chars) for _ in range(length))


def random_hex(length: int = 40, chars: Sequence[str] = "ABCDEF0123456789") -> str:
    """
    Random hex text secret; decode it with ``bytes.fromhex``.
    """
    if length < 40:
        raise InvalidSecret("Secrets should be at least 160 bits")
    return "".join(random.choice(chars) for _ in range(length))
