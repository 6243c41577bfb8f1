"""
Error kinds raised by otpcore.

Configuration errors also derive from :class:`ValueError` so callers that
already catch ``ValueError`` around OTP construction keep working.
"""


class OTPError(Exception):
    """
    Base class for every error raised by this package.
    """


class InvalidSecret(OTPError, ValueError):
    """
    The secret is empty or is not a byte sequence.
    """


class InvalidDigits(OTPError, ValueError):
    """
    The digit count is outside the range the truncation can fill.
    """


class InvalidTimeStep(OTPError, ValueError):
    """
    The TOTP interval is zero, negative or not a whole number of seconds.
    """


class InvalidCounter(OTPError, ValueError):
    """
    The counter does not fit in 64 unsigned bits.
    """


class InvalidWindow(OTPError, ValueError):
    """
    The verification window is negative or not an integer.
    """


class InvalidAlgorithm(OTPError, ValueError):
    """
    The hash algorithm is not one of SHA1, SHA256 or SHA512.
    """


class HashFailure(OTPError):
    """
    The keyed hash could not be computed or its digest could not be truncated.
    """


class ClockError(OTPError):
    """
    The time source failed or produced a time before the configured epoch.
    """
