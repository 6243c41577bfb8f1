import hashlib
import hmac
from enum import Enum
from typing import Any, Union

from .exceptions import HashFailure, InvalidAlgorithm, InvalidCounter, InvalidDigits, InvalidSecret

MIN_DIGITS = 6
# A truncated value is below 2**31, so it never has more than 10 decimal digits.
MAX_DIGITS = 10
MAX_COUNTER = 2**64 - 1


class Algorithm(str, Enum):
    """
    Hash functions usable for the HMAC step.
    """

    SHA1 = "SHA1"
    SHA256 = "SHA256"
    SHA512 = "SHA512"

    @property
    def hash_function(self) -> Any:
        return _HASH_FUNCTIONS[self]

    @property
    def digest_size(self) -> int:
        return self.hash_function().digest_size

    @classmethod
    def from_name(cls, name: Any) -> "Algorithm":
        """
        Resolves an algorithm given as a member, a name such as ``"sha-256"``
        or a hashlib constructor such as ``hashlib.sha1``.

        :raises InvalidAlgorithm: for anything else (md5, shake, ...)
        """
        if isinstance(name, cls):
            return name
        if isinstance(name, str):
            key = name.replace("-", "").upper()
            for algorithm in cls:
                if algorithm.value == key:
                    return algorithm
        else:
            for algorithm, function in _HASH_FUNCTIONS.items():
                if name is function:
                    return algorithm
        raise InvalidAlgorithm("Invalid value for algorithm, must be SHA1, SHA256 or SHA512")


_HASH_FUNCTIONS = {
    Algorithm.SHA1: hashlib.sha1,
    Algorithm.SHA256: hashlib.sha256,
    Algorithm.SHA512: hashlib.sha512,
}


def compute_hmac(secret: bytes, message: bytes, algorithm: Union[Algorithm, str] = Algorithm.SHA1) -> bytes:
    """
    HMAC(secret, message) with the selected hash. The digest is 20, 32 or
    64 bytes long depending only on ``algorithm``.

    :raises HashFailure: if the platform refuses to compute the HMAC
    """
    algorithm = Algorithm.from_name(algorithm)
    try:
        return hmac.new(bytes(secret), message, algorithm.hash_function).digest()
    except (TypeError, ValueError) as e:
        raise HashFailure("HMAC-{} computation failed".format(algorithm.value)) from e


def int_to_bytestring(i: int, padding: int = 8) -> bytes:
    """
    Turns an integer to the OATH specified
    bytestring, which is fed to the HMAC
    along with the secret
    """
    # 1 -> b"\x00\x00\x00\x00\x00\x00\x00\x01" (big-endian, unsigned)
    try:
        return i.to_bytes(padding, byteorder="big", signed=False)
    except OverflowError as e:
        raise InvalidCounter("counter must fit in {} unsigned bytes".format(padding)) from e


def dynamic_truncate(digest: bytes) -> int:
    """
    RFC 4226 section 5.3 dynamic truncation.

    :param digest: an HMAC digest, at least 20 bytes long
    :returns: an integer P with 0 <= P < 2**31
    """
    if len(digest) < 20:
        raise HashFailure("digest must be at least 20 bytes long, got {}".format(len(digest)))
    hmac_hash = bytearray(digest)
    # The low nibble of the last byte picks where the 4 bytes start (0-15).
    offset = hmac_hash[-1] & 0xF
    # The top bit is dropped so the result reads the same signed or unsigned.
    return (
        (hmac_hash[offset] & 0x7F) << 24
        | (hmac_hash[offset + 1] & 0xFF) << 16
        | (hmac_hash[offset + 2] & 0xFF) << 8
        | (hmac_hash[offset + 3] & 0xFF)
    )


def format_code(value: int, digits: int) -> str:
    """
    Renders ``value mod 10**digits`` as exactly ``digits`` decimal characters.
    """
    digits = check_digits(digits)
    # 1_000_000_000_000 + 4729 -> "1000000004729" -> last 6 -> "004729"
    str_code = str(10**MAX_DIGITS * 100 + (value % 10**digits))
    return str_code[-digits:]


def check_secret(secret: Any) -> bytes:
    if not isinstance(secret, (bytes, bytearray)):
        raise InvalidSecret("secret must be bytes; decode Base32 secrets with otpcore.utils.byte_secret()")
    if len(secret) == 0:
        raise InvalidSecret("secret must not be empty")
    return bytes(secret)


def check_counter(counter: Any) -> int:
    if isinstance(counter, bool) or not isinstance(counter, int):
        raise InvalidCounter("counter must be an integer")
    if counter < 0 or counter > MAX_COUNTER:
        raise InvalidCounter("counter must be between 0 and 2**64 - 1")
    return counter


def check_digits(digits: Any) -> int:
    if isinstance(digits, bool) or not isinstance(digits, int):
        raise InvalidDigits("digits must be an integer")
    if digits < MIN_DIGITS or digits > MAX_DIGITS:
        raise InvalidDigits("digits must be between {} and {}, got {}".format(MIN_DIGITS, MAX_DIGITS, digits))
    return digits


class OTP(object):
    """
    Base class for OTP handlers.

    Holds the configuration shared by HOTP and TOTP. Instances never hold
    the secret or a counter.
    """

    def __init__(self, digits: int = 6, algorithm: Any = Algorithm.SHA1) -> None:
        """
        :param digits: number of integers in the OTP, 6 to 10
        :param algorithm: hash used in the HMAC, SHA1 unless the verifier expects otherwise
        """
        self._digits = check_digits(digits)
        self._algorithm = Algorithm.from_name(algorithm)

    @property
    def digits(self) -> int:
        return self._digits

    @property
    def algorithm(self) -> Algorithm:
        return self._algorithm

    def generate_otp(self, secret: bytes, input: int) -> str:
        """
        :param secret: raw secret bytes
        :param input: the HMAC counter value to use as the OTP input.
            Usually either the counter, or the computed integer based on the Unix timestamp
        """
        secret = check_secret(secret)
        input = check_counter(input)
        digest = compute_hmac(secret, int_to_bytestring(input), self._algorithm)
        return self.code_from_digest(digest)

    def code_from_digest(self, digest: bytes) -> str:
        """
        Builds a code from an HMAC digest computed elsewhere.

        :param digest: HMAC output, at least 20 bytes
        :returns: OTP
        """
        return format_code(dynamic_truncate(digest), self._digits)

    def __repr__(self) -> str:
        return "{}(digits={}, algorithm={})".format(type(self).__name__, self._digits, self._algorithm.value)


# Input (counter or time step)
#       int_to_bytestring()   -> 8 bytes, big-endian
#           compute_hmac()    -> 20 / 32 / 64 bytes
#               dynamic_truncate():
#                       - last nibble picks the offset (0-15)
#                       - 4 bytes from there, top bit cleared
#                       - 31-bit integer
#               format_code() -> value % 10**digits, zero padded
