import logging
from typing import Any, Optional

from . import utils
from .exceptions import InvalidCounter
from .otp import MAX_COUNTER, OTP, Algorithm, check_counter, check_secret

logger = logging.getLogger(__name__)


class HOTP(OTP):
    """
    Handler for HMAC-based OTP counters.

    The secret and the counter are passed on every call. The handler never
    stores or increments a counter: after a successful verification the
    caller moves its own stored counter past the matched value.
    """

    def __init__(self, digits: int = 6, algorithm: Any = Algorithm.SHA1) -> None:
        """
        :param digits: number of integers in the OTP. Some apps expect this to be 6 digits, others support more.
        :param algorithm: hash used in the HMAC (expected to be SHA1)
        """
        super().__init__(digits=digits, algorithm=algorithm)

    def generate(self, secret: bytes, counter: int) -> str:
        """
        Generates the OTP for the given count.

        :param secret: raw secret bytes
        :param counter: the OTP HMAC counter, 0 to 2**64 - 1
        :returns: OTP
        """
        return self.generate_otp(secret, counter)

    # hotp = HOTP()
    # hotp.generate(b"12345678901234567890", 0) -> "755224"
    # hotp.generate(b"12345678901234567890", 1) -> "287082"

    def verify(self, otp: str, secret: bytes, counter: int) -> bool:
        """
        Verifies the OTP passed in against the OTP for ``counter``.

        :param otp: the OTP to check against
        :param secret: raw secret bytes
        :param counter: the OTP HMAC counter
        """
        return utils.strings_equal(utils.code_text(otp), self.generate(secret, counter))

    def find_counter(self, otp: str, secret: bytes, counter: int, look_ahead: int = 0) -> Optional[int]:
        """
        Resynchronisation helper (RFC 4226 section 7.4). Tries ``counter``
        and then up to ``look_ahead`` following counters.

        :param otp: the OTP to check against
        :param secret: raw secret bytes
        :param counter: the next counter the caller expects
        :param look_ahead: how many counters past ``counter`` to also accept
        :returns: the matching counter, or None. The caller should store
            ``match + 1`` as its next expected counter.
        """
        counter = check_counter(counter)
        if isinstance(look_ahead, bool) or not isinstance(look_ahead, int) or look_ahead < 0:
            raise InvalidCounter("look_ahead must be a non-negative integer")
        secret = check_secret(secret)
        otp = utils.code_text(otp)

        last = min(counter + look_ahead, MAX_COUNTER)
        for candidate in range(counter, last + 1):
            if utils.strings_equal(otp, self.generate(secret, candidate)):
                if candidate != counter:
                    logger.debug("HOTP code matched %d counters ahead", candidate - counter)
                return candidate
        return None
