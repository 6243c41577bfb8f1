import base64
import binascii
import unicodedata
from hmac import compare_digest
from typing import Any

from .exceptions import InvalidSecret


def byte_secret(secret: str) -> bytes:
    """
    Decodes a Base32 secret, as found in authenticator apps and otpauth
    URIs, into the raw bytes HOTP and TOTP expect.

    Missing ``=`` padding is restored; case and embedded spaces are ignored.

    :raises InvalidSecret: if the text is empty or not valid Base32
    """
    # "GEZDGNBVGY3TQOJQ" -> b"1234567890"
    secret = secret.replace(" ", "")
    if not secret:
        raise InvalidSecret("secret must not be empty")
    missing_padding = len(secret) % 8
    if missing_padding != 0:
        secret += "=" * (8 - missing_padding)
    try:
        return base64.b32decode(secret, casefold=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidSecret("secret is not valid Base32") from e


def strings_equal(s1: str, s2: str) -> bool:
    """
    Timing-attack resistant string comparison.

    Normal comparison using == will short-circuit on the first mismatching
    character. This avoids that by scanning the whole string, though we
    still reveal to a timing attack whether the strings are the same
    length.
    """
    # "４８２１９３" (fullwidth) normalizes to "482193"
    s1 = unicodedata.normalize("NFKC", s1)
    s2 = unicodedata.normalize("NFKC", s2)
    # Lone surrogates (e.g. from json.loads) encode instead of raising; they never match a digit.
    return compare_digest(s1.encode("utf-8", "surrogatepass"), s2.encode("utf-8", "surrogatepass"))


def code_text(otp: Any) -> str:
    """
    Text form of a presented code. Bytes are read as ASCII; undecodable
    bytes become U+FFFD, which never matches a digit.
    """
    # b"755224" -> "755224", not "b'755224'"
    if isinstance(otp, (bytes, bytearray)):
        return bytes(otp).decode("ascii", "replace")
    return str(otp)
