#!/usr/bin/env python3
"""
otp_core.py - HOTP / TOTP math for the keyfob.

- Pure functions; no I/O, no clock reads. The caller passes `now`.
- HMAC-SHA1 is injected (default: hmac + hashlib) so a different primitive,
  e.g. one backed by a secure element, can be dropped in.
- Keys are raw bytes here. Base32 handling lives in keyfob.base32.

References: RFC 4226 (HOTP), RFC 6238 (TOTP).
"""

from typing import Callable, Tuple
from urllib.parse import quote
import hashlib
import hmac
import struct

from keyfob.config import DEFAULT_DIGITS, DEFAULT_TIME_STEP, CLOCK_VALID_AFTER

CODE_MODULUS = 10 ** DEFAULT_DIGITS
MAX_COUNTER = 2 ** 64 - 1          # counters are packed as unsigned 64-bit
PLACEHOLDER = "-" * DEFAULT_DIGITS   # shown instead of a code while the clock is not valid

HmacSha1 = Callable[[bytes, bytes], bytes]


# --- HMAC primitive --------------------------------------------------------
def hmac_sha1(key: bytes, message: bytes) -> bytes:
    """Standard HMAC-SHA1, 20-byte digest."""
    return hmac.new(key, message, hashlib.sha1).digest()


# --- RFC helpers -----------------------------------------------------------
def int_to_bytes(i: int) -> bytes:
    """
    Counter -> 8 bytes big-endian, as RFC 4226 requires.

    Example: int_to_bytes(1) -> b'\\x00\\x00\\x00\\x00\\x00\\x00\\x00\\x01'
    """
    return struct.pack(">Q", i)


def dynamic_truncate(hmac_digest: bytes) -> int:
    """
    RFC 4226 dynamic truncation.

    - offset = last byte & 0x0F
    - 4 bytes from offset, top bit of the first one cleared
    - assembled big-endian into a 31-bit unsigned integer
    """
    # offset in range 0..15, so offset + 3 <= 18 for a 20-byte digest
    offset = hmac_digest[19] & 0x0F
    code = (
        ((hmac_digest[offset] & 0x7F) << 24)
        | ((hmac_digest[offset + 1] & 0xFF) << 16)
        | ((hmac_digest[offset + 2] & 0xFF) << 8)
        | (hmac_digest[offset + 3] & 0xFF)
    )
    return code


def hotp(key: bytes, counter: int, hmac_fn: HmacSha1 = hmac_sha1) -> int:
    """
    HOTP value for a raw key and a 64-bit counter.

    Steps:
    1. Message = 8-byte counter (big-endian)
    2. HMAC-SHA1(key, message)
    3. Dynamic truncate -> dbc
    4. dbc % 1_000_000

    Returns:
        int in [0, 999999]; use format_code() for display text.
    """
    digest = hmac_fn(key, int_to_bytes(counter))
    return dynamic_truncate(digest) % CODE_MODULUS


def timecode(now: int, period: int = DEFAULT_TIME_STEP) -> int:
    """TOTP counter: floor(now / period)."""
    return int(now) // period


def totp(
    key: bytes,
    now: int,
    period: int = DEFAULT_TIME_STEP,
    hmac_fn: HmacSha1 = hmac_sha1,
) -> Tuple[int, int, int]:
    """
    TOTP code plus countdown for the current window.

    Arguments:
        key: raw key bytes
        now: unix seconds; must already be past CLOCK_VALID_AFTER
        period: window length (seconds)

    Returns:
        (code, seconds_remaining, percent_remaining)
        - seconds_remaining in (0, period]
        - percent_remaining in [0, 100], integer-truncated
    """
    now = int(now)
    code = hotp(key, timecode(now, period), hmac_fn)
    seconds_remaining = period - (now % period)
    percent_remaining = (seconds_remaining * 100) // period
    return code, seconds_remaining, percent_remaining


def clock_is_valid(now: int) -> bool:
    """False until the wall clock has been set to something believable."""
    return now >= CLOCK_VALID_AFTER


def format_code(code: int, digits: int = DEFAULT_DIGITS) -> str:
    """Zero-padded display text; leading zeros are part of the code."""
    return str(code).zfill(digits)


def format_otpauth_uri(
    secret_b32: str,
    account: str,
    issuer: str,
    period: int = DEFAULT_TIME_STEP,
) -> str:
    """
    otpauth:// URI for enrolling the same secret in an authenticator app.

    otpauth://totp/{issuer}:{account}?secret=...&issuer=...&algorithm=SHA1&digits=6&period=...
    """
    secret = secret_b32.replace(" ", "").replace("=", "").upper()
    label = quote(f"{issuer}:{account}" if issuer else account)
    uri = f"otpauth://totp/{label}?secret={secret}"
    if issuer:
        uri += f"&issuer={quote(issuer)}"
    uri += f"&algorithm=SHA1&digits={DEFAULT_DIGITS}&period={period}"
    return uri
