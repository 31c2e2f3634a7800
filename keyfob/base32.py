"""
base32.py - RFC 4648 Base32 decoding for shared secrets.

Two modes:
- decode(): permissive. Skips '=' and any character outside A-Z / 2-7,
  stops at the caller's buffer capacity, never raises.
- decode_strict(): rejects anything the standard library would reject.
  Used only when the accounts file asks for strict checking.
"""

import base64
import binascii
from typing import Tuple

ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"


def symbol_value(ch: str) -> int:
    """
    Map one character to its 5-bit value, or -1 if it is not a Base32 symbol.

    'A'-'Z' (either case) -> 0..25, '2'-'7' -> 26..31.
    """
    if "A" <= ch <= "Z":
        return ord(ch) - ord("A")
    if "a" <= ch <= "z":
        return ord(ch) - ord("a")
    if "2" <= ch <= "7":
        return ord(ch) - ord("2") + 26
    return -1


def decode(text: str, max_output_len: int) -> Tuple[bytes, int]:
    """
    Decode a Base32 secret into at most max_output_len raw bytes.

    Bits are shifted into an accumulator five at a time; each time 8 or
    more are buffered the top 8 are emitted. Leftover bits (< 8) at the
    end are dropped, so N valid symbols always yield floor(5*N/8) bytes
    before the capacity limit applies.

    Arguments:
        text: secret as typed, padding and stray characters allowed
        max_output_len: output capacity; output is truncated silently

    Returns:
        (key_bytes, count) where count == len(key_bytes). An input with
        no valid symbols gives (b"", 0).
    """
    out = bytearray()
    if max_output_len <= 0:
        return b"", 0

    buffer = 0
    bits = 0
    for ch in text:
        val = symbol_value(ch)
        if val < 0:
            continue
        buffer = ((buffer << 5) | val) & 0xFFFF
        bits += 5
        if bits >= 8:
            bits -= 8
            out.append((buffer >> bits) & 0xFF)
            if len(out) == max_output_len:
                break

    return bytes(out), len(out)


def decode_strict(text: str) -> bytes:
    """
    Decode with the standard library; missing '=' padding is added first.

    Raises:
        ValueError: empty input, or any character outside the alphabet
    """
    cleaned = text.strip().upper().rstrip("=")
    if not cleaned:
        raise ValueError("Invalid Base32 secret")
    padded = cleaned + "=" * (-len(cleaned) % 8)
    try:
        return base64.b32decode(padded, casefold=True)
    except binascii.Error as e:
        raise ValueError("Invalid Base32 secret") from e
