"""
keyfob package
==============

A multi-account TOTP keyfob: two buttons, a small display, and a
keyboard output that types the current code into the host.

- base32     : permissive Base32 decoding of shared secrets
- otp_core   : HOTP (RFC 4226) and TOTP (RFC 6238) math
- accounts   : fixed account list with a wrapping selection
- buttons    : debounced "advance" button, edge-latched "request" button
- clock      : wall-clock sources, bounded wait for a valid clock
- session    : the control loop tying it all together
- sinks      : display and keystroke outputs

Example:

    from keyfob import base32, otp_core
    key, n = base32.decode("JBSWY3DPEHPK3PXP", 64)
    code, remaining, percent = otp_core.totp(key, 1111111109)
    text = otp_core.format_code(code)    # zero-padded, 6 digits
"""

from keyfob.accounts import Account, AccountRegistry, RegistryEmptyError
from keyfob.base32 import decode, decode_strict
from keyfob.buttons import ButtonState, DebouncedButton, EdgeLatchButton, MemoryPin
from keyfob.clock import ManualClock, SystemClock, wait_for_valid_clock
from keyfob.config import ConfigError
from keyfob.otp_core import clock_is_valid, format_code, format_otpauth_uri, hotp, totp
from keyfob.session import SessionController, run_loop

__all__ = [
    "Account", "AccountRegistry", "RegistryEmptyError",
    "decode", "decode_strict",
    "ButtonState", "DebouncedButton", "EdgeLatchButton", "MemoryPin",
    "ManualClock", "SystemClock", "wait_for_valid_clock",
    "ConfigError",
    "clock_is_valid", "format_code", "format_otpauth_uri", "hotp", "totp",
    "SessionController", "run_loop",
]
