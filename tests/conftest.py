import json

import pytest

from keyfob.accounts import AccountRegistry
from keyfob.buttons import MemoryPin
from keyfob.clock import ManualClock
from keyfob.session import SessionController
from keyfob.sinks import FrameBuffer, KeystrokeBuffer

# RFC 4226 / RFC 6238 test key "12345678901234567890"
RFC_SECRET = "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"
RFC_KEY = b"12345678901234567890"

ACCOUNTS = [
    ("Google", RFC_SECRET),
    ("GitHub", "JBSWY3DPEHPK3PXP"),
    ("Work", "KRSXG5CTMVRXEZLU"),
]

# RFC 6238 SHA-1 vectors, last six digits
RFC_TOTP = {
    59: "287082",
    1111111109: "081804",
    1111111111: "050471",
    1234567890: "005924",
    2000000000: "279037",
    20000000000: "353130",
}


class FakeMs:
    """Millisecond clock for the control loop."""

    def __init__(self, now=0):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def registry():
    return AccountRegistry.from_entries(ACCOUNTS)


@pytest.fixture
def clock():
    return ManualClock(1111111109)


@pytest.fixture
def pins():
    return MemoryPin(), MemoryPin()


@pytest.fixture
def display():
    return FrameBuffer()


@pytest.fixture
def keyboard():
    return KeystrokeBuffer()


@pytest.fixture
def controller(registry, clock, pins, display, keyboard):
    advance_pin, request_pin = pins
    return SessionController(registry, clock, advance_pin, request_pin, display, keyboard)


@pytest.fixture
def accounts_file(tmp_path):
    path = tmp_path / "accounts.json"
    path.write_text(json.dumps({
        "accounts": [{"label": label, "secret": secret} for label, secret in ACCOUNTS]
    }))
    return str(path)
