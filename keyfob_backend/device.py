"""
device.py - One simulated keyfob: registry, pins, sinks and controller.

The bounded clock wait runs once, when the device is built. Every HTTP
request that touches the device runs exactly one tick, so the
debounce timer sees real elapsed time between requests.
"""

from keyfob.accounts import AccountRegistry
from keyfob.buttons import MemoryPin
from keyfob.clock import SystemClock, wait_for_valid_clock
from keyfob.config import DEBOUNCE_MS, DEFAULT_TIME_STEP, DISPLAY_INTERVAL_MS, SYNC_TIMEOUT_S
from keyfob.session import SessionController, monotonic_ms
from keyfob.sinks import FrameBuffer, KeystrokeBuffer

BUTTONS = ('advance', 'request')


class Device:

    def __init__(self, registry: AccountRegistry, clock=None, clock_ms=monotonic_ms,
                 period: int = DEFAULT_TIME_STEP,
                 debounce_ms: int = DEBOUNCE_MS,
                 display_interval_ms: int = DISPLAY_INTERVAL_MS,
                 sync_timeout: float = SYNC_TIMEOUT_S):
        self.registry = registry
        self.clock = clock or SystemClock()
        self.clock_ms = clock_ms
        self.synced = wait_for_valid_clock(self.clock, timeout_s=sync_timeout)
        self.pins = {name: MemoryPin() for name in BUTTONS}
        self.display = FrameBuffer()
        self.keyboard = KeystrokeBuffer()
        self.controller = SessionController(
            registry, self.clock,
            advance_pin=self.pins['advance'],
            request_pin=self.pins['request'],
            renderer=self.display,
            keyboard=self.keyboard,
            period=period,
            debounce_ms=debounce_ms,
            display_interval_ms=display_interval_ms,
            synced=self.synced,
        )

    def tick(self) -> dict:
        self.controller.tick(self.clock_ms())
        return self.display.frame

    def set_button(self, name: str, pressed: bool) -> dict:
        pin = self.pins[name]
        if pressed:
            pin.press()
        else:
            pin.release()
        return self.tick()

    def button_states(self) -> dict:
        return {
            'advance': self.controller.advance_button.state.value,
            'request': 'active' if self.controller.request_button.pressed else 'idle',
        }
