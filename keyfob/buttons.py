"""
buttons.py - Debounced input channels for the two keyfob buttons.

Both buttons are active-low momentary switches: a pin reading of False
(line pulled low) means "pressed". Pins are anything with a read() method
returning the line level as a bool.

Channel A (DebouncedButton): a reading must hold still for debounce_ms
before it becomes the stable state. Fires once on stable inactive -> active.

Channel B (EdgeLatchButton): no timer. Fires on a raw inactive -> active
edge and latches until the line is seen inactive again. A press that
bounces (active, inactive, active on successive polls) fires twice;
that matches the hardware this was built for and is left as is.
"""

import enum

from keyfob.config import DEBOUNCE_MS


class ButtonState(enum.Enum):
    IDLE = "idle"
    SETTLING = "settling"
    ACTIVE = "active"


class MemoryPin:
    """A pin whose level is set in software. Starts high (released)."""

    def __init__(self, level: bool = True):
        self.level = level

    def read(self) -> bool:
        return self.level

    def press(self):
        self.level = False

    def release(self):
        self.level = True

    def __repr__(self):
        return f"MemoryPin(level={self.level})"


class DebouncedButton:
    """Channel A: level-debounced, one event per settled press."""

    def __init__(self, pin, debounce_ms: int = DEBOUNCE_MS):
        self.pin = pin
        self.debounce_ms = debounce_ms
        self._last_reading = False     # active?
        self._last_change_ms = 0
        self._stable = False

    def _active(self) -> bool:
        return not self.pin.read()

    def poll(self, now_ms: int) -> bool:
        """Read the pin; True exactly once per settled transition to active."""
        reading = self._active()
        if reading != self._last_reading:
            self._last_reading = reading
            self._last_change_ms = now_ms

        if reading != self._stable and now_ms - self._last_change_ms >= self.debounce_ms:
            self._stable = reading
            return reading
        return False

    @property
    def pressed(self) -> bool:
        return self._stable

    @property
    def state(self) -> ButtonState:
        if self._last_reading != self._stable:
            return ButtonState.SETTLING
        return ButtonState.ACTIVE if self._stable else ButtonState.IDLE


class EdgeLatchButton:
    """Channel B: raw edge trigger with a press latch, no debounce timer."""

    def __init__(self, pin):
        self.pin = pin
        self._previous = False     # active?
        self.latched = False

    def poll(self, now_ms: int = None) -> bool:
        """Read the pin; True on inactive -> active. now_ms is accepted and ignored."""
        reading = not self.pin.read()
        fired = False
        if reading and not self._previous:
            self.latched = True
            fired = True
        elif not reading and self._previous:
            self.latched = False
        self._previous = reading
        return fired

    @property
    def pressed(self) -> bool:
        return self._previous
