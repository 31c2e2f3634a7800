"""
session.py - The keyfob control loop.

Each tick:
  1. poll the advance button; on fire, select the next account and force
     a display refresh
  2. poll the request button; on fire, type the current code
  3. every display_interval_ms (or when forced), hand a frame to the renderer

Nothing here blocks and nothing is shared with another thread.
"""

import logging
import time

from keyfob import otp_core
from keyfob.buttons import DebouncedButton, EdgeLatchButton
from keyfob.config import ConfigError, DEBOUNCE_MS, DEFAULT_TIME_STEP, DISPLAY_INTERVAL_MS, TICK_MS

logger = logging.getLogger(__name__)


class SessionController:
    """
    One device session.

    synced is the outcome of the start-up clock wait. When it is False,
    codes stay withheld for the life of the session, whatever the clock
    reads later.

    Raises:
        ConfigError: period is not a positive number of seconds
    """

    def __init__(self, registry, clock, advance_pin, request_pin, renderer, keyboard,
                 period: int = DEFAULT_TIME_STEP,
                 debounce_ms: int = DEBOUNCE_MS,
                 display_interval_ms: int = DISPLAY_INTERVAL_MS,
                 hmac_fn=otp_core.hmac_sha1,
                 synced: bool = True):
        if period <= 0:
            raise ConfigError(f"TOTP period must be positive, got {period}")
        self.synced = synced
        self.registry = registry
        self.clock = clock
        self.advance_button = DebouncedButton(advance_pin, debounce_ms)
        self.request_button = EdgeLatchButton(request_pin)
        self.renderer = renderer
        self.keyboard = keyboard
        self.period = period
        self.display_interval_ms = display_interval_ms
        self.hmac_fn = hmac_fn
        self._last_render_ms = None
        self._refresh = True
        self.last_frame = None

    def frame(self) -> dict:
        """Display state for the selected account at the current clock reading."""
        account = self.registry.current()
        now = self.clock.now()
        if not (self.synced and otp_core.clock_is_valid(now)):
            return {
                "label": account.label,
                "code_text": otp_core.PLACEHOLDER,
                "seconds_remaining": 0,
                "percent_remaining": 0,
                "clock_valid": False,
            }
        code, seconds_remaining, percent_remaining = otp_core.totp(
            account.key, now, self.period, self.hmac_fn)
        return {
            "label": account.label,
            "code_text": otp_core.format_code(code),
            "seconds_remaining": seconds_remaining,
            "percent_remaining": percent_remaining,
            "clock_valid": True,
        }

    def emit_code(self) -> bool:
        """Type the selected account's code. Refused while the clock is not valid."""
        frame = self.frame()
        if not frame["clock_valid"]:
            logger.warning("Code requested for %s but the clock is not valid", frame["label"])
            return False
        try:
            self.keyboard.send(frame["code_text"])
        except Exception:
            logger.exception("Keystroke output failed")
            return False
        logger.info("Typed code for %s", frame["label"])
        return True

    def tick(self, now_ms: int):
        if self.advance_button.poll(now_ms):
            self.registry.advance()
            self._refresh = True

        if self.request_button.poll(now_ms):
            self.emit_code()

        due = (self._last_render_ms is None
               or now_ms - self._last_render_ms >= self.display_interval_ms)
        if self._refresh or due:
            self._render(now_ms)

    def _render(self, now_ms: int):
        self._refresh = False
        self._last_render_ms = now_ms
        self.last_frame = self.frame()
        try:
            self.renderer.render(self.last_frame)
        except Exception:
            logger.exception("Display output failed")


def monotonic_ms() -> int:
    return int(time.monotonic() * 1000)


def run_loop(controller, clock_ms=monotonic_ms, sleep=time.sleep,
             tick_ms: int = TICK_MS, max_ticks: int = None) -> int:
    """
    Tick the controller every tick_ms until interrupted (or max_ticks).

    Returns the number of ticks run.
    """
    ticks = 0
    try:
        while max_ticks is None or ticks < max_ticks:
            controller.tick(clock_ms())
            ticks += 1
            sleep(tick_ms / 1000)
    except KeyboardInterrupt:
        logger.info("Stopped after %d ticks", ticks)
    return ticks
