"""
sinks.py - Where frames and passcodes go.

A renderer has render(frame); a keyboard has send(text). Both are
fire-and-forget. A frame is a dict:

    {"label": "GitHub", "code_text": "081804", "seconds_remaining": 21,
     "percent_remaining": 70, "clock_valid": True}
"""

import sys

BAR_WIDTH = 20


def progress_bar(percent: int, width: int = BAR_WIDTH) -> str:
    filled = (max(0, min(100, percent)) * width) // 100
    return "#" * filled + "." * (width - filled)


class ConsoleRenderer:
    """One status line; a fresh line only when label or code changes."""

    def __init__(self, stream=None):
        self.stream = stream or sys.stdout
        self._last = None

    def render(self, frame: dict):
        if not frame["clock_valid"]:
            line = f"{frame['label']}: {frame['code_text']}  (waiting for time sync)"
        else:
            line = (f"{frame['label']}: {frame['code_text']}  "
                    f"[{progress_bar(frame['percent_remaining'])}] "
                    f"{frame['seconds_remaining']:2d}s")
        key = (frame["label"], frame["code_text"])
        if self._last is not None and key != self._last:
            self.stream.write("\n")
        self.stream.write("\r" + line)
        self.stream.flush()
        self._last = key


class ConsoleKeyboard:
    """Types the code onto stdout."""

    def __init__(self, stream=None):
        self.stream = stream or sys.stdout

    def send(self, text: str):
        self.stream.write(f"\n>>> {text}\n")
        self.stream.flush()


class FrameBuffer:
    """Keeps the latest frame for whoever asks (the HTTP layer)."""

    def __init__(self):
        self.frame = None
        self.count = 0

    def render(self, frame: dict):
        self.frame = dict(frame)
        self.count += 1


class KeystrokeBuffer:
    """Collects typed strings until drained."""

    def __init__(self):
        self._typed = []

    def send(self, text: str):
        self._typed.append(text)

    def drain(self) -> list:
        typed, self._typed = self._typed, []
        return typed

    def __len__(self):
        return len(self._typed)
