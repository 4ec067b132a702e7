from __future__ import annotations
import logging
import pyautogui

log = logging.getLogger(__name__)


class BlinkClicker:
    """Downstream action for the demo: every accepted blink is one mouse click."""
    def __init__(self, button: str = "left"):
        self.button = button

    def __call__(self, count: int):
        # errors propagate; the session logs them and keeps running
        pyautogui.click(button=self.button)
        log.debug("blink #%d -> %s click", count, self.button)
