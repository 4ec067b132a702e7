from __future__ import annotations
import logging
from typing import Optional

log = logging.getLogger(__name__)


class RateMonitor:
    """Frames counted per window of at least `window_ms`; diagnostic only."""
    def __init__(self, window_ms: float = 1000.0):
        self.window_ms = window_ms
        self.frames = 0
        self.window_start: Optional[float] = None
        self.fps = 0

    def tick(self, now_ms: float) -> Optional[int]:
        """Count one frame; returns the new fps when a window closes."""
        if self.window_start is None:
            self.window_start = now_ms
        self.frames += 1
        if now_ms - self.window_start >= self.window_ms:
            self.fps = self.frames
            self.frames = 0
            self.window_start = now_ms
            log.debug("fps=%d", self.fps)
            return self.fps
        return None

    def reset(self):
        self.frames = 0; self.window_start = None; self.fps = 0
