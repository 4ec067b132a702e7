from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Optional
from ..eye.blink import EyeState

log = logging.getLogger(__name__)


@dataclass
class BlinkDetectorState:
    consecutive_closed_frames: int = 0
    is_blinking: bool = False
    last_accepted_ts: float = float("-inf")
    blink_count: int = 0

    def reset(self):
        self.clear_count()
        self.last_accepted_ts = float("-inf")

    def clear_count(self):
        """Fresh count mid-session; last_accepted_ts is kept so debounce still holds."""
        self.consecutive_closed_frames = 0
        self.is_blinking = False
        self.blink_count = 0


class BlinkDetector:
    """
    Two-state machine over per-frame eye states:
    idle -> confirmed_closed after `consecutive_frames` CLOSED frames,
    and back to idle on the next OPEN frame, which is the reopen candidate.
    """
    def __init__(self, consecutive_frames: int = 2):
        self.consecutive_frames = consecutive_frames

    @staticmethod
    def phase(state: BlinkDetectorState) -> str:
        return "confirmed_closed" if state.is_blinking else "idle"

    def step(self, state: BlinkDetectorState, eye: Optional[EyeState]) -> bool:
        """
        Advance one frame. Returns True when this frame is a reopen candidate.
        eye=None is a no-signal frame: the closure in progress is kept as is.
        """
        if eye is None:
            log.debug("no signal, holding closed=%d blinking=%s",
                      state.consecutive_closed_frames, state.is_blinking)
            return False
        if eye is EyeState.CLOSED:
            state.consecutive_closed_frames += 1
            if not state.is_blinking and state.consecutive_closed_frames >= self.consecutive_frames:
                state.is_blinking = True
                log.debug("%s after %d closed frames", self.phase(state), state.consecutive_closed_frames)
            return False
        candidate = state.is_blinking
        state.consecutive_closed_frames = 0
        state.is_blinking = False
        return candidate
