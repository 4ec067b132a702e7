from __future__ import annotations
import logging
from typing import Callable, Optional
from .state import BlinkDetectorState

log = logging.getLogger(__name__)

BlinkCallback = Callable[[int], None]


class DebounceGate:
    """Accepts a reopen candidate only if enabled and debounce_ms have passed."""
    def __init__(self, debounce_ms: int = 200, enabled: bool = True):
        self.debounce_ms = debounce_ms
        self.enabled = enabled

    def accepts(self, state: BlinkDetectorState, now_ms: float) -> bool:
        if not self.enabled:
            log.debug("candidate at %.0fms rejected: gate disabled", now_ms)
            return False
        elapsed = now_ms - state.last_accepted_ts
        if elapsed < self.debounce_ms:
            log.debug("candidate at %.0fms rejected: %.0fms since last blink", now_ms, elapsed)
            return False
        return True


class BlinkEmitter:
    """
    Owns the blink count. accept() increments it once and calls the
    downstream callback once; a failing callback is logged, not undone.
    """
    def __init__(self, callback: Optional[BlinkCallback] = None):
        self.callback = callback

    def accept(self, state: BlinkDetectorState, now_ms: float) -> int:
        state.last_accepted_ts = now_ms
        state.blink_count += 1
        count = state.blink_count
        log.debug("blink #%d at %.0fms", count, now_ms)
        if self.callback is not None:
            try:
                self.callback(count)
            except Exception:
                log.exception("blink callback failed for blink #%d", count)
        return count
