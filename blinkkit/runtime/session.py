from __future__ import annotations
import logging
from enum import Enum
from typing import Any, Dict, Optional
from ..config import DetectorConfig
from ..detect.gate import BlinkCallback, BlinkEmitter, DebounceGate
from ..detect.state import BlinkDetector, BlinkDetectorState
from ..errors import DeviceError, InitializationError, SessionStateError
from ..eye.blink import EyeState, average_ear, classify
from .events import Diagnostics
from .rate import RateMonitor
from .scheduler import Scheduler

log = logging.getLogger(__name__)


class Lifecycle(str, Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"
    RUNNING = "running"
    STOPPED = "stopped"


class SessionController:
    """
    Owns one blink-counting session: the tracker, the frame source, the
    detector state and the frame loop.

    Every tick reads one frame, runs the landmark source on it and feeds the
    result through classifier -> detector -> debounce gate -> emitter, then
    asks the scheduler for the next tick. Everything runs on the scheduler's
    thread, so the detector state needs no locking and the blink callback is
    called synchronously from inside the tick.

    Frames without a face, or with collapsed eye corners, are no-signal
    frames: the detector keeps its closed-frame count and blinking flag as
    they were, so a tracker dropout in the middle of a blink does not
    restart confirmation.

    A source that reports `exhausted` (end of a video file or replay) stops
    the session on the first tick that gets no frame.
    """
    def __init__(self, tracker, source, scheduler: Scheduler,
                 config: Optional[DetectorConfig] = None,
                 on_blink: Optional[BlinkCallback] = None):
        self.tracker = tracker
        self.source = source
        self.scheduler = scheduler
        self.state = BlinkDetectorState()
        self.rate = RateMonitor()
        self.emitter = BlinkEmitter(on_blink)
        self.lifecycle = Lifecycle.UNINITIALIZED
        self.avg_ear = 0.0
        self._handle: Any = None
        self.configure(config or DetectorConfig())

    def configure(self, config: DetectorConfig):
        if self.lifecycle is Lifecycle.RUNNING:
            raise SessionStateError("configuration is fixed while the session is running")
        self.config = config
        self.detector = BlinkDetector(config.consecutive_frames)
        self.gate = DebounceGate(config.debounce_ms, config.enabled)

    @property
    def is_running(self) -> bool:
        return self.lifecycle is Lifecycle.RUNNING

    @property
    def blink_count(self) -> int:
        return self.state.blink_count

    def load(self):
        """Load the tracker: UNINITIALIZED -> READY."""
        if self.lifecycle is not Lifecycle.UNINITIALIZED:
            raise SessionStateError(f"cannot load from {self.lifecycle.value}")
        try:
            self.tracker.load()
        except InitializationError:
            raise
        except Exception as e:
            raise InitializationError(f"tracker failed to load: {e}") from e
        self.lifecycle = Lifecycle.READY

    def start(self):
        if self.lifecycle is Lifecycle.UNINITIALIZED:
            self.load()
        if self.lifecycle is not Lifecycle.READY:
            raise SessionStateError(f"cannot start from {self.lifecycle.value}")
        try:
            self.source.open()
        except DeviceError:
            raise
        except Exception as e:
            raise DeviceError(f"frame source unavailable: {e}") from e
        self.state.reset()
        self.rate.reset()
        self.avg_ear = 0.0
        self.lifecycle = Lifecycle.RUNNING
        log.info("session started (%s)", self.config.model_dump())
        self._handle = self.scheduler.request(self._on_tick)

    def stop(self):
        if self.lifecycle is Lifecycle.STOPPED: return
        was_running = self.lifecycle is Lifecycle.RUNNING
        self.lifecycle = Lifecycle.STOPPED
        self.scheduler.cancel(self._handle)
        self._handle = None
        if was_running:
            self.source.release()
        self.tracker.close()
        log.info("session stopped after %d blinks", self.state.blink_count)

    def reset(self):
        """Start a fresh count without stopping the loop or releasing the source."""
        self.state.clear_count()
        log.info("blink count reset")

    def diagnostics(self) -> Diagnostics:
        return Diagnostics(avg_ear=self.avg_ear, fps=self.rate.fps,
                           blink_count=self.state.blink_count, is_running=self.is_running)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.stop()

    def _on_tick(self):
        self._handle = None
        if self.lifecycle is not Lifecycle.RUNNING: return
        try:
            frame = self.source.read()
            if frame is not None:
                self._process_frame(frame)
            elif getattr(self.source, "exhausted", False):
                log.info("frame source exhausted")
                self.stop()
        finally:
            # the blink callback may have stopped the session
            if self.lifecycle is Lifecycle.RUNNING:
                self._handle = self.scheduler.request(self._on_tick)

    def _read_eye(self, image, ts: float) -> Optional[EyeState]:
        try:
            pts = self.tracker(image, ts)
        except Exception:
            log.exception("landmark source failed at %.0fms, frame skipped", ts)
            return None
        if pts is None:
            log.debug("no face at %.0fms", ts)
            return None
        reading = average_ear(pts)
        if reading is None:
            log.debug("degenerate eye corners at %.0fms", ts)
            return None
        self.avg_ear = reading[2]
        return classify(self.avg_ear, self.config.ear_threshold)

    def _process_frame(self, frame: Dict[str, Any]) -> Optional[int]:
        ts = float(frame["meta"]["ts_ms"])
        self.rate.tick(ts)
        eye = self._read_eye(frame["image"], ts)
        if self.detector.step(self.state, eye) and self.gate.accepts(self.state, ts):
            return self.emitter.accept(self.state, ts)
        return None
