from __future__ import annotations
import cv2, logging, time
from typing import Any, Callable, Dict, Optional
from ..errors import DeviceError

log = logging.getLogger(__name__)


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class CameraSource:
    """OpenCV capture device as a frame source: open() / read() / release()."""
    def __init__(self, camera: int|str=0, width: int=640, height: int=480,
                 clock: Callable[[], float]=monotonic_ms):
        self.camera = camera; self.width = width; self.height = height
        self.clock = clock
        self.cap = None
        self.exhausted = False

    def open(self):
        cap = cv2.VideoCapture(self.camera)
        if self.width:  cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.width)
        if self.height: cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.height)
        if not cap.isOpened():
            cap.release()
            raise DeviceError(f"Cannot open camera {self.camera!r}")
        self.cap = cap
        self.exhausted = False
        log.info("camera %r opened", self.camera)

    def read(self) -> Optional[Dict[str, Any]]:
        if self.cap is None: return None
        ok, frame = self.cap.read()
        if not ok:
            # a live device can drop a frame, a video file is done
            if isinstance(self.camera, str):
                self.exhausted = True
            return None
        return {"image": frame, "meta": {"ts_ms": self.clock()}}

    def release(self):
        if self.cap is not None:
            self.cap.release()
            self.cap = None
            log.info("camera %r released", self.camera)
