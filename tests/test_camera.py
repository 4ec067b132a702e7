import numpy as np
import pytest
from blinkkit.errors import DeviceError
from blinkkit.io import camera
from blinkkit.io.camera import CameraSource

class FakeCapture:
    def __init__(self, src, frames=2, opened=True):
        self.src = src; self.left = frames; self.opened = opened; self.released = False
    def set(self, prop, value):
        return True
    def isOpened(self):
        return self.opened
    def read(self):
        if self.left == 0: return False, None
        self.left -= 1
        return True, np.zeros((4,4,3), np.uint8)
    def release(self):
        self.released = True

def test_video_file_end_marks_exhausted(monkeypatch):
    monkeypatch.setattr(camera.cv2, "VideoCapture", lambda src: FakeCapture(src))
    src = CameraSource("clip.mp4", clock=lambda: 5.0)
    src.open()
    assert src.read()["meta"]["ts_ms"] == 5.0
    src.read()
    assert not src.exhausted
    assert src.read() is None and src.exhausted

def test_device_dropped_frame_is_not_exhaustion(monkeypatch):
    monkeypatch.setattr(camera.cv2, "VideoCapture", lambda src: FakeCapture(src, frames=0))
    src = CameraSource(0)
    src.open()
    assert src.read() is None and not src.exhausted

def test_unopened_device_raises(monkeypatch):
    monkeypatch.setattr(camera.cv2, "VideoCapture", lambda src: FakeCapture(src, opened=False))
    with pytest.raises(DeviceError):
        CameraSource(3).open()
