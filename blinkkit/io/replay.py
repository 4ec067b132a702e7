from __future__ import annotations
import json, yaml
import numpy as np
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple
from ..eye.blink import LEFT_EYE, RIGHT_EYE, EyeLandmarkSet

N_POINTS = 478  # FaceMesh with refined iris landmarks

Frame = Tuple[float, Optional[np.ndarray]]


def _place_eye(pts: np.ndarray, eye: EyeLandmarkSet, cx: float, cy: float,
               ear_value: float, width: float):
    # lids at +-width/6 from centre, lid gap = ear * width, so both verticals equal ear*width
    h = ear_value * width
    pts[eye.outer] = (cx - width/2, cy)
    pts[eye.inner] = (cx + width/2, cy)
    pts[eye.upper_a] = (cx - width/6, cy - h/2)
    pts[eye.upper_b] = (cx + width/6, cy - h/2)
    pts[eye.lower_a] = (cx - width/6, cy + h/2)
    pts[eye.lower_b] = (cx + width/6, cy + h/2)


def synthetic_face(left_ear: float, right_ear: Optional[float] = None, eye_width: float = 0.1) -> np.ndarray:
    """
    (478, 2) normalized landmarks whose eyes give exactly the requested EARs.
    eye_width=0 produces collapsed eye corners (no reliable reading).
    """
    right_ear = left_ear if right_ear is None else right_ear
    pts = np.full((N_POINTS, 2), 0.5, dtype=np.float64)
    _place_eye(pts, LEFT_EYE, 0.35, 0.4, left_ear, eye_width)
    _place_eye(pts, RIGHT_EYE, 0.65, 0.4, right_ear, eye_width)
    return pts


class ReplaySource:
    """Frame source over a fixed, ordered list of (ts_ms, landmarks|None)."""
    def __init__(self, frames: Iterable[Frame]):
        self.frames: List[Frame] = list(frames)
        self.pos = 0
        self.opened = False

    def open(self):
        self.opened = True

    def read(self) -> Optional[Dict[str, Any]]:
        if self.exhausted: return None
        ts, payload = self.frames[self.pos]
        self.pos += 1
        return {"image": payload, "meta": {"ts_ms": float(ts)}}

    @property
    def exhausted(self) -> bool:
        return self.pos >= len(self.frames)

    def release(self):
        self.opened = False


class ReplayLandmarks:
    """Landmark source for ReplaySource frames: the payload already is the landmark array."""
    def load(self):
        pass

    def __call__(self, image, ts_ms: float) -> Optional[np.ndarray]:
        return image

    def close(self):
        pass


def ear_frames(ears: Iterable[Optional[float]], step_ms: float = 33.0, t0: float = 0.0) -> List[Frame]:
    """Evenly spaced frames from a list of EAR values; None is a no-face frame."""
    return [(t0 + i*step_ms, None if e is None else synthetic_face(e)) for i, e in enumerate(ears)]


def load_trace(path: str|Path) -> List[Frame]:
    """
    Read a YAML/JSON trace: a list of {ts, ear} or {ts, left, right}.
    A row giving only one eye uses it for both; a row without EAR values,
    or with a null one, is a frame with no face.
    """
    text = Path(path).read_text()
    rows = json.loads(text) if str(path).endswith(".json") else yaml.safe_load(text)
    if isinstance(rows, dict): rows = rows.get("frames", [])
    out: List[Frame] = []
    for row in rows or []:
        ts = float(row["ts"])
        if "left" in row or "right" in row:
            left = row.get("left", row.get("right"))
            right = row.get("right", row.get("left"))
            if left is None or right is None:
                out.append((ts, None))
            else:
                out.append((ts, synthetic_face(float(left), float(right))))
        elif row.get("ear") is not None:
            out.append((ts, synthetic_face(float(row["ear"]))))
        else:
            out.append((ts, None))
    return out
