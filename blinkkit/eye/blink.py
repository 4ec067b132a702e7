from __future__ import annotations
import math
from enum import Enum
from typing import NamedTuple, Optional, Tuple
import numpy as np


class EyeLandmarkSet(NamedTuple):
    """FaceMesh indices p1..p6 of one eye, in EAR order."""
    outer: int     # p1
    upper_a: int   # p2
    upper_b: int   # p3
    inner: int     # p4
    lower_b: int   # p5
    lower_a: int   # p6


LEFT_EYE = EyeLandmarkSet(33, 160, 158, 133, 153, 144)
RIGHT_EYE = EyeLandmarkSet(362, 385, 387, 263, 373, 380)


class EyeState(str, Enum):
    OPEN = "open"
    CLOSED = "closed"


def _dist(a, b) -> float:
    return math.hypot(float(a[0]) - float(b[0]), float(a[1]) - float(b[1]))


def ear(pts: np.ndarray, eye: EyeLandmarkSet) -> Optional[float]:
    """
    Eye aspect ratio (|p2-p6| + |p3-p5|) / (2*|p1-p4|) on (x, y) only.
    Returns None when the corner distance is zero or the result is not finite.
    """
    p1, p2, p3, p4, p5, p6 = (pts[i] for i in eye)
    horizontal = _dist(p1, p4)
    if horizontal == 0.0:
        return None
    value = (_dist(p2, p6) + _dist(p3, p5)) / (2.0 * horizontal)
    return value if math.isfinite(value) else None


def average_ear(pts: np.ndarray, left: EyeLandmarkSet = LEFT_EYE,
                right: EyeLandmarkSet = RIGHT_EYE) -> Optional[Tuple[float, float, float]]:
    """(left, right, mean) or None if either eye has no reliable reading."""
    ear_l, ear_r = ear(pts, left), ear(pts, right)
    if ear_l is None or ear_r is None:
        return None
    return ear_l, ear_r, (ear_l + ear_r) / 2.0


def classify(avg_ear: float, thr: float = 0.21) -> EyeState:
    # both eyes averaged: a one-eyed wink is not told apart from a blink
    return EyeState.CLOSED if avg_ear < thr else EyeState.OPEN
