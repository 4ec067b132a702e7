import numpy as np
import pytest
from blinkkit.eye.blink import LEFT_EYE, RIGHT_EYE, EyeState, ear, average_ear, classify
from blinkkit.io.replay import synthetic_face

def test_ear_formula():
    pts = np.zeros((478,2), dtype=float)
    # p1..p6: corners 0.2 apart, verticals 0.04 and 0.06
    pts[33] = [0.30,0.40]; pts[133] = [0.50,0.40]
    pts[160] = [0.36,0.38]; pts[144] = [0.36,0.42]
    pts[158] = [0.44,0.37]; pts[153] = [0.44,0.43]
    assert ear(pts, LEFT_EYE) == pytest.approx((0.04 + 0.06) / (2*0.2))

def test_ear_ignores_z():
    pts = np.zeros((478,3), dtype=float)
    pts[:,:2] = synthetic_face(0.25)
    pts[:,2] = np.linspace(-1, 1, 478)
    assert ear(pts, LEFT_EYE) == pytest.approx(0.25)

def test_ear_does_not_mutate_input():
    pts = synthetic_face(0.3)
    before = pts.copy()
    ear(pts, RIGHT_EYE)
    assert np.array_equal(pts, before)

def test_degenerate_corners_give_no_reading():
    pts = synthetic_face(0.3, eye_width=0.0)
    assert ear(pts, LEFT_EYE) is None
    assert average_ear(pts) is None

def test_average_is_arithmetic_mean():
    l, r, avg = average_ear(synthetic_face(0.10, 0.30))
    assert l == pytest.approx(0.10) and r == pytest.approx(0.30)
    assert avg == pytest.approx(0.20)

def test_classify_threshold_is_strict():
    assert classify(0.20, 0.21) is EyeState.CLOSED
    assert classify(0.21, 0.21) is EyeState.OPEN
    assert classify(0.30) is EyeState.OPEN

def test_wink_averages_like_blink():
    # one closed eye at 0.05 and one open at 0.3 averages below 0.21
    _, _, avg = average_ear(synthetic_face(0.05, 0.30))
    assert classify(avg) is EyeState.CLOSED
