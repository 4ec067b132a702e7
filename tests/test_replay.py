import json
from blinkkit.io.replay import ReplaySource, load_trace, ear_frames
from blinkkit.eye.blink import average_ear

def test_load_yaml_trace(tmp_path):
    p = tmp_path / "trace.yaml"
    p.write_text("- {ts: 0, ear: 0.3}\n- {ts: 33}\n- {ts: 66, left: 0.1, right: 0.2}\n")
    frames = load_trace(p)
    assert [t for t,_ in frames] == [0.0, 33.0, 66.0]
    assert frames[1][1] is None
    _, _, avg = average_ear(frames[2][1])
    assert abs(avg - 0.15) < 1e-9

def test_load_json_trace_with_frames_key(tmp_path):
    p = tmp_path / "trace.json"
    p.write_text(json.dumps({"frames": [{"ts": 5, "ear": 0.2}]}))
    assert len(load_trace(p)) == 1

def test_replay_source_in_order():
    src = ReplaySource(ear_frames([0.3, None], step_ms=10, t0=100))
    src.open()
    a, b = src.read(), src.read()
    assert a["meta"]["ts_ms"] == 100.0 and b["meta"]["ts_ms"] == 110.0
    assert b["image"] is None
    assert src.exhausted and src.read() is None

def test_single_eye_row_is_used_for_both(tmp_path):
    p = tmp_path / "trace.yaml"
    p.write_text("- {ts: 0, left: 0.1}\n- {ts: 33, right: 0.3}\n")
    (_, a), (_, b) = load_trace(p)
    assert abs(average_ear(a)[2] - 0.1) < 1e-9
    assert abs(average_ear(b)[2] - 0.3) < 1e-9

def test_null_eye_is_a_no_face_frame(tmp_path):
    p = tmp_path / "trace.yaml"
    p.write_text("- {ts: 0, left: null, right: 0.3}\n- {ts: 33, left: null}\n- {ts: 66, ear: null}\n")
    assert [f for _, f in load_trace(p)] == [None, None, None]
