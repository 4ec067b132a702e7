from __future__ import annotations
import logging
from typing import Optional
import numpy as np
import cv2
from ..errors import InitializationError

log = logging.getLogger(__name__)


class FaceLandmarks:
    """
    MediaPipe FaceMesh tracker. Returns the (478, 3) normalized points of the
    first detected face, or None when no face is found.
    """
    def __init__(self, static_image_mode=False, refine_landmarks=True,
                 min_detection_confidence=0.5, min_tracking_confidence=0.5):
        self.opts = dict(static_image_mode=static_image_mode,
                         refine_landmarks=refine_landmarks,
                         max_num_faces=1,
                         min_detection_confidence=min_detection_confidence,
                         min_tracking_confidence=min_tracking_confidence)
        self.mesh = None

    def load(self):
        if self.mesh is not None: return
        try:
            import mediapipe as mp
            self.mesh = mp.solutions.face_mesh.FaceMesh(**self.opts)
        except Exception as e:
            log.error("FaceMesh failed to load: %s", e)
            raise InitializationError(f"FaceMesh unavailable: {e}") from e
        log.info("FaceMesh ready (refine_landmarks=%s)", self.opts["refine_landmarks"])

    def __call__(self, frame_bgr, ts_ms: float) -> Optional[np.ndarray]:
        # FaceMesh tracks on its own clock; ts_ms is part of the tracker interface
        rgb = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)
        res = self.mesh.process(rgb)
        if not res.multi_face_landmarks: return None
        lms = res.multi_face_landmarks[0]
        return np.array([(lm.x, lm.y, lm.z) for lm in lms.landmark], dtype=np.float32)

    def close(self):
        if self.mesh is not None:
            self.mesh.close()
            self.mesh = None
