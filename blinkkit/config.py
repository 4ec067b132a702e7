from __future__ import annotations
import yaml
from pathlib import Path
from typing import Any, Dict, Optional, Union
from pydantic import BaseModel, ConfigDict, Field


class DetectorConfig(BaseModel):
    """Blink thresholds. Frozen: a running session never sees it change."""
    model_config = ConfigDict(frozen=True)

    ear_threshold: float = Field(0.21, gt=0)
    consecutive_frames: int = Field(2, ge=1)
    debounce_ms: int = Field(200, ge=0)
    enabled: bool = True


class CaptureConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    camera: Union[int, str] = 0
    width: int = Field(640, gt=0)
    height: int = Field(480, gt=0)
    fps: float = Field(30.0, gt=0)


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    detector: DetectorConfig = Field(default_factory=DetectorConfig)
    capture: CaptureConfig = Field(default_factory=CaptureConfig)

    def override(self, detector: Optional[Dict[str, Any]] = None,
                 capture: Optional[Dict[str, Any]] = None) -> "Settings":
        """Return a copy with the non-None values applied (CLI options)."""
        d = {k: v for k, v in (detector or {}).items() if v is not None}
        c = {k: v for k, v in (capture or {}).items() if v is not None}
        return Settings(
            detector=DetectorConfig(**{**self.detector.model_dump(), **d}),
            capture=CaptureConfig(**{**self.capture.model_dump(), **c}),
        )


def load_config(path: Union[str, Path, None]) -> Settings:
    if path is None or not Path(path).exists():
        return Settings()
    with open(path, "r") as f:
        cfg = yaml.safe_load(f) or {}
    return Settings(**cfg)
