"""String Tuner - pitch detection and tuning feedback for stringed instruments."""

from .tuner_types import (
    AudioFrame,
    InvalidFrameError,
    STANDARD_TUNING,
    TargetTone,
    TuningDirection,
    TuningResult,
    TuningStatus,
    TuningTable,
)
from .core.tuner import Tuner

__all__ = [
    "AudioFrame",
    "InvalidFrameError",
    "STANDARD_TUNING",
    "TargetTone",
    "Tuner",
    "TuningDirection",
    "TuningResult",
    "TuningStatus",
    "TuningTable",
]
