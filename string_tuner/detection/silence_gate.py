import numpy as np

from ..logger import get_logger
from ..tuner_types import InvalidFrameError

logger = get_logger(__name__)


class SilenceGate:
    """
    Decides whether a frame carries enough energy to be worth analyzing.
    """

    DEFAULT_THRESHOLD = 0.005  # RMS, full scale = 1.0

    def __init__(self, threshold: float = DEFAULT_THRESHOLD):
        if threshold < 0:
            raise ValueError(f"Silence threshold must not be negative, got {threshold}")
        self._threshold = float(threshold)

    @property
    def threshold(self) -> float:
        return self._threshold

    @staticmethod
    def rms(samples) -> float:
        """Root-mean-square amplitude of the frame."""
        data = np.asarray(samples, dtype=np.float64)
        if data.size == 0:
            raise InvalidFrameError("Cannot measure the level of an empty frame")
        return float(np.sqrt(np.mean(np.square(data))))

    def is_silent(self, samples) -> bool:
        return self.is_silent_level(self.rms(samples))

    def is_silent_level(self, level: float) -> bool:
        """Compare an already measured RMS level against the threshold."""
        # A frame exactly at the threshold still counts as sound
        silent = level < self._threshold
        if silent:
            logger.debug(f"Too quiet ({level:.4f} < {self._threshold})")
        return silent
