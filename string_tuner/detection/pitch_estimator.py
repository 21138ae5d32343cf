"""YIN pitch estimation for monophonic string tones."""

from __future__ import annotations
from typing import ClassVar, Optional

import numpy as np

from ..logger import get_logger
from ..tuner_types import validate_frame
from ..core.interfaces import IPitchEstimator

logger = get_logger(__name__)


class YinPitchEstimator(IPitchEstimator):
    """Estimate the fundamental frequency of a frame with the YIN method.

    The frame is compared against lagged copies of itself; the cumulative
    mean normalized difference (CMND) curve dips towards zero at lags equal
    to the period. The first dip under ``threshold`` is taken, refined with a
    parabola through its neighbours and converted to Hz.
    """

    DEFAULT_THRESHOLD: ClassVar[float] = 0.2
    MIN_FREQUENCY: ClassVar[float] = 70.0  # Hz - below the lowest string
    MAX_FREQUENCY: ClassVar[float] = 600.0  # Hz - above the highest string
    # Parabolas flatter than this fall back to the integer lag
    MIN_CURVATURE: ClassVar[float] = 1e-12

    def __init__(
        self,
        threshold: float = DEFAULT_THRESHOLD,
        min_frequency: float = MIN_FREQUENCY,
        max_frequency: float = MAX_FREQUENCY,
    ) -> None:
        """Initialize the estimator.

        Args:
            threshold: CMND value a dip must fall under to be accepted early
            min_frequency: Lowest plausible fundamental in Hz
            max_frequency: Highest plausible fundamental in Hz
        """
        if not 0 < min_frequency < max_frequency:
            raise ValueError(
                f"Invalid detection band: {min_frequency} - {max_frequency} Hz"
            )
        self._threshold = threshold
        self._min_frequency = min_frequency
        self._max_frequency = max_frequency

        logger.info(
            f"YIN estimator initialized: threshold={threshold}, "
            f"band={min_frequency}-{max_frequency}Hz"
        )

    @property
    def threshold(self) -> float:
        return self._threshold

    @property
    def min_frequency(self) -> float:
        return self._min_frequency

    @property
    def max_frequency(self) -> float:
        return self._max_frequency

    def cmnd(self, samples) -> np.ndarray:
        """Return the cumulative mean normalized difference curve of a frame.

        The curve has ``len(samples) // 2`` entries; index 0 is fixed at 1.
        """
        data = validate_frame(samples)
        return self._cmnd(data)

    @staticmethod
    def _cmnd(data: np.ndarray) -> np.ndarray:
        half = data.size // 2
        curve = np.ones(half, dtype=np.float64)
        if half < 2:
            return curve

        head = data[:half]

        # d(tau) = sum((x[j] - x[j + tau])^2), summed directly so that a
        # constant frame gives exactly zero at every lag
        windows = np.lib.stride_tricks.sliding_window_view(data, half)[1:half]
        diff = np.sum(np.square(windows - head), axis=1)
        taus = np.arange(1, half)

        running = np.cumsum(diff)
        normalized = np.ones_like(diff)
        np.divide(diff * taus, running, out=normalized, where=running != 0)
        curve[1:] = normalized
        return curve

    def _pick_lag(self, curve: np.ndarray) -> Optional[int]:
        """Choose the lag of the period, or None when the curve has no dip."""
        if curve.size < 4:
            return None

        lags = np.arange(1, curve.size - 1)
        inner = curve[1:-1]
        is_dip = (inner < curve[:-2]) & (inner < curve[2:]) & (lags >= 2)
        dips = lags[is_dip]
        if dips.size == 0:
            return None

        accepted = dips[curve[dips] < self._threshold]
        if accepted.size:
            return int(accepted[0])

        # Nothing under the threshold: best local minimum, first one on ties
        return int(dips[np.argmin(curve[dips])])

    def _refine_lag(self, curve: np.ndarray, lag: int) -> float:
        y0, y1, y2 = curve[lag - 1], curve[lag], curve[lag + 1]
        denominator = 2.0 * (2.0 * y1 - y2 - y0)
        if not np.isfinite(denominator) or abs(denominator) < self.MIN_CURVATURE:
            logger.debug(f"Flat CMND around lag {lag}, skipping interpolation")
            return float(lag)
        return lag + (y2 - y0) / denominator

    def estimate(self, samples, sample_rate: int) -> Optional[float]:
        """Estimate the fundamental frequency of a frame.

        Args:
            samples: Mono frame, at least 4 samples
            sample_rate: Sample rate in Hz

        Returns:
            Frequency in Hz inside the detection band, or None if there is no pitch

        Raises:
            InvalidFrameError: If the frame or sample rate cannot be analyzed
        """
        data = validate_frame(samples, sample_rate)
        curve = self._cmnd(data)

        lag = self._pick_lag(curve)
        if lag is None:
            logger.debug("No local minimum in CMND curve")
            return None

        refined = self._refine_lag(curve, lag)
        frequency = sample_rate / refined if refined > 0 else float("inf")

        if not np.isfinite(frequency) or not (
            self._min_frequency <= frequency <= self._max_frequency
        ):
            logger.debug(
                f"Rejected {frequency:.1f}Hz (lag {refined:.2f}, "
                f"cmnd {curve[lag]:.3f}) outside {self._min_frequency}-{self._max_frequency}Hz"
            )
            return None

        logger.debug(f"Pitch {frequency:.2f}Hz at lag {refined:.2f} (cmnd {curve[lag]:.3f})")
        return float(frequency)
