from typing import Tuple

import numpy as np

from .logger import get_logger
from .note_utils import cents_between
from .tuner_types import TargetTone, TuningStatus, TuningTable

# Get logger for this module
logger = get_logger(__name__)


class NoteMatcher:
    """
    Picks the target tone closest to a detected frequency and measures how
    far off it is, in cents.

    Matching uses plain Hz distance, not pitch distance, and is recomputed
    from scratch on every call; there is no hysteresis between strings.
    """

    DEFAULT_IN_TUNE_CENTS = 10.0

    def __init__(self, in_tune_cents: float = DEFAULT_IN_TUNE_CENTS):
        if in_tune_cents <= 0:
            raise ValueError(f"In-tune window must be positive, got {in_tune_cents}")
        self._in_tune_cents = in_tune_cents

    @property
    def in_tune_cents(self) -> float:
        return self._in_tune_cents

    @staticmethod
    def closest_tone(frequency: float, table: TuningTable) -> TargetTone:
        # min() keeps the first of equally distant tones
        return min(table, key=lambda tone: abs(frequency - tone.frequency))

    def match(self, frequency: float, table: TuningTable) -> Tuple[TargetTone, float]:
        """
        Match a detected frequency against a tuning table.

        Args:
            frequency: Detected frequency in Hz
            table: Target tones to choose from
        Returns:
            The closest tone and the deviation from it in cents
            (positive when sharp, negative when flat)
        Raises:
            ValueError: If the frequency is not a positive number
        """
        if not np.isfinite(frequency) or frequency <= 0:
            raise ValueError(f"Cannot match non-positive frequency {frequency}")

        tone = self.closest_tone(frequency, table)
        cents = cents_between(frequency, tone.frequency)
        logger.debug(
            f"Matched {frequency:.2f}Hz to {tone.label} ({tone.frequency:.2f}Hz), "
            f"{cents:+.2f} cents"
        )
        return tone, cents

    def classify(self, cents: float) -> TuningStatus:
        """Classify a cents deviation as in tune or still detecting."""
        if abs(cents) < self._in_tune_cents:
            return TuningStatus.IN_TUNE
        return TuningStatus.DETECTING
