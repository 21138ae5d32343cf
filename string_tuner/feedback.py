"""Human-facing tuning feedback: which way to turn and where the needle sits."""

from typing import Optional, Tuple

from .logger import get_logger
from .note_utils import cents_between
from .tuner_types import TargetTone, TuningDirection

logger = get_logger(__name__)


class TuningFeedback:
    """Turns a detected frequency into a direction and a meter position."""

    DEFAULT_DIRECTION_TOLERANCE_HZ = 2.0
    DEFAULT_DISPLAY_RANGE_CENTS = 50.0
    CENTERED = 0.5

    def __init__(
        self,
        direction_tolerance_hz: float = DEFAULT_DIRECTION_TOLERANCE_HZ,
        display_range_cents: float = DEFAULT_DISPLAY_RANGE_CENTS,
    ):
        """
        Args:
            direction_tolerance_hz: Distance from the target, in Hz, that reads as in tune
            display_range_cents: Deviation that pins the meter to either end
        """
        if direction_tolerance_hz < 0:
            raise ValueError(
                f"Direction tolerance must not be negative, got {direction_tolerance_hz}"
            )
        if display_range_cents <= 0:
            raise ValueError(
                f"Display range must be positive, got {display_range_cents}"
            )
        self._direction_tolerance_hz = direction_tolerance_hz
        self._display_range_cents = display_range_cents

    def direction(self, frequency: float, tone: TargetTone) -> TuningDirection:
        difference = frequency - tone.frequency
        if abs(difference) < self._direction_tolerance_hz:
            return TuningDirection.IN_TUNE
        return TuningDirection.LOWER if difference > 0 else TuningDirection.RAISE

    def display_fraction(
        self, frequency: Optional[float], selected_tone: TargetTone
    ) -> float:
        """Map the deviation from the selected tone onto [0, 1].

        -range cents maps to 0, the target to 0.5 and +range cents to 1.
        Without a frequency the meter stays centered.
        """
        if frequency is None or frequency <= 0:
            return self.CENTERED

        span = self._display_range_cents
        cents = cents_between(frequency, selected_tone.frequency)
        clamped = max(-span, min(span, cents))
        return (clamped + span) / (2 * span)

    def feedback(
        self,
        frequency: float,
        matched_tone: TargetTone,
        selected_tone: Optional[TargetTone] = None,
    ) -> Tuple[TuningDirection, float]:
        """Direction against the matched tone, meter against the selected one.

        The selected tone defaults to the matched tone when the caller has
        not pinned a string.
        """
        direction = self.direction(frequency, matched_tone)
        fraction = self.display_fraction(frequency, selected_tone or matched_tone)
        logger.debug(f"Feedback: {direction.value}, meter at {fraction:.2f}")
        return direction, fraction
