"""The per-frame analysis pipeline."""

from __future__ import annotations
from typing import Optional

from ..logger import get_logger
from ..tuner_types import (
    STANDARD_TUNING,
    AudioFrame,
    TuningResult,
    TuningStatus,
    TuningTable,
    validate_frame,
)
from ..detection.silence_gate import SilenceGate
from ..detection.pitch_estimator import YinPitchEstimator
from ..note_matcher import NoteMatcher
from ..feedback import TuningFeedback
from .config import TunerSettings
from .interfaces import IPitchEstimator

logger = get_logger(__name__)


class Tuner:
    """Runs silence gate, pitch estimation, matching and feedback on one frame.

    The tuner keeps no state between frames. A caller that lets the user pin
    a string passes its index on every call.
    """

    def __init__(
        self,
        table: TuningTable = STANDARD_TUNING,
        silence_gate: Optional[SilenceGate] = None,
        estimator: Optional[IPitchEstimator] = None,
        matcher: Optional[NoteMatcher] = None,
        feedback: Optional[TuningFeedback] = None,
    ) -> None:
        self.table = table
        self.silence_gate = silence_gate or SilenceGate()
        self.estimator = estimator or YinPitchEstimator()
        self.matcher = matcher or NoteMatcher()
        self.feedback = feedback or TuningFeedback()

        logger.info(f"Tuner ready with {table!r}")

    @classmethod
    def from_settings(cls, settings: TunerSettings) -> Tuner:
        return cls(
            table=settings.tuning,
            silence_gate=SilenceGate(settings.silence_threshold),
            estimator=YinPitchEstimator(
                threshold=settings.yin_threshold,
                min_frequency=settings.min_frequency,
                max_frequency=settings.max_frequency,
            ),
            matcher=NoteMatcher(settings.in_tune_cents),
            feedback=TuningFeedback(
                direction_tolerance_hz=settings.direction_tolerance_hz,
                display_range_cents=settings.display_range_cents,
            ),
        )

    def analyze_frame(
        self, frame: AudioFrame, selected_index: Optional[int] = None
    ) -> TuningResult:
        return self.analyze(frame.samples, frame.sample_rate, selected_index)

    def analyze(
        self, samples, sample_rate: int, selected_index: Optional[int] = None
    ) -> TuningResult:
        """Analyze one frame.

        Args:
            samples: Mono frame with amplitudes in [-1, 1]
            sample_rate: Sample rate in Hz
            selected_index: String pinned by the caller; only moves the meter

        Returns:
            A TuningResult; silence and unclear pitch are results, not errors

        Raises:
            InvalidFrameError: For an empty or too short frame, or a bad sample rate
            IndexError: If selected_index does not point into the table
        """
        data = validate_frame(samples, sample_rate)
        if selected_index is not None and not 0 <= selected_index < len(self.table):
            raise IndexError(
                f"Selected string {selected_index} out of range for {len(self.table)} strings"
            )
        selected = self.table[selected_index or 0]
        rms = self.silence_gate.rms(data)

        if self.silence_gate.is_silent_level(rms):
            return TuningResult(
                status=TuningStatus.SILENT,
                matched_tone=selected,
                selected_tone=selected,
                signal_rms=rms,
            )

        frequency = self.estimator.estimate(data, sample_rate)
        if frequency is None:
            logger.debug(f"Could not determine pitch | level: {rms:.4f}")
            return TuningResult(
                status=TuningStatus.NO_PITCH,
                matched_tone=selected,
                selected_tone=selected,
                signal_rms=rms,
            )

        tone, cents = self.matcher.match(frequency, self.table)
        status = self.matcher.classify(cents)
        if selected_index is None:
            selected = tone
        direction, fraction = self.feedback.feedback(frequency, tone, selected)

        logger.debug(
            f"Frequency: {frequency:.2f} Hz | {tone.label} | {cents:+.2f} cents | {status.value}"
        )
        return TuningResult(
            status=status,
            matched_tone=tone,
            selected_tone=selected,
            signal_rms=rms,
            display_fraction=fraction,
            estimated_frequency=frequency,
            cents_deviation=cents,
            direction=direction,
        )
