"""Type definitions for the String Tuner project."""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, Optional, Tuple, Union

import numpy as np

# Shortest frame that still forms a lag window
MIN_FRAME_LENGTH = 4


class InvalidFrameError(ValueError):
    """Raised when a frame or sample rate cannot be analyzed at all."""


def validate_frame(samples, sample_rate: Optional[int] = None) -> np.ndarray:
    """Check analysis preconditions and return the samples as a float64 array.

    Raises:
        InvalidFrameError: empty, multi-channel or too short frame, or a
            non-positive sample rate
    """
    if sample_rate is not None and sample_rate <= 0:
        raise InvalidFrameError(f"Sample rate must be positive, got {sample_rate}")

    data = np.asarray(samples, dtype=np.float64)
    if data.ndim != 1:
        raise InvalidFrameError(
            f"Expected a mono frame (1-D), got an array of shape {data.shape}"
        )
    if data.size == 0:
        raise InvalidFrameError("Cannot analyze an empty frame")
    if data.size < MIN_FRAME_LENGTH:
        raise InvalidFrameError(
            f"Frame of {data.size} samples is shorter than {MIN_FRAME_LENGTH}"
        )
    return data


@dataclass(frozen=True, eq=False)
class AudioFrame:
    """One window of mono samples and the rate they were captured at."""

    samples: np.ndarray  # amplitudes in [-1, 1]
    sample_rate: int  # Hz

    def __len__(self) -> int:
        return len(self.samples)

    @property
    def duration(self) -> float:
        """Length of the frame in seconds."""
        return len(self.samples) / self.sample_rate


@dataclass(frozen=True)
class TargetTone:
    """A string label and the frequency it should be tuned to."""

    label: str  # e.g. 'A2'
    frequency: float  # Hz

    def __str__(self):
        return f"{self.label} ({self.frequency:.2f} Hz)"


class TuningTable:
    """Ordered, immutable set of target tones with unique labels."""

    def __init__(self, tones: Iterable[Union[TargetTone, Tuple[str, float]]], name: str = "custom"):
        converted = []
        for tone in tones:
            if not isinstance(tone, TargetTone):
                label, frequency = tone
                tone = TargetTone(str(label), float(frequency))
            converted.append(tone)

        if not converted:
            raise ValueError("A tuning table needs at least one target tone")

        labels = [tone.label for tone in converted]
        duplicates = sorted({label for label in labels if labels.count(label) > 1})
        if duplicates:
            raise ValueError(f"Duplicate labels in tuning table: {', '.join(duplicates)}")

        for tone in converted:
            if not np.isfinite(tone.frequency) or tone.frequency <= 0:
                raise ValueError(
                    f"Target frequency for {tone.label} must be positive, got {tone.frequency}"
                )

        self.name = name
        self._tones: Tuple[TargetTone, ...] = tuple(converted)

    def __getitem__(self, index):
        return self._tones[index]

    def __len__(self) -> int:
        return len(self._tones)

    def __iter__(self) -> Iterator[TargetTone]:
        return iter(self._tones)

    def __eq__(self, other) -> bool:
        if not isinstance(other, TuningTable):
            return NotImplemented
        return self._tones == other._tones

    def __hash__(self) -> int:
        return hash(self._tones)

    def __repr__(self) -> str:
        tones = ", ".join(f"{t.label}={t.frequency:.2f}" for t in self._tones)
        return f"TuningTable({self.name!r}: {tones})"

    @property
    def labels(self) -> Tuple[str, ...]:
        return tuple(tone.label for tone in self._tones)

    def index_of(self, label: str) -> int:
        """Return the position of the tone with the given label.

        Raises:
            KeyError: If no tone carries that label
        """
        for index, tone in enumerate(self._tones):
            if tone.label == label:
                return index
        raise KeyError(f"No string labelled {label!r} in tuning {self.name!r}")


STANDARD_TUNING = TuningTable(
    [
        ("E2", 82.41),
        ("A2", 110.00),
        ("D3", 146.83),
        ("G3", 196.00),
        ("B3", 246.94),
        ("E4", 329.63),
    ],
    name="standard",
)


class TuningStatus(Enum):
    """Outcome of analyzing a single frame."""

    SILENT = "silent"
    NO_PITCH = "no-pitch"
    DETECTING = "detecting"
    IN_TUNE = "in-tune"


class TuningDirection(Enum):
    """Which way the string has to be adjusted."""

    IN_TUNE = "in tune"
    LOWER = "lower"  # sharp
    RAISE = "raise"  # flat


@dataclass(frozen=True)
class TuningResult:
    """Everything the presentation layer needs for one analyzed frame."""

    status: TuningStatus
    matched_tone: TargetTone
    selected_tone: TargetTone
    signal_rms: float
    display_fraction: float = 0.5
    estimated_frequency: Optional[float] = None
    cents_deviation: Optional[float] = None
    direction: Optional[TuningDirection] = None

    @property
    def has_pitch(self) -> bool:
        return self.estimated_frequency is not None
