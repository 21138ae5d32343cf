"""Defines the core interfaces for the String Tuner application."""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Iterator, Optional

from ..tuner_types import AudioFrame


class IPitchEstimator(ABC):
    """Interface for monophonic pitch estimators."""

    @abstractmethod
    def estimate(self, samples, sample_rate: int) -> Optional[float]:
        """Return the fundamental frequency in Hz, or None when there is no pitch."""
        pass


class IAudioProvider(ABC):
    """Interface for sources of fixed-size mono frames.

    Providers are context managers: the underlying device or file is held
    only between __enter__ and __exit__.
    """

    @abstractmethod
    def open(self) -> None:
        """Acquire the underlying stream or file."""
        pass

    @abstractmethod
    def close(self) -> None:
        """Release the underlying stream or file."""
        pass

    @abstractmethod
    def frames(self) -> Iterator[AudioFrame]:
        """Yield frames one at a time until the source is exhausted."""
        pass

    @property
    @abstractmethod
    def sample_rate(self) -> int:
        """The sample rate of the audio stream."""
        pass

    @property
    @abstractmethod
    def channels(self) -> int:
        """The number of channels in the audio stream."""
        pass

    def __enter__(self) -> IAudioProvider:
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
