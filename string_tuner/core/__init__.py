"""Core components for the String Tuner application."""

# Import interfaces for easier access
from .interfaces import (
    IAudioProvider,
    IPitchEstimator,
)

__all__ = ["IAudioProvider", "IPitchEstimator"]
