"""Command-line interface for String Tuner."""

from .main import main

__all__ = ["main"]
