"""Utility functions for working with musical notes and frequencies."""

import re

import numpy as np

from .logger import get_logger

# Get logger for this module
logger = get_logger(__name__)

NOTE_NAMES_SHARPS = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]
NOTE_NAMES_FLATS = ["C", "Db", "D", "Eb", "E", "F", "Gb", "G", "Ab", "A", "Bb", "B"]

# Note letter, optional accidental and a mandatory octave (e.g. 'E2', 'Bb3', 'F#-1')
NOTE_PATTERN = re.compile(r"^([A-Ga-g])([#b]?)(-?[0-9]+)$")

A4_FREQUENCY = 440.0
A4_MIDI = 69


def cents_between(frequency: float, reference: float) -> float:
    """Interval from reference to frequency in cents (1200 per octave)."""
    return float(1200.0 * np.log2(frequency / reference))


def get_note_name(freq: float, use_flats: bool = False) -> str:
    """Convert frequency to note name using Scientific Pitch Notation (SPN).

    Args:
        freq: Frequency in Hz
        use_flats: If True, use flat notes (e.g., 'Bb') instead of sharps (e.g., 'A#')

    Returns:
        Note name with octave in SPN (e.g., 'A4', 'C#4', 'Bb3'), or '---'
        for a frequency that is not positive

    Note:
        - Middle C is C4 (261.63 Hz)
        - A4 is 440 Hz
        - Octave numbers change between B and C (e.g., B3 -> C4)
    """
    if not np.isfinite(freq) or freq <= 0:
        return "---"

    half_steps = round(12 * np.log2(freq / A4_FREQUENCY))
    midi_number = A4_MIDI + half_steps

    # SPN octave calculation (C4 is middle C)
    octave = (midi_number // 12) - 1
    note_idx = midi_number % 12

    names = NOTE_NAMES_FLATS if use_flats else NOTE_NAMES_SHARPS
    return f"{names[note_idx]}{octave}"


def note_to_frequency(note_name: str, a4: float = A4_FREQUENCY) -> float:
    """Convert an SPN note name to its equal-tempered frequency.

    Args:
        note_name: Note with octave, e.g. 'E2', 'F#3' or 'Bb3'
        a4: Reference pitch for A4 in Hz

    Returns:
        Frequency in Hz

    Raises:
        ValueError: If the name is not a note with an octave number
    """
    match = NOTE_PATTERN.match(str(note_name).strip())
    if not match:
        raise ValueError(f"Invalid note name: {note_name!r}")

    letter, accidental, octave = match.groups()
    note_idx = NOTE_NAMES_SHARPS.index(letter.upper())
    # Cb and B# cross the octave boundary, which the MIDI number absorbs
    if accidental == "b":
        note_idx -= 1
    elif accidental == "#":
        note_idx += 1

    midi_number = (int(octave) + 1) * 12 + note_idx
    frequency = a4 * 2.0 ** ((midi_number - A4_MIDI) / 12.0)
    logger.debug(f"Resolved {note_name} to {frequency:.2f} Hz (MIDI {midi_number})")
    return float(frequency)
