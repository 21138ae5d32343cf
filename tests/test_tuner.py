import unittest
from unittest import mock

import numpy as np

from string_tuner import (
    STANDARD_TUNING,
    AudioFrame,
    InvalidFrameError,
    Tuner,
    TuningDirection,
    TuningStatus,
    TuningTable,
)
from string_tuner.core.config import TunerSettings

SAMPLE_RATE = 44100
FRAME_SIZE = 2048


def _make_sine(freq, sr=SAMPLE_RATE, size=FRAME_SIZE, amplitude=0.5):
    """Generate a pure sine frame."""
    t = np.arange(size) / sr
    return amplitude * np.sin(2 * np.pi * freq * t)


class TestTunerPipeline(unittest.TestCase):
    def setUp(self):
        self.tuner = Tuner()

    def assertWellFormed(self, result):
        self.assertEqual(result.cents_deviation is not None, result.estimated_frequency is not None)
        self.assertEqual(
            result.estimated_frequency is not None,
            result.status in (TuningStatus.DETECTING, TuningStatus.IN_TUNE),
        )
        self.assertGreaterEqual(result.display_fraction, 0.0)
        self.assertLessEqual(result.display_fraction, 1.0)

    def test_a2_in_tune(self):
        result = self.tuner.analyze(_make_sine(110.0), SAMPLE_RATE)
        self.assertWellFormed(result)
        self.assertEqual(result.status, TuningStatus.IN_TUNE)
        self.assertEqual(result.matched_tone.label, "A2")
        self.assertEqual(result.selected_tone.label, "A2")
        self.assertLess(abs(result.cents_deviation), 1.0)
        self.assertEqual(result.direction, TuningDirection.IN_TUNE)
        self.assertAlmostEqual(result.display_fraction, 0.5, delta=0.01)

    def test_440_matches_e4(self):
        result = self.tuner.analyze(_make_sine(440.0), SAMPLE_RATE)
        self.assertWellFormed(result)
        self.assertEqual(result.status, TuningStatus.DETECTING)
        self.assertEqual(result.matched_tone.label, "E4")
        self.assertGreater(result.cents_deviation, 400)
        self.assertEqual(result.direction, TuningDirection.LOWER)
        self.assertEqual(result.display_fraction, 1.0)

    def test_flat_string_needs_raising(self):
        result = self.tuner.analyze(_make_sine(190.0), SAMPLE_RATE)
        self.assertEqual(result.status, TuningStatus.DETECTING)
        self.assertEqual(result.matched_tone.label, "G3")
        self.assertLess(result.cents_deviation, -10)
        self.assertEqual(result.direction, TuningDirection.RAISE)
        self.assertLess(result.display_fraction, 0.5)

    def test_silence(self):
        result = self.tuner.analyze(np.zeros(FRAME_SIZE), SAMPLE_RATE)
        self.assertWellFormed(result)
        self.assertEqual(result.status, TuningStatus.SILENT)
        self.assertEqual(result.display_fraction, 0.5)
        self.assertIsNone(result.estimated_frequency)
        self.assertIsNone(result.cents_deviation)
        self.assertIsNone(result.direction)
        self.assertEqual(result.matched_tone, STANDARD_TUNING[0])
        self.assertEqual(result.signal_rms, 0.0)

    def test_quiet_tone_is_silent(self):
        result = self.tuner.analyze(_make_sine(110.0, amplitude=0.002), SAMPLE_RATE)
        self.assertEqual(result.status, TuningStatus.SILENT)

    def test_out_of_band_is_no_pitch(self):
        result = self.tuner.analyze(_make_sine(2000.0), SAMPLE_RATE)
        self.assertWellFormed(result)
        self.assertEqual(result.status, TuningStatus.NO_PITCH)
        self.assertIsNone(result.estimated_frequency)
        self.assertEqual(result.display_fraction, 0.5)
        self.assertGreater(result.signal_rms, 0.3)

    def test_constant_frame_is_no_pitch(self):
        # Loud enough to pass the gate but with nothing periodic in it
        for level in [0.007, 0.00749, 0.01744, -0.3]:
            with self.subTest(level=level):
                result = self.tuner.analyze(np.full(FRAME_SIZE, level), SAMPLE_RATE)
                self.assertWellFormed(result)
                self.assertEqual(result.status, TuningStatus.NO_PITCH)
                self.assertAlmostEqual(result.signal_rms, abs(level))

    def test_level_is_measured_once(self):
        gate = self.tuner.silence_gate
        with mock.patch.object(gate, "rms", wraps=gate.rms) as rms:
            result = self.tuner.analyze(_make_sine(110.0), SAMPLE_RATE)
        rms.assert_called_once()
        self.assertEqual(result.status, TuningStatus.IN_TUNE)

    def test_pinned_string_moves_only_the_meter(self):
        result = self.tuner.analyze(_make_sine(110.0), SAMPLE_RATE, selected_index=0)
        self.assertEqual(result.matched_tone.label, "A2")
        self.assertEqual(result.selected_tone.label, "E2")
        self.assertEqual(result.status, TuningStatus.IN_TUNE)
        self.assertEqual(result.direction, TuningDirection.IN_TUNE)
        self.assertEqual(result.display_fraction, 1.0)

    def test_pinned_string_when_silent(self):
        result = self.tuner.analyze(np.zeros(FRAME_SIZE), SAMPLE_RATE, selected_index=3)
        self.assertEqual(result.matched_tone.label, "G3")
        self.assertEqual(result.selected_tone.label, "G3")

    def test_no_state_between_frames(self):
        first = self.tuner.analyze(_make_sine(110.0), SAMPLE_RATE)
        self.tuner.analyze(_make_sine(329.63), SAMPLE_RATE)
        self.tuner.analyze(np.zeros(FRAME_SIZE), SAMPLE_RATE)
        again = self.tuner.analyze(_make_sine(110.0), SAMPLE_RATE)
        self.assertEqual(first, again)

    def test_every_standard_string(self):
        for tone in STANDARD_TUNING:
            with self.subTest(tone=tone.label):
                result = self.tuner.analyze(_make_sine(tone.frequency), SAMPLE_RATE)
                self.assertEqual(result.matched_tone, tone)
                self.assertEqual(result.status, TuningStatus.IN_TUNE)

    def test_analyze_frame(self):
        frame = AudioFrame(_make_sine(196.0, sr=48000), 48000)
        result = self.tuner.analyze_frame(frame)
        self.assertEqual(result.matched_tone.label, "G3")
        self.assertEqual(result.status, TuningStatus.IN_TUNE)

    def test_precondition_violations(self):
        with self.assertRaises(InvalidFrameError):
            self.tuner.analyze(np.array([]), SAMPLE_RATE)
        with self.assertRaises(InvalidFrameError):
            self.tuner.analyze(np.zeros(3), SAMPLE_RATE)
        with self.assertRaises(InvalidFrameError):
            self.tuner.analyze(_make_sine(110.0), 0)

    def test_invalid_selected_index(self):
        with self.assertRaises(IndexError):
            self.tuner.analyze(_make_sine(110.0), SAMPLE_RATE, selected_index=6)
        with self.assertRaises(IndexError):
            self.tuner.analyze(_make_sine(110.0), SAMPLE_RATE, selected_index=-1)


class TestTunerConfiguration(unittest.TestCase):
    def test_from_settings(self):
        settings = TunerSettings(in_tune_cents=1.0)
        tuner = Tuner.from_settings(settings)
        result = tuner.analyze(_make_sine(110.0 * 2 ** (5 / 1200)), SAMPLE_RATE)
        self.assertEqual(result.status, TuningStatus.DETECTING)
        self.assertAlmostEqual(result.cents_deviation, 5.0, delta=1.0)

    def test_custom_table(self):
        drop_d = TuningTable(
            [("D2", 73.42), ("A2", 110.0), ("D3", 146.83), ("G3", 196.0), ("B3", 246.94), ("E4", 329.63)],
            name="drop-d",
        )
        tuner = Tuner(table=drop_d)
        result = tuner.analyze(_make_sine(73.42), SAMPLE_RATE)
        self.assertEqual(result.matched_tone.label, "D2")
        self.assertEqual(result.status, TuningStatus.IN_TUNE)

    def test_higher_silence_threshold(self):
        tuner = Tuner.from_settings(TunerSettings(silence_threshold=0.5))
        result = tuner.analyze(_make_sine(110.0), SAMPLE_RATE)
        self.assertEqual(result.status, TuningStatus.SILENT)


if __name__ == "__main__":
    unittest.main()
