import unittest

import numpy as np

from string_tuner.tuner_types import (
    STANDARD_TUNING,
    AudioFrame,
    InvalidFrameError,
    TargetTone,
    TuningTable,
    validate_frame,
)


class TestTuningTable(unittest.TestCase):
    def test_standard_tuning(self):
        self.assertEqual(STANDARD_TUNING.labels, ("E2", "A2", "D3", "G3", "B3", "E4"))
        self.assertEqual(STANDARD_TUNING[1], TargetTone("A2", 110.0))
        self.assertEqual(len(STANDARD_TUNING), 6)

    def test_accepts_pairs_and_tones(self):
        table = TuningTable([("E2", 82.41), TargetTone("A2", 110.0)])
        self.assertEqual(table.labels, ("E2", "A2"))
        self.assertIsInstance(table[0], TargetTone)

    def test_index_of(self):
        self.assertEqual(STANDARD_TUNING.index_of("G3"), 3)
        with self.assertRaises(KeyError):
            STANDARD_TUNING.index_of("C4")

    def test_equality_ignores_name(self):
        copy = TuningTable(list(STANDARD_TUNING), name="copy")
        self.assertEqual(copy, STANDARD_TUNING)

    def test_duplicate_labels(self):
        with self.assertRaises(ValueError):
            TuningTable([("E", 82.41), ("E", 329.63)])

    def test_empty_table(self):
        with self.assertRaises(ValueError):
            TuningTable([])

    def test_non_positive_frequency(self):
        with self.assertRaises(ValueError):
            TuningTable([("E2", 0.0)])
        with self.assertRaises(ValueError):
            TuningTable([("E2", -82.41)])

    def test_tones_are_immutable(self):
        with self.assertRaises(AttributeError):
            STANDARD_TUNING[0].frequency = 80.0


class TestAudioFrame(unittest.TestCase):
    def test_duration(self):
        frame = AudioFrame(np.zeros(2048), 44100)
        self.assertEqual(len(frame), 2048)
        self.assertAlmostEqual(frame.duration, 2048 / 44100)

    def test_validate_frame_converts_to_float64(self):
        data = validate_frame(np.zeros(8, dtype=np.float32), 44100)
        self.assertEqual(data.dtype, np.float64)

    def test_validate_frame_rejects_misuse(self):
        with self.assertRaises(InvalidFrameError):
            validate_frame([], 44100)
        with self.assertRaises(InvalidFrameError):
            validate_frame([0.0, 0.1, 0.2], 44100)
        with self.assertRaises(InvalidFrameError):
            validate_frame(np.zeros(8), 0)
        # InvalidFrameError is still a ValueError for callers that do not care
        with self.assertRaises(ValueError):
            validate_frame(np.zeros((4, 2)), 44100)


if __name__ == "__main__":
    unittest.main()
