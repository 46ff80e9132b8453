import math
import unittest

import numpy as np

from config import FieldStrategy, WedgeConfig
from wave_engine import WaveState, WedgeWaveEngine


class TestWedgeWaveEngine(unittest.TestCase):
    def setUp(self):
        self.engine = WedgeWaveEngine()

    def test_empty_field_is_flat(self):
        self.assertEqual(self.engine.height_at(0.3, 0.4), 0.0)

    def test_frequency_to_angle_is_log_centered(self):
        geometric_mid = math.sqrt(100.0 * 6000.0)
        self.assertAlmostEqual(self.engine.frequency_to_angle(geometric_mid), 0.0, places=9)
        self.assertAlmostEqual(self.engine.frequency_to_angle(100.0), -math.pi / 6, places=9)
        self.assertAlmostEqual(self.engine.frequency_to_angle(6000.0), math.pi / 6, places=9)

    def test_center_angle_inside_wedge(self):
        for phonetic_type in ("vowel", "trill", "fricative", "plosive"):
            self.engine.generate_wave(phonetic_type)
        for wave in self.engine.get_waves():
            self.assertLessEqual(abs(wave.center_angle), self.engine.half_span + 1e-12)

    def _peak_sample(self, phonetic_type, elapsed):
        self.engine.generate_wave(phonetic_type)
        self.engine.update_time(elapsed)
        wave = self.engine.get_waves()[0]
        folded = abs(wave.center_angle) / self.engine.half_span
        frequency = 0.5 + folded / 2
        times = np.linspace(0.0, 1.0, 401)
        return wave, frequency, times

    def test_wave_front_produces_ripple(self):
        wave, frequency, times = self._peak_sample("plosive", 2.0)
        heights = self.engine.sample_heights(frequency, times)
        self.assertGreater(np.max(np.abs(heights)), 0.0)

        front = self.engine.wave_radius(wave)
        far = times * self.engine.field.max_radius - front >= self.engine.config.influence_distance
        self.assertTrue(np.all(heights[far] == 0.0))

    def test_mirrored_halves_respond_identically(self):
        _, frequency, times = self._peak_sample("fricative", 3.0)
        right = self.engine.sample_heights(frequency, times)
        left = self.engine.sample_heights(1.0 - frequency, times)
        np.testing.assert_allclose(left, right, atol=1e-12)

    def test_outside_spread_is_zero(self):
        self.engine.generate_wave("vowel")
        self.engine.update_time(1.0)
        wave = self.engine.get_waves()[0]
        # vowel spread is narrow; the wedge edge is far from its center angle
        self.assertLess(wave.spread, self.engine.half_span - abs(wave.center_angle))
        self.assertEqual(self.engine.height_at(1.0, 0.0), 0.0)

    def test_height_at_is_pure(self):
        self.engine.generate_wave("trill")
        self.engine.update_time(1.5)
        before = (self.engine.time, len(self.engine.get_waves()))
        first = self.engine.height_at(0.7, 0.1)
        second = self.engine.height_at(0.7, 0.1)
        self.assertEqual(first, second)
        self.assertEqual(before, (self.engine.time, len(self.engine.get_waves())))

    def test_scalar_matches_vectorized(self):
        self.engine.generate_wave("plosive")
        self.engine.generate_wave("trill")
        self.engine.update_time(1.2)
        freqs = np.array([0.1, 0.55, 0.8, 0.95])
        times = np.array([0.05, 0.1, 0.15, 0.2])
        vector = self.engine.sample_heights(freqs, times)
        for f, t, h in zip(freqs, times, vector):
            self.assertAlmostEqual(self.engine.height_at(f, t), h, places=12)

    def test_out_of_range_coordinates_are_clamped(self):
        self.engine.generate_wave("plosive")
        self.engine.update_time(0.5)
        self.assertEqual(self.engine.height_at(1.5, -1.0), self.engine.height_at(1.0, 0.0))

    def test_plosive_retires_after_lifetime(self):
        self.engine.generate_wave("plosive")
        wave = self.engine.get_waves()[0]
        live = self.engine.update_time(4.9)
        self.assertEqual(len(live), 1)
        self.assertEqual(wave.state, WaveState.ACTIVE)

        self.engine.update_time(0.2)
        self.assertEqual(self.engine.get_active_wave_count(), 0)
        self.assertEqual(wave.state, WaveState.EXPIRED)

    def test_wave_retires_at_field_edge(self):
        engine = WedgeWaveEngine(WedgeConfig(wave_speed=5.0))
        engine.generate_wave("vowel")
        engine.update_time(2.0)
        self.assertEqual(engine.get_active_wave_count(), 0)

    def test_produce_frame_exposes_sampler(self):
        self.engine.generate_wave("fricative")
        frame = self.engine.produce_frame(0.5)
        self.assertEqual(self.engine.strategy, FieldStrategy.WEDGE)
        self.assertEqual(frame.spectrograms, [])
        self.assertEqual(frame.active_wave_count, 1)
        self.assertEqual(frame.sampler(0.6, 0.01), self.engine.height_at(0.6, 0.01))

    def test_reset_issues_fresh_ids(self):
        first = self.engine.generate_wave("trill")
        self.engine.reset()
        self.assertEqual(self.engine.get_active_wave_count(), 0)
        self.assertNotEqual(self.engine.generate_wave("trill"), first)


if __name__ == "__main__":
    unittest.main()
