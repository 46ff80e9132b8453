import json
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from config import Config, FieldStrategy
import config_persistence


class TestConfigPersistence(unittest.TestCase):
    def test_save_and_load_roundtrip(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            cfg_file = Path(tmpdir) / "config.json"
            cfg = Config()
            cfg.engine.frame_rate = 24.0
            cfg.engine.strategy = FieldStrategy.WEDGE
            cfg.synth.seed = 7

            with mock.patch.object(config_persistence, "get_config_file", return_value=cfg_file):
                self.assertTrue(config_persistence.save_config(cfg))
                loaded = config_persistence.load_config()

            self.assertAlmostEqual(loaded.engine.frame_rate, 24.0, places=6)
            self.assertEqual(loaded.engine.strategy, FieldStrategy.WEDGE)
            self.assertEqual(loaded.synth.seed, 7)

    def test_load_default_when_missing(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            cfg_file = Path(tmpdir) / "config.json"
            with mock.patch.object(config_persistence, "get_config_file", return_value=cfg_file):
                loaded = config_persistence.load_config()
            self.assertIsInstance(loaded, Config)

    def test_load_invalid_json_returns_default(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            cfg_file = Path(tmpdir) / "config.json"
            with open(cfg_file, "w", encoding="utf-8") as f:
                f.write("{invalid json")

            with mock.patch.object(config_persistence, "get_config_file", return_value=cfg_file):
                loaded = config_persistence.load_config()

            self.assertIsInstance(loaded, Config)

    def test_load_malformed_section_falls_back(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            cfg_file = Path(tmpdir) / "config.json"
            with open(cfg_file, "w", encoding="utf-8") as f:
                json.dump({"version": 2, "engine": 3, "synth": {"seed": 5}}, f)

            with mock.patch.object(config_persistence, "get_config_file", return_value=cfg_file):
                loaded = config_persistence.load_config()

            self.assertEqual(loaded.engine.strategy, FieldStrategy.SPECTROGRAM)
            self.assertEqual(loaded.engine.frame_rate, 10.0)
            self.assertEqual(loaded.synth.seed, 5)

    def test_save_failure_returns_false(self):
        cfg = Config()

        with mock.patch.object(config_persistence, "get_config_file", side_effect=OSError("boom")):
            with mock.patch("config_persistence.log_event") as log_event_mock:
                self.assertFalse(config_persistence.save_config(cfg))

        level, tag = log_event_mock.call_args[0][:2]
        self.assertEqual(level, "WARNING")
        self.assertEqual(tag, "Config")


if __name__ == "__main__":
    unittest.main()
