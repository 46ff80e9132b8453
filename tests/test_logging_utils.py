import logging
import unittest

import logging_utils


class TestLoggingUtils(unittest.TestCase):
    def tearDown(self):
        logging_utils.set_log_level("INFO")

    def test_set_and_get_level(self):
        logging_utils.set_log_level("debug")
        self.assertEqual(logging_utils.get_log_level(), "DEBUG")
        logging_utils.set_log_level("bogus")
        self.assertEqual(logging_utils.get_log_level(), "INFO")

    def test_log_event_appends_fields_and_tag(self):
        with self.assertLogs("phonofield", level="INFO") as captured:
            logging_utils.log_event("INFO", "PolarWaveEngine", "Generated", id="wave-0-0", frames=800)

        record = captured.records[0]
        self.assertEqual(record.tag, "PolarWaveEngine")
        self.assertEqual(record.getMessage(), "Generated | id=wave-0-0 frames=800")

    def test_float_fields_are_shortened(self):
        with self.assertLogs("phonofield", level="INFO") as captured:
            logging_utils.log_event("INFO", "WaveField", "Tick", time=1.0 / 3.0)
        self.assertEqual(captured.records[0].getMessage(), "Tick | time=0.333333")

    def test_empty_tag_uses_default(self):
        with self.assertLogs("phonofield", level="INFO") as captured:
            logging_utils.log_event("INFO", None, "hello")
        self.assertEqual(captured.records[0].tag, logging_utils.DEFAULT_TAG)

    def test_tagged_binds_component(self):
        log = logging_utils.tagged("Viewer")
        with self.assertLogs("phonofield", level="INFO") as captured:
            log("INFO", "Closed", active_waves=2)
        record = captured.records[0]
        self.assertEqual(record.tag, "Viewer")
        self.assertEqual(record.getMessage(), "Closed | active_waves=2")

    def test_warn_alias(self):
        with self.assertLogs("phonofield", level="WARNING") as captured:
            logging_utils.log_event("WARN", "Config", "careful")
        self.assertEqual(captured.records[0].levelno, logging.WARNING)


if __name__ == "__main__":
    unittest.main()
