"""Unit tests for SessionConfig."""
import os
import tempfile
import unittest
from dataclasses import FrozenInstanceError

from gip.config import SessionConfig


class TestSessionConfig(unittest.TestCase):
    """Tests for defaults and loading."""

    def test_defaults(self):
        config = SessionConfig()
        self.assertEqual(config.handshake_timeout_ms, 2000)
        self.assertEqual(config.stream_timeout_ms, 100)
        self.assertEqual(config.write_timeout_ms, 1000)
        self.assertEqual(config.handshake_attempts, 5)
        self.assertEqual(config.power_settle_delay, 0.5)
        self.assertEqual(config.read_size, 64)

    def test_immutability(self):
        config = SessionConfig()
        with self.assertRaises(FrozenInstanceError):
            config.stream_timeout_ms = 10

    def test_dict_round_trip(self):
        config = SessionConfig(stream_timeout_ms=50, power_settle_delay=0.25)
        self.assertEqual(SessionConfig.from_dict(config.to_dict()), config)

    def test_from_dict_ignores_unknown(self):
        config = SessionConfig.from_dict({"stream_timeout_ms": "20", "bogus": "1"})
        self.assertEqual(config.stream_timeout_ms, 20)

    def test_from_ini(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "gip.ini")
            with open(path, "w") as f:
                f.write("[session]\nhandshake_attempts = 8\npower_settle_delay = 0.1\n")

            config = SessionConfig.from_ini(path)

        self.assertEqual(config.handshake_attempts, 8)
        self.assertEqual(config.power_settle_delay, 0.1)
        self.assertEqual(config.stream_timeout_ms, 100)

    def test_from_ini_without_section(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "gip.ini")
            with open(path, "w") as f:
                f.write("[other]\nkey = value\n")
            self.assertEqual(SessionConfig.from_ini(path), SessionConfig())

    def test_from_ini_missing_file(self):
        self.assertEqual(SessionConfig.from_ini("/nonexistent/gip.ini"), SessionConfig())
        self.assertEqual(SessionConfig.from_ini(None), SessionConfig())


if __name__ == '__main__':
    unittest.main()
