# ========================
# tests/test_main.py
# ========================

import logging
import os
import sys
import tempfile
import unittest
from unittest import mock

# Add the project root to Python path so main.py is importable
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import main


class TestMainEntryPoint(unittest.TestCase):
    """Test that bad settings end in a logged exit code instead of a traceback."""

    def setUp(self):
        root_logger = logging.getLogger()
        self._root_handlers = list(root_logger.handlers)
        self._root_level = root_logger.level

        self._cwd = os.getcwd()
        self._tmp_dir = tempfile.TemporaryDirectory()
        os.chdir(self._tmp_dir.name)

    def tearDown(self):
        os.chdir(self._cwd)

        root_logger = logging.getLogger()
        for handler in root_logger.handlers:
            if handler not in self._root_handlers:
                handler.close()
        root_logger.handlers[:] = self._root_handlers
        root_logger.setLevel(self._root_level)
        logging.captureWarnings(False)

        self._tmp_dir.cleanup()

    def test_malformed_float_setting_exits_with_error(self):
        """Test that a non-numeric CDI_IQR_MULTIPLIER is logged and returns 1."""
        with mock.patch.dict(os.environ, {'CDI_IQR_MULTIPLIER': 'abc'}):
            with self.assertLogs('main', level='ERROR') as logs:
                exit_code = main.main()

        self.assertEqual(exit_code, 1)
        self.assertIn('abc', logs.output[0])
        self.assertFalse(os.path.exists('logs'))

    def test_malformed_degenerate_fill_exits_with_error(self):
        with mock.patch.dict(os.environ, {'CDI_DEGENERATE_FILL': 'half'}):
            with self.assertLogs('main', level='ERROR'):
                self.assertEqual(main.main(), 1)

    def test_unknown_log_level_exits_with_error(self):
        """Test that an unknown LOG_LEVEL fails validation instead of crashing logging setup."""
        with mock.patch.dict(os.environ, {'LOG_LEVEL': 'LOUD'}):
            with self.assertLogs('main', level='ERROR') as logs:
                exit_code = main.main()

        self.assertEqual(exit_code, 1)
        self.assertIn('log_level', logs.output[0])


if __name__ == '__main__':
    unittest.main()
