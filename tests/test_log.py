"""Test log."""

import argparse
import io
import logging
import unittest
from unittest.mock import patch

from .context import testngreport  # noqa: F401

from testngreport import log  # noqa: I100


class TestLog(unittest.TestCase):

    def test_log_level(self):
        self.assertEqual(logging.WARNING,
                         log.log_level(argparse.Namespace(verbose=False, debug=False)))
        self.assertEqual(logging.INFO,
                         log.log_level(argparse.Namespace(verbose=True, debug=False)))
        self.assertEqual(logging.DEBUG,
                         log.log_level(argparse.Namespace(verbose=False, debug=True)))

    @patch('logging.basicConfig')
    def test_setup(self, mock_config):
        log.setup(argparse.Namespace(verbose=True, debug=False), subprogram='parse')
        mock_config.assert_called_once_with(
            level=logging.INFO,
            format='testngreport|parse %(levelname)s %(filename)s: %(message)s')

        mock_config.reset_mock()
        log.setup(argparse.Namespace(verbose=False, debug=False))
        mock_config.assert_called_once_with(level=logging.WARNING,
                                            format='%(filename)s: %(message)s')

    def test_parse_log_stream(self):
        stream = io.StringIO()
        parse_log = log.ParseLog(stream)
        parse_log.message('hello')
        try:
            raise ValueError('bad value')
        except ValueError as e:
            parse_log.exception(e)
        output = stream.getvalue()
        self.assertTrue(output.startswith('hello\n'))
        self.assertIn('Traceback', output)
        self.assertIn('ValueError: bad value', output)

    def test_parse_log_fallback(self):
        parse_log = log.ParseLog()
        with self.assertLogs(level='DEBUG') as cm:
            parse_log.message('hello')
            parse_log.exception(ValueError('bad value'))
        self.assertEqual(['DEBUG:root:hello', 'ERROR:root:ValueError: bad value'], cm.output)
