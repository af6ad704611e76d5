import os
import time
import unittest
from unittest.mock import MagicMock

import requests

from .context import testngreport  # noqa: F401
from .util import patch_config_get

from testngreport import netreq  # noqa: I100


class RaiseFirst:
    """Raise an exception on the first call, then succeed on subsequent calls"""
    def __init__(self):
        self.count = 0

    def __call__(self):
        self.count += 1
        if self.count == 1:
            raise RuntimeError('First call')
        return self.count


def mock_session(chunks) -> MagicMock:
    """Return a session whose get() returns a response producing the given chunks."""
    resp = MagicMock()
    resp.__enter__.return_value = resp
    resp.iter_content.side_effect = chunks
    session = MagicMock()
    session.get.return_value = resp
    return session


class TestNetreq(unittest.TestCase):
    def test_retry_on_exception(self):
        # no exception
        result = netreq.retry_on_exception(lambda: 'OK', RuntimeError)
        assert result == 'OK'

        # call always raises exception
        with self.assertRaises(ZeroDivisionError):
            result = netreq.retry_on_exception(lambda: 1 / 0, ZeroDivisionError,
                                               retries=2, delay=0.1)

        # call always raises the wrong exception
        with self.assertRaises(ZeroDivisionError):
            result = netreq.retry_on_exception(lambda: 1 / 0, RuntimeError,
                                               retries=2, delay=0.1)

        # raise a single exception, then succeed
        start = time.time()
        result = netreq.retry_on_exception(RaiseFirst(), RuntimeError, retries=100, delay=0.1)
        assert result == 2
        assert time.time() - start < 9, 'too many retries'

    def test_download_file(self):
        session = mock_session(lambda chunk_size: iter([b'<a>', b'</a>']))
        fn = netreq.download_file(session, 'https://example.com/testng-results.xml')
        try:
            with open(fn, 'rb') as f:
                self.assertEqual(b'<a></a>', f.read())
        finally:
            os.unlink(fn)
        session.get.assert_called_once()
        self.assertTrue(session.get.call_args.kwargs['stream'])

    def test_download_file_retry(self):
        """A download that breaks off part way is retried."""
        attempts = []

        def chunks(chunk_size):
            attempts.append(1)
            if len(attempts) == 1:
                raise requests.exceptions.ChunkedEncodingError('Response ended prematurely')
            return iter([b'done'])

        session = mock_session(chunks)
        with patch_config_get('download_backoff_factor', 0):
            fn = netreq.download_file(session, 'https://example.com/testng-results.xml')
        try:
            with open(fn, 'rb') as f:
                self.assertEqual(b'done', f.read())
        finally:
            os.unlink(fn)
        self.assertEqual(2, len(attempts))

    def test_session(self):
        session = netreq.Session(total=2, backoff_factor=0)
        self.assertEqual(netreq.USER_AGENT, session.headers['User-Agent'])
        self.assertEqual(2, session.get_adapter('https://example.com/').max_retries.total)
