"""Locate and open results files, whether local or on a web server."""

import contextlib
import glob
import logging
import os
import urllib.parse
from typing import Iterator, Optional

import requests

from testngreport import config
from testngreport import netreq
from testngreport.filedef import BinaryIORead


REMOTE_SCHEMES = frozenset(('http', 'https'))


class SourceNotFound(Exception):
    """Raised when a results file path does not point to a readable file."""


def is_remote(path: str) -> bool:
    return urllib.parse.urlparse(path).scheme in REMOTE_SCHEMES


@contextlib.contextmanager
def open_local(path: str) -> Iterator[BinaryIORead]:
    fn = os.path.abspath(os.path.expanduser(path))
    if not os.path.isfile(fn):
        raise SourceNotFound(f"'{fn}' points to an invalid test report")
    with open(fn, 'rb') as f:
        yield f


@contextlib.contextmanager
def open_remote(url: str, session: Optional[requests.Session]) -> Iterator[BinaryIORead]:
    """Download the file then open the local copy.

    The local copy is removed when the context exits.
    """
    if not session:
        session = netreq.Session()
    try:
        fn = netreq.download_file(session, url)
    except requests.exceptions.RequestException as e:
        raise SourceNotFound(f"'{url}' could not be retrieved: {e}") from e
    try:
        with open(fn, 'rb') as f:
            yield f
    finally:
        os.unlink(fn)


def open_source(path: str, session: Optional[requests.Session] = None
                ) -> contextlib.AbstractContextManager[BinaryIORead]:
    """Open a results file for binary reading, as a context manager.

    Raises SourceNotFound if the path or URL doesn't lead to a file.
    """
    if is_remote(path):
        return open_remote(path, session)
    return open_local(path)


def find_results(paths: list[str]) -> list[str]:
    """Expand any directories in the list into the results files found within them.

    URLs and other non-directories are passed through untouched.
    """
    pattern = config.get('result_file_glob')
    found = []
    for path in paths:
        if not is_remote(path) and os.path.isdir(os.path.expanduser(path)):
            matches = sorted(glob.glob(os.path.join(os.path.expanduser(path), pattern),
                                       recursive=True))
            logging.info('Found %d results files in %s', len(matches), path)
            found.extend(matches)
        else:
            found.append(path)
    return found
