"""Network functions for fetching remote results files
"""

import functools
import logging
import os
import tempfile
import time
from typing import Callable, Optional, Type

import requests
from requests import adapters

import testngreport
from testngreport import config


HTTPError = requests.exceptions.HTTPError

# The User-Agent: header to use
USER_AGENT = f'testngreport/{testngreport.__version__}'

# Block size to download
CHUNK_SIZE = 0x10000


class Session(requests.Session):
    """Set up a requests session with a standard configuration"""

    def __init__(self, total: Optional[int] = None, backoff_factor: Optional[float] = None,
                 status_forcelist: Optional[list[int]] = None,
                 allowed_methods: Optional[list[str]] = None):
        super().__init__()
        if total is None:
            total = config.get('download_retries')
        if backoff_factor is None:
            backoff_factor = config.get('download_backoff_factor')
        if not status_forcelist:
            status_forcelist = [429, 500, 502, 503, 504]
        if not allowed_methods:
            allowed_methods = ['HEAD', 'GET', 'OPTIONS']

        retry_strategy = adapters.Retry(
            total=total, backoff_factor=backoff_factor, status_forcelist=status_forcelist,
            allowed_methods=allowed_methods)
        adapter = adapters.HTTPAdapter(max_retries=retry_strategy)
        self.mount('https://', adapter)
        self.mount('http://', adapter)
        self.headers['User-Agent'] = USER_AGENT


def retry_on_exception(func: Callable, exception: Type[Exception],
                       retries: int = 10, delay: float = 10):
    """Retry a function call on an exception, with fixed delay"""
    for attempt in range(retries):
        try:
            return func()
        except exception as e:
            exc = e
            logging.info(f'Download attempt {attempt} failed; retrying after delay')
            if attempt < retries - 1:
                time.sleep(delay)

    # all attempts raised an exception, so raise it now
    raise exc


def download_file_onetry(session: requests.Session, url: str) -> str:
    """Download the file at the URL into a temporary file and return its name

    This is done in a streamed manner to avoid having to load the entire file into RAM at once.
    The caller must delete the file when done with it.
    """
    with session.get(url, stream=True, timeout=config.get('download_timeout')) as resp:
        resp.raise_for_status()
        with tempfile.NamedTemporaryFile(prefix='testngreport', suffix='.xml',
                                         delete=False) as tmp:
            try:
                # In case of download error, this can raise the exception:
                #   requests.exceptions.ChunkedEncodingError: Response ended prematurely
                for chunk in resp.iter_content(chunk_size=CHUNK_SIZE):
                    tmp.write(chunk)
            except BaseException:
                # Delete the temporary file on exception
                tmp.close()
                os.unlink(tmp.name)
                raise
    return tmp.name


def download_file(session: requests.Session, url: str) -> str:
    """Download a file, retrying a few times in case of errors, if necessary"""
    return retry_on_exception(functools.partial(download_file_onetry, session, url),
                              requests.exceptions.ChunkedEncodingError,
                              retries=max(config.get('download_retries'), 1),
                              delay=config.get('download_backoff_factor'))
