"""Logging for the results parser and the commands that drive it
"""

import argparse
import logging
import traceback
from typing import Optional, TextIO


# Name shown at the start of every log line from a command
PROGRAM = 'testngreport'


def log_level(args: argparse.Namespace) -> int:
    """Return the logging level chosen by the --verbose and --debug options."""
    if args.debug:
        return logging.DEBUG
    if args.verbose:
        return logging.INFO
    return logging.WARNING


def setup(args: argparse.Namespace, subprogram: str = ''):
    """Configure the root logger for a command.

    subprogram is appended to the program name (used to show which command is running).
    Log lines only carry the program name when more than warnings are shown.
    """
    level = log_level(args)
    if level < logging.WARNING:
        program = f'{PROGRAM}|{subprogram}' if subprogram else PROGRAM
        # Escape percents to pass through format()
        fmt = program.replace('%', '%%') + ' %(levelname)s %(filename)s: %(message)s'
    else:
        fmt = '%(filename)s: %(message)s'
    logging.basicConfig(level=level, format=fmt)


class ParseLog:
    """Where the results parser reports what it is doing.

    If a stream is given (e.g. the console of the job that produced the results), everything
    is written there. Otherwise, messages are sent to the process-wide logger: informational
    strings at debug level and exceptions at error level.
    """

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream

    def message(self, msg: str):
        if self.stream:
            print(msg, file=self.stream)
        else:
            logging.debug(msg)

    def exception(self, exc: BaseException):
        if self.stream:
            traceback.print_exception(type(exc), exc, exc.__traceback__, file=self.stream)
        else:
            logging.error('%s: %s', type(exc).__name__, exc)
