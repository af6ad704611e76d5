"""Command-line options shared by the testngreport commands."""

import argparse
import ast
from typing import Any

from testngreport import config


def config_assignment(text: str) -> tuple[str, Any]:
    """argparse type for a NAME=VALUE configuration override.

    VALUE is a Python literal; an empty VALUE is the empty string.
    """
    name, eq, rawval = text.partition('=')
    if not eq:
        raise argparse.ArgumentTypeError(f'Missing = in {text}')
    if not config.is_setting(name):
        raise argparse.ArgumentTypeError(f'Unknown configuration setting {name}')
    try:
        value = ast.literal_eval(rawval) if rawval else ''
    except (ValueError, SyntaxError) as e:
        raise argparse.ArgumentTypeError(f'Bad value for {name}: {rawval}') from e
    return (name, value)


def arguments_config(parser: argparse.ArgumentParser):
    """Add the --set option for overriding configuration settings."""
    parser.add_argument(
        '--set',
        action='append',
        type=config_assignment,
        default=[],
        metavar='NAME=VALUE',
        help='Override a config value; use once per setting')


def apply_config(args: argparse.Namespace):
    """Make the --set overrides take effect."""
    for name, value in args.set:
        config.add_override(name, value)


def arguments_logging(parser: argparse.ArgumentParser):
    """Add the options that choose how much is logged."""
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Show more log messages')
    parser.add_argument(
        '--debug',
        action='store_true',
        help='Show debug level log messages (implies --verbose)')
