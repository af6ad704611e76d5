"""Program configuration.

A setting's value comes from the first of these that has it: an override given on the
command line, the user's testngreportrc file, then the defaults in configdef. The rc file is
Python source; every top-level name in it not starting with an underscore is a setting.
"""

import functools
import logging
import os
import runpy
from typing import Any

from testngreport import configdef


RC_NAME = 'testngreportrc'

# Settings given on the command line
overrides = {}  # type: dict[str, Any]


def public_names(namespace: dict[str, Any]) -> dict[str, Any]:
    return {name: value for name, value in namespace.items() if not name.startswith('_')}


def rc_path() -> str:
    """Return the name of the user's configuration file, which need not exist."""
    config_home = os.environ.get('XDG_CONFIG_HOME') or os.path.expanduser('~/.config')
    return os.path.join(config_home, RC_NAME)


@functools.lru_cache(maxsize=None)
def rc_settings() -> dict[str, Any]:
    """Return the settings in the user's configuration file, loaded only once."""
    fn = rc_path()
    if not os.access(fn, os.R_OK):
        logging.info('Configuration file %s not found', fn)
        return {}
    logging.info('Reading configuration file %s', fn)
    return public_names(runpy.run_path(fn))


def is_setting(name: str) -> bool:
    """Return True if the name is a known setting."""
    return not name.startswith('_') and hasattr(configdef, name)


@functools.lru_cache(maxsize=None)
def get(name: str) -> Any:
    """Return the value of a setting."""
    if not is_setting(name):
        raise KeyError(f'Unknown configuration setting {name}')
    if name in overrides:
        return overrides[name]
    return rc_settings().get(name, getattr(configdef, name))


def add_override(name: str, value: Any):
    """Override a setting for the rest of this run."""
    if not is_setting(name):
        raise KeyError(f'Unknown configuration setting {name}')
    overrides[name] = value
    get.cache_clear()
