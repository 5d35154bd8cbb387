"""
Protocol defaults for irclink sessions.

Numeric and name defaults can be overridden through an environment variable
of the same name; wire format constants cannot.
"""

import logging
import os
from collections.abc import Callable
from typing import TypeVar

T = TypeVar("T", int, float, str)


def _from_env(name: str, default: T, cast: Callable[[str], T]) -> T:
    """Read ``name`` from the environment, converted with ``cast``.

    Unset or empty variables give ``default``. A value ``cast`` rejects is
    reported once on the ``irclink`` logger and also gives ``default``.
    """
    value = os.getenv(name)
    if not value:
        return default
    try:
        return cast(value)
    except ValueError:
        logging.getLogger("irclink").warning(
            "Ignoring %s=%r: expected %s, using %r", name, value, cast.__name__, default
        )
        return default


IRC_DEFAULT_PORT = _from_env("IRC_DEFAULT_PORT", 6667, int)
# Seconds allowed for the TCP (and TLS) handshake
IRC_CONNECT_TIMEOUT = _from_env("IRC_CONNECT_TIMEOUT", 30.0, float)

# USER line
IRC_DEFAULT_REAL_NAME = _from_env("IRC_DEFAULT_REAL_NAME", "irclink", str)
IRC_DEFAULT_MODE = _from_env("IRC_DEFAULT_MODE", 0, int)

# Seconds join/identify wait for RPL_WELCOME before giving up
IRC_READY_TIMEOUT = _from_env("IRC_READY_TIMEOUT", 120.0, float)

IRC_LINE_TERMINATOR = "\r\n"
IRC_ENCODING = "utf-8"

# Channel name prefixes (RFC 2811)
IRC_CHANNEL_TYPES = "#&+!"
