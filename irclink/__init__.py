"""irclink: the protocol core of a threaded IRC client."""

from .errors import (
    InternalError,
    IRCConnectionError,
    NickInUseError,
    ProtocolFatalError,
    UnknownEventError,
)
from .irc import IRCMessage, IRCSession, connect, parse_irc_message
from .config import SessionOptions  # isort: skip (config.model imports irc.events)

__all__ = [
    "IRCConnectionError",
    "IRCMessage",
    "IRCSession",
    "InternalError",
    "NickInUseError",
    "ProtocolFatalError",
    "SessionOptions",
    "UnknownEventError",
    "connect",
    "parse_irc_message",
]
