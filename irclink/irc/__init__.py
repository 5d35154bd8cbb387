"""IRC subsystem package.

Contains the parser, data models, event registry, connection, dispatcher and
session facade.
"""

from .connection import IRCConnection, end  # noqa: F401
from .dispatcher import IRCDispatcher  # noqa: F401
from .events import EventRegistry, log_raw_line  # noqa: F401
from .models import (  # noqa: F401
    ChannelState,
    Hostmask,
    Indicator,
    PrivMsg,
    SessionState,
    Topic,
    UserState,
)
from .parser import IRCMessage, parse_hostmask, parse_irc_message  # noqa: F401
from .session import IRCSession, connect  # noqa: F401

__all__ = [
    "ChannelState",
    "EventRegistry",
    "Hostmask",
    "IRCConnection",
    "IRCDispatcher",
    "IRCMessage",
    "IRCSession",
    "Indicator",
    "PrivMsg",
    "SessionState",
    "Topic",
    "UserState",
    "connect",
    "end",
    "log_raw_line",
    "parse_hostmask",
    "parse_irc_message",
]
