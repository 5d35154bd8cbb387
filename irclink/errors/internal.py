"""Centralized internal error hierarchy.

These exceptions provide semantic categories for the session lifecycle. Raw
socket errors never leave the connection layer; they are wrapped into
``IRCConnectionError`` first.

Classes:
  InternalError        – Base for all internal errors.
  IRCConnectionError   – Socket open/read/write failure or read timeout.
  ProtocolFatalError   – Server reply the session cannot recover from.
  NickInUseError       – ERR_NICKNAMEINUSE (433) during the session.
  UnknownEventError    – Callback registered under an unknown event name.

None of these are retried: a failed connection is terminal.
"""

from __future__ import annotations

from collections.abc import Mapping


class InternalError(Exception):
    """Base class for all internal errors with metadata support.

    Attributes:
        data: Dictionary containing arbitrary structured context data.

    Args:
        message: Descriptive error message.
        data: Optional mapping of additional context data.
    """

    data: dict[str, object]

    def __init__(
        self, message: str, *, data: Mapping[str, object] | None = None
    ) -> None:
        super().__init__(message)
        # Copy into a plain dict to avoid unexpected mutations from caller.
        self.data = dict(data) if data else {}


class IRCConnectionError(InternalError, ConnectionError):
    """Exception raised for socket level failures.

    Covers refused connections, DNS failures, broken writes and an expired
    read timeout. The read loop ends and ``on-shutdown`` fires with it.
    """


class ProtocolFatalError(InternalError):
    """Exception raised when the server sends a reply the session cannot survive.

    Distinct from ``IRCConnectionError`` so callers can tell a fatal protocol
    condition apart from an ordinary disconnect.
    """


class NickInUseError(ProtocolFatalError):
    """The nick we tried to use is taken (433). Never retried."""

    def __init__(self, nick: str | None, *, data: Mapping[str, object] | None = None):
        super().__init__(f"Nick {nick!r} is already taken. Can't recover.", data=data)
        self.nick = nick


class UnknownEventError(InternalError, ValueError):
    """Exception raised when a callback is registered for an unknown event name."""

    def __init__(self, name: str):
        super().__init__(f"Unknown event name: {name!r}", data={"event": name})
        self.name = name


__all__ = [
    "InternalError",
    "IRCConnectionError",
    "ProtocolFatalError",
    "NickInUseError",
    "UnknownEventError",
]
