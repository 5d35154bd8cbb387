"""Event registry and default callbacks.

Every event has at most one callback. Callbacks receive the session first,
then event specific arguments:

    raw-log          (session, direction, line)   direction is "read" or "write"
    on-shutdown      (session, error)              error is None for a clean close
    privmsg, ctcp-*  (session, privmsg)
    everything else  (session, message)

Besides the known names, any lowercased protocol command (``notice``,
``376``, ``topic``...) may be registered; those fire as passthrough events.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Mapping
from typing import Any

from ..errors.internal import ProtocolFatalError, UnknownEventError
from ..logs.logger import logger

Callback = Callable[..., Any]

KNOWN_EVENTS = frozenset(
    {
        "raw-log",
        "001",
        "324",
        "332",
        "433",
        "nick",
        "join",
        "part",
        "kick",
        "mode",
        "privmsg",
        "on-shutdown",
    }
)

_CTCP_EVENT = re.compile(r"^ctcp-[a-z0-9_]+$")
_PASSTHROUGH_EVENT = re.compile(r"^(?:[a-z]+|\d{3})$")


def passthrough_event_name(command: str) -> str:
    return command.lower()


def ctcp_event_name(verb: str) -> str:
    return f"ctcp-{verb.lower()}"


def is_valid_event_name(name: str) -> bool:
    return (
        name in KNOWN_EVENTS
        or bool(_CTCP_EVENT.match(name))
        or bool(_PASSTHROUGH_EVENT.match(name))
    )


class EventRegistry:
    def __init__(self, callbacks: Mapping[str, Callback] | None = None) -> None:
        self._callbacks: dict[str, Callback] = {}
        for name, callback in (callbacks or {}).items():
            self.register(name, callback)

    def register(self, name: str, callback: Callback) -> None:
        """Register ``callback`` for ``name``, replacing any previous one."""
        if not is_valid_event_name(name):
            raise UnknownEventError(name)
        if not callable(callback):
            raise TypeError(f"callback for {name!r} is not callable")
        self._callbacks[name] = callback

    def unregister(self, name: str) -> None:
        self._callbacks.pop(name, None)

    def get(self, name: str) -> Callback | None:
        return self._callbacks.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._callbacks

    def names(self) -> list[str]:
        return sorted(self._callbacks)

    def fire(self, session: Any, name: str, *args: Any) -> Any:
        callback = self._callbacks.get(name)
        if callback is None:
            return None
        try:
            return callback(session, *args)
        except ProtocolFatalError:
            raise
        except Exception as e:  # noqa: BLE001
            logger.log_event(
                "irc",
                "callback_error",
                level=logging.ERROR,
                event=name,
                error=str(e),
                error_type=type(e).__name__,
                exc_info=True,
            )
            return None


_SECRET_LINE = re.compile(r"^((?:PASS|PRIVMSG NickServ :IDENTIFY) ).+", re.IGNORECASE)


def mask_secrets(line: str) -> str:
    """Hide the password of a PASS or NickServ IDENTIFY line."""
    return _SECRET_LINE.sub(r"\1****", line)


def log_raw_line(_session: Any, direction: str, line: str) -> None:
    """Default raw-log callback: writes go out as ``>> line``, reads as-is."""
    line = mask_secrets(line)
    text = f">> {line}" if direction == "write" else line
    logger.log_event("irc", f"raw_{direction}", human=text, line=line)


DEFAULT_CALLBACKS: dict[str, Callback] = {"raw-log": log_raw_line}
