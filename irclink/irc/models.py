"""Shared IRC data models."""

from __future__ import annotations

import threading
from concurrent.futures import Future
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from .events import EventRegistry


class Indicator(Enum):
    """Visibility marker of a channel's 353 reply."""

    SECRET = "secret"
    PRIVATE = "private"
    PUBLIC = "public"
    UNKNOWN = "unknown"

    @classmethod
    def from_marker(cls, marker: str | None) -> Indicator:
        return _INDICATOR_MARKERS.get(marker or "", cls.UNKNOWN)


_INDICATOR_MARKERS = {
    "@": Indicator.SECRET,
    "*": Indicator.PRIVATE,
    "=": Indicator.PUBLIC,
}


@dataclass(frozen=True, slots=True)
class Hostmask:
    nick: str | None
    user: str | None = None
    host: str | None = None

    def __str__(self) -> str:
        text = self.nick or ""
        if self.user:
            text += f"!{self.user}"
        if self.host:
            text += f"@{self.host}"
        return text


@dataclass(slots=True)
class Topic:
    text: str | None = None
    set_by: str | None = None
    set_at: int | None = None


@dataclass(slots=True)
class UserState:
    mode: str | None = None


@dataclass(slots=True)
class ChannelState:
    topic: Topic = field(default_factory=Topic)
    mode: str = ""
    indicator: Indicator = Indicator.UNKNOWN
    users: dict[str, UserState] = field(default_factory=dict)


@dataclass
class PrivMsg:
    """A PRIVMSG after target/text extraction.

    ``ctcp_kind`` and ``ctcp_text`` are only set for CTCP frames.
    """

    source: Hostmask | None
    target: str | None
    text: str
    raw: str
    ctcp_kind: str | None = None
    ctcp_text: str | None = None

    @property
    def nick(self) -> str | None:
        return self.source.nick if self.source else None


@dataclass
class SessionState:  # pylint: disable=too-many-instance-attributes
    """Everything known about one connection.

    Only the read-loop thread mutates ``channels``, ``prefixes`` and ``nick``.
    Updates touching more than one channel hold ``lock`` for their whole
    duration; readers wanting a consistent view take the same lock.
    """

    nick: str
    registry: EventRegistry
    username: str | None = None
    real_name: str = ""
    init_mode: int = 0
    password: str | None = None
    network: str | None = None
    channels: dict[str, ChannelState] = field(default_factory=dict)
    prefixes: dict[str, str] = field(default_factory=dict)
    ready: Future[bool] = field(default_factory=Future)
    shutdown: bool = False
    error: Exception | None = None
    lock: threading.RLock = field(default_factory=threading.RLock, repr=False)

    def mark_ready(self) -> bool:
        """Resolve ``ready`` with True. Returns False if it was already resolved."""
        with self.lock:
            if self.ready.done():
                return False
            self.ready.set_result(True)
            return True

    def abandon_ready(self) -> None:
        """Resolve a still pending ``ready`` with False so waiters wake up."""
        with self.lock:
            if not self.ready.done():
                self.ready.set_result(False)
