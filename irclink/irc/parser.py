"""IRC message parsing utilities."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from .models import Hostmask, UserState

_ISUPPORT_PREFIX = re.compile(r"PREFIX=\((.*?)\)(\S+)")
_CTCP_FRAME = re.compile("\x01(.*)\x01")


@dataclass
class IRCMessage:
    raw: str
    command: str
    params: list[str] = field(default_factory=list)
    prefix: Hostmask | None = None

    @property
    def nick(self) -> str | None:
        return self.prefix.nick if self.prefix else None

    @property
    def user(self) -> str | None:
        return self.prefix.user if self.prefix else None

    @property
    def host(self) -> str | None:
        return self.prefix.host if self.prefix else None

    def param(self, index: int) -> str | None:
        """Positional parameter or None when the server left it out."""
        try:
            return self.params[index]
        except IndexError:
            return None


def parse_hostmask(text: str) -> Hostmask:
    """Split ``nick!user@host``; absent parts are None, never empty strings."""
    nick, _, rest = text.partition("!")
    if rest:
        user, _, host = rest.partition("@")
    else:
        user = None
        nick, _, host = nick.partition("@")
    return Hostmask(nick=nick or None, user=user or None, host=host or None)


def parse_irc_message(raw_line: str) -> IRCMessage:
    tokens = raw_line.split(" ")
    prefix: Hostmask | None = None

    if tokens[0].startswith(":"):
        prefix = parse_hostmask(tokens[0][1:])
        tokens = tokens[1:]

    command = tokens[0] if tokens else ""
    remainder = " ".join(tokens[1:])

    # Only the first ':' starts the trailing parameter; it is never re-split.
    before, sep, after = remainder.partition(":")
    params = before.split()
    if sep:
        params.append(after)

    return IRCMessage(raw=raw_line, command=command, params=params, prefix=prefix)


def parse_isupport_prefix(raw: str) -> dict[str, str] | None:
    """Extract ``PREFIX=(modes)(symbols)`` from an RPL_ISUPPORT line.

    Returns a mapping of symbol to mode letter, e.g. ``{"@": "o", "+": "v"}``.
    """
    match = _ISUPPORT_PREFIX.search(raw)
    if not match:
        return None
    modes, symbols = match.groups()
    return dict(zip(symbols, modes))


def parse_names(names: str, prefixes: dict[str, str]) -> dict[str, UserState]:
    users: dict[str, UserState] = {}
    for token in names.split():
        mode = prefixes.get(token[0])
        nick = token[1:] if mode else token
        if nick:
            users[nick] = UserState(mode=mode)
    return users


def parse_ctcp(text: str) -> tuple[str, str | None] | None:
    """Return ``(verb, remainder)`` for a CTCP frame, None for plain text."""
    match = _CTCP_FRAME.search(text)
    if not match:
        return None
    parts = match.group(1).split(None, 1)
    if not parts:
        return None
    verb = parts[0]
    remainder = parts[1] if len(parts) > 1 else None
    return verb, remainder
