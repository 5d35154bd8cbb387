"""Per-command state updates and event dispatch."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from ..constants import IRC_CHANNEL_TYPES
from ..errors.internal import NickInUseError
from ..logs.logger import logger
from .events import ctcp_event_name, passthrough_event_name
from .models import ChannelState, Indicator, PrivMsg, Topic, UserState
from .parser import IRCMessage, parse_ctcp, parse_isupport_prefix, parse_names

if TYPE_CHECKING:  # pragma: no cover
    from .session import IRCSession


class IRCDispatcher:
    """Applies one parsed message at a time to the session state.

    The set of handled commands is closed; everything else is fired as a
    passthrough event named after the lowercased command.
    """

    def __init__(self, session: IRCSession):
        self.session = session
        self.handlers: dict[str, Callable[[IRCMessage], None]] = {
            "001": self._handle_welcome,
            "005": self._handle_isupport,
            "324": self._handle_channel_mode,
            "332": self._handle_topic,
            "333": self._handle_topic_who_time,
            "353": self._handle_names,
            "433": self._handle_nick_in_use,
            "PING": self._handle_ping,
            "NICK": self._handle_nick,
            "JOIN": self._handle_join,
            "PART": self._handle_part,
            "QUIT": self._handle_quit,
            "KICK": self._handle_kick,
            "MODE": self._handle_mode,
            "PRIVMSG": self._handle_privmsg,
        }

    @property
    def state(self):  # type: ignore[no-untyped-def]
        return self.session.state

    def fire(self, name: str, *args: object) -> None:
        self.state.registry.fire(self.session, name, *args)

    def process(self, message: IRCMessage) -> None:
        if not message.command:
            return
        handler = self.handlers.get(message.command.upper())
        if handler is None:
            self.fire(passthrough_event_name(message.command), message)
            return
        handler(message)

    # Numerics

    def _handle_welcome(self, message: IRCMessage) -> None:
        if self.state.mark_ready():
            logger.log_event(
                "irc", "ready", nick=self.state.nick, network=self.state.network
            )
        self.fire("001", message)

    def _handle_isupport(self, message: IRCMessage) -> None:
        prefixes = parse_isupport_prefix(message.raw)
        if prefixes is None:
            return
        with self.state.lock:
            self.state.prefixes = prefixes
        logger.log_event(
            "irc", "prefixes", level=logging.DEBUG, prefixes="".join(prefixes)
        )

    def _handle_channel_mode(self, message: IRCMessage) -> None:
        channel = self._channel(message.param(1), create=True)
        if channel is not None:
            channel.mode = " ".join(message.params[2:])
        self.fire("324", message)

    def _handle_topic(self, message: IRCMessage) -> None:
        name = message.param(1)
        channel = self._channel(name, create=True)
        if channel is not None and len(message.params) > 2:
            channel.topic = Topic(text=message.params[-1])
            logger.log_event(
                "irc",
                "topic",
                level=logging.DEBUG,
                channel=name,
                topic=channel.topic.text,
            )
        self.fire("332", message)

    def _handle_topic_who_time(self, message: IRCMessage) -> None:
        channel = self._channel(message.param(1), create=True)
        if channel is None:
            return
        timestamp = message.param(3)
        channel.topic.set_by = message.param(2)
        channel.topic.set_at = int(timestamp) if timestamp and timestamp.isdigit() else None

    def _handle_names(self, message: IRCMessage) -> None:
        name = message.param(2)
        channel = self._channel(name, create=True)
        if channel is None:
            return
        users = parse_names(message.param(3) or "", self.state.prefixes)
        with self.state.lock:
            channel.indicator = Indicator.from_marker(message.param(1))
            channel.users = {**channel.users, **users}
        logger.log_event(
            "irc", "names", level=logging.DEBUG, channel=name, count=len(users)
        )

    def _handle_nick_in_use(self, message: IRCMessage) -> None:
        nick = message.param(1) or self.state.nick
        logger.log_event("irc", "nick_in_use", level=logging.ERROR, nick=nick)
        self.fire("433", message)
        raise NickInUseError(nick, data={"raw": message.raw})

    # Commands

    def _handle_ping(self, message: IRCMessage) -> None:
        raw = message.raw
        if raw.startswith("PING"):
            pong = "PONG" + raw[len("PING"):]
        else:
            pong = f"PONG :{message.param(-1) or ''}"
        self.session.connection.write_line(pong)
        logger.log_event("irc", "ping", level=logging.DEBUG)

    def _handle_nick(self, message: IRCMessage) -> None:
        old_nick, new_nick = message.nick, message.param(0)
        if old_nick and new_nick:
            with self.state.lock:
                renamed = {}
                for name, channel in self.state.channels.items():
                    if old_nick in channel.users:
                        users = dict(channel.users)
                        users[new_nick] = users.pop(old_nick)
                        renamed[name] = users
                for name, users in renamed.items():
                    self.state.channels[name].users = users
                if self.state.nick == old_nick:
                    self.state.nick = new_nick
            logger.log_event(
                "irc",
                "nick_change",
                level=logging.DEBUG,
                old_nick=old_nick,
                new_nick=new_nick,
            )
        self.fire("nick", message)

    def _handle_join(self, message: IRCMessage) -> None:
        name, actor = message.param(0), message.nick
        channel = self._channel(name, create=True)
        if channel is not None and actor:
            with self.state.lock:
                channel.users.setdefault(actor, UserState())
            logger.log_event(
                "irc", "join", level=logging.DEBUG, channel=name, actor=actor
            )
        self.fire("join", message)

    def _handle_part(self, message: IRCMessage) -> None:
        name, actor = message.param(0), message.nick
        channel = self._channel(name)
        if channel is not None and actor:
            with self.state.lock:
                channel.users.pop(actor, None)
            logger.log_event(
                "irc", "part", level=logging.DEBUG, channel=name, actor=actor
            )
        self.fire("part", message)

    def _handle_quit(self, message: IRCMessage) -> None:
        actor = message.nick
        if actor:
            with self.state.lock:
                for channel in self.state.channels.values():
                    channel.users.pop(actor, None)
            logger.log_event("irc", "quit", level=logging.DEBUG, actor=actor)
        self.fire("part", message)

    def _handle_kick(self, message: IRCMessage) -> None:
        name, target = message.param(0), message.param(1)
        channel = self._channel(name)
        if channel is not None and target:
            with self.state.lock:
                channel.users.pop(target, None)
            logger.log_event(
                "irc",
                "kick",
                level=logging.DEBUG,
                channel=name,
                target=target,
                actor=message.nick,
            )
        self.fire("kick", message)

    def _handle_mode(self, message: IRCMessage) -> None:
        # Mode deltas are not interpreted; ask the server for the result instead.
        target = message.param(0)
        if target and target[0] in IRC_CHANNEL_TYPES:
            logger.log_event("irc", "mode_resync", level=logging.DEBUG, target=target)
            self.session.connection.write_line("MODE", target)
        self.fire("mode", message)

    def _handle_privmsg(self, message: IRCMessage) -> None:
        text = message.param(1) or ""
        privmsg = PrivMsg(
            source=message.prefix,
            target=message.param(0),
            text=text,
            raw=message.raw,
        )
        ctcp = parse_ctcp(text)
        if ctcp:
            privmsg.ctcp_kind, privmsg.ctcp_text = ctcp
            self.fire(ctcp_event_name(privmsg.ctcp_kind), privmsg)
            return
        self.fire("privmsg", privmsg)

    def _channel(self, name: str | None, create: bool = False) -> ChannelState | None:
        if not name:
            return None
        channel = self.state.channels.get(name)
        if channel is None and create:
            with self.state.lock:
                channel = self.state.channels.setdefault(name, ChannelState())
        return channel
