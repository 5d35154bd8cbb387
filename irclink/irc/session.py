"""Session facade: connect, read loop thread and outbound commands."""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Any

from ..config.model import SessionOptions
from ..constants import IRC_DEFAULT_PORT, IRC_READY_TIMEOUT
from ..errors.handling import log_error
from ..errors.internal import IRCConnectionError, ProtocolFatalError
from ..logs.logger import logger
from .connection import IRCConnection, end
from .dispatcher import IRCDispatcher
from .events import EventRegistry
from .models import ChannelState, SessionState, UserState
from .parser import parse_irc_message


class IRCSession:  # pylint: disable=too-many-public-methods
    """One IRC connection and everything known about it.

    All state mutation happens on the read-loop thread. Outbound methods can
    be called from any thread, including from inside callbacks.
    """

    def __init__(
        self,
        connection: IRCConnection,
        nick: str,
        options: SessionOptions | None = None,
    ) -> None:
        options = options or SessionOptions()
        self.options = options
        self.connection = connection
        self.state = SessionState(
            nick=nick,
            registry=EventRegistry(options.callbacks),
            username=options.username,
            real_name=options.real_name,
            init_mode=options.mode,
            password=options.password,
            network=connection.host,
        )
        self.dispatcher = IRCDispatcher(self)
        self.thread: threading.Thread | None = None
        connection.raw_log = self._fire_raw_log

    # Lifecycle

    def start(self) -> None:
        self.thread = threading.Thread(
            target=self._read_loop,
            name=f"irc-{self.state.network}-{self.state.nick}",
            daemon=True,
        )
        self.thread.start()

    def _fire_raw_log(self, direction: str, line: str) -> None:
        self.fire("raw-log", direction, line)

    def fire(self, name: str, *args: Any) -> Any:
        return self.state.registry.fire(self, name, *args)

    def on(self, name: str, callback: Any) -> None:
        """Register ``callback`` for event ``name``, replacing any previous one."""
        self.state.registry.register(name, callback)

    def process_line(self, line: str) -> None:
        self.dispatcher.process(parse_irc_message(line))

    def _read_loop(self) -> None:
        state = self.state
        logger.log_event("irc", "read_loop_start", level=logging.DEBUG, nick=state.nick)
        error: Exception | None = None
        try:
            self.connection.set_timeout(self.options.timeout)
            self.connection.register(
                state.nick,
                state.username,
                state.real_name,
                state.init_mode,
                state.password,
            )
            for line in self.connection.read_lines():
                self.process_line(line)
        except ProtocolFatalError as e:
            error = e
            logger.log_event(
                "irc", "fatal", level=logging.ERROR, nick=state.nick, error=str(e)
            )
        except IRCConnectionError as e:
            error = e
            log_error("Connection lost", e, context={"network": state.network})
        except Exception as e:  # noqa: BLE001
            error = e
            log_error("Read loop crashed", e, context={"network": state.network})
        finally:
            self._terminate(error)

    def _terminate(self, error: Exception | None) -> None:
        state = self.state
        with state.lock:
            state.shutdown = True
            if error is not None:
                state.error = error
        self.connection.close()
        state.abandon_ready()
        logger.log_event("irc", "read_loop_end", level=logging.DEBUG, nick=state.nick)
        self.fire("on-shutdown", error)

    def kill(self) -> None:
        """Close the socket; the read loop sees the stream end and shuts down."""
        logger.log_event("irc", "kill", nick=self.state.nick)
        with self.state.lock:
            self.state.shutdown = True
        self.connection.close()

    def wait(self, timeout: float | None = None) -> None:
        """Block until the read loop ends. Re-raises a fatal protocol error."""
        if self.thread is not None:
            self.thread.join(timeout)
        if isinstance(self.state.error, ProtocolFatalError):
            raise self.state.error

    def wait_ready(self, timeout: float | None = None) -> bool:
        """True once the server confirmed registration (001)."""
        try:
            return self.state.ready.result(timeout)
        except FutureTimeoutError:
            return False

    def _require_ready(self, operation: str) -> None:
        if self.state.ready.done():
            ready = self.state.ready.result()
        elif threading.current_thread() is self.thread:
            # Only this thread can process 001, so waiting here would stall it.
            ready = False
        else:
            logger.log_event(
                "irc",
                "ready_wait",
                level=logging.DEBUG,
                nick=self.state.nick,
                operation=operation,
            )
            ready = self.wait_ready(IRC_READY_TIMEOUT)
        if not ready:
            raise IRCConnectionError(
                f"Cannot {operation}: connection is not registered",
                data={"operation": operation},
            )

    # Read-only views

    @property
    def nick(self) -> str:
        return self.state.nick

    @property
    def channels(self) -> dict[str, ChannelState]:
        return self.state.channels

    @property
    def prefixes(self) -> dict[str, str]:
        return self.state.prefixes

    @property
    def is_alive(self) -> bool:
        return not self.state.shutdown

    def channel_users(self, channel: str) -> dict[str, UserState]:
        """Snapshot of a channel's users taken under the state lock."""
        with self.state.lock:
            chan = self.state.channels.get(channel)
            if chan is None:
                return {}
            return {nick: UserState(mode=user.mode) for nick, user in chan.users.items()}

    # Outbound commands

    def write_line(self, *parts: str | None) -> str:
        return self.connection.write_line(*parts)

    def join(self, *channels: str | tuple[str, str]) -> str | None:
        """Join channels. A channel is a name or a ``(name, key)`` tuple.

        Keyed channels are sent first so the key list lines up with them.
        Blocks until the server has confirmed registration.
        """
        if not channels:
            return None
        keyed = [c for c in channels if isinstance(c, tuple)]
        regular = [c for c in channels if not isinstance(c, tuple)]
        names = [name for name, _ in keyed] + regular
        keys = ",".join(key for _, key in keyed) or None
        self._require_ready("join")
        return self.write_line("JOIN", ",".join(names), keys)

    def part(self, *channels: str, message: str | None = None) -> str | None:
        if not channels:
            return None
        return self.write_line("PART", ",".join(channels), end(message))

    def send_message(self, target: str, *text: str) -> str:
        return self.write_line("PRIVMSG", target, end(" ".join(text)))

    def send_notice(self, target: str, *text: str) -> str:
        return self.write_line("NOTICE", target, end(" ".join(text)))

    def send_action(self, target: str, *text: str) -> str:
        return self.send_message(target, f"\x01ACTION {' '.join(text)}\x01")

    def identify(self, password: str) -> str:
        """Identify with NickServ once registered."""
        self._require_ready("identify")
        return self.send_message("NickServ", "IDENTIFY", password)

    def set_nick(self, nick: str) -> str:
        # The session nick changes when the server echoes NICK back.
        return self.write_line("NICK", nick)

    def mode(self, channel: str, modes: str | None = None) -> str:
        return self.write_line("MODE", channel, modes)

    def kick(self, channel: str, user: str, message: str | None = None) -> str:
        return self.write_line("KICK", channel, user, end(message))

    def quit(self, message: str | None = None) -> str:
        return self.write_line("QUIT", end(message))


def connect(
    host: str,
    port: int = IRC_DEFAULT_PORT,
    nick: str = "irclink",
    options: SessionOptions | Mapping[str, Any] | None = None,
    **kwargs: Any,
) -> IRCSession:
    """Connect to IRC and start the read loop on its own thread.

    Returns as soon as the socket is open; registration happens on the read
    thread. Use ``session.wait_ready()`` to block until the server has
    accepted the nick.

    Raises:
        IRCConnectionError: the socket could not be opened.
        pydantic.ValidationError: invalid options (e.g. unknown event name).
    """
    if options is None:
        options = SessionOptions.from_dict(kwargs)
    elif not isinstance(options, SessionOptions):
        options = SessionOptions.from_dict({**options, **kwargs})
    connection = IRCConnection.open(host, port, use_ssl=options.ssl)
    session = IRCSession(connection, nick, options)
    session.start()
    return session
