from __future__ import annotations

import socket

import pytest

from irclink.config.model import SessionOptions
from irclink.irc.connection import IRCConnection
from irclink.irc.session import IRCSession


class FakeConnection:
    """Stands in for IRCConnection: records written lines instead of sending them."""

    def __init__(self, host: str = "irc.test") -> None:
        self.host = host
        self.port = 6667
        self.raw_log = None
        self.sent: list[str] = []
        self.closed = False

    def write_line(self, *parts):  # type: ignore[no-untyped-def]
        line = " ".join(p for p in parts if p is not None)
        if self.raw_log:
            self.raw_log("write", line)
        self.sent.append(line)
        return line

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_connection():
    return FakeConnection()


@pytest.fixture
def make_session(fake_connection):
    """Build a session on a FakeConnection; the read thread is not started."""

    def _make(nick: str = "me", callbacks=None, **options):  # type: ignore[no-untyped-def]
        opts = SessionOptions(callbacks=callbacks or {}, **options)
        return IRCSession(fake_connection, nick, opts)

    return _make


@pytest.fixture
def socket_pair():
    """(client IRCConnection, server socket) joined by socketpair."""
    client_sock, server_sock = socket.socketpair()
    connection = IRCConnection(client_sock, host="irc.test", port=6667)
    yield connection, server_sock
    connection.close()
    server_sock.close()
