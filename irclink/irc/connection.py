"""Socket ownership, registration handshake and line I/O."""

from __future__ import annotations

import logging
import socket
import ssl
import threading
from collections.abc import Callable, Iterator

from ..constants import IRC_CONNECT_TIMEOUT, IRC_ENCODING, IRC_LINE_TERMINATOR
from ..errors.internal import IRCConnectionError
from ..logs.logger import logger

RawLogHook = Callable[[str, str], None]

_LINE_BREAKS = str.maketrans({"\r": " ", "\n": " ", "\0": " "})


def end(param: str | None) -> str | None:
    """Prefix a trailing parameter with ':'; None or '' gives None."""
    if not param:
        return None
    return f":{param}"


class IRCConnection:
    """A connected stream socket speaking line-delimited IRC.

    ``raw_log`` is called as ``raw_log(direction, line)`` for every line
    read or written.
    """

    def __init__(
        self,
        sock: socket.socket,
        host: str | None = None,
        port: int | None = None,
        raw_log: RawLogHook | None = None,
    ) -> None:
        self.sock = sock
        self.host = host
        self.port = port
        self.raw_log = raw_log
        self.timeout_ms: int | None = None
        self.closed = False
        self._reader = sock.makefile("rb")
        self._write_lock = threading.RLock()

    @classmethod
    def open(
        cls,
        host: str,
        port: int,
        use_ssl: bool = False,
        raw_log: RawLogHook | None = None,
    ) -> IRCConnection:
        logger.log_event("irc", "connect_start", host=host, port=port)
        try:
            sock = socket.create_connection((host, port), timeout=IRC_CONNECT_TIMEOUT)
            if use_ssl:
                context = ssl.create_default_context()
                sock = context.wrap_socket(sock, server_hostname=host)
            # Blocking reads until set_timeout says otherwise.
            sock.settimeout(None)
        except OSError as e:
            logger.log_event(
                "irc",
                "connect_failed",
                level=logging.ERROR,
                host=host,
                port=port,
                error=str(e),
            )
            raise IRCConnectionError(
                f"Could not connect to {host}:{port}: {e}",
                data={"host": host, "port": port},
            ) from e
        logger.log_event(
            "irc", "connection_established", level=logging.DEBUG, host=host, port=port
        )
        return cls(sock, host=host, port=port, raw_log=raw_log)

    def set_timeout(self, timeout_ms: int | None) -> None:
        """Read deadline in milliseconds. Expiry surfaces as IRCConnectionError."""
        if timeout_ms is None:
            return
        self.timeout_ms = timeout_ms
        self.sock.settimeout(timeout_ms / 1000)
        logger.log_event(
            "irc", "timeout_set", level=logging.DEBUG, timeout_ms=timeout_ms
        )

    def register(
        self,
        nick: str,
        username: str | None = None,
        real_name: str = "",
        init_mode: int = 0,
        password: str | None = None,
    ) -> None:
        logger.log_event("irc", "register", level=logging.DEBUG, nick=nick)
        if password:
            self.write_line("PASS", password)
        self.write_line("NICK", nick)
        self.write_line("USER", username or nick, str(init_mode), "*", end(real_name))

    def write_line(self, *parts: str | None) -> str:
        """Join the non-None parts with spaces and send them as one line.

        CR, LF and NUL inside the parts are replaced with spaces, so a call
        never puts more than one command on the wire.
        """
        line = " ".join(part for part in parts if part is not None)
        line = line.translate(_LINE_BREAKS)
        data = (line + IRC_LINE_TERMINATOR).encode(IRC_ENCODING)
        try:
            # raw_log under the lock keeps its order equal to the wire order.
            with self._write_lock:
                if self.raw_log:
                    self.raw_log("write", line)
                self.sock.sendall(data)
        except OSError as e:
            logger.log_event("irc", "write_error", level=logging.ERROR, error=str(e))
            raise IRCConnectionError(f"Write failed: {e}") from e
        return line

    def read_lines(self) -> Iterator[str]:
        """Yield decoded lines until the stream ends.

        EOF and socket errors end the iteration quietly. An expired read
        timeout raises IRCConnectionError.
        """
        while True:
            try:
                data = self._reader.readline()
            except TimeoutError as e:
                logger.log_event(
                    "irc", "read_timeout", level=logging.WARNING, timeout_ms=self.timeout_ms
                )
                raise IRCConnectionError(
                    f"No data from server for {self.timeout_ms}ms",
                    data={"timeout_ms": self.timeout_ms},
                ) from e
            except (OSError, ValueError) as e:
                # ValueError: the file object was closed underneath us by kill().
                logger.log_event("irc", "read_error", level=logging.DEBUG, error=str(e))
                return
            if not data:
                logger.log_event("irc", "stream_closed", level=logging.DEBUG)
                return
            line = data.decode(IRC_ENCODING, errors="replace").rstrip("\r\n")
            if self.raw_log:
                self.raw_log("read", line)
            yield line

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        try:
            self.sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass  # already disconnected
        self._reader.close()
        self.sock.close()
        logger.log_event("irc", "close", level=logging.DEBUG)
