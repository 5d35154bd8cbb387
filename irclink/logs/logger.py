"""Project logger rendering catalog events as aligned one-line messages."""

from __future__ import annotations

import logging
import os
import sys

import colorlog

from .event_catalog import EVENT_TEMPLATES

# Widths of the event name column (DEBUG only) and of the [nick #channel] column.
EVENT_COLUMN = 32
PREFIX_COLUMN = 24


def _debug_env() -> bool:
    return os.environ.get("DEBUG", "false").lower() in ("true", "1", "yes")


def _console_formatter() -> logging.Formatter:
    # colorlog drops the escape codes itself when stdout is not a terminal.
    return colorlog.ColoredFormatter(
        "%(log_color)s%(levelname)-8s%(reset)s %(message)s",
        log_colors={
            "DEBUG": "cyan",
            "INFO": "green",
            "WARNING": "yellow",
            "ERROR": "red",
            "CRITICAL": "magenta",
        },
        stream=sys.stdout,
    )


class IRCLogger:
    """Structured event logger.

    Call sites name an event by domain and action::

        logger.log_event("irc", "join", nick=nick, channel=name, actor=actor)

    The human text comes from the event catalog, formatted with the keyword
    arguments. ``nick`` and ``channel`` are not part of the context; they
    form the ``[nick #channel]`` column. With DEBUG set, every line also
    carries the event name and the remaining context as ``key=value`` pairs.
    """

    def __init__(self, name: str = "irclink", log_file: str | None = None) -> None:
        self.logger = logging.getLogger(name)
        self.log_file = log_file
        self.logger.handlers.clear()
        self.logger.setLevel(logging.DEBUG if _debug_env() else logging.INFO)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(_console_formatter())
        self.logger.addHandler(console_handler)

        if log_file:
            file_handler = logging.FileHandler(log_file)
            file_handler.setFormatter(
                logging.Formatter(
                    "%(asctime)s %(threadName)s %(levelname)s %(message)s"
                )
            )
            self.logger.addHandler(file_handler)

    def set_level(self, level: int) -> None:
        self.logger.setLevel(level)

    def log_event(
        self,
        domain: str,
        action: str,
        level: int = logging.INFO,
        human: str | None = None,
        *,
        exc_info: bool = False,
        **context: object,
    ) -> None:
        if not self.logger.isEnabledFor(level):
            return
        nick = context.pop("nick", None)
        channel = context.pop("channel", None)
        if human is None:
            human = self._render(domain, action, context, nick=nick, channel=channel)
        prefix = self._prefix(
            nick if isinstance(nick, str) else None,
            channel if isinstance(channel, str) else None,
        )
        if _debug_env():
            msg = self._debug_line(f"{domain}_{action}".lower(), prefix, human, context)
        else:
            msg = f"{prefix} {human}"
        self.logger.log(level, msg, exc_info=exc_info)

    @staticmethod
    def _render(
        domain: str, action: str, context: dict[str, object], **reserved: object
    ) -> str:
        template = EVENT_TEMPLATES.get((domain, action))
        if template is None:
            context["derived"] = True
            return f"{domain.replace('_', ' ')}: {action.replace('_', ' ')}"
        try:
            return template.format(**reserved, **context)
        except (KeyError, IndexError, ValueError):
            # A call site missing a field still logs the bare template.
            return template

    @staticmethod
    def _prefix(nick: str | None, channel: str | None) -> str:
        label = f"{nick or 'system'} {channel}" if channel else nick or "system"
        return f"[{label.ljust(PREFIX_COLUMN)[:PREFIX_COLUMN]}]"

    @staticmethod
    def _debug_line(
        event_name: str, prefix: str, human: str, context: dict[str, object]
    ) -> str:
        if len(event_name) > EVENT_COLUMN:
            event_name = event_name[: EVENT_COLUMN - 1] + "…"
        line = f"{event_name.ljust(EVENT_COLUMN)} {prefix} {human}"
        if context:
            line += " (" + ", ".join(f"{k}={v}" for k, v in context.items()) + ")"
        return line


logger = IRCLogger()
