"""
Root logging setup for applications embedding irclink.

``LoggerConfigurator`` installs a colorlog handler on the root logger; the
thread name column tells apart the read loops of concurrent sessions.
``log_structured_error`` writes one categorized line per failure.
"""

import logging
import os
import sys
from typing import Any

import colorlog

LOG_FORMAT = (
    "%(asctime)s %(log_color)s%(levelname)-8s%(reset)s "
    "%(threadName)-20s %(message_log_color)s%(message)s"
)
LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "magenta",
}


def log_structured_error(
    error_type: str,
    message: str,
    exception: Exception | None = None,
    context: dict[str, Any] | None = None,
    level: int = logging.ERROR,
) -> None:
    """Log ``[CATEGORY] message | Exception: ... | Context: k=v | ...``.

    Structured ``data`` carried by the exception (see ``InternalError``) is
    merged under the explicit ``context``, which wins on conflicts.

    Args:
        error_type: Category of the error (e.g., 'network', 'protocol', 'config')
        message: Descriptive error message
        exception: The exception that occurred (optional)
        context: Additional context data for debugging
        level: Logging level (default: ERROR)
    """
    parts = [f"[{error_type.upper()}] {message}"]
    if exception is not None:
        parts.append(f"Exception: {type(exception).__name__}: {exception}")
    data = getattr(exception, "data", None) or {}
    merged = {**data, **(context or {})}
    if merged:
        parts.append("Context: " + " | ".join(f"{k}={v}" for k, v in merged.items()))
    logging.getLogger("irclink").log(level, " | ".join(parts))


class LoggerConfigurator:
    """Configures the root logger with colorlog.

    ``config`` keys:
        level: explicit level name or number; otherwise the DEBUG
            environment variable picks DEBUG or INFO.
        stream: output stream, stderr by default.
    """

    def __init__(self, config=None):
        self.config = config or {}

    def level(self) -> int:
        level = self.config.get("level")
        if level is not None:
            return logging.getLevelName(level) if isinstance(level, str) else int(level)
        debug_env = os.environ.get("DEBUG", "").lower()
        return logging.DEBUG if debug_env in ("true", "1", "yes") else logging.INFO

    def configure(self):
        """Install the colored handler and return its formatter."""
        log_level = self.level()
        formatter = colorlog.ColoredFormatter(
            LOG_FORMAT,
            datefmt="%H:%M:%S",
            log_colors=LOG_COLORS,
            secondary_log_colors={"message": {"ERROR": "red", "CRITICAL": "magenta"}},
        )

        handler = logging.StreamHandler(self.config.get("stream", sys.stderr))
        handler.setFormatter(formatter)
        logging.basicConfig(level=log_level, handlers=[handler])

        root_logger = logging.getLogger()
        root_logger.setLevel(log_level)
        # basicConfig is a no-op once the root has handlers; restyle those too.
        for h in root_logger.handlers:
            h.setFormatter(formatter)
        return formatter
