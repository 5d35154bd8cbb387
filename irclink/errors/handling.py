from __future__ import annotations

from ..logging_config import log_structured_error
from .internal import (
    InternalError,
    IRCConnectionError,
    ProtocolFatalError,
    UnknownEventError,
)

# First match wins; InternalError must stay after its subclasses.
_CATEGORIES: tuple[tuple[type[BaseException] | tuple[type[BaseException], ...], str], ...] = (
    ((IRCConnectionError, OSError), "network"),
    (ProtocolFatalError, "protocol"),
    (UnknownEventError, "config"),
    (InternalError, "internal"),
)


def error_category(error: BaseException) -> str:
    """Category used to group log lines: network, protocol, config, internal or unknown."""
    for types, category in _CATEGORIES:
        if isinstance(error, types):
            return category
    return "unknown"


def log_error(message: str, error: Exception, context: dict | None = None) -> None:
    """Log ``message`` together with ``error`` under the error's category.

    Args:
        message: What was being done when the error happened.
        error: The exception instance to be logged.
        context: Optional additional context data (e.g. the network).
    """
    log_structured_error(
        error_type=error_category(error),
        message=f"{message}: {error}",
        exception=error,
        context=context,
    )
