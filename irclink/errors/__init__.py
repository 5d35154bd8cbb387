"""Error hierarchy and error logging helpers."""

from .handling import error_category, log_error  # noqa: F401
from .internal import (  # noqa: F401
    InternalError,
    IRCConnectionError,
    NickInUseError,
    ProtocolFatalError,
    UnknownEventError,
)

__all__ = [
    "InternalError",
    "IRCConnectionError",
    "NickInUseError",
    "ProtocolFatalError",
    "UnknownEventError",
    "error_category",
    "log_error",
]
