from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..constants import IRC_DEFAULT_MODE, IRC_DEFAULT_REAL_NAME
from ..irc.events import DEFAULT_CALLBACKS, is_valid_event_name


class SessionOptions(BaseModel):
    """Options accepted by ``connect``.

    Attributes:
        timeout: Read timeout in milliseconds; None keeps reads blocking.
        real_name: Real name sent in the USER line.
        mode: Initial user mode sent in the USER line.
        username: Username for the USER line; defaults to the nick.
        password: Server password, sent as PASS before NICK.
        ssl: Wrap the socket in TLS.
        callbacks: Event name to callback. When omitted, raw lines are logged.
    """

    model_config = ConfigDict(extra="forbid")

    timeout: int | None = Field(default=None, gt=0)
    real_name: str = IRC_DEFAULT_REAL_NAME
    mode: int = Field(default=IRC_DEFAULT_MODE, ge=0)
    username: str | None = None
    password: str | None = None
    ssl: bool = False
    callbacks: dict[str, Callable[..., Any]] = Field(
        default_factory=lambda: dict(DEFAULT_CALLBACKS)
    )

    @field_validator("username", "password", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("callbacks", mode="before")
    @classmethod
    def validate_callbacks(cls, v: Any) -> dict[str, Any]:
        """Reject names outside the known events and the passthrough rule."""
        if v is None:
            return dict(DEFAULT_CALLBACKS)
        if not isinstance(v, Mapping):
            raise ValueError("callbacks must be a mapping of event name to callable")
        unknown = [name for name in v if not is_valid_event_name(str(name))]
        if unknown:
            raise ValueError(f"unknown event names: {', '.join(sorted(unknown))}")
        return dict(v)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SessionOptions:
        # Accept the dashed spelling (real-name) as well.
        norm_data = {str(k).replace("-", "_"): v for k, v in data.items()}
        return cls.model_validate(norm_data)
