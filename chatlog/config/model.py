from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..constants import DEFAULT_TOKEN_FILE, RECONNECT_MAX_ATTEMPTS, TWITCH_IRC_WS_URL


class AuthMode(str, Enum):
    """How the bearer token is obtained.

    Attributes:
        REFRESH: Tokens come from the token file and are refreshed with the
            client credentials when Twitch rejects them.
        STATIC: A token given on the command line; rejection is fatal.
    """

    REFRESH = "refresh"
    STATIC = "token"


class SessionConfig(BaseModel):
    """Immutable session identity and authentication settings.

    Attributes:
        nick: The account nickname.
        channels: Channels to join, in join order.
        auth_mode: Token source.
        oauth_token: Static token (``token`` mode).
        client_id: Twitch application client ID (``refresh`` mode).
        client_secret: Twitch application client secret (``refresh`` mode).
        token_file: Path of the persisted token file (``refresh`` mode).
        ws_url: Chat gateway endpoint.
        max_attempts: Reconnect attempts per outage.
        debug: Enable debug logging.
    """

    model_config = ConfigDict(frozen=True)

    nick: str = Field(min_length=1, max_length=25)
    channels: tuple[str, ...] = Field(min_length=1)
    auth_mode: AuthMode
    oauth_token: str | None = None
    client_id: str | None = None
    client_secret: str | None = None
    token_file: str = DEFAULT_TOKEN_FILE
    ws_url: str = TWITCH_IRC_WS_URL
    max_attempts: int = Field(default=RECONNECT_MAX_ATTEMPTS, ge=0)
    debug: bool = False

    @field_validator("nick", mode="before")
    @classmethod
    def validate_nick(cls, v: Any) -> str:
        if not isinstance(v, str):
            raise ValueError("nick must be a string")
        return v.strip().lower()

    @field_validator("channels", mode="before")
    @classmethod
    def validate_channels(cls, v: Any) -> tuple[str, ...]:
        """Strip whitespace and leading '#', lowercase, drop empties.

        Duplicates are removed keeping the first occurrence, so the join
        order is the order given.
        """
        if not isinstance(v, list | tuple):
            raise ValueError("channels must be a list")
        validated = []
        for c in v:
            if isinstance(c, str):
                stripped = c.strip().lstrip("#").lower()
                if stripped:
                    validated.append(stripped)
        return tuple(dict.fromkeys(validated))

    @field_validator("ws_url")
    @classmethod
    def validate_ws_url(cls, v: str) -> str:
        if not v.startswith(("ws://", "wss://")):
            raise ValueError("ws_url must be a ws:// or wss:// URL")
        return v

    @model_validator(mode="after")
    def validate_auth(self) -> SessionConfig:
        """Each auth mode needs its own credentials."""
        if self.auth_mode is AuthMode.STATIC:
            if not (self.oauth_token and self.oauth_token.strip()):
                raise ValueError("token mode requires an oauth token")
        elif not (self.client_id and self.client_secret):
            raise ValueError("refresh mode requires client_id and client_secret")
        return self
