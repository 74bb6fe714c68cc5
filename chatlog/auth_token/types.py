"""Credential model shared by the token store, client and provider."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Credential(BaseModel):
    """OAuth token pair as returned by the Twitch token endpoint.

    Only ``access_token`` and ``refresh_token`` are interpreted. Everything
    else in the token response (``expires_in``, ``scope``, ``token_type``)
    is kept as opaque extra data so a persisted file round-trips unchanged.
    Instances are frozen; a refresh replaces the whole object.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    access_token: str = Field(min_length=1)
    refresh_token: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Credential:
        return cls.model_validate(dict(data))

    @classmethod
    def static(cls, access_token: str) -> Credential:
        """Credential for a user supplied token without refresh capability."""
        token = access_token.strip()
        if token.lower().startswith("oauth:"):
            token = token[len("oauth:") :]
        return cls(access_token=token)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)

    @property
    def can_refresh(self) -> bool:
        return bool(self.refresh_token)
