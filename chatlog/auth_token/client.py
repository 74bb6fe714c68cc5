"""Token refresh HTTP client."""

from __future__ import annotations

import logging

import aiohttp
from pydantic import ValidationError

from ..constants import HTTP_REQUEST_TIMEOUT_SECONDS, TWITCH_TOKEN_URL
from ..errors.internal import NetworkError, OAuthError, ParsingError, RateLimitError
from ..utils import format_duration
from .types import Credential


class TokenClient:
    """Performs the OAuth ``refresh_token`` grant against Twitch.

    Every failure is raised as an ``InternalError`` subclass so retry policies
    can tell transient failures (``NetworkError``, ``RateLimitError``) from
    definitive ones (``OAuthError``, ``ParsingError``).
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        http_session: aiohttp.ClientSession,
        token_url: str = TWITCH_TOKEN_URL,
    ):
        """Initialize the token client.

        Args:
            client_id: Twitch application client ID.
            client_secret: Twitch application client secret.
            http_session: HTTP session for making requests.
            token_url: OAuth token endpoint.
        """
        self.client_id = client_id
        self.client_secret = client_secret
        self.session = http_session
        self.token_url = token_url

    async def refresh(self, refresh_token: str) -> Credential:
        """Exchange a refresh token for a new credential.

        Args:
            refresh_token: The refresh token to use.

        Returns:
            The complete new credential. When the response omits a new
            refresh token the old one is carried over.

        Raises:
            NetworkError: Timeouts, connection failures and HTTP 5xx.
            RateLimitError: HTTP 429.
            OAuthError: HTTP 400/401/403 (refresh token or client rejected).
            ParsingError: Malformed success response.
        """
        data = {
            "grant_type": "refresh_token",
            "refresh_token": refresh_token,
            "client_id": self.client_id,
            "client_secret": self.client_secret,
        }
        timeout = aiohttp.ClientTimeout(total=HTTP_REQUEST_TIMEOUT_SECONDS)
        try:
            async with self.session.post(self.token_url, data=data, timeout=timeout) as resp:
                if resp.status == 200:
                    try:
                        payload = await resp.json(content_type=None)
                    except ValueError as e:
                        raise ParsingError("Invalid JSON in refresh response") from e
                    return self._parse_credential(payload, refresh_token)
                body = await resp.text()
                if resp.status in (400, 401, 403):
                    raise OAuthError(
                        f"Token refresh rejected (HTTP {resp.status})",
                        data={"status": resp.status, "body": body[:200]},
                    )
                if resp.status == 429:
                    retry_after = resp.headers.get("Retry-After")
                    raise RateLimitError(
                        "Rate limited during token refresh",
                        retry_after=float(retry_after) if retry_after and retry_after.isdigit() else None,
                    )
                raise NetworkError(
                    f"HTTP {resp.status} during token refresh",
                    data={"status": resp.status},
                )
        except TimeoutError as e:
            raise NetworkError("Token refresh timeout") from e
        except aiohttp.ClientError as e:
            raise NetworkError(f"Network error during token refresh: {e}") from e

    def _parse_credential(self, payload: object, old_refresh_token: str) -> Credential:
        if not isinstance(payload, dict) or not payload.get("access_token"):
            raise ParsingError("Missing access_token in refresh response")
        fields = dict(payload)
        # A null or empty refresh_token in the response means "unchanged"
        if not fields.get("refresh_token"):
            fields["refresh_token"] = old_refresh_token
        try:
            credential = Credential.from_dict(fields)
        except ValidationError as e:
            raise ParsingError(f"Invalid token fields in refresh response: {e.error_count()} error(s)") from e
        expires_in = fields.get("expires_in")
        lifetime = format_duration(expires_in) if isinstance(expires_in, int | float) else "unknown"
        logging.info(f"🔑 Token refreshed (lifetime {lifetime}) expires_in={expires_in}")
        return credential
