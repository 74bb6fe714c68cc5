"""Credential providers used by the connection lifecycle manager."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from ..constants import (
    RETRY_BACKOFF_MULTIPLIER,
    RETRY_MAX_BACKOFF_SECONDS,
    TOKEN_REFRESH_MAX_ATTEMPTS,
)
from ..errors.internal import (
    CredentialRefreshError,
    NetworkError,
    OAuthError,
    ParsingError,
    RateLimitError,
)
from ..utils.retry import RetryExhaustedError, retry_async
from .client import TokenClient
from .store import TokenStore
from .types import Credential


class CredentialProvider:
    """Holds the live credential and refreshes it on demand.

    At most one refresh runs at a time: callers arriving while a refresh is in
    flight await the same task instead of starting a second one, so the
    persisted file and the in-memory credential can never diverge between two
    racing refreshes.

    Attributes:
        client (TokenClient): OAuth client performing the refresh grant.
        store (TokenStore): Token file persistence.
        max_attempts (int): Refresh attempts before giving up.
    """

    def __init__(
        self,
        credential: Credential,
        client: TokenClient,
        store: TokenStore,
        *,
        max_attempts: int = TOKEN_REFRESH_MAX_ATTEMPTS,
        retry_multiplier: float = RETRY_BACKOFF_MULTIPLIER,
        retry_max_wait: float = RETRY_MAX_BACKOFF_SECONDS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._credential = credential
        self.client = client
        self.store = store
        self.max_attempts = max_attempts
        self._retry_multiplier = retry_multiplier
        self._retry_max_wait = retry_max_wait
        self._sleep = sleep
        self._refresh_task: asyncio.Task[Credential] | None = None

    @classmethod
    def from_store(cls, client: TokenClient, store: TokenStore, **kwargs) -> CredentialProvider:
        """Build a provider from the persisted token file.

        Raises:
            CredentialLoadError: If the token file cannot be loaded.
        """
        return cls(store.load(), client, store, **kwargs)

    def current_credential(self) -> Credential:
        return self._credential

    @property
    def refresh_in_flight(self) -> bool:
        return self._refresh_task is not None and not self._refresh_task.done()

    async def refresh(self) -> Credential:
        """Refresh the credential, joining an in-flight refresh if there is one.

        Returns:
            The new credential, already persisted and installed.

        Raises:
            CredentialRefreshError: If the refresh was rejected or every
                attempt failed. The persisted file is left untouched.
        """
        if self._refresh_task is None:
            task = asyncio.create_task(self._refresh())
            task.add_done_callback(self._clear_refresh_task)
            self._refresh_task = task
        else:
            logging.debug("🔗 Joining in-flight token refresh")
        return await asyncio.shield(self._refresh_task)

    async def aclose(self) -> None:
        """Cancel an in-flight refresh, if any."""
        task = self._refresh_task
        if task and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
            except CredentialRefreshError:
                pass

    def _clear_refresh_task(self, task: asyncio.Task[Credential]) -> None:
        if self._refresh_task is task:
            self._refresh_task = None

    async def _refresh(self) -> Credential:
        old = self._credential
        if not old.refresh_token:
            raise CredentialRefreshError("No refresh token available")
        logging.info("🔄 Refreshing access token")

        async def operation(_attempt: int) -> Credential:
            return await self.client.refresh(old.refresh_token)

        try:
            new = await retry_async(
                operation,
                retry_on=(NetworkError, RateLimitError),
                max_attempts=self.max_attempts,
                multiplier=self._retry_multiplier,
                max_wait=self._retry_max_wait,
                context="Token refresh",
                sleep=self._sleep,
            )
        except RetryExhaustedError as e:
            raise CredentialRefreshError(
                "Maximum token refresh attempts exceeded",
                data={"attempts": e.attempts},
            ) from e
        except (OAuthError, ParsingError) as e:
            raise CredentialRefreshError(f"Token refresh rejected: {e}") from e

        try:
            self.store.save(new)
        except OSError as e:
            # The new token is valid; keep it live and retry persisting on the next refresh.
            logging.error(f"💥 Error writing tokens to {self.store.path}: {e}")
        self._credential = new
        return new


class StaticCredentialProvider:
    """Provider for a token supplied on the command line.

    It has no client credentials, so an authentication failure cannot be
    repaired and ``refresh`` always fails.
    """

    def __init__(self, credential: Credential) -> None:
        self._credential = credential

    def current_credential(self) -> Credential:
        return self._credential

    async def refresh(self) -> Credential:
        raise CredentialRefreshError("Static token cannot be refreshed")

    async def aclose(self) -> None:
        return None
