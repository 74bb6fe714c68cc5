"""Credential model, OAuth refresh client, token file store and providers."""

from .client import TokenClient
from .provider import CredentialProvider, StaticCredentialProvider
from .store import TokenStore
from .types import Credential

__all__ = [
    "Credential",
    "TokenClient",
    "TokenStore",
    "CredentialProvider",
    "StaticCredentialProvider",
]
