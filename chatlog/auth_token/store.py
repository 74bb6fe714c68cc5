from __future__ import annotations

import fcntl
import json
import logging
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from ..errors.internal import CredentialLoadError
from .types import Credential


class TokenStore:
    """JSON token file holding the complete token response.

    Reads fail loudly with ``CredentialLoadError``; writes are atomic
    (temp file in the same directory, fsync, rename) so a crash mid-write
    never leaves a truncated file behind.
    """

    def __init__(self, path: str | os.PathLike[str]):
        """Initialize the TokenStore.

        Args:
            path: Path to the token file.
        """
        if not isinstance(path, str | os.PathLike):
            raise TypeError("path must be str or os.PathLike")
        self.path = str(path)

    def load(self) -> Credential:
        """Load the persisted credential.

        Returns:
            The credential stored in the file.

        Raises:
            CredentialLoadError: If the file is missing, unreadable, not JSON,
                or lacks the token fields.
        """
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError as e:
            raise CredentialLoadError(
                f"Token file not found: {self.path}", data={"path": self.path}
            ) from e
        except (OSError, ValueError) as e:
            raise CredentialLoadError(
                f"Error reading tokens from {self.path}: {e}", data={"path": self.path}
            ) from e
        if not isinstance(data, dict):
            raise CredentialLoadError(
                f"Token file {self.path} must contain a JSON object",
                data={"path": self.path},
            )
        try:
            credential = Credential.from_dict(data)
        except ValidationError as e:
            raise CredentialLoadError(
                f"Token file {self.path} is missing access_token", data={"path": self.path}
            ) from e
        if not credential.can_refresh:
            raise CredentialLoadError(
                f"Token file {self.path} is missing refresh_token", data={"path": self.path}
            )
        logging.debug(f"📂 Tokens loaded from {self.path}")
        return credential

    def save(self, credential: Credential) -> None:
        """Persist the credential, replacing the previous file atomically.

        Args:
            credential: Credential to write.

        Raises:
            OSError: If the file cannot be written.
        """
        self._atomic_write(credential.to_dict())

    def _atomic_write(self, data: dict) -> None:
        token_path = Path(self.path)
        token_path.parent.mkdir(parents=True, exist_ok=True)
        lock_path = token_path.with_suffix(token_path.suffix + ".lock")
        temp_path: str | None = None
        try:
            with open(lock_path, "w", encoding="utf-8") as lock_file:
                fcntl.flock(lock_file.fileno(), fcntl.LOCK_EX)
                with tempfile.NamedTemporaryFile(
                    mode="w",
                    dir=token_path.parent,
                    prefix=f".{token_path.name}.",
                    suffix=".tmp",
                    delete=False,
                    encoding="utf-8",
                ) as tmp:
                    temp_path = tmp.name
                    json.dump(data, tmp, indent=2)
                    tmp.flush()
                    os.fsync(tmp.fileno())
                os.chmod(temp_path, 0o600)
                os.replace(temp_path, self.path)
                temp_path = None
                logging.info(f"💾 Tokens saved to {self.path}")
        except (OSError, ValueError) as e:
            logging.error(f"💥 Writing tokens failed: {type(e).__name__}: {e}")
            raise
        finally:
            if temp_path and os.path.exists(temp_path):
                try:
                    os.unlink(temp_path)
                except OSError:
                    pass
            try:
                os.unlink(lock_path)
            except OSError:
                pass
