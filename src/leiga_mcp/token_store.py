"""Access token cache for the Leiga OpenAPI.

A single credential record is persisted so that consecutive server
invocations can reuse an access token until it expires. The on-disk format
is shared with other Leiga tooling and must stay stable:

    {"accessToken": "...", "expireIn": 7200, "createdAt": 1700000000000}

Key behaviors:
- Expiry is derived (createdAt + expireIn * 1000), never stored
- A record is valid only while now < expiry; the exact expiry instant is expired
- Absence is an ordinary state: reads never raise, they return None
- Records are replaced wholesale, never patched
"""
import json
import logging
import os
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError


logger = logging.getLogger("leiga-mcp.token_store")


def now_millis() -> int:
    """Current time as epoch milliseconds."""
    return int(time.time() * 1000)


class TokenRecord(BaseModel):
    """A cached access token as issued by the authentication endpoint."""

    access_token: str = Field(..., alias="accessToken")
    expire_in: int = Field(..., alias="expireIn", description="Lifetime in seconds")
    created_at: int = Field(..., alias="createdAt", description="Issuance time in epoch millis")

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @property
    def expires_at(self) -> int:
        return self.created_at + self.expire_in * 1000

    def is_valid_at(self, now_ms: int) -> bool:
        return now_ms < self.expires_at

    @classmethod
    def issue(cls, access_token: str, expire_in: int, now_ms: Optional[int] = None) -> "TokenRecord":
        """Stamp a freshly issued token with its creation time."""
        created_at = now_ms if now_ms is not None else now_millis()
        return cls(access_token=access_token, expire_in=expire_in, created_at=created_at)


class CredentialStore(ABC):
    """Single-slot credential storage."""

    @abstractmethod
    def has_record(self) -> bool:
        ...

    @abstractmethod
    def read_record(self) -> Optional[TokenRecord]:
        ...

    @abstractmethod
    def save_record(self, record: TokenRecord) -> None:
        ...

    @abstractmethod
    def delete_record(self) -> bool:
        ...

    def is_valid(self, now_ms: Optional[int] = None) -> bool:
        """True if a record exists and has not yet expired."""
        record = self.read_record()
        if record is None:
            return False
        if now_ms is None:
            now_ms = now_millis()
        return record.is_valid_at(now_ms)


class TokenManager(CredentialStore):
    """Credential store backed by one JSON file.

    No locking is performed: one process, one user, one file.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path).expanduser()

    def has_record(self) -> bool:
        return self.path.is_file() and os.access(self.path, os.R_OK)

    def read_record(self) -> Optional[TokenRecord]:
        """Parse the token file.

        Returns None when the file is missing, unreadable, or does not hold a
        well-formed record.
        """
        if not self.has_record():
            return None
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            return TokenRecord.model_validate(raw)
        except (OSError, ValueError, RecursionError, ValidationError) as e:
            logger.debug(f"Ignoring unusable token file {self.path}: {type(e).__name__}")
            return None

    def save_record(self, record: TokenRecord) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(record.model_dump(by_alias=True)), encoding="utf-8")
        logger.info(f"Saved access token to {self.path}")

    def delete_record(self) -> bool:
        """Remove the token file.

        Returns False both when there was nothing to delete and when deletion
        failed.
        """
        if not self.path.is_file():
            return False
        try:
            self.path.unlink()
        except OSError as e:
            logger.warning(f"Failed to delete token file {self.path}: {e}")
            return False
        logger.info(f"Deleted token file {self.path}")
        return True


class InMemoryCredentialStore(CredentialStore):
    """Credential store that never touches the filesystem."""

    def __init__(self, record: Optional[TokenRecord] = None):
        self._record = record

    def has_record(self) -> bool:
        return self._record is not None

    def read_record(self) -> Optional[TokenRecord]:
        return self._record

    def save_record(self, record: TokenRecord) -> None:
        self._record = record

    def delete_record(self) -> bool:
        if self._record is None:
            return False
        self._record = None
        return True
