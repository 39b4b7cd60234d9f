"""
Single-use download tokens.

A token grants one download of one object. Tokens are kept in memory only
and have no expiry: they live until consumed or until the process restarts.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from uuid import UUID, uuid4


@dataclass(frozen=True)
class DownloadToken:
    """A capability to download one object once."""

    token: str
    container_id: UUID
    object_id: UUID


def new_token() -> str:
    """Generate a 64 character hex token from two random UUIDs."""
    return uuid4().hex + uuid4().hex


class DownloadTokenRegistry:
    """Lock-guarded mapping from token string to the object it unlocks."""

    def __init__(self) -> None:
        self._tokens: dict[str, DownloadToken] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._tokens)

    def issue(self, container_id: UUID, object_id: UUID) -> DownloadToken:
        """Register and return a fresh token for an object."""
        grant = DownloadToken(token=new_token(), container_id=container_id, object_id=object_id)
        with self._lock:
            self._tokens[grant.token] = grant
        return grant

    def consume(self, token: str) -> DownloadToken | None:
        """Remove and return the grant for `token`, or None if unknown or used."""
        with self._lock:
            return self._tokens.pop(token, None)
