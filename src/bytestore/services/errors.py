"""
Exception hierarchy for the storage engine.

Request-scoped failures (not found, ownership, live I/O) are recoverable and
raised to the caller. ReconstructionError is fatal: the index cannot be
trusted and the service must not start.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path
    from uuid import UUID


class StoreError(Exception):
    """Base exception for storage engine operations."""

    pass


class ContainerNotFoundError(StoreError):
    """Raised when a container identifier is not indexed."""

    def __init__(self, container_id: UUID) -> None:
        self.container_id = container_id
        super().__init__(f"Container '{container_id}' not found")


class ObjectNotFoundError(StoreError):
    """Raised when an object identifier is not indexed in its container."""

    def __init__(self, container_id: UUID, object_id: UUID) -> None:
        self.container_id = container_id
        self.object_id = object_id
        super().__init__(f"Object '{object_id}' not found in container '{container_id}'")


class OwnershipError(StoreError):
    """Raised when an object is addressed through a container that does not own it."""

    def __init__(self, container_id: UUID, object_id: UUID, owner_id: UUID) -> None:
        self.container_id = container_id
        self.object_id = object_id
        self.owner_id = owner_id
        super().__init__(
            f"Object '{object_id}' belongs to container '{owner_id}', not '{container_id}'"
        )


class StorageIOError(StoreError):
    """Raised when a filesystem operation fails while serving a request."""

    def __init__(self, operation: str, path: Path, cause: OSError) -> None:
        self.operation = operation
        self.path = path
        self.cause = cause
        super().__init__(f"Failed to {operation} '{path}': {cause}")


class ReconstructionError(StoreError):
    """Raised when the index cannot be rebuilt from disk."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot rebuild index from '{path}': {reason}")
