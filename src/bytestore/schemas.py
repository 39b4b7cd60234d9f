"""
Pydantic request/response models for the bytestore API.

Object metadata is returned as ObjectMeta itself, serialized with the
sidecar field names.
"""

from __future__ import annotations

from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class HealthResponse(BaseModel):
    """Response model for GET /health endpoint."""

    status: Literal["healthy", "unhealthy"]
    """Service health status."""

    uptime_seconds: float
    """Uptime in seconds since service start."""

    uptime: str
    """Human-readable uptime."""

    system_time: str
    """Current system time in yyyy-mm-dd hh:mm format (UTC)."""


class StorageInfo(BaseModel):
    """Storage configuration and index totals for /info endpoint."""

    model_config = ConfigDict(extra="forbid")

    path: str
    """Object store root directory."""

    content_type: str
    """Content type used for payload downloads."""

    list_limit: int
    """Maximum number of identifiers returned by a listing."""

    container_count: int
    """Number of indexed containers."""

    object_count: int
    """Number of indexed objects across all containers."""


class InfoResponse(BaseModel):
    """Response model for GET /info endpoint."""

    service: str
    """Service name."""

    version: str
    """Service version."""

    storage: StorageInfo
    """Storage configuration and status."""


class ContainerListResponse(BaseModel):
    """Response model for GET /containers."""

    model_config = ConfigDict(extra="forbid")

    containers: list[UUID]
    """Container identifiers, in no particular order."""


class ObjectListResponse(BaseModel):
    """Response model for GET /containers/{container_id}/objects."""

    model_config = ConfigDict(extra="forbid")

    container_id: UUID
    """Container the objects belong to."""

    objects: list[UUID]
    """Object identifiers, in no particular order."""


class DownloadTokenResponse(BaseModel):
    """Response model for POST /containers/{container_id}/objects/{object_id}/tokens."""

    model_config = ConfigDict(extra="forbid")

    token: str
    """Single-use token for GET /downloads/{token}."""

    container_id: UUID
    object_id: UUID


class ErrorResponse(BaseModel):
    """Standard error response model."""

    error: str
    """Machine-readable error code."""

    message: str
    """Human-readable error description."""

    details: dict[str, Any]
    """Additional error context."""
