"""
Helpers shared by the container, object and download routers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

from fastapi.responses import FileResponse

from bytestore.config import get_settings
from bytestore.core.exceptions import ServiceError
from bytestore.core.state import get_app_state
from bytestore.services.errors import ContainerNotFoundError, ObjectNotFoundError

if TYPE_CHECKING:
    from bytestore.services.container import Container
    from bytestore.services.container_index import ContainerIndex
    from bytestore.services.download_tokens import DownloadTokenRegistry
    from bytestore.services.object_meta import ObjectMeta


def parse_id(value: str, kind: str) -> UUID:
    """Parse a path identifier. Raises ServiceError on invalid ID."""
    try:
        return UUID(value)
    except ValueError as exc:
        raise ServiceError(
            error="invalid_id",
            message=f"Invalid {kind} ID: '{value}'. IDs must be UUIDs.",
            status_code=400,
            details={f"{kind}_id": value},
        ) from exc


def get_container_index() -> ContainerIndex:
    """Get initialized container index or raise a service error."""
    index = get_app_state().container_index
    if index is None:
        raise ServiceError(
            error="service_unavailable",
            message="Container index is not initialized",
            status_code=503,
            details={},
        )
    return index


def get_download_tokens() -> DownloadTokenRegistry:
    """Get initialized token registry or raise a service error."""
    tokens = get_app_state().download_tokens
    if tokens is None:
        raise ServiceError(
            error="service_unavailable",
            message="Download token registry is not initialized",
            status_code=503,
            details={},
        )
    return tokens


def resolve_container(container_id: UUID) -> Container:
    """Look up an indexed container. Raises ContainerNotFoundError."""
    container = get_container_index().get(container_id)
    if container is None:
        raise ContainerNotFoundError(container_id)
    return container


def resolve_object(container: Container, object_id: UUID) -> ObjectMeta:
    """Look up an indexed object. Raises ObjectNotFoundError."""
    meta = container.get_object(object_id)
    if meta is None:
        raise ObjectNotFoundError(container.id, object_id)
    return meta


def effective_limit(limit: int | None) -> int:
    """Cap a requested listing size at the configured maximum."""
    max_limit = get_settings().storage.list_limit
    if limit is None:
        return max_limit
    return min(limit, max_limit)


def payload_response(container: Container, meta: ObjectMeta) -> FileResponse:
    """Stream an object's payload as an attachment named after the object."""
    path = container.payload_path(meta.id)
    if not path.is_file():
        raise ServiceError(
            error="storage_read_failed",
            message=f"Payload of object '{meta.id}' is missing on disk",
            status_code=503,
            details={"container_id": str(container.id), "object_id": str(meta.id)},
        )
    return FileResponse(
        path,
        media_type=get_settings().storage.content_type,
        filename=meta.name,
    )
