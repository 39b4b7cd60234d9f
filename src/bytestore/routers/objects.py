"""
Object storage endpoints.

Provides upload, metadata, download and delete operations for objects
inside a container, plus issuing of single-use download tokens.
"""

from __future__ import annotations

import tempfile
from typing import TYPE_CHECKING

from fastapi import APIRouter, Query, Request, Response
from fastapi.responses import FileResponse
from starlette.concurrency import run_in_threadpool

from bytestore.logging import get_logger
from bytestore.routers.common import (
    effective_limit,
    get_container_index,
    get_download_tokens,
    parse_id,
    payload_response,
    resolve_container,
    resolve_object,
)
from bytestore.schemas import DownloadTokenResponse, ErrorResponse, ObjectListResponse
from bytestore.services.object_meta import ObjectMeta

if TYPE_CHECKING:
    from typing import BinaryIO

router = APIRouter()

# Request bodies above this size are spooled to a temporary file.
_SPOOL_MAX_BYTES = 8 * 1024 * 1024

_NOT_FOUND = {404: {"model": ErrorResponse}, 400: {"model": ErrorResponse}}


async def _spool_body(request: Request, spool: BinaryIO) -> None:
    async for chunk in request.stream():
        spool.write(chunk)
    spool.seek(0)


# nosemgrep: no-default-parameter-values (intentional API query parameter default)
@router.post(
    "/containers/{container_id}/objects",
    status_code=201,
    response_model=ObjectMeta,
    responses={400: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
async def upload_object(
    container_id: str,
    request: Request,
    name: str = Query(description="Display name of the object"),
    tag: str = Query(default="", description="Opaque metadata stored with the object"),
) -> ObjectMeta:
    """Store the request body as a new object, creating the container if needed."""
    container = get_container_index().get_or_create(parse_id(container_id, "container"))
    with tempfile.SpooledTemporaryFile(max_size=_SPOOL_MAX_BYTES) as spool:
        await _spool_body(request, spool)
        meta = await run_in_threadpool(container.add_object, name, tag, spool)

    get_logger().info(
        "Object stored",
        extra={"container_id": str(container.id), "object_id": str(meta.id)},
    )
    return meta


# nosemgrep: no-default-parameter-values (intentional API query parameter default)
@router.get(
    "/containers/{container_id}/objects",
    response_model=ObjectListResponse,
    responses=_NOT_FOUND,
)
async def list_objects(
    container_id: str,
    limit: int | None = Query(default=None, ge=1, description="Maximum identifiers to return"),
) -> ObjectListResponse:
    """List object identifiers in a container."""
    container = resolve_container(parse_id(container_id, "container"))
    return ObjectListResponse(
        container_id=container.id,
        objects=container.list_objects(effective_limit(limit)),
    )


@router.get(
    "/containers/{container_id}/objects/{object_id}",
    response_model=ObjectMeta,
    responses=_NOT_FOUND,
)
async def get_object_meta(container_id: str, object_id: str) -> ObjectMeta:
    """Get an object's metadata record."""
    container = resolve_container(parse_id(container_id, "container"))
    return resolve_object(container, parse_id(object_id, "object"))


@router.get("/containers/{container_id}/objects/{object_id}/content", responses=_NOT_FOUND)
async def download_object(container_id: str, object_id: str) -> FileResponse:
    """Download an object's payload."""
    container = resolve_container(parse_id(container_id, "container"))
    meta = resolve_object(container, parse_id(object_id, "object"))
    return payload_response(container, meta)


@router.delete(
    "/containers/{container_id}/objects/{object_id}",
    status_code=204,
    responses={**_NOT_FOUND, 503: {"model": ErrorResponse}},
)
async def delete_object(container_id: str, object_id: str) -> Response:
    """Delete a single object."""
    container = resolve_container(parse_id(container_id, "container"))
    meta = resolve_object(container, parse_id(object_id, "object"))
    await run_in_threadpool(container.remove_object, meta)
    return Response(status_code=204)


@router.post(
    "/containers/{container_id}/objects/{object_id}/tokens",
    response_model=DownloadTokenResponse,
    responses=_NOT_FOUND,
)
async def create_download_token(container_id: str, object_id: str) -> DownloadTokenResponse:
    """Issue a single-use token for downloading an object without its identifiers."""
    container = resolve_container(parse_id(container_id, "container"))
    meta = resolve_object(container, parse_id(object_id, "object"))
    grant = get_download_tokens().issue(container.id, meta.id)

    get_logger().info(
        "Download token issued",
        extra={"container_id": str(container.id), "object_id": str(meta.id)},
    )
    return DownloadTokenResponse(
        token=grant.token,
        container_id=grant.container_id,
        object_id=grant.object_id,
    )
