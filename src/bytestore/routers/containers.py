"""
Container endpoints.

Lists and deletes containers. Containers are created implicitly by the
first upload into them.
"""

from __future__ import annotations

from fastapi import APIRouter, Query, Response
from starlette.concurrency import run_in_threadpool

from bytestore.routers.common import (
    effective_limit,
    get_container_index,
    parse_id,
    resolve_container,
)
from bytestore.schemas import ContainerListResponse, ErrorResponse

router = APIRouter()


# nosemgrep: no-default-parameter-values (intentional API query parameter default)
@router.get("/containers", response_model=ContainerListResponse)
async def list_containers(
    limit: int | None = Query(default=None, ge=1, description="Maximum identifiers to return"),
) -> ContainerListResponse:
    """List container identifiers."""
    index = get_container_index()
    return ContainerListResponse(containers=index.list_containers(effective_limit(limit)))


@router.delete(
    "/containers/{container_id}",
    status_code=204,
    responses={404: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
async def delete_container(container_id: str) -> Response:
    """Delete a container with all of its objects."""
    container = resolve_container(parse_id(container_id, "container"))
    await run_in_threadpool(get_container_index().delete_container, container.id)
    return Response(status_code=204)
