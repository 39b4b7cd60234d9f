"""
Token download endpoint.

Redeems a single-use token issued by the objects router. The token is
consumed before the lookup, so a failed download still uses it up.
"""

from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import FileResponse

from bytestore.core.exceptions import ServiceError
from bytestore.logging import get_logger
from bytestore.routers.common import (
    get_download_tokens,
    payload_response,
    resolve_container,
    resolve_object,
)
from bytestore.schemas import ErrorResponse

router = APIRouter()


@router.get("/downloads/{token}", responses={404: {"model": ErrorResponse}})
async def download_by_token(token: str) -> FileResponse:
    """Download the object a token was issued for."""
    grant = get_download_tokens().consume(token)
    if grant is None:
        raise ServiceError(
            error="token_not_found",
            message="Download not found or token already used",
            status_code=404,
            details={},
        )

    get_logger().info(
        "Download token consumed",
        extra={"container_id": str(grant.container_id), "object_id": str(grant.object_id)},
    )
    container = resolve_container(grant.container_id)
    meta = resolve_object(container, grant.object_id)
    return payload_response(container, meta)
