"""
Service information endpoint.
"""

from __future__ import annotations

from fastapi import APIRouter

from bytestore.config import get_settings
from bytestore.routers.common import get_container_index
from bytestore.schemas import InfoResponse, StorageInfo

router = APIRouter()


@router.get("/info", response_model=InfoResponse)
async def get_info() -> InfoResponse:
    """Get service information, storage configuration and index totals."""
    settings = get_settings()
    index = get_container_index()

    storage_info = StorageInfo(
        path=settings.storage.path,
        content_type=settings.storage.content_type,
        list_limit=settings.storage.list_limit,
        container_count=len(index),
        object_count=index.count_objects(),
    )

    return InfoResponse(
        service=settings.service.name,
        version=settings.service.version,
        storage=storage_info,
    )
