"""
Application lifecycle management.

Startup rebuilds the container index from disk. A ReconstructionError is
not caught: a store that cannot be read consistently must not serve requests.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path
from typing import TYPE_CHECKING

from bytestore.config import get_safe_config, get_settings
from bytestore.core.state import init_app_state, reset_app_state
from bytestore.logging import get_logger, setup_logging
from bytestore.services.container_index import ContainerIndex
from bytestore.services.download_tokens import DownloadTokenRegistry
from bytestore.services.errors import ReconstructionError

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from fastapi import FastAPI


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifecycle."""
    # === STARTUP ===
    settings = get_settings()

    # Initialize logging first
    setup_logging(settings.logging.level, settings.service.name)
    logger = get_logger()

    logger.info(
        "Service starting",
        extra={
            "service": settings.service.name,
            "version": settings.service.version,
            "host": settings.server.host,
            "port": settings.server.port,
            "config": get_safe_config(),
        },
    )

    state = init_app_state()

    index = ContainerIndex(root=Path(settings.storage.path), logger=logger)
    try:
        index.rebuild_from_disk()
    except ReconstructionError as e:
        logger.critical(
            "Cannot rebuild index from disk, refusing to start",
            extra={"path": str(e.path), "reason": e.reason},
        )
        reset_app_state()
        raise

    state.container_index = index
    state.download_tokens = DownloadTokenRegistry()

    logger.info(
        "Service ready to accept requests",
        extra={
            "storage_path": settings.storage.path,
            "container_count": len(index),
            "object_count": index.count_objects(),
        },
    )

    yield  # Application runs here

    # === SHUTDOWN ===
    logger.info(
        "Service shutting down",
        extra={
            "uptime_seconds": state.uptime_seconds,
            "uptime": state.uptime_formatted,
            "container_count": len(index),
            "object_count": index.count_objects(),
            "unused_download_tokens": len(state.download_tokens),
        },
    )
