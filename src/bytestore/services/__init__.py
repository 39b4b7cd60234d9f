"""Storage engine: container index, containers, metadata and download tokens."""

from bytestore.services.container import Container
from bytestore.services.container_index import ContainerIndex
from bytestore.services.download_tokens import DownloadToken, DownloadTokenRegistry
from bytestore.services.errors import (
    ContainerNotFoundError,
    ObjectNotFoundError,
    OwnershipError,
    ReconstructionError,
    StorageIOError,
    StoreError,
)
from bytestore.services.object_meta import ObjectMeta

__all__ = [
    "Container",
    "ContainerIndex",
    "ContainerNotFoundError",
    "DownloadToken",
    "DownloadTokenRegistry",
    "ObjectMeta",
    "ObjectNotFoundError",
    "OwnershipError",
    "ReconstructionError",
    "StorageIOError",
    "StoreError",
]
