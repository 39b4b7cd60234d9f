"""
In-memory index of containers backed by the object store root directory.

Disk is the source of truth. The index is a cache that can be rebuilt at any
time by scanning the root directory.
"""

from __future__ import annotations

import shutil
import threading
from itertools import islice
from typing import TYPE_CHECKING

from bytestore.services.container import Container, parse_identifier
from bytestore.services.errors import ReconstructionError, StorageIOError

if TYPE_CHECKING:
    import logging
    from pathlib import Path
    from uuid import UUID


class ContainerIndex:
    """
    Mapping from container identifier to Container.

    A single lock guards the container map. It is never held while a
    container's own lock is taken or while filesystem I/O runs.

    Attributes:
        root: Object store root directory (one subdirectory per container)
    """

    def __init__(self, root: Path, logger: logging.Logger) -> None:
        """
        Initialize an empty index and create the root directory if absent.

        Args:
            root: Object store root directory
            logger: Logger for skipped entries and integrity warnings
        """
        self.root = root
        self._logger = logger
        self._containers: dict[UUID, Container] = {}
        self._lock = threading.Lock()
        self.root.mkdir(parents=True, exist_ok=True)

    def __len__(self) -> int:
        return len(self._containers)

    def _new_container(self, container_id: UUID) -> Container:
        return Container(container_id, self.root / str(container_id), self._logger)

    def get_or_create(self, container_id: UUID) -> Container:
        """
        Return the container for `container_id`, creating it if unseen.

        A directory creation failure is logged, not raised; the next write
        into the container reports it as a StorageIOError.
        """
        container = self._containers.get(container_id)
        if container is not None:
            return container

        with self._lock:
            container = self._containers.get(container_id)
            if container is None:
                container = self._new_container(container_id)
                self._containers[container_id] = container

        try:
            container.ensure_directory()
        except OSError as exc:
            self._logger.warning(
                "Failed to create container directory",
                extra={
                    "container_id": str(container_id),
                    "path": str(container.directory),
                    "reason": str(exc),
                },
            )
        return container

    def get(self, container_id: UUID) -> Container | None:
        """Return the container, or None if not indexed."""
        return self._containers.get(container_id)

    def list_containers(self, limit: int) -> list[UUID]:
        """Return up to `limit` container identifiers in no particular order."""
        with self._lock:
            return list(islice(self._containers, limit))

    def count_objects(self) -> int:
        """Total number of indexed objects across all containers."""
        with self._lock:
            containers = list(self._containers.values())
        return sum(len(container) for container in containers)

    def delete_container(self, container_id: UUID) -> None:
        """
        Evict a container from the index and remove its directory.

        A missing directory counts as removed. If removal fails, files may
        remain on disk without an index entry until the next rebuild.

        Raises:
            StorageIOError: If the directory exists but cannot be removed
        """
        with self._lock:
            self._containers.pop(container_id, None)

        directory = self.root / str(container_id)
        try:
            shutil.rmtree(directory)
        except FileNotFoundError:
            pass
        except OSError as exc:
            raise StorageIOError("remove container", directory, exc) from exc

    def rebuild_from_disk(self) -> None:
        """
        Replace the index with the state found on disk.

        Each subdirectory named by a canonical identifier becomes a container
        and loads its own sidecars. Other entries are skipped with a warning.
        The new map is swapped in only after every container loaded.

        Raises:
            ReconstructionError: If the root or any container cannot be read
        """
        try:
            entries = sorted(self.root.iterdir())
        except OSError as exc:
            raise ReconstructionError(self.root, str(exc)) from exc

        containers: dict[UUID, Container] = {}
        for entry in entries:
            if not entry.is_dir():
                self._logger.warning(
                    "Skipping non-directory entry in store root",
                    extra={"path": str(entry)},
                )
                continue

            container_id = parse_identifier(entry.name)
            if container_id is None:
                self._logger.warning(
                    "Skipping directory with invalid container identifier",
                    extra={"path": str(entry)},
                )
                continue

            container = self._new_container(container_id)
            container.rebuild_from_disk()
            containers[container_id] = container

        with self._lock:
            self._containers = containers

        self._logger.info(
            "Rebuilt index from disk",
            extra={
                "root": str(self.root),
                "container_count": len(containers),
                "object_count": sum(len(c) for c in containers.values()),
            },
        )
