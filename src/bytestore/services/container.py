"""
A container: one directory of payloads and their metadata sidecars.

Objects are stored as {id}.bin (payload) and {id}.json (sidecar) inside the
container directory. The in-memory object map caches what is on disk.
"""

from __future__ import annotations

import shutil
import threading
from itertools import islice
from typing import TYPE_CHECKING
from uuid import UUID

from pydantic import ValidationError

from bytestore.services.errors import OwnershipError, ReconstructionError, StorageIOError
from bytestore.services.object_meta import ObjectMeta

if TYPE_CHECKING:
    import logging
    from pathlib import Path
    from typing import BinaryIO

PAYLOAD_SUFFIX = ".bin"
SIDECAR_SUFFIX = ".json"
# Sidecars are written under this extra suffix, then renamed into place.
STAGING_SUFFIX = ".tmp"


def parse_identifier(text: str) -> UUID | None:
    """
    Parse a canonical lowercase hyphenated UUID.

    Returns:
        The identifier, or None if text is not in canonical form
    """
    try:
        identifier = UUID(text)
    except ValueError:
        return None
    if str(identifier) != text:
        return None
    return identifier


class Container:
    """
    Object map for a single container, guarded by its own lock.

    The lock only protects the object map. Filesystem I/O runs outside it.

    Attributes:
        id: Container identifier, also the directory name
        directory: Directory holding this container's files
    """

    def __init__(self, container_id: UUID, directory: Path, logger: logging.Logger) -> None:
        self.id = container_id
        self.directory = directory
        self._logger = logger
        self._objects: dict[UUID, ObjectMeta] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._objects)

    def payload_path(self, object_id: UUID) -> Path:
        """Location of an object's payload file."""
        return self.directory / f"{object_id}{PAYLOAD_SUFFIX}"

    def meta_path(self, object_id: UUID) -> Path:
        """Location of an object's sidecar file."""
        return self.directory / f"{object_id}{SIDECAR_SUFFIX}"

    def add_object(self, name: str, tag: str, stream: BinaryIO) -> ObjectMeta:
        """
        Store a payload and its metadata.

        The payload is written first, the sidecar second, and the record is
        indexed last. The sidecar is written under a staging name and renamed
        into place, so a failed write never leaves a partial sidecar. There is
        no rollback of the payload: it stays behind as an orphan and nothing
        is indexed.

        Args:
            name: Display name of the object
            tag: Opaque caller-supplied string
            stream: Binary stream copied verbatim to the payload file

        Returns:
            The stored metadata record

        Raises:
            StorageIOError: If either file cannot be written
        """
        meta = ObjectMeta.create(container_id=self.id, name=name, tag=tag)

        payload_path = self.payload_path(meta.id)
        try:
            with payload_path.open("wb") as out:
                shutil.copyfileobj(stream, out)
        except OSError as exc:
            raise StorageIOError("write payload", payload_path, exc) from exc

        sidecar_path = self.meta_path(meta.id)
        staging_path = sidecar_path.with_name(sidecar_path.name + STAGING_SUFFIX)
        try:
            staging_path.write_bytes(meta.to_sidecar())
            staging_path.replace(sidecar_path)
        except OSError as exc:
            if staging_path.exists():
                staging_path.unlink(missing_ok=True)
            raise StorageIOError("write sidecar", sidecar_path, exc) from exc

        with self._lock:
            self._objects[meta.id] = meta
        return meta

    def get_object(self, object_id: UUID) -> ObjectMeta | None:
        """Return the indexed record, or None if not found."""
        return self._objects.get(object_id)

    def list_objects(self, limit: int) -> list[UUID]:
        """Return up to `limit` object identifiers in no particular order."""
        with self._lock:
            return list(islice(self._objects, limit))

    def remove_object(self, meta: ObjectMeta) -> None:
        """
        Delete an object from the index and from disk.

        The index entry is evicted before the files are unlinked. Files that
        are already gone count as deleted.

        Raises:
            OwnershipError: If the record belongs to another container
            StorageIOError: If a file exists but cannot be removed
        """
        if meta.container_id != self.id:
            raise OwnershipError(
                container_id=self.id,
                object_id=meta.id,
                owner_id=meta.container_id,
            )

        with self._lock:
            self._objects.pop(meta.id, None)

        failure: StorageIOError | None = None
        for path in (self.payload_path(meta.id), self.meta_path(meta.id)):
            try:
                path.unlink(missing_ok=True)
            except OSError as exc:
                if failure is None:
                    failure = StorageIOError("remove", path, exc)
        if failure is not None:
            raise failure

    def ensure_directory(self) -> None:
        """Create the container directory if it does not exist."""
        self.directory.mkdir(exist_ok=True)

    def rebuild_from_disk(self) -> None:
        """
        Load every sidecar in the container directory into the object map.

        Raises:
            ReconstructionError: If the directory or a sidecar cannot be read,
                or a sidecar does not describe the file it is stored in
        """
        try:
            entries = sorted(self.directory.iterdir())
        except OSError as exc:
            raise ReconstructionError(self.directory, str(exc)) from exc

        names = {entry.name for entry in entries}
        objects: dict[UUID, ObjectMeta] = {}
        for sidecar_path in entries:
            if sidecar_path.suffix != SIDECAR_SUFFIX or not sidecar_path.is_file():
                continue

            object_id = parse_identifier(sidecar_path.stem)
            if object_id is None:
                self._logger.warning(
                    "Skipping sidecar with invalid identifier",
                    extra={"path": str(sidecar_path)},
                )
                continue

            try:
                meta = ObjectMeta.from_sidecar(sidecar_path.read_bytes())
            except OSError as exc:
                raise ReconstructionError(sidecar_path, str(exc)) from exc
            except ValidationError as exc:
                raise ReconstructionError(sidecar_path, f"corrupt sidecar: {exc}") from exc

            if meta.id != object_id or meta.container_id != self.id:
                raise ReconstructionError(
                    sidecar_path,
                    f"sidecar describes object '{meta.id}' in container '{meta.container_id}'",
                )

            if self.payload_path(object_id).name not in names:
                self._logger.warning(
                    "Sidecar has no payload",
                    extra={"container_id": str(self.id), "object_id": str(object_id)},
                )
            objects[object_id] = meta

        for payload_path in entries:
            if payload_path.suffix != PAYLOAD_SUFFIX:
                continue
            if payload_path.with_suffix(SIDECAR_SUFFIX).name not in names:
                self._logger.warning(
                    "Payload has no sidecar",
                    extra={"container_id": str(self.id), "path": str(payload_path)},
                )

        with self._lock:
            self._objects = objects
