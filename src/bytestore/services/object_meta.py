"""
Metadata record stored beside every payload.

The sidecar is a UTF-8 JSON object using the field names of the established
on-disk format (Id, FileName, ContainerId, Meta, CreatedDate).
"""

from __future__ import annotations

import re
from datetime import UTC, datetime
from typing import Any
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator

# RFC3339 allows arbitrary fractional digits; datetime stores microseconds.
_FRACTION_PATTERN = re.compile(r"(\.\d{6})\d+")


class ObjectMeta(BaseModel):
    """
    Immutable metadata for one stored object.

    Attributes:
        id: Object identifier, basename of the payload and sidecar files
        name: Caller-supplied display name
        container_id: Identifier of the owning container
        tag: Opaque caller-supplied string
        created_at: Creation time (UTC)
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: UUID = Field(alias="Id")
    name: str = Field(alias="FileName")
    container_id: UUID = Field(alias="ContainerId")
    tag: str = Field(alias="Meta")
    created_at: datetime = Field(alias="CreatedDate")

    @field_validator("created_at", mode="before")
    @classmethod
    def _truncate_fraction(cls, value: Any) -> Any:
        if isinstance(value, str):
            return _FRACTION_PATTERN.sub(r"\1", value)
        return value

    @field_validator("created_at")
    @classmethod
    def _require_timezone(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            raise ValueError("CreatedDate must carry a UTC offset")
        return value.astimezone(UTC)

    @classmethod
    def create(cls, container_id: UUID, name: str, tag: str) -> ObjectMeta:
        """Build a record with a fresh random identifier and the current time."""
        return cls(
            id=uuid4(),
            name=name,
            container_id=container_id,
            tag=tag,
            created_at=datetime.now(UTC),
        )

    def to_sidecar(self) -> bytes:
        """Serialize to sidecar file content."""
        return self.model_dump_json(by_alias=True).encode("utf-8")

    @classmethod
    def from_sidecar(cls, content: bytes) -> ObjectMeta:
        """
        Deserialize sidecar file content.

        Raises:
            pydantic.ValidationError: If content is not a valid record
        """
        return cls.model_validate_json(content)
