"""
Shared base for MongoDB document models.

``PyObjectId`` accepts an ObjectId or its 24-char hex string and keeps it as an
``ObjectId`` for the driver; only JSON output renders it as a string.

``MongoBaseModel`` maps ``_id`` to ``id`` and normalises every datetime field to
aware UTC, since pymongo hands back naive UTC values unless the client is
created with ``tz_aware=True``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, Optional, TypeVar

from bson import ObjectId
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PlainSerializer,
    PlainValidator,
    WithJsonSchema,
    field_validator,
)

from shared.datetime_utils import ensure_utc


def _to_object_id(value: Any) -> ObjectId:
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    raise ValueError(f"Invalid ObjectId: {value!r}")


PyObjectId = Annotated[
    ObjectId,
    PlainValidator(_to_object_id),
    PlainSerializer(str, when_used="json"),
    WithJsonSchema({"type": "string"}),
]

DocT = TypeVar("DocT", bound="MongoBaseModel")


class MongoBaseModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[PyObjectId] = Field(default=None, alias="_id")

    @field_validator("*", mode="after")
    @classmethod
    def _aware_datetimes(cls, value: Any) -> Any:
        if isinstance(value, datetime):
            return ensure_utc(value)
        return value

    def to_mongo(self) -> dict:
        """Dump for ``insert_one``; a missing ``_id`` is left for MongoDB to assign."""
        data = self.model_dump(by_alias=True)
        if data.get("_id") is None:
            data.pop("_id", None)
        return data

    @classmethod
    def from_mongo(cls: type[DocT], data: Optional[dict]) -> Optional[DocT]:
        if data is None:
            return None
        return cls.model_validate(data)
