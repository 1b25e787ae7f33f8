"""
Short link document model.

Maps to the `links` MongoDB collection. Visits are embedded on the link
document so that recording a visit is a single-document update:

  {"$push": {"visits": <VisitRecord>}, "$inc": {"clicks": 1}, "$set": {"updated_at": ...}}

which keeps `clicks == len(visits)`.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from schemas.models.base import MongoBaseModel
from shared.datetime_utils import ensure_utc, utcnow


class VisitRecord(BaseModel):
    """One recorded redirect event. Immutable once appended."""

    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    user_agent: Optional[str] = None
    ip: str = ""
    country: Optional[str] = None
    device: str = "Unknown"
    browser: str = "Unknown"
    os: str = "Unknown"
    is_bot: bool = False
    # No server-side signal flips this after the visit is written
    app_opened: bool = False

    @field_validator("timestamp")
    @classmethod
    def _utc_timestamp(cls, v: datetime) -> datetime:
        return ensure_utc(v)


class ShortLinkDoc(MongoBaseModel):
    """Document model for the `links` collection."""

    short_code: str
    original_url: str
    platform: str
    clicks: int = 0
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    visits: list[VisitRecord] = Field(default_factory=list)
