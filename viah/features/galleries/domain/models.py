"""
Gallery records. Only the metadata lives here; photo files are stored elsewhere.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, model_validator

from viah.models.records import Record

GalleryType = Literal["inspiration", "vendor_portfolio", "event_photos"]


class PhotoGallery(Record):
    id: str
    name: str
    type: GalleryType
    wedding_id: str | None = None
    vendor_id: str | None = None
    event_id: str | None = None
    description: str | None = None
    cover_photo_url: str | None = None
    is_public: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None


class GalleryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    type: GalleryType
    wedding_id: str | None = None
    vendor_id: str | None = None
    event_id: str | None = None
    description: str | None = None
    cover_photo_url: str | None = Field(default=None, max_length=2048)
    is_public: bool = False

    @model_validator(mode="after")
    def _one_owner_for_type(self) -> "GalleryCreate":
        if self.type == "vendor_portfolio":
            if not self.vendor_id or self.wedding_id:
                raise ValueError("vendor_portfolio galleries belong to a vendor_id only")
        elif not self.wedding_id or self.vendor_id:
            raise ValueError(f"{self.type} galleries belong to a wedding_id only")
        if self.event_id and self.type != "event_photos":
            raise ValueError("event_id is only used by event_photos galleries")
        return self


class GalleryUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    cover_photo_url: str | None = Field(default=None, max_length=2048)
    is_public: bool | None = None
