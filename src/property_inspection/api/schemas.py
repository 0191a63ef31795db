"""Pydantic models for the property inspection HTTP API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from property_inspection.domain.properties import (
    MEDIA_STATUS_INCOMPLETE,
    MediaRecord,
    PropertyDraft,
    PropertyRecord,
)
from property_inspection.domain.steps import MediaType, StepCategory


class PropertyCreate(BaseModel):
    """Request body for a new property lead."""

    name: str = Field(min_length=1)
    address: str = Field(min_length=1)
    email: str | None = None
    phone: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    bedrooms: int | None = Field(default=None, ge=0)
    bathrooms: int | None = Field(default=None, ge=0)
    square_feet: int | None = Field(default=None, ge=0)
    property_type: str = "SFR"
    has_pool: bool = False
    has_basement: bool = False
    has_garage: bool = False
    notes: str | None = None

    def to_draft(self) -> PropertyDraft:
        return PropertyDraft(**self.model_dump())


class PropertyOut(BaseModel):
    """Property lead payload."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    token: str
    name: str
    address: str
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    email: str | None = None
    phone: str | None = None
    bedrooms: int | None = None
    bathrooms: int | None = None
    square_feet: int | None = None
    property_type: str = "SFR"
    has_pool: bool = False
    has_basement: bool = False
    has_garage: bool = False
    notes: str | None = None
    media_status: str = MEDIA_STATUS_INCOMPLETE
    drive_folder_id: str | None = None
    drive_share_link: str | None = None
    created_at: datetime | None = None

    def to_domain(self) -> PropertyRecord:
        return PropertyRecord(**self.model_dump())


class MediaOut(BaseModel):
    """Stored media payload."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    property_id: UUID
    token: str
    step_id: str
    step_title: str
    file_name: str
    file_url: str
    file_type: MediaType
    file_size: int | None = None
    mime_type: str | None = None
    drive_file_id: str | None = None
    is_synced_to_drive: bool = False
    metadata: dict[str, object] = Field(default_factory=dict)
    created_at: datetime | None = None

    def to_domain(self) -> MediaRecord:
        return MediaRecord(**self.model_dump())


class UploadOut(BaseModel):
    """Response for an accepted upload."""

    success: bool = True
    file_url: str
    metadata: dict[str, object] = Field(default_factory=dict)


class StepOut(BaseModel):
    """One checklist step."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: str
    example_image_url: str
    category: StepCategory
    media_type: MediaType | None = None
    max_duration_seconds: int | None = None


class PropertyFolderOut(BaseModel):
    """Property listed in the file browser with its file count."""

    model_config = ConfigDict(from_attributes=True)

    property: PropertyOut
    media_count: int


class SearchResultOut(BaseModel):
    """Property search hit."""

    id: UUID
    token: str
    name: str
    address: str
    full_address: str
    media_status: str


class BrowsedFileOut(BaseModel):
    """Raw file in an upload folder."""

    model_config = ConfigDict(from_attributes=True)

    name: str
    size: int
    size_formatted: str
    modified_at: str
    type: str
    url: str
    download_url: str
