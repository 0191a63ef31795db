"""Domain models for property records and their media."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from property_inspection.domain.steps import MediaType

MEDIA_STATUS_INCOMPLETE = "incomplete"
MEDIA_STATUS_COMPLETE = "complete"


@dataclass(frozen=True)
class PropertyDraft:
    """Owner-supplied details for a new property."""

    name: str
    address: str
    email: str | None = None
    phone: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    bedrooms: int | None = None
    bathrooms: int | None = None
    square_feet: int | None = None
    property_type: str = "SFR"
    has_pool: bool = False
    has_basement: bool = False
    has_garage: bool = False
    notes: str | None = None


@dataclass(frozen=True)
class PropertyRecord:
    """A persisted property with its shareable upload token."""

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

    @property
    def is_complete(self) -> bool:
        return self.media_status == MEDIA_STATUS_COMPLETE


@dataclass(frozen=True)
class PropertySummary:
    """Property row with the number of stored media files."""

    property: PropertyRecord
    media_count: int


@dataclass(frozen=True)
class MediaRecord:
    """A stored media file for one inspection step."""

    id: UUID
    property_id: UUID
    token: str
    step_id: str
    step_title: str
    file_name: str
    file_url: str
    file_type: MediaType
    local_path: str | None = None
    file_size: int | None = None
    mime_type: str | None = None
    drive_file_id: str | None = None
    is_synced_to_drive: bool = False
    metadata: dict[str, object] = field(default_factory=dict)
    created_at: datetime | None = None


@dataclass(frozen=True)
class UploadedMediaRecord:
    """Client-side record of a confirmed upload."""

    step_id: str
    file_url: str
    file_type: MediaType


@dataclass(frozen=True)
class UploadResult:
    """Durable location returned for an uploaded artifact."""

    file_url: str
    metadata: dict[str, object] = field(default_factory=dict)
