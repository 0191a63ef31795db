"""Browsing and housekeeping of stored property media."""

import logging
from dataclasses import dataclass
from pathlib import Path, PurePath
from uuid import UUID

from property_inspection.domain.errors import MediaNotFoundError, PropertyNotFoundError
from property_inspection.domain.properties import (
    MediaRecord,
    PropertyRecord,
    PropertySummary,
)
from property_inspection.domain.steps import MediaType
from property_inspection.domain.storage import StoredFileInfo
from property_inspection.services.properties import PropertyRepository
from property_inspection.services.uploads import (
    MediaRepository,
    MediaStorage,
    property_folder_name,
)

_logger = logging.getLogger(__name__)

PHOTO_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp"}
VIDEO_EXTENSIONS = {".mp4", ".webm", ".mov"}
LEGACY_STEP_ID = "legacy"


@dataclass(frozen=True)
class BrowsedFile:
    """A raw file listed from an upload folder."""

    name: str
    size: int
    size_formatted: str
    modified_at: str
    type: str
    url: str
    download_url: str


@dataclass
class MediaBrowserService:
    """Lists, resolves and deletes stored media."""

    property_repository: PropertyRepository
    media_repository: MediaRepository
    storage: MediaStorage

    def list_property_folders(self) -> list[PropertySummary]:
        """Return every property with the number of files it holds."""
        summaries = []
        for record in self.property_repository.list_properties():
            count = self.media_repository.count_by_property(record.id)
            if count == 0:
                count = self.storage.count_files(property_folder_name(record))
            if count == 0:
                count = self.storage.count_files(record.token)
            summaries.append(PropertySummary(property=record, media_count=count))
        return summaries

    def resolve_property(self, identifier: str) -> PropertyRecord:
        """Find a property by id or by token."""
        record = None
        property_id = _parse_uuid(identifier)
        if property_id is not None:
            record = self.property_repository.get_by_id(property_id)
        else:
            record = self.property_repository.get_by_token(identifier)
        if record is None:
            raise PropertyNotFoundError(f"Property lead not found: {identifier}")
        return record

    def list_property_media(self, identifier: str) -> list[MediaRecord]:
        """Return a property's media, importing files found on disk if none are recorded."""
        record = self.resolve_property(identifier)
        media = self.media_repository.list_by_property(record.id)
        if not media:
            self._import_from_disk(record)
            media = self.media_repository.list_by_property(record.id)
        return media

    def delete_media(self, media_id: UUID) -> None:
        """Delete one media file from disk and from the record store."""
        media = self.media_repository.get_media(media_id)
        if media is None:
            raise MediaNotFoundError(f"Media file not found: {media_id}")
        if media.local_path:
            self.storage.delete_file(media.local_path)
        self.media_repository.delete_media(media_id)

    def delete_property(self, property_id: UUID) -> None:
        """Delete a property together with all of its media."""
        record = self.property_repository.get_by_id(property_id)
        if record is None:
            raise PropertyNotFoundError(f"Property not found: {property_id}")
        self.media_repository.delete_by_property(record.id)
        self.storage.delete_folder(property_folder_name(record))
        self.storage.delete_folder(record.token)
        self.property_repository.delete_property(record.id)
        _logger.info("Property deleted: id=%s token=%s", record.id, record.token)

    def browse_folder(self, folder: str) -> list[BrowsedFile]:
        """List the raw files in an upload folder."""
        return [
            BrowsedFile(
                name=info.name,
                size=info.size,
                size_formatted=f"{info.size / 1024:.2f} KB",
                modified_at=info.modified_at.isoformat(),
                type=_browse_type(info.name),
                url=self.storage.file_url(folder, info.name),
                download_url=f"{self.storage.file_url(folder, info.name)}?download=true",
            )
            for info in self.storage.list_files(folder)
        ]

    def resolve_file(self, folder: str, file_name: str) -> Path | None:
        """Return the path of a stored file for download."""
        return self.storage.resolve(folder, file_name)

    def _import_from_disk(self, record: PropertyRecord) -> None:
        seen: set[str] = set()
        for folder in (property_folder_name(record), record.token):
            for info in self.storage.list_files(folder):
                media_type = media_type_from_name(info.name)
                if media_type is None or info.name in seen:
                    continue
                seen.add(info.name)
                self._record_disk_file(record, folder, info, media_type)

    def _record_disk_file(
        self,
        record: PropertyRecord,
        folder: str,
        info: StoredFileInfo,
        media_type: MediaType,
    ) -> None:
        self.media_repository.create_media(
            property_id=record.id,
            token=record.token,
            step_id=LEGACY_STEP_ID,
            step_title=info.name,
            file_name=info.name,
            file_url=self.storage.file_url(folder, info.name),
            file_type=media_type,
            local_path=str(info.local_path),
            file_size=info.size,
            mime_type=None,
            drive_file_id=None,
            is_synced_to_drive=False,
            metadata={"imported_from": "fs-scan"},
        )
        _logger.info("Imported %s from disk for property %s", info.name, record.id)


def media_type_from_name(file_name: str) -> MediaType | None:
    """Classify a stored file by its extension."""
    extension = PurePath(file_name).suffix.lower()
    if extension in PHOTO_EXTENSIONS:
        return MediaType.PHOTO
    if extension in VIDEO_EXTENSIONS:
        return MediaType.VIDEO
    return None


def _browse_type(file_name: str) -> str:
    media_type = media_type_from_name(file_name)
    if media_type is MediaType.PHOTO:
        return "image"
    if media_type is MediaType.VIDEO:
        return "video"
    return "file"


def _parse_uuid(value: str) -> UUID | None:
    try:
        return UUID(value)
    except ValueError:
        return None
