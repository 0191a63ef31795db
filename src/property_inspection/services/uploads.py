"""Server side of the upload pipeline.

Files are written to local primary storage first, then copied to the cloud
mirror when the owner has connected one. Mirror failures never fail an upload.
"""

import logging
import re
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path, PurePath
from typing import Protocol
from uuid import UUID

from property_inspection.domain.drive import DriveCredentials
from property_inspection.domain.errors import InvalidUploadError
from property_inspection.domain.properties import (
    MediaRecord,
    PropertyRecord,
    UploadResult,
)
from property_inspection.domain.steps import MediaType
from property_inspection.domain.storage import MirroredFile, StoredFile, StoredFileInfo
from property_inspection.services.properties import FolderMirror, PropertyService

_logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9\s-]")
_WHITESPACE = re.compile(r"\s+")


class MediaRepository(Protocol):
    """Persistence interface for media rows."""

    def create_media(  # noqa: PLR0913
        self,
        property_id: UUID,
        token: str,
        step_id: str,
        step_title: str,
        file_name: str,
        file_url: str,
        file_type: MediaType,
        local_path: str | None,
        file_size: int | None,
        mime_type: str | None,
        drive_file_id: str | None,
        is_synced_to_drive: bool,
        metadata: dict[str, object],
    ) -> MediaRecord:
        """Create a media row and return it."""

    def list_by_property(self, property_id: UUID) -> list[MediaRecord]:
        """Return media rows for a property."""

    def list_by_token(self, token: str) -> list[MediaRecord]:
        """Return media rows for a property token."""

    def count_by_property(self, property_id: UUID) -> int:
        """Return the number of media rows for a property."""

    def get_media(self, media_id: UUID) -> MediaRecord | None:
        """Return a media row by id, if present."""

    def delete_media(self, media_id: UUID) -> None:
        """Delete a media row."""

    def delete_by_property(self, property_id: UUID) -> None:
        """Delete all media rows for a property."""


class MediaStorage(Protocol):
    """Local primary storage for uploaded files."""

    def save(self, folder: str, file_name: str, data: bytes) -> StoredFile:
        """Write a file and return where it lives."""

    def resolve(self, folder: str, file_name: str) -> Path | None:
        """Return the path of an existing file, if present."""

    def list_files(self, folder: str) -> list[StoredFileInfo]:
        """Return the files in a folder."""

    def count_files(self, folder: str) -> int:
        """Return how many files a folder holds."""

    def file_url(self, folder: str, file_name: str) -> str:
        """Return the public URL of a stored file."""

    def delete_file(self, local_path: str) -> None:
        """Delete a stored file if it exists."""

    def delete_folder(self, folder: str) -> None:
        """Delete a folder and everything in it."""


class FileMirror(FolderMirror, Protocol):
    """Cloud mirror operations needed for uploads."""

    def upload_file(  # noqa: PLR0913
        self,
        data: bytes,
        file_name: str,
        folder_id: str,
        mime_type: str,
        credentials: DriveCredentials,
    ) -> MirroredFile:
        """Copy a file into a mirror folder."""


@dataclass
class UploadService:
    """Stores uploaded artifacts and records them against their property."""

    property_service: PropertyService
    media_repository: MediaRepository
    storage: MediaStorage
    mirror: FileMirror | None = None

    def upload(  # noqa: PLR0913
        self,
        token: str,
        step_id: str,
        step_title: str,
        original_name: str,
        content_type: str,
        data: bytes,
    ) -> UploadResult:
        """Save an artifact locally, mirror it, and record it."""
        if not token or not step_id or not step_title:
            raise InvalidUploadError(
                "Missing required fields: token, step_id, step_title"
            )
        if not data:
            raise InvalidUploadError("No file uploaded")
        record = self.property_service.get_by_token(token)
        _logger.info("Processing upload: %s for token %s", step_title, token)

        file_name = media_file_name(step_title, original_name, content_type)
        folder = property_folder_name(record)
        stored = self.storage.save(folder, file_name, data)

        mirrored = self._mirror(record, file_name, content_type, data)
        metadata: dict[str, object] = {
            "original_name": original_name,
            "uploaded_at": datetime.now(tz=UTC).isoformat(),
        }
        media = self.media_repository.create_media(
            property_id=record.id,
            token=token,
            step_id=step_id,
            step_title=step_title,
            file_name=file_name,
            file_url=stored.file_url,
            file_type=media_type_for(content_type),
            local_path=str(stored.local_path),
            file_size=len(data),
            mime_type=content_type,
            drive_file_id=mirrored.file_id if mirrored else None,
            is_synced_to_drive=mirrored is not None,
            metadata=metadata,
        )
        return UploadResult(file_url=stored.file_url, metadata=media.metadata)

    def list_media(self, token: str) -> list[MediaRecord]:
        """Return the media recorded for a property token."""
        record = self.property_service.get_by_token(token)
        return self.media_repository.list_by_property(record.id)

    def _mirror(
        self,
        record: PropertyRecord,
        file_name: str,
        content_type: str,
        data: bytes,
    ) -> MirroredFile | None:
        credentials = self.property_service.owner_credentials()
        if self.mirror is None or credentials is None:
            _logger.info("Mirror not connected - %s saved locally only", file_name)
            return None
        try:
            folder = self.property_service.ensure_mirror_folder(record)
            if folder is None:
                return None
            mirrored = self.mirror.upload_file(
                data, file_name, folder.folder_id, content_type, credentials
            )
        except Exception:
            _logger.warning(
                "Mirror sync failed, %s saved locally only", file_name, exc_info=True
            )
            return None
        _logger.info("Mirrored %s: %s", file_name, mirrored.web_view_link)
        return mirrored


def sanitize_name(value: str) -> str:
    """Drop characters outside letters, digits, whitespace and '-', then use '_'."""
    return _WHITESPACE.sub("_", _UNSAFE_CHARS.sub("", value))


def media_file_name(step_title: str, original_name: str, content_type: str) -> str:
    """Name a stored file after its step title."""
    extension = PurePath(original_name).suffix if original_name else ""
    if not extension:
        extension = ".jpg" if "image" in content_type else ".mp4"
    return f"{sanitize_name(step_title)}{extension}"


def property_folder_name(record: PropertyRecord) -> str:
    """Return the local folder that holds a property's files."""
    return f"{sanitize_name(record.address or '')}_{record.city or ''}"


def media_type_for(content_type: str) -> MediaType:
    return MediaType.PHOTO if "image" in content_type else MediaType.VIDEO
