"""Property records and their shareable upload tokens."""

import logging
from dataclasses import dataclass, field
from typing import Protocol
from uuid import UUID, uuid4

from property_inspection.domain.drive import DriveCredentials
from property_inspection.domain.errors import PropertyNotFoundError
from property_inspection.domain.properties import (
    MEDIA_STATUS_COMPLETE,
    PropertyDraft,
    PropertyRecord,
)
from property_inspection.domain.steps import Step
from property_inspection.domain.storage import DriveFolder
from property_inspection.services.catalog import generate_steps
from property_inspection.services.inspection import (
    DEFAULT_BATHROOMS,
    DEFAULT_BEDROOMS,
    features_for,
)

_logger = logging.getLogger(__name__)

MIN_SEARCH_LENGTH = 2
SEARCH_LIMIT = 10


class PropertyRepository(Protocol):
    """Persistence interface for property records."""

    def create_property(self, draft: PropertyDraft, token: str) -> PropertyRecord:
        """Create a property row and return it."""

    def get_by_token(self, token: str) -> PropertyRecord | None:
        """Return a property by its upload token, if present."""

    def get_by_id(self, property_id: UUID) -> PropertyRecord | None:
        """Return a property by id, if present."""

    def update_status(self, property_id: UUID, status: str) -> PropertyRecord:
        """Set the media status and return the updated row."""

    def update_drive_info(
        self, property_id: UUID, folder_id: str, share_link: str
    ) -> PropertyRecord:
        """Store the mirror folder and return the updated row."""

    def search(self, query: str, limit: int) -> list[PropertyRecord]:
        """Return properties whose name or address fields contain the query."""

    def list_properties(self) -> list[PropertyRecord]:
        """Return all properties."""

    def delete_property(self, property_id: UUID) -> None:
        """Delete a property row."""


class CredentialsRepository(Protocol):
    """Storage for the mirror owner's credentials."""

    def get_owner_credentials(self) -> DriveCredentials | None:
        """Return the current owner credentials, if connected."""


class FolderMirror(Protocol):
    """Cloud mirror operations needed to prepare a property folder."""

    def ensure_folder_path(
        self, names: list[str], credentials: DriveCredentials
    ) -> DriveFolder:
        """Find or create nested folders and return the innermost one."""


@dataclass
class PropertyService:
    """Service for creating and looking up properties."""

    repository: PropertyRepository
    mirror: FolderMirror | None = None
    credentials_repository: CredentialsRepository | None = None
    mirror_root: list[str] = field(default_factory=list)

    def create_property(self, draft: PropertyDraft) -> PropertyRecord:
        """Create a property with a fresh token and try to prepare its mirror folder."""
        token = generate_token()
        record = self.repository.create_property(draft, token)
        _logger.info("Property created: id=%s token=%s", record.id, token)
        folder = self.ensure_mirror_folder(record)
        if folder is None:
            return record
        return self.repository.get_by_id(record.id) or record

    def ensure_mirror_folder(self, record: PropertyRecord) -> DriveFolder | None:
        """Create the mirror folder for a property; failures are logged and ignored."""
        if record.drive_folder_id:
            return DriveFolder(
                folder_id=record.drive_folder_id,
                share_link=record.drive_share_link or "",
            )
        credentials = self.owner_credentials()
        if self.mirror is None or credentials is None:
            return None
        try:
            folder = self.mirror.ensure_folder_path(
                [*self.mirror_root, display_address(record)], credentials
            )
            self.repository.update_drive_info(
                record.id, folder.folder_id, folder.share_link
            )
        except Exception:
            _logger.warning(
                "Mirror folder setup failed: property=%s", record.id, exc_info=True
            )
            return None
        return folder

    def get_by_token(self, token: str) -> PropertyRecord:
        """Return a property by token or raise PropertyNotFoundError."""
        record = self.repository.get_by_token(token)
        if record is None:
            raise PropertyNotFoundError(f"Property lead not found: {token}")
        return record

    def mark_complete(self, token: str) -> PropertyRecord:
        """Mark a property's media collection complete."""
        record = self.get_by_token(token)
        return self.repository.update_status(record.id, MEDIA_STATUS_COMPLETE)

    def search(self, query: str) -> list[PropertyRecord]:
        """Search properties by name or address."""
        cleaned = query.strip()
        if len(cleaned) < MIN_SEARCH_LENGTH:
            return []
        return self.repository.search(cleaned, SEARCH_LIMIT)

    def steps_for(self, token: str) -> list[Step]:
        """Return the capture checklist for a property."""
        record = self.get_by_token(token)
        return generate_steps(
            record.property_type,
            record.bedrooms if record.bedrooms is not None else DEFAULT_BEDROOMS,
            record.bathrooms if record.bathrooms is not None else DEFAULT_BATHROOMS,
            features_for(record),
        )

    def owner_credentials(self) -> DriveCredentials | None:
        """Return the mirror owner's credentials when a mirror is connected."""
        if self.credentials_repository is None:
            return None
        return self.credentials_repository.get_owner_credentials()


def generate_token() -> str:
    """Return a short random upload token."""
    return uuid4().hex[:8]


def display_address(record: PropertyRecord) -> str:
    """Return 'address, city, state' skipping empty parts."""
    parts = [record.address, record.city, record.state]
    return ", ".join(part for part in parts if part)


def full_address(record: PropertyRecord) -> str:
    """Return the address line used in search results."""
    locality = " ".join(part for part in (record.state, record.zip_code) if part)
    parts = [record.address, record.city, locality]
    return ", ".join(part for part in parts if part)
