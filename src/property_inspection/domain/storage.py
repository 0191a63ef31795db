"""Models for files kept in primary and mirror storage."""

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path


@dataclass(frozen=True)
class StoredFile:
    """A file written to local primary storage."""

    local_path: Path
    file_url: str


@dataclass(frozen=True)
class StoredFileInfo:
    """A file found while listing a storage folder."""

    name: str
    local_path: Path
    size: int
    modified_at: datetime


@dataclass(frozen=True)
class DriveFolder:
    """A folder in the cloud mirror."""

    folder_id: str
    share_link: str


@dataclass(frozen=True)
class MirroredFile:
    """A file copied to the cloud mirror."""

    file_id: str
    web_view_link: str
