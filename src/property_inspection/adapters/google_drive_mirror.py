"""Google Drive mirror for uploaded media."""

import io
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.http import MediaIoBaseUpload

from property_inspection.domain.drive import DriveCredentials
from property_inspection.domain.storage import DriveFolder, MirroredFile
from property_inspection.services.uploads import FileMirror

_logger = logging.getLogger(__name__)

FOLDER_MIME_TYPE = "application/vnd.google-apps.folder"
TOKEN_URI = "https://oauth2.googleapis.com/token"
SCOPES = ["https://www.googleapis.com/auth/drive.file"]


def folder_link(folder_id: str) -> str:
    return f"https://drive.google.com/drive/folders/{folder_id}"


def file_link(file_id: str) -> str:
    return f"https://drive.google.com/file/d/{file_id}/view"


def _escape(value: str) -> str:
    return value.replace("\\", "\\\\").replace("'", "\\'")


@dataclass
class GoogleDriveMirror(FileMirror):
    """Drive v3 client that finds or creates folders and uploads files.

    ``service_factory`` builds a Drive service from owner credentials so that
    tests can substitute a fake service.
    """

    client_id: str | None = None
    client_secret: str | None = None
    service_factory: Callable[[DriveCredentials], Any] | None = None

    def ensure_folder_path(
        self, names: list[str], credentials: DriveCredentials
    ) -> DriveFolder:
        """Walk ``names`` from the Drive root, creating missing folders."""
        if not names:
            raise ValueError("Folder path must not be empty")
        service = self._service(credentials)
        parent_id = "root"
        for name in names:
            parent_id = self._find_or_create_folder(service, name, parent_id)
        return DriveFolder(folder_id=parent_id, share_link=folder_link(parent_id))

    def upload_file(  # noqa: PLR0913
        self,
        data: bytes,
        file_name: str,
        folder_id: str,
        mime_type: str,
        credentials: DriveCredentials,
    ) -> MirroredFile:
        """Upload bytes into a Drive folder."""
        service = self._service(credentials)
        media = MediaIoBaseUpload(io.BytesIO(data), mimetype=mime_type, resumable=False)
        created = (
            service.files()
            .create(
                body={"name": file_name, "parents": [folder_id]},
                media_body=media,
                fields="id, webViewLink",
            )
            .execute()
        )
        file_id = created["id"]
        return MirroredFile(
            file_id=file_id,
            web_view_link=created.get("webViewLink") or file_link(file_id),
        )

    def _find_or_create_folder(self, service: Any, name: str, parent_id: str) -> str:
        query = (
            f"name = '{_escape(name)}' and mimeType = '{FOLDER_MIME_TYPE}' "
            f"and '{parent_id}' in parents and trashed = false"
        )
        found = (
            service.files()
            .list(q=query, fields="files(id, name)", spaces="drive")
            .execute()
        )
        files = found.get("files") or []
        if files:
            return files[0]["id"]
        created = (
            service.files()
            .create(
                body={"name": name, "mimeType": FOLDER_MIME_TYPE, "parents": [parent_id]},
                fields="id",
            )
            .execute()
        )
        _logger.info("Created Drive folder %s in %s", name, parent_id)
        return created["id"]

    def _service(self, credentials: DriveCredentials) -> Any:
        if self.service_factory is not None:
            return self.service_factory(credentials)
        google_credentials = Credentials(
            token=credentials.access_token,
            refresh_token=credentials.refresh_token,
            token_uri=TOKEN_URI,
            client_id=self.client_id,
            client_secret=self.client_secret,
            scopes=SCOPES,
        )
        return build("drive", "v3", credentials=google_credentials, cache_discovery=False)
