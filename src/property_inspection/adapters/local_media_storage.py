"""Local filesystem primary storage for uploaded media."""

import logging
import shutil
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from urllib.parse import quote

from property_inspection.domain.storage import StoredFile, StoredFileInfo
from property_inspection.services.uploads import MediaStorage

_logger = logging.getLogger(__name__)


@dataclass
class LocalMediaStorage(MediaStorage):
    """Stores files under ``root/<folder>/<file_name>``."""

    root: Path
    url_prefix: str = "/uploads"

    def save(self, folder: str, file_name: str, data: bytes) -> StoredFile:
        path = self._path(folder, file_name)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        _logger.info("Saved locally: %s", path)
        return StoredFile(local_path=path, file_url=self.file_url(folder, file_name))

    def resolve(self, folder: str, file_name: str) -> Path | None:
        try:
            path = self._path(folder, file_name)
        except ValueError:
            return None
        if not path.is_file():
            return None
        return path

    def list_files(self, folder: str) -> list[StoredFileInfo]:
        try:
            directory = self._path(folder)
        except ValueError:
            return []
        if not directory.is_dir():
            return []
        files = []
        for entry in sorted(directory.iterdir()):
            if not entry.is_file():
                continue
            stat = entry.stat()
            files.append(
                StoredFileInfo(
                    name=entry.name,
                    local_path=entry,
                    size=stat.st_size,
                    modified_at=datetime.fromtimestamp(stat.st_mtime, tz=UTC),
                )
            )
        return files

    def count_files(self, folder: str) -> int:
        return len(self.list_files(folder))

    def file_url(self, folder: str, file_name: str) -> str:
        return f"{self.url_prefix}/{quote(folder)}/{quote(file_name)}"

    def delete_file(self, local_path: str) -> None:
        path = Path(local_path)
        if not path.resolve().is_relative_to(self.root.resolve()):
            raise ValueError(f"Refusing to delete outside storage root: {local_path}")
        path.unlink(missing_ok=True)

    def delete_folder(self, folder: str) -> None:
        directory = self._path(folder)
        if directory == self.root.resolve():
            raise ValueError("Refusing to delete the storage root")
        if directory.is_dir():
            shutil.rmtree(directory)
            _logger.info("Deleted folder: %s", directory)

    def _path(self, *parts: str) -> Path:
        root = self.root.resolve()
        path = root.joinpath(*parts).resolve()
        if not path.is_relative_to(root):
            raise ValueError(f"Path escapes storage root: {'/'.join(parts)}")
        return path
