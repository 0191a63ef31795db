"""Normalization of raw user captures into artifacts."""

import mimetypes
from dataclasses import dataclass
from pathlib import Path

from property_inspection.domain.media import CapturedArtifact

_DEFAULT_CONTENT_TYPE = "application/octet-stream"


@dataclass
class CaptureAdapter:
    """Turns picked or captured files into candidate artifacts."""

    def from_bytes(
        self,
        data: bytes,
        filename: str | None = None,
        content_type: str | None = None,
        duration_seconds: float | None = None,
    ) -> CapturedArtifact:
        """Build an artifact from raw bytes and whatever metadata came with them."""
        resolved_type = _resolve_content_type(data, filename, content_type)
        return CapturedArtifact(
            filename=filename or _default_filename(resolved_type),
            content_type=resolved_type,
            data=data,
            duration_seconds=duration_seconds,
        )

    def from_path(
        self, path: Path | str, duration_seconds: float | None = None
    ) -> CapturedArtifact:
        """Build an artifact from a file picked on disk."""
        file_path = Path(path)
        return self.from_bytes(
            file_path.read_bytes(),
            filename=file_path.name,
            duration_seconds=duration_seconds,
        )


def _resolve_content_type(
    data: bytes, filename: str | None, declared: str | None
) -> str:
    """Prefer the declared type, then the file extension, then the signature."""
    if declared and declared != _DEFAULT_CONTENT_TYPE:
        return declared.split(";", maxsplit=1)[0].strip().lower()
    if filename:
        guessed, _ = mimetypes.guess_type(filename)
        if guessed:
            return guessed
    return detect_mime_type(data)


def detect_mime_type(data: bytes) -> str:
    """Infer a basic media MIME type from file signatures."""
    if data.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if data.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if data[:6] in {b"GIF87a", b"GIF89a"}:
        return "image/gif"
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    if data[4:8] == b"ftyp":
        if data[8:10] == b"qt":
            return "video/quicktime"
        return "video/mp4"
    if data.startswith(b"\x1a\x45\xdf\xa3"):
        return "video/webm"
    return _DEFAULT_CONTENT_TYPE


def _default_filename(content_type: str) -> str:
    extension = mimetypes.guess_extension(content_type) or ""
    return f"capture{extension}"
