"""Captured media artifacts."""

from dataclasses import dataclass, replace

from property_inspection.domain.steps import MediaType


@dataclass(frozen=True)
class CapturedArtifact:
    """A photo or video file, before or after preprocessing."""

    filename: str
    content_type: str
    data: bytes
    duration_seconds: float | None = None

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def is_image(self) -> bool:
        return self.content_type.startswith("image/")

    @property
    def is_video(self) -> bool:
        return self.content_type.startswith("video/")

    @property
    def media_kind(self) -> MediaType | None:
        """Return the capture kind implied by the content type."""
        if self.is_image:
            return MediaType.PHOTO
        if self.is_video:
            return MediaType.VIDEO
        return None

    def with_data(self, data: bytes) -> "CapturedArtifact":
        """Return a copy carrying re-encoded bytes."""
        return replace(self, data=data)
