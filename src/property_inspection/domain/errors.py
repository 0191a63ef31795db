"""Errors raised by the inspection workflow."""


class InspectionError(Exception):
    """Base class for inspection workflow failures."""


class InspectionStateError(InspectionError):
    """Raised when an operation is not valid in the current session state."""


class MediaValidationError(InspectionError):
    """Raised when a capture is rejected before upload."""


class VideoTooLongError(MediaValidationError):
    """Raised when a video exceeds the allowed duration."""

    def __init__(self, duration_seconds: float, max_seconds: int) -> None:
        super().__init__(
            f"Video is {duration_seconds:.0f} seconds long; "
            f"the maximum is {max_seconds} seconds."
        )
        self.duration_seconds = duration_seconds
        self.max_seconds = max_seconds


class VideoMetadataError(MediaValidationError):
    """Raised when a video's duration cannot be verified."""


class UploadFailedError(InspectionError):
    """Raised when an artifact could not be uploaded."""


class CompletionFailedError(InspectionError):
    """Raised when the completed status could not be persisted."""


class InvalidUploadError(InspectionError):
    """Raised when an upload request is missing required fields."""


class MediaNotFoundError(InspectionError):
    """Raised when no media file matches an id."""


class PropertyNotFoundError(InspectionError):
    """Raised when no property matches a token or id."""
