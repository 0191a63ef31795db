"""Validation and normalization of artifacts before upload."""

import asyncio
import io
import logging
from dataclasses import dataclass
from typing import Protocol

from PIL import Image, ImageOps

from property_inspection.domain.errors import VideoMetadataError, VideoTooLongError
from property_inspection.domain.media import CapturedArtifact

_logger = logging.getLogger(__name__)


class VideoProbe(Protocol):
    """Interface for reading video metadata."""

    async def duration_seconds(self, artifact: CapturedArtifact) -> float:
        """Return the video duration, raising if it cannot be read."""


@dataclass
class MediaPreprocessor:
    """Downsamples oversized images and bounds video duration."""

    video_probe: VideoProbe
    max_width: int = 1920
    max_height: int = 1080
    quality: int = 80
    max_video_seconds: int = 120

    async def process(self, artifact: CapturedArtifact) -> CapturedArtifact:
        """Return the artifact to upload.

        Image failures fall back to the original artifact. Videos that are too
        long, or whose duration cannot be read, raise a MediaValidationError.
        """
        if artifact.is_image:
            return await asyncio.to_thread(self._process_image, artifact)
        if artifact.is_video:
            await self._validate_video(artifact)
        return artifact

    def _process_image(self, artifact: CapturedArtifact) -> CapturedArtifact:
        try:
            resized = downscale_image(
                artifact.data,
                max_width=self.max_width,
                max_height=self.max_height,
                quality=self.quality,
            )
        except Exception:
            _logger.warning(
                "Image preprocessing failed, keeping original: %s", artifact.filename
            )
            return artifact
        return artifact.with_data(resized)

    async def _validate_video(self, artifact: CapturedArtifact) -> None:
        duration = artifact.duration_seconds
        if duration is None:
            try:
                duration = await self.video_probe.duration_seconds(artifact)
            except Exception as exc:
                raise VideoMetadataError(
                    "Could not read the video duration. Please try again."
                ) from exc
        if duration > self.max_video_seconds:
            raise VideoTooLongError(duration, self.max_video_seconds)


def fit_within(
    width: int, height: int, max_width: int, max_height: int
) -> tuple[int, int]:
    """Scale dimensions down, preserving aspect ratio, to fit the bound."""
    if width <= max_width and height <= max_height:
        return width, height
    scale = min(max_width / width, max_height / height)
    return max(1, round(width * scale)), max(1, round(height * scale))


def downscale_image(data: bytes, max_width: int, max_height: int, quality: int) -> bytes:
    """Re-encode an image in its original format, shrinking it to the bound."""
    with Image.open(io.BytesIO(data)) as image:
        image.load()
        image_format = image.format
        if image_format is None:
            raise ValueError("Unknown image format")
        upright = ImageOps.exif_transpose(image)
        new_size = fit_within(upright.width, upright.height, max_width, max_height)
        resized = upright
        if new_size != upright.size:
            resized = upright.resize(new_size, Image.Resampling.LANCZOS)
        if image_format == "JPEG" and resized.mode not in {"RGB", "L"}:
            resized = resized.convert("RGB")
        output = io.BytesIO()
        resized.save(output, format=image_format, quality=quality)
        return output.getvalue()
