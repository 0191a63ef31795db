"""Video duration probe backed by the ffprobe binary."""

import asyncio
import json
import math
import tempfile
from dataclasses import dataclass
from pathlib import Path, PurePath

from property_inspection.domain.media import CapturedArtifact
from property_inspection.services.preprocessing import VideoProbe


@dataclass
class FfprobeVideoProbe(VideoProbe):
    """Reads the container duration of a video with ffprobe."""

    ffprobe_path: str = "ffprobe"
    timeout_seconds: float = 30.0

    async def duration_seconds(self, artifact: CapturedArtifact) -> float:
        suffix = PurePath(artifact.filename).suffix or ".mp4"
        with tempfile.TemporaryDirectory() as directory:
            path = Path(directory) / f"probe{suffix}"
            path.write_bytes(artifact.data)
            process = await asyncio.create_subprocess_exec(
                self.ffprobe_path,
                "-v",
                "error",
                "-show_entries",
                "format=duration",
                "-of",
                "json",
                str(path),
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
            try:
                stdout, stderr = await asyncio.wait_for(
                    process.communicate(), timeout=self.timeout_seconds
                )
            except TimeoutError:
                process.kill()
                await process.wait()
                raise
        if process.returncode != 0:
            raise RuntimeError(
                f"ffprobe failed ({process.returncode}): {stderr.decode(errors='replace')}"
            )
        return parse_duration(stdout.decode())


def parse_duration(output: str) -> float:
    """Extract the duration in seconds from ffprobe JSON output."""
    payload = json.loads(output)
    raw = payload.get("format", {}).get("duration")
    if raw in (None, "N/A"):
        raise ValueError("ffprobe reported no duration")
    duration = float(raw)
    if not math.isfinite(duration) or duration < 0:
        raise ValueError(f"Invalid duration: {duration}")
    return duration
