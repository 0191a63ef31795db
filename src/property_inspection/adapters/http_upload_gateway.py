"""HTTPX client for the upload endpoint, with streamed progress."""

from collections.abc import AsyncIterator
from dataclasses import dataclass

import httpx

from property_inspection.api.schemas import UploadOut
from property_inspection.domain.media import CapturedArtifact
from property_inspection.domain.properties import UploadResult
from property_inspection.services.inspection import ProgressCallback, UploadGateway

DEFAULT_CHUNK_SIZE = 64 * 1024


@dataclass
class HttpxUploadGateway(UploadGateway):
    """Posts artifacts as multipart form data to ``/api/upload``."""

    base_url: str
    http_client: httpx.AsyncClient
    chunk_size: int = DEFAULT_CHUNK_SIZE

    @classmethod
    def create(cls, base_url: str) -> "HttpxUploadGateway":
        """Create an upload gateway with a managed httpx session."""
        return cls(base_url=base_url.rstrip("/"), http_client=httpx.AsyncClient())

    async def upload(  # noqa: PLR0913
        self,
        artifact: CapturedArtifact,
        token: str,
        step_id: str,
        step_title: str,
        on_progress: ProgressCallback | None = None,
    ) -> UploadResult:
        """Upload an artifact and return where it was stored."""
        url = f"{self.base_url}/api/upload"
        request = self.http_client.build_request(
            "POST",
            url,
            data={"token": token, "step_id": step_id, "step_title": step_title},
            files={
                "file": (artifact.filename, artifact.data, artifact.content_type)
            },
        )
        body = request.read()
        response = await self.http_client.post(
            url,
            content=self._stream(body, on_progress),
            headers={
                "Content-Type": request.headers["Content-Type"],
                "Content-Length": str(len(body)),
            },
            timeout=None,
        )
        response.raise_for_status()
        payload = UploadOut.model_validate(response.json())
        return UploadResult(file_url=payload.file_url, metadata=payload.metadata)

    async def _stream(
        self, body: bytes, on_progress: ProgressCallback | None
    ) -> AsyncIterator[bytes]:
        total = len(body)
        sent = 0
        last_percent = -1
        for start in range(0, total, self.chunk_size):
            chunk = body[start : start + self.chunk_size]
            yield chunk
            sent += len(chunk)
            percent = sent * 100 // total
            if on_progress is not None and percent != last_percent:
                on_progress(percent)
                last_percent = percent

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
