"""HTTPX client for property records exposed by the API."""

from dataclasses import dataclass

import httpx

from property_inspection.api.schemas import MediaOut, PropertyOut
from property_inspection.domain.properties import MediaRecord, PropertyRecord
from property_inspection.services.inspection import PropertyRecordStore


@dataclass
class HttpxPropertyRecordStore(PropertyRecordStore):
    """Reads properties and marks them complete through the HTTP API."""

    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, base_url: str) -> "HttpxPropertyRecordStore":
        """Create a record store with a managed httpx session."""
        return cls(base_url=base_url.rstrip("/"), http_client=httpx.AsyncClient())

    async def get_by_token(self, token: str) -> PropertyRecord | None:
        """Fetch a property by token, returning None when it does not exist."""
        response = await self.http_client.get(
            f"{self.base_url}/api/property-leads/{token}", timeout=15
        )
        if response.status_code == httpx.codes.NOT_FOUND:
            return None
        response.raise_for_status()
        return PropertyOut.model_validate(response.json()).to_domain()

    async def list_media(self, token: str) -> list[MediaRecord]:
        """Fetch media recorded for a property."""
        response = await self.http_client.get(
            f"{self.base_url}/api/property-leads/{token}/media", timeout=15
        )
        response.raise_for_status()
        return [
            MediaOut.model_validate(item).to_domain()
            for item in response.json().get("media", [])
        ]

    async def mark_complete(self, token: str) -> None:
        """Mark a property's media collection complete."""
        response = await self.http_client.put(
            f"{self.base_url}/api/property-leads/{token}/complete", timeout=15
        )
        response.raise_for_status()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
