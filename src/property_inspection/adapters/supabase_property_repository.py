"""Supabase implementation for property leads."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from property_inspection.domain.properties import (
    MEDIA_STATUS_INCOMPLETE,
    PropertyDraft,
    PropertyRecord,
)
from property_inspection.services.properties import PropertyRepository

_TABLE = "property_leads"
_SEARCH_COLUMNS = ("name", "address", "city", "state")


@dataclass
class SupabasePropertyRepository(PropertyRepository):
    """Supabase-backed repository for property leads."""

    client: Client

    def create_property(self, draft: PropertyDraft, token: str) -> PropertyRecord:
        """Create a property row and return it."""
        response = (
            self.client.table(_TABLE)
            .insert(
                {
                    "token": token,
                    "name": draft.name,
                    "address": draft.address,
                    "email": draft.email,
                    "phone": draft.phone,
                    "city": draft.city,
                    "state": draft.state,
                    "zip": draft.zip_code,
                    "bedrooms": draft.bedrooms,
                    "bathrooms": draft.bathrooms,
                    "square_feet": draft.square_feet,
                    "property_type": draft.property_type,
                    "has_pool": draft.has_pool,
                    "has_basement": draft.has_basement,
                    "has_garage": draft.has_garage,
                    "notes": draft.notes,
                    "media_status": MEDIA_STATUS_INCOMPLETE,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create property lead")
        return _parse_property(response.data[0])

    def get_by_token(self, token: str) -> PropertyRecord | None:
        """Return a property by its upload token, if present."""
        response = (
            self.client.table(_TABLE).select("*").eq("token", token).limit(1).execute()
        )
        if not response.data:
            return None
        return _parse_property(response.data[0])

    def get_by_id(self, property_id: UUID) -> PropertyRecord | None:
        """Return a property by id, if present."""
        response = (
            self.client.table(_TABLE)
            .select("*")
            .eq("id", str(property_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_property(response.data[0])

    def update_status(self, property_id: UUID, status: str) -> PropertyRecord:
        """Set the media status and return the updated row."""
        return self._update(property_id, {"media_status": status})

    def update_drive_info(
        self, property_id: UUID, folder_id: str, share_link: str
    ) -> PropertyRecord:
        """Store the mirror folder and return the updated row."""
        return self._update(
            property_id,
            {"drive_folder_id": folder_id, "drive_share_link": share_link},
        )

    def search(self, query: str, limit: int) -> list[PropertyRecord]:
        """Search properties across name and address columns."""
        pattern = f"%{query}%"
        seen: set[UUID] = set()
        results: list[PropertyRecord] = []
        for column in _SEARCH_COLUMNS:
            response = (
                self.client.table(_TABLE)
                .select("*")
                .ilike(column, pattern)
                .limit(limit)
                .execute()
            )
            for row in response.data or []:
                record = _parse_property(row)
                if record.id not in seen:
                    seen.add(record.id)
                    results.append(record)
        return results[:limit]

    def list_properties(self) -> list[PropertyRecord]:
        """Return all properties, newest first."""
        response = (
            self.client.table(_TABLE)
            .select("*")
            .order("created_at", desc=True)
            .execute()
        )
        return [_parse_property(row) for row in response.data or []]

    def delete_property(self, property_id: UUID) -> None:
        """Delete a property row."""
        self.client.table(_TABLE).delete().eq("id", str(property_id)).execute()

    def _update(self, property_id: UUID, payload: dict[str, object]) -> PropertyRecord:
        response = (
            self.client.table(_TABLE)
            .update(payload)
            .eq("id", str(property_id))
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update property lead")
        return _parse_property(response.data[0])


def _parse_property(row: dict[str, object]) -> PropertyRecord:
    """Parse a property lead row into a domain model."""
    created_raw = row.get("created_at")
    created_at = (
        datetime.fromisoformat(created_raw)
        if isinstance(created_raw, str) and created_raw
        else None
    )
    return PropertyRecord(
        id=UUID(str(row["id"])),
        token=str(row["token"]),
        name=str(row.get("name") or ""),
        address=str(row.get("address") or ""),
        city=row.get("city"),
        state=row.get("state"),
        zip_code=row.get("zip"),
        email=row.get("email"),
        phone=row.get("phone"),
        bedrooms=_optional_int(row.get("bedrooms")),
        bathrooms=_optional_int(row.get("bathrooms")),
        square_feet=_optional_int(row.get("square_feet")),
        property_type=str(row.get("property_type") or "SFR"),
        has_pool=bool(row.get("has_pool")),
        has_basement=bool(row.get("has_basement")),
        has_garage=bool(row.get("has_garage")),
        notes=row.get("notes"),
        media_status=str(row.get("media_status") or MEDIA_STATUS_INCOMPLETE),
        drive_folder_id=row.get("drive_folder_id"),
        drive_share_link=row.get("drive_share_link"),
        created_at=created_at,
    )


def _optional_int(value: object) -> int | None:
    if value is None:
        return None
    return int(value)
