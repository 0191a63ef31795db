"""Supabase implementation for property media rows."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from property_inspection.domain.properties import MediaRecord
from property_inspection.domain.steps import MediaType
from property_inspection.services.uploads import MediaRepository

_TABLE = "property_media"


@dataclass
class SupabaseMediaRepository(MediaRepository):
    """Supabase-backed repository for uploaded media."""

    client: Client

    def create_media(  # noqa: PLR0913
        self,
        property_id: UUID,
        token: str,
        step_id: str,
        step_title: str,
        file_name: str,
        file_url: str,
        file_type: MediaType,
        local_path: str | None,
        file_size: int | None,
        mime_type: str | None,
        drive_file_id: str | None,
        is_synced_to_drive: bool,
        metadata: dict[str, object],
    ) -> MediaRecord:
        """Create a media row and return it."""
        response = (
            self.client.table(_TABLE)
            .insert(
                {
                    "property_lead_id": str(property_id),
                    "token": token,
                    "step_id": step_id,
                    "step_title": step_title,
                    "file_name": file_name,
                    "file_url": file_url,
                    "file_type": file_type.value,
                    "local_path": local_path,
                    "file_size": file_size,
                    "mime_type": mime_type,
                    "drive_file_id": drive_file_id,
                    "is_synced_to_drive": is_synced_to_drive,
                    "metadata": metadata,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create media record")
        return _parse_media(response.data[0])

    def list_by_property(self, property_id: UUID) -> list[MediaRecord]:
        """Return media rows for a property in upload order."""
        response = (
            self.client.table(_TABLE)
            .select("*")
            .eq("property_lead_id", str(property_id))
            .order("created_at")
            .execute()
        )
        return [_parse_media(row) for row in response.data or []]

    def list_by_token(self, token: str) -> list[MediaRecord]:
        """Return media rows for a property token in upload order."""
        response = (
            self.client.table(_TABLE)
            .select("*")
            .eq("token", token)
            .order("created_at")
            .execute()
        )
        return [_parse_media(row) for row in response.data or []]

    def count_by_property(self, property_id: UUID) -> int:
        """Return the number of media rows for a property."""
        response = (
            self.client.table(_TABLE)
            .select("id")
            .eq("property_lead_id", str(property_id))
            .execute()
        )
        return len(response.data or [])

    def get_media(self, media_id: UUID) -> MediaRecord | None:
        """Return a media row by id, if present."""
        response = (
            self.client.table(_TABLE)
            .select("*")
            .eq("id", str(media_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_media(response.data[0])

    def delete_media(self, media_id: UUID) -> None:
        """Delete a media row."""
        self.client.table(_TABLE).delete().eq("id", str(media_id)).execute()

    def delete_by_property(self, property_id: UUID) -> None:
        """Delete all media rows for a property."""
        self.client.table(_TABLE).delete().eq(
            "property_lead_id", str(property_id)
        ).execute()


def _parse_media(row: dict[str, object]) -> MediaRecord:
    """Parse a media row into a domain model."""
    created_raw = row.get("created_at")
    created_at = (
        datetime.fromisoformat(created_raw)
        if isinstance(created_raw, str) and created_raw
        else None
    )
    file_size = row.get("file_size")
    return MediaRecord(
        id=UUID(str(row["id"])),
        property_id=UUID(str(row["property_lead_id"])),
        token=str(row.get("token") or ""),
        step_id=str(row.get("step_id") or ""),
        step_title=str(row.get("step_title") or ""),
        file_name=str(row.get("file_name") or ""),
        file_url=str(row.get("file_url") or ""),
        file_type=MediaType(str(row.get("file_type") or MediaType.PHOTO.value)),
        local_path=row.get("local_path"),
        file_size=int(file_size) if file_size is not None else None,
        mime_type=row.get("mime_type"),
        drive_file_id=row.get("drive_file_id"),
        is_synced_to_drive=bool(row.get("is_synced_to_drive")),
        metadata=dict(row.get("metadata") or {}),
        created_at=created_at,
    )
