"""Supabase storage for the mirror owner's credentials."""

from dataclasses import dataclass

from supabase import Client

from property_inspection.domain.drive import DriveCredentials
from property_inspection.services.properties import CredentialsRepository


@dataclass
class SupabaseCredentialsRepository(CredentialsRepository):
    """Reads the most recently stored owner credentials."""

    client: Client

    def get_owner_credentials(self) -> DriveCredentials | None:
        response = (
            self.client.table("drive_credentials")
            .select("access_token, refresh_token")
            .order("updated_at", desc=True)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        access_token = row.get("access_token")
        if not access_token:
            return None
        return DriveCredentials(
            access_token=str(access_token), refresh_token=row.get("refresh_token")
        )
