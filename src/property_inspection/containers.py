"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path

import httpx
from supabase import create_client

from property_inspection.adapters.ffprobe_video_probe import FfprobeVideoProbe
from property_inspection.adapters.google_drive_mirror import GoogleDriveMirror
from property_inspection.adapters.http_property_record_store import (
    HttpxPropertyRecordStore,
)
from property_inspection.adapters.http_upload_gateway import HttpxUploadGateway
from property_inspection.adapters.local_media_storage import LocalMediaStorage
from property_inspection.adapters.supabase_credentials_repository import (
    SupabaseCredentialsRepository,
)
from property_inspection.adapters.supabase_media_repository import (
    SupabaseMediaRepository,
)
from property_inspection.adapters.supabase_property_repository import (
    SupabasePropertyRepository,
)
from property_inspection.config import ClientSettings, Settings, parse_folder_path
from property_inspection.services.browser import MediaBrowserService
from property_inspection.services.inspection import InspectionSession
from property_inspection.services.preprocessing import MediaPreprocessor
from property_inspection.services.properties import PropertyService
from property_inspection.services.uploads import UploadService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    property_service: PropertyService
    upload_service: UploadService
    browser_service: MediaBrowserService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    property_repository = SupabasePropertyRepository(supabase_client)
    media_repository = SupabaseMediaRepository(supabase_client)
    credentials_repository = SupabaseCredentialsRepository(supabase_client)
    storage = LocalMediaStorage(root=Path(resolved_settings.upload_dir))
    mirror = None
    if resolved_settings.drive_mirror_enabled:
        mirror = GoogleDriveMirror(
            client_id=resolved_settings.google_client_id,
            client_secret=resolved_settings.google_client_secret,
        )
    property_service = PropertyService(
        repository=property_repository,
        mirror=mirror,
        credentials_repository=credentials_repository,
        mirror_root=parse_folder_path(resolved_settings.drive_root_folders),
    )
    upload_service = UploadService(
        property_service=property_service,
        media_repository=media_repository,
        storage=storage,
        mirror=mirror,
    )
    browser_service = MediaBrowserService(
        property_repository=property_repository,
        media_repository=media_repository,
        storage=storage,
    )

    async def close_resources() -> None:
        # The Supabase and Drive clients are synchronous and hold no pooled sessions.
        return None

    return AppContainer(
        settings=resolved_settings,
        property_service=property_service,
        upload_service=upload_service,
        browser_service=browser_service,
        close_resources=close_resources,
    )


def build_inspection_session(
    settings: ClientSettings | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> InspectionSession:
    """Create a client-side inspection session talking to the HTTP API."""
    resolved_settings = settings or ClientSettings()
    client = http_client or httpx.AsyncClient()
    base_url = resolved_settings.public_base_url.rstrip("/")
    preprocessor = MediaPreprocessor(
        video_probe=FfprobeVideoProbe(ffprobe_path=resolved_settings.ffprobe_path),
        max_width=resolved_settings.max_image_width,
        max_height=resolved_settings.max_image_height,
        quality=resolved_settings.image_quality,
        max_video_seconds=resolved_settings.max_video_seconds,
    )
    return InspectionSession(
        upload_gateway=HttpxUploadGateway(base_url=base_url, http_client=client),
        record_store=HttpxPropertyRecordStore(base_url=base_url, http_client=client),
        preprocessor=preprocessor,
        upload_timeout_seconds=resolved_settings.upload_timeout_seconds,
    )
