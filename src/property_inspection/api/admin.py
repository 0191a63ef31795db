"""Admin API endpoints for browsing and deleting stored media."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from property_inspection.api.schemas import (
    BrowsedFileOut,
    MediaOut,
    PropertyFolderOut,
    PropertyOut,
)
from property_inspection.domain.errors import MediaNotFoundError, PropertyNotFoundError

if TYPE_CHECKING:
    from property_inspection.containers import AppContainer

router = APIRouter(prefix="/admin", tags=["admin"])


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not x_admin_token or x_admin_token != admin_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.get("/health", dependencies=[Depends(require_admin)])
async def admin_health() -> dict[str, str]:
    """Admin health check endpoint."""
    return {"status": "ok"}


@router.get("/property-folders", dependencies=[Depends(require_admin)])
async def list_property_folders(request: Request) -> dict[str, object]:
    """Return every property with its media count."""
    container: AppContainer = request.app.state.container
    summaries = container.browser_service.list_property_folders()
    return {
        "properties": [PropertyFolderOut.model_validate(item) for item in summaries]
    }


@router.get("/property-media/{identifier}", dependencies=[Depends(require_admin)])
async def property_media(identifier: str, request: Request) -> dict[str, object]:
    """Return a property, looked up by id or token, with its media."""
    container: AppContainer = request.app.state.container
    try:
        record = container.browser_service.resolve_property(identifier)
        media = container.browser_service.list_property_media(identifier)
    except PropertyNotFoundError as exc:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return {
        "property": PropertyOut.model_validate(record),
        "media": [MediaOut.model_validate(item) for item in media],
    }


@router.delete("/property-folders/{property_id}", dependencies=[Depends(require_admin)])
async def delete_property_folder(property_id: UUID, request: Request) -> dict[str, str]:
    """Delete a property with its files and media rows."""
    container: AppContainer = request.app.state.container
    try:
        container.browser_service.delete_property(property_id)
    except PropertyNotFoundError as exc:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return {"status": "deleted"}


@router.delete("/property-media/{media_id}", dependencies=[Depends(require_admin)])
async def delete_property_media(media_id: UUID, request: Request) -> dict[str, str]:
    """Delete one media file."""
    container: AppContainer = request.app.state.container
    try:
        container.browser_service.delete_media(media_id)
    except MediaNotFoundError as exc:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return {"status": "deleted"}


@router.get("/browse/{folder}", dependencies=[Depends(require_admin)])
async def browse_folder(folder: str, request: Request) -> dict[str, object]:
    """List the raw files in an upload folder."""
    container: AppContainer = request.app.state.container
    files = container.browser_service.browse_folder(folder)
    return {
        "folder": folder,
        "files": [BrowsedFileOut.model_validate(item) for item in files],
    }
