"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, File, Form, HTTPException, Request, UploadFile, status
from fastapi.responses import FileResponse

from property_inspection.api.admin import router as admin_router
from property_inspection.api.schemas import (
    MediaOut,
    PropertyCreate,
    PropertyOut,
    SearchResultOut,
    StepOut,
    UploadOut,
)
from property_inspection.app_logging import configure_logging
from property_inspection.containers import AppContainer
from property_inspection.domain.errors import InvalidUploadError, PropertyNotFoundError
from property_inspection.services.properties import full_address


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(admin_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/api/property-leads", status_code=status.HTTP_201_CREATED)
    async def create_property_lead(
        payload: PropertyCreate, request: Request
    ) -> PropertyOut:
        """Create a property lead and return its upload token."""
        state_container: AppContainer = request.app.state.container
        try:
            record = state_container.property_service.create_property(
                payload.to_draft()
            )
        except Exception as exc:
            logger.exception("Failed to create property lead")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=format_error(
                    state_container, exc, "Failed to create property lead"
                ),
            ) from exc
        return PropertyOut.model_validate(record)

    @app.get("/api/property-leads/{token}")
    async def get_property_lead(token: str, request: Request) -> PropertyOut:
        """Return a property lead by upload token."""
        state_container: AppContainer = request.app.state.container
        try:
            record = state_container.property_service.get_by_token(token)
        except PropertyNotFoundError as exc:
            raise HTTPException(status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
        return PropertyOut.model_validate(record)

    @app.put("/api/property-leads/{token}/complete")
    async def complete_property_lead(token: str, request: Request) -> PropertyOut:
        """Mark a property's media collection complete."""
        state_container: AppContainer = request.app.state.container
        try:
            record = state_container.property_service.mark_complete(token)
        except PropertyNotFoundError as exc:
            raise HTTPException(status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
        logger.info("Inspection completed: token=%s", token)
        return PropertyOut.model_validate(record)

    @app.get("/api/property-leads/{token}/media")
    async def list_property_media(token: str, request: Request) -> dict[str, object]:
        """Return the media uploaded for a property."""
        state_container: AppContainer = request.app.state.container
        try:
            media = state_container.upload_service.list_media(token)
        except PropertyNotFoundError as exc:
            raise HTTPException(status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
        return {"media": [MediaOut.model_validate(item) for item in media]}

    @app.get("/api/property-leads/{token}/steps")
    async def list_property_steps(token: str, request: Request) -> dict[str, object]:
        """Return the capture checklist for a property."""
        state_container: AppContainer = request.app.state.container
        try:
            steps = state_container.property_service.steps_for(token)
        except PropertyNotFoundError as exc:
            raise HTTPException(status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
        return {"steps": [StepOut.model_validate(step) for step in steps]}

    @app.post("/api/upload")
    def upload_media(
        request: Request,
        file: UploadFile = File(...),
        token: str = Form(""),
        step_id: str = Form(""),
        step_title: str = Form(""),
    ) -> UploadOut:
        """Store one captured artifact for an inspection step."""
        state_container: AppContainer = request.app.state.container
        data = file.file.read()
        try:
            result = state_container.upload_service.upload(
                token=token,
                step_id=step_id,
                step_title=step_title,
                original_name=file.filename or "",
                content_type=file.content_type or "application/octet-stream",
                data=data,
            )
        except InvalidUploadError as exc:
            raise HTTPException(status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
        except PropertyNotFoundError as exc:
            raise HTTPException(status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
        except Exception as exc:
            logger.exception("Upload failed", extra={"token": token})
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=format_error(state_container, exc, "Upload failed"),
            ) from exc
        return UploadOut(file_url=result.file_url, metadata=result.metadata)

    @app.get("/api/property-search")
    async def search_properties(request: Request, q: str = "") -> dict[str, object]:
        """Search property leads by name or address."""
        state_container: AppContainer = request.app.state.container
        records = state_container.property_service.search(q)
        return {
            "results": [
                SearchResultOut(
                    id=record.id,
                    token=record.token,
                    name=record.name,
                    address=record.address,
                    full_address=full_address(record),
                    media_status=record.media_status,
                )
                for record in records
            ]
        }

    @app.get("/uploads/{folder}/{file_name}")
    async def serve_upload(
        folder: str, file_name: str, request: Request, download: bool = False
    ) -> FileResponse:
        """Serve a stored file, as an attachment when ``download`` is set."""
        state_container: AppContainer = request.app.state.container
        path = state_container.browser_service.resolve_file(folder, file_name)
        if path is None:
            raise HTTPException(status.HTTP_404_NOT_FOUND, detail="File not found")
        if download:
            return FileResponse(path, filename=file_name)
        return FileResponse(path)

    return app


def format_error(state_container: AppContainer, exc: Exception, fallback: str) -> str:
    """Return a user-facing error message with local debug info."""
    if state_container.settings.environment == "local":
        detail = f"{type(exc).__name__}: {exc}".strip()
        if detail:
            return f"{fallback} (debug: {detail})"
    return fallback
