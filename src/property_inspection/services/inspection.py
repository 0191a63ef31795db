"""Client-held state machine that walks an inspector through the checklist.

The session is driven by discrete user actions (select, capture, review,
confirm) and by a single in-flight upload at a time. It owns the seeded step
list, the capture under review, upload progress and the confirmed uploads, and
decides which step comes next after each confirmed upload.
"""

import asyncio
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

from property_inspection.config import parse_feature_notes
from property_inspection.domain.errors import (
    CompletionFailedError,
    InspectionStateError,
    MediaValidationError,
    PropertyNotFoundError,
    UploadFailedError,
)
from property_inspection.domain.media import CapturedArtifact
from property_inspection.domain.properties import (
    MediaRecord,
    PropertyRecord,
    UploadedMediaRecord,
    UploadResult,
)
from property_inspection.domain.steps import (
    MediaType,
    PropertyFeatures,
    Step,
    StepCategory,
)
from property_inspection.services.catalog import generate_steps
from property_inspection.services.preprocessing import MediaPreprocessor

_logger = logging.getLogger(__name__)

DEFAULT_BEDROOMS = 3
DEFAULT_BATHROOMS = 2

# Walkaround is not part of the fallback scan; it is reached by selecting it.
NEXT_STEP_CATEGORY_ORDER: tuple[StepCategory, ...] = (
    StepCategory.EXTERIOR,
    StepCategory.INTERIOR,
    StepCategory.BEDROOMS,
    StepCategory.BATHROOMS,
    StepCategory.UTILITY,
    StepCategory.SPECIAL,
)

ProgressCallback = Callable[[int], None]


class UploadGateway(Protocol):
    """Network boundary that stores an artifact and returns its URL."""

    async def upload(  # noqa: PLR0913
        self,
        artifact: CapturedArtifact,
        token: str,
        step_id: str,
        step_title: str,
        on_progress: ProgressCallback | None = None,
    ) -> UploadResult:
        """Upload an artifact, reporting 0-100 progress as it streams."""


class PropertyRecordStore(Protocol):
    """Persistence boundary for property records and their media."""

    async def get_by_token(self, token: str) -> PropertyRecord | None:
        """Return the property for a token, if present."""

    async def list_media(self, token: str) -> list[MediaRecord]:
        """Return media recorded for a property."""

    async def mark_complete(self, token: str) -> None:
        """Persist the completed status for a property."""


class SessionPhase(str, Enum):
    """Externally visible state of an inspection session."""

    IDLE = "idle"
    ACTIVE = "active"
    STEP_SELECTED = "step_selected"
    REVIEWING = "reviewing"
    UPLOADING = "uploading"
    COMPLETED = "completed"


@dataclass(frozen=True)
class SessionNotice:
    """User-facing notification raised by a session operation."""

    title: str
    description: str
    variant: str = "default"


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only view of the session for its UI consumer."""

    phase: SessionPhase
    token: str | None
    property_type: str
    steps: tuple[Step, ...]
    current_step_index: int
    selected_step: Step | None
    capture_mode: MediaType | None
    pending_artifact: CapturedArtifact | None
    is_reviewing: bool
    uploaded_media: tuple[UploadedMediaRecord, ...]
    upload_progress: int
    is_uploading: bool
    is_completed: bool


SessionListener = Callable[[SessionSnapshot], None]


@dataclass
class InspectionSession:
    """State machine for one inspector's run through a property checklist."""

    upload_gateway: UploadGateway
    record_store: PropertyRecordStore
    preprocessor: MediaPreprocessor
    upload_timeout_seconds: float | None = 120.0
    notifier: Callable[[SessionNotice], None] | None = None

    token: str | None = field(default=None, init=False)
    property_type: str = field(default="SFR", init=False)
    steps: list[Step] = field(default_factory=list, init=False)
    current_step_index: int = field(default=0, init=False)
    selected_step: Step | None = field(default=None, init=False)
    capture_mode: MediaType | None = field(default=None, init=False)
    pending_artifact: CapturedArtifact | None = field(default=None, init=False)
    is_reviewing: bool = field(default=False, init=False)
    uploaded_media: list[UploadedMediaRecord] = field(default_factory=list, init=False)
    upload_progress: int = field(default=0, init=False)
    is_uploading: bool = field(default=False, init=False)
    is_completed: bool = field(default=False, init=False)
    notices: list[SessionNotice] = field(default_factory=list, init=False)

    _listeners: list[SessionListener] = field(default_factory=list, init=False)
    _upload_task: asyncio.Future | None = field(default=None, init=False)
    _cancel_requested: bool = field(default=False, init=False)

    @property
    def phase(self) -> SessionPhase:
        if self.token is None:
            return SessionPhase.IDLE
        if self.is_uploading:
            return SessionPhase.UPLOADING
        if self.is_reviewing:
            return SessionPhase.REVIEWING
        if self.is_completed:
            return SessionPhase.COMPLETED
        if self.selected_step is not None:
            return SessionPhase.STEP_SELECTED
        return SessionPhase.ACTIVE

    @property
    def current_step(self) -> Step | None:
        """Return the step at the position index, if any."""
        if 0 <= self.current_step_index < len(self.steps):
            return self.steps[self.current_step_index]
        return None

    def snapshot(self) -> SessionSnapshot:
        """Return the current state."""
        return SessionSnapshot(
            phase=self.phase,
            token=self.token,
            property_type=self.property_type,
            steps=tuple(self.steps),
            current_step_index=self.current_step_index,
            selected_step=self.selected_step,
            capture_mode=self.capture_mode,
            pending_artifact=self.pending_artifact,
            is_reviewing=self.is_reviewing,
            uploaded_media=tuple(self.uploaded_media),
            upload_progress=self.upload_progress,
            is_uploading=self.is_uploading,
            is_completed=self.is_completed,
        )

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register a listener for state changes and return an unsubscribe hook."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def start(
        self,
        token: str,
        property_type: str = "SFR",
        bedrooms: int = DEFAULT_BEDROOMS,
        bathrooms: int = DEFAULT_BATHROOMS,
        features: PropertyFeatures | None = None,
    ) -> SessionSnapshot:
        """Seed a fresh checklist for a property token."""
        if not token:
            raise InspectionStateError("A session token is required")
        if token == self.token:
            raise InspectionStateError(f"Session already started for {token}")
        self._clear_state()
        self.token = token
        self.property_type = property_type
        self.steps = generate_steps(property_type, bedrooms, bathrooms, features)
        _logger.info("Inspection started: token=%s steps=%s", token, len(self.steps))
        self._emit()
        return self.snapshot()

    async def resume(self, token: str) -> SessionSnapshot:
        """Start a session from the stored property and replay its uploads."""
        record = await self.record_store.get_by_token(token)
        if record is None:
            raise PropertyNotFoundError(f"No property for token {token}")
        if token == self.token:
            self._clear_state()
        self.start(
            token,
            property_type=record.property_type or "SFR",
            bedrooms=(
                record.bedrooms if record.bedrooms is not None else DEFAULT_BEDROOMS
            ),
            bathrooms=(
                record.bathrooms if record.bathrooms is not None else DEFAULT_BATHROOMS
            ),
            features=features_for(record),
        )
        media = await self.record_store.list_media(token)
        step_ids = {step.id for step in self.steps}
        self.uploaded_media = [
            UploadedMediaRecord(
                step_id=item.step_id,
                file_url=item.file_url,
                file_type=item.file_type,
            )
            for item in media
            if item.step_id in step_ids
        ]
        self.is_completed = record.is_complete
        self._emit()
        return self.snapshot()

    def select_step(self, step: Step | None) -> SessionSnapshot:
        """Choose a step to capture, or return to the checklist with None."""
        self._require_started()
        self._require_idle_upload()
        if step is not None and all(item.id != step.id for item in self.steps):
            raise InspectionStateError(f"Unknown step {step.id}")
        self.selected_step = step
        self.pending_artifact = None
        self.capture_mode = None
        self.is_reviewing = False
        self._emit()
        return self.snapshot()

    def set_capture_mode(self, mode: MediaType | str) -> SessionSnapshot:
        """Record whether the next artifact is a photo or a video."""
        self.capture_mode = MediaType(mode)
        self._emit()
        return self.snapshot()

    async def submit_artifact(self, artifact: CapturedArtifact) -> SessionSnapshot:
        """Preprocess a capture and hold it for review."""
        self._require_started()
        self._require_idle_upload()
        try:
            processed = await self.preprocessor.process(artifact)
        except MediaValidationError as exc:
            self._notify("Invalid Video", str(exc), variant="destructive")
            raise
        except Exception:
            _logger.warning(
                "Preprocessing failed, using original capture: %s",
                artifact.filename,
                exc_info=True,
            )
            processed = artifact
        self.pending_artifact = processed
        self.is_reviewing = True
        self._emit()
        return self.snapshot()

    def retake(self) -> SessionSnapshot:
        """Discard the capture under review."""
        self._require_idle_upload()
        self.pending_artifact = None
        self.is_reviewing = False
        self._emit()
        return self.snapshot()

    async def confirm_upload(self) -> UploadedMediaRecord | None:
        """Upload the capture under review and advance to the next step.

        Returns None without side effects when there is nothing to upload or an
        upload is already in flight.
        """
        if self.is_uploading:
            _logger.warning("Ignoring confirm while an upload is in flight")
            return None
        step = self.selected_step or self.current_step
        artifact = self.pending_artifact
        if artifact is None or self.token is None or step is None:
            return None

        self.is_uploading = True
        self.upload_progress = 0
        self._emit()
        try:
            result = await self._run_upload(artifact, self.token, step)
        except UploadFailedError as exc:
            self.is_uploading = False
            self.upload_progress = 0
            _logger.warning("Upload failed: step=%s error=%s", step.id, exc)
            self._notify(
                "Upload Failed",
                "There was a problem uploading your media",
                variant="destructive",
            )
            self._emit()
            raise
        except asyncio.CancelledError:
            # The caller's task was cancelled; keep the artifact for a retry.
            self.is_uploading = False
            self.upload_progress = 0
            _logger.warning("Upload interrupted: step=%s", step.id)
            self._emit()
            raise

        record = UploadedMediaRecord(
            step_id=step.id,
            file_url=result.file_url,
            file_type=self.capture_mode or artifact.media_kind or MediaType.PHOTO,
        )
        self.uploaded_media = [*self.uploaded_media, record]
        self.pending_artifact = None
        self.capture_mode = None
        self.is_reviewing = False
        self.is_uploading = False
        self.upload_progress = 100
        self._advance_from(step)
        _logger.info("Upload confirmed: token=%s step=%s", self.token, step.id)
        self._notify("Media Uploaded", f"{step.title} saved")
        self._emit()
        return record

    def cancel_upload(self) -> bool:
        """Cancel the in-flight upload, if there is one."""
        task = self._upload_task
        if task is None or task.done():
            return False
        self._cancel_requested = True
        task.cancel()
        return True

    async def complete_inspection(self) -> SessionSnapshot:
        """Persist the completed status and mark the session complete."""
        self._require_started()
        try:
            await self.record_store.mark_complete(self.token)
        except Exception as exc:
            _logger.warning("Failed to mark inspection complete: %s", exc)
            self._notify(
                "Error",
                "Failed to mark inspection as complete",
                variant="destructive",
            )
            raise CompletionFailedError("Failed to mark inspection as complete") from exc
        self.is_completed = True
        self._emit()
        return self.snapshot()

    def reset_selected_steps(self, step_ids: Iterable[str]) -> SessionSnapshot:
        """Reopen completed steps so they can be captured again."""
        ids = set(step_ids)
        if not ids:
            return self.snapshot()
        if not self.is_completed:
            raise InspectionStateError("Only a completed inspection can be reopened")
        self.uploaded_media = [
            record for record in self.uploaded_media if record.step_id not in ids
        ]
        self.is_completed = False
        self.selected_step = None
        self.pending_artifact = None
        self.capture_mode = None
        self.is_reviewing = False
        _logger.info("Reopened steps: token=%s steps=%s", self.token, sorted(ids))
        self._emit()
        return self.snapshot()

    def go_to_next_step(self) -> SessionSnapshot:
        """Move the position index forward, stopping at the last step."""
        last_index = max(len(self.steps) - 1, 0)
        self.current_step_index = min(self.current_step_index + 1, last_index)
        self._emit()
        return self.snapshot()

    def go_to_previous_step(self) -> SessionSnapshot:
        """Move the position index back, stopping at the first step."""
        self.current_step_index = max(0, self.current_step_index - 1)
        self._emit()
        return self.snapshot()

    def progress(self) -> tuple[int, int]:
        """Return (completed, total) step counts."""
        completed = self._completed_ids()
        done = sum(1 for step in self.steps if step.id in completed)
        return done, len(self.steps)

    def reset(self) -> SessionSnapshot:
        """Discard everything and return to idle."""
        self._clear_state()
        self._emit()
        return self.snapshot()

    async def _run_upload(
        self, artifact: CapturedArtifact, token: str, step: Step
    ) -> UploadResult:
        def on_progress(percent: int) -> None:
            self.upload_progress = percent
            self._emit()

        task = asyncio.ensure_future(
            self.upload_gateway.upload(
                artifact, token, step.id, step.title, on_progress=on_progress
            )
        )
        self._upload_task = task
        try:
            return await asyncio.wait_for(task, timeout=self.upload_timeout_seconds)
        except TimeoutError as exc:
            raise UploadFailedError("Upload timed out") from exc
        except asyncio.CancelledError:
            if not self._cancel_requested:
                raise
            raise UploadFailedError("Upload cancelled") from None
        except UploadFailedError:
            raise
        except Exception as exc:
            raise UploadFailedError(f"Upload failed: {exc}") from exc
        finally:
            self._upload_task = None
            self._cancel_requested = False

    def _advance_from(self, step: Step) -> None:
        completed = self._completed_ids()
        next_step = next_incomplete_step(self.steps, step, completed)
        if next_step is not None:
            self.selected_step = next_step
            self.current_step_index = self.steps.index(next_step)
            return
        # Steps outside the fallback scan (walkaround) keep the session active.
        self.selected_step = None
        if all(item.id in completed for item in self.steps):
            self.is_completed = True

    def _completed_ids(self) -> set[str]:
        return {record.step_id for record in self.uploaded_media}

    def _clear_state(self) -> None:
        self.token = None
        self.property_type = "SFR"
        self.steps = []
        self.current_step_index = 0
        self.selected_step = None
        self.capture_mode = None
        self.pending_artifact = None
        self.is_reviewing = False
        self.uploaded_media = []
        self.upload_progress = 0
        self.is_uploading = False
        self.is_completed = False
        self.notices = []

    def _require_started(self) -> None:
        if self.token is None:
            raise InspectionStateError("No inspection session has been started")

    def _require_idle_upload(self) -> None:
        if self.is_uploading:
            raise InspectionStateError("An upload is in progress")

    def _notify(self, title: str, description: str, variant: str = "default") -> None:
        notice = SessionNotice(title=title, description=description, variant=variant)
        self.notices.append(notice)
        if self.notifier is not None:
            self.notifier(notice)

    def _emit(self) -> None:
        if not self._listeners:
            return
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            listener(snapshot)


def next_incomplete_step(
    steps: list[Step], completed_step: Step, completed_ids: set[str]
) -> Step | None:
    """Pick the step to capture after completing one.

    Scans forward within the completed step's category first, then the
    remaining categories in NEXT_STEP_CATEGORY_ORDER.
    """
    position = next(
        (index for index, step in enumerate(steps) if step.id == completed_step.id),
        -1,
    )
    for step in steps[position + 1 :]:
        if step.category == completed_step.category and step.id not in completed_ids:
            return step

    if completed_step.category in NEXT_STEP_CATEGORY_ORDER:
        start = NEXT_STEP_CATEGORY_ORDER.index(completed_step.category) + 1
    else:
        start = 0
    for category in NEXT_STEP_CATEGORY_ORDER[start:]:
        for step in steps:
            if step.category == category and step.id not in completed_ids:
                return step
    return None


def features_for(record: PropertyRecord) -> PropertyFeatures:
    """Derive catalog feature flags from a stored property."""
    return PropertyFeatures(
        has_pool=record.has_pool,
        has_basement=record.has_basement,
        has_garage=record.has_garage,
        special_features=parse_feature_notes(record.notes),
    )
