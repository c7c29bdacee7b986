"""REST endpoints for the note being composed.

Flow: write (text, image, mood) → style (artist, layout) → finalize
(commit or export). The word cap and the non-empty-text gate are checked
here, before the store or the composer are called.
"""

from __future__ import annotations

import logging
import time
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from api.converters import (
    draft_to_response,
    entry_to_response,
    export_to_response,
    snapshot_to_response,
)
from api.deps import DiarySession, get_session
from api.schemas.diary import (
    BackgroundRunResponse,
    CaptureRequest,
    DraftResponse,
    EntryResponse,
    ExportRatioEnum,
    ExportResponse,
    RenderResponse,
    SetImageRequest,
    SetImagesRequest,
    SetMoodRequest,
    SetStyleRequest,
    SetTextRequest,
)
from core.diary.background import RemovalResult, RemovalState, RemovalSuccess, RemovalTrigger
from core.diary.draft import MAX_WORDS, can_proceed, count_words, within_word_limit
from core.diary.export import export_draft
from infrastructure.metrics import LatencyTimer, record_background_removal, record_commit

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/draft", tags=["draft"])

Session = Annotated[DiarySession, Depends(get_session)]


@router.get("/", response_model=DraftResponse)
def get_draft(session: Session) -> DraftResponse:
    """Return the current draft."""
    return draft_to_response(session.draft)


@router.put("/text", response_model=DraftResponse)
def set_text(body: SetTextRequest, session: Session) -> DraftResponse:
    """Replace the draft text. Rejected (draft unchanged) past the word cap."""
    if not within_word_limit(body.text):
        raise HTTPException(
            status_code=422,
            detail={
                "reason": "word_limit_exceeded",
                "message": f"Notes are limited to {MAX_WORDS} words, got {count_words(body.text)}.",
            },
        )
    session.draft.set_text(body.text)
    return draft_to_response(session.draft)


@router.put("/image", response_model=DraftResponse)
def set_image(body: SetImageRequest, session: Session) -> DraftResponse:
    """Set the primary image, or clear all images with ``null``."""
    session.draft.set_image(body.image)
    return draft_to_response(session.draft)


@router.put("/images", response_model=DraftResponse)
def set_images(body: SetImagesRequest, session: Session) -> DraftResponse:
    session.draft.set_images(body.images)
    return draft_to_response(session.draft)


@router.put("/mood", response_model=DraftResponse)
def set_mood(body: SetMoodRequest, session: Session) -> DraftResponse:
    """Set the mood; with ``toggle`` picking the current mood again clears it."""
    if body.toggle:
        session.draft.toggle_mood(body.mood)
    else:
        session.draft.set_mood(body.mood)
    return draft_to_response(session.draft)


@router.put("/style", response_model=DraftResponse)
def set_style(body: SetStyleRequest, session: Session) -> DraftResponse:
    session.draft.set_style(body.style)
    return draft_to_response(session.draft)


@router.post("/layout/cycle", response_model=DraftResponse)
def cycle_layout(session: Session) -> DraftResponse:
    """Switch to the next of the six layout variants."""
    session.draft.cycle_layout_variant()
    return draft_to_response(session.draft)


@router.post("/reset", response_model=DraftResponse)
def reset_draft(session: Session) -> DraftResponse:
    """Discard the draft (the active theme is kept)."""
    session.draft.reset()
    return draft_to_response(session.draft)


@router.post("/commit", response_model=EntryResponse, status_code=201)
def commit_draft(session: Session) -> EntryResponse:
    """Save the draft as a new entry, or update the entry being edited."""
    if not can_proceed(session.draft.text):
        raise HTTPException(
            status_code=422,
            detail={"reason": "empty_text", "message": "Write something before saving."},
        )
    mode = "updated" if session.draft.is_editing else "created"
    entry = session.composer.commit(session.draft, session.repository)
    record_commit(mode)
    logger.info("draft committed (%s): id=%s", mode, entry.id)
    return entry_to_response(entry)


@router.get("/render", response_model=RenderResponse)
def render_draft(session: Session) -> RenderResponse:
    """Read-only tuple for the note renderer."""
    return snapshot_to_response(session.draft.snapshot())


@router.get("/export", response_model=ExportResponse)
def export_current_draft(session: Session, ratio: ExportRatioEnum = "1:1") -> ExportResponse:
    """Describe the draft for rasterized download at the given aspect ratio."""
    request = export_draft(session.draft, ratio, time.time_ns() // 1_000_000)
    return export_to_response(request)


# ---------------------------------------------------------------------------
# Background removal
# ---------------------------------------------------------------------------


def _run_response(session: DiarySession, result: RemovalResult | None) -> BackgroundRunResponse:
    if result is None:
        return BackgroundRunResponse(
            state=session.pipeline.state.value,
            outcome="skipped",
            image=session.draft.image,
            notices=session.pop_notices(),
        )
    terminal = RemovalState.SUCCESS if isinstance(result, RemovalSuccess) else RemovalState.FAILED
    return BackgroundRunResponse(
        state=terminal.value,
        outcome="success" if result.ok else "failed",
        reason=None if isinstance(result, RemovalSuccess) else result.reason,
        image=session.draft.image,
        notices=session.pop_notices(),
    )


def _record(result: RemovalResult, trigger: RemovalTrigger, elapsed: float) -> None:
    outcome = "success" if isinstance(result, RemovalSuccess) else result.reason
    record_background_removal(outcome=outcome, trigger=trigger.value, latency_seconds=elapsed)
    if not isinstance(result, RemovalSuccess):
        logger.warning("background removal failed (%s): %s", result.reason, result.message)


@router.get("/background", response_model=BackgroundRunResponse)
def background_status(session: Session) -> BackgroundRunResponse:
    """Current pipeline state; clients disable the scissors while processing."""
    return BackgroundRunResponse(
        state=session.pipeline.state.value,
        outcome="skipped",
        image=session.draft.image,
    )


@router.post("/background", response_model=BackgroundRunResponse)
async def remove_draft_background(session: Session) -> BackgroundRunResponse:
    """Manual trigger: remove the background of the draft's primary image."""
    if session.pipeline.is_busy:
        raise HTTPException(
            status_code=409,
            detail={"reason": "busy", "message": "Background removal already in progress."},
        )
    if session.draft.image is None:
        raise HTTPException(
            status_code=422,
            detail={"reason": "no_image", "message": "Add a photo first."},
        )
    with LatencyTimer() as timer:
        result = await session.pipeline.run(session.draft, RemovalTrigger.MANUAL)
    _record(result, RemovalTrigger.MANUAL, timer.elapsed)
    return _run_response(session, result)


@router.post("/capture", response_model=BackgroundRunResponse)
async def capture_photo(body: CaptureRequest, session: Session) -> BackgroundRunResponse:
    """Camera trigger: attach the photo, then remove its background if enabled."""
    if body.auto_remove and session.pipeline.is_busy:
        raise HTTPException(
            status_code=409,
            detail={"reason": "busy", "message": "Background removal already in progress."},
        )
    with LatencyTimer() as timer:
        result = await session.pipeline.on_capture(
            session.draft, body.image, auto_remove=body.auto_remove
        )
    if result is not None:
        _record(result, RemovalTrigger.CAPTURE, timer.elapsed)
    return _run_response(session, result)
