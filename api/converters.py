"""Core value objects → API response models."""

from __future__ import annotations

from api.schemas.diary import (
    DraftResponse,
    EntryResponse,
    ExportResponse,
    RenderResponse,
)
from core.diary.draft import DraftNoteStore, RenderSnapshot, can_proceed, count_words
from core.diary.export import ExportRequest
from core.diary.types import DiaryEntry


def draft_to_response(draft: DraftNoteStore) -> DraftResponse:
    return DraftResponse(
        text=draft.text,
        word_count=count_words(draft.text),
        can_proceed=can_proceed(draft.text),
        images=list(draft.images),
        image=draft.image,
        mood=draft.mood,
        selected_style=draft.selected_style,
        layout_variant=draft.layout_variant,
        theme=draft.theme,
        editing_entry_id=draft.editing_entry_id,
    )


def entry_to_response(entry: DiaryEntry) -> EntryResponse:
    return EntryResponse(
        id=entry.id,
        text=entry.text,
        images=list(entry.images),
        image=entry.image,
        style=entry.style,
        date=entry.date,
        theme=entry.theme,
        mood=entry.mood,
    )


def snapshot_to_response(snapshot: RenderSnapshot) -> RenderResponse:
    return RenderResponse(
        text=snapshot.text,
        images=list(snapshot.images),
        style=snapshot.style,
        layout_variant=snapshot.layout_variant,
    )


def export_to_response(request: ExportRequest) -> ExportResponse:
    width, height = request.aspect
    return ExportResponse(
        snapshot=snapshot_to_response(request.snapshot),
        ratio=request.ratio,
        aspect_width=width,
        aspect_height=height,
        filename=request.filename,
        watermark=request.watermark,
    )
