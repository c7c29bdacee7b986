"""Pydantic schemas for the diary endpoints."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

ArtistStyleEnum = Literal["floral", "ink", "geometric"]
ExportRatioEnum = Literal["1:1", "4:3"]
ThemeModeEnum = Literal["none", "suggested", "adopted", "custom"]
RemovalStateEnum = Literal["idle", "processing", "success", "failed"]


# ---------------------------------------------------------------------------
# Draft
# ---------------------------------------------------------------------------


class DraftResponse(BaseModel):
    """Serialized draft note."""

    text: str
    word_count: int
    can_proceed: bool
    images: list[str]
    image: str | None
    mood: str
    selected_style: ArtistStyleEnum
    layout_variant: int
    theme: str
    editing_entry_id: str | None


class SetTextRequest(BaseModel):
    text: str


class SetImageRequest(BaseModel):
    image: str | None = None


class SetImagesRequest(BaseModel):
    images: list[str] = Field(default_factory=list)


class SetMoodRequest(BaseModel):
    mood: str = ""
    toggle: bool = False


class SetStyleRequest(BaseModel):
    style: ArtistStyleEnum


class RenderResponse(BaseModel):
    """Read-only tuple handed to the renderer."""

    text: str
    images: list[str]
    style: ArtistStyleEnum
    layout_variant: int


class ExportResponse(BaseModel):
    snapshot: RenderResponse
    ratio: ExportRatioEnum
    aspect_width: int
    aspect_height: int
    filename: str
    watermark: str


# ---------------------------------------------------------------------------
# Entries
# ---------------------------------------------------------------------------


class EntryResponse(BaseModel):
    """Serialized DiaryEntry."""

    id: str
    text: str
    images: list[str]
    image: str | None
    style: ArtistStyleEnum
    date: str
    theme: str
    mood: str


class EntryListResponse(BaseModel):
    entries: list[EntryResponse]
    total: int


class MonthGroup(BaseModel):
    month: str
    entries: list[EntryResponse]


class TimelineResponse(BaseModel):
    months: list[MonthGroup]
    dates: list[str]
    total: int


class TodayResponse(BaseModel):
    date: str
    entries: list[EntryResponse]
    latest: EntryResponse | None


# ---------------------------------------------------------------------------
# Themes
# ---------------------------------------------------------------------------


class ThemeStateResponse(BaseModel):
    mode: ThemeModeEnum
    suggestion: str
    active_theme: str


class AdoptThemeRequest(BaseModel):
    theme: str | None = None


class CustomThemeRequest(BaseModel):
    text: str = Field(..., max_length=200)


# ---------------------------------------------------------------------------
# Artists
# ---------------------------------------------------------------------------


class ArtistResponse(BaseModel):
    id: str
    name: str
    subtitle: str
    bio: str
    style: ArtistStyleEnum
    saved: bool


class ArtistListResponse(BaseModel):
    artists: list[ArtistResponse]
    default_template: ArtistResponse


class SlotsResponse(BaseModel):
    saved: list[str]
    slots: list[str | None]
    count: int
    capacity: int
    is_full: bool


class ToggleResponse(SlotsResponse):
    artist_id: str
    added: bool


# ---------------------------------------------------------------------------
# Background removal
# ---------------------------------------------------------------------------


class CaptureRequest(BaseModel):
    image: str = Field(..., min_length=1)
    auto_remove: bool = False


class BackgroundRunResponse(BaseModel):
    """Outcome of a background-removal run against the draft."""

    state: RemovalStateEnum
    outcome: Literal["success", "failed", "skipped"]
    reason: str | None = None
    image: str | None
    notices: list[str] = Field(default_factory=list)


class RemoveBackgroundRequest(BaseModel):
    image: str | None = None
