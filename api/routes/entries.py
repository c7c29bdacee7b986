"""REST endpoints for saved diary entries."""

from __future__ import annotations

import time
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from api.converters import draft_to_response, entry_to_response, export_to_response
from api.deps import DiarySession, get_session
from api.schemas.diary import (
    DraftResponse,
    EntryListResponse,
    EntryResponse,
    ExportRatioEnum,
    ExportResponse,
    MonthGroup,
    TimelineResponse,
    TodayResponse,
)
from core.diary.export import export_entry
from core.diary.timeline import dates_with_entries, entries_on, group_by_month
from core.diary.types import DiaryEntry, format_entry_date

router = APIRouter(prefix="/entries", tags=["entries"])

Session = Annotated[DiarySession, Depends(get_session)]


def _get_or_404(session: DiarySession, entry_id: str) -> DiaryEntry:
    entry = session.repository.get(entry_id)
    if entry is None:
        raise HTTPException(status_code=404, detail=f"Entry not found: {entry_id!r}")
    return entry


@router.get("/", response_model=EntryListResponse)
def list_entries(session: Session) -> EntryListResponse:
    """List all saved entries in the order they were first saved."""
    entries = session.repository.list_all()
    return EntryListResponse(entries=[entry_to_response(e) for e in entries], total=len(entries))


# NOTE: literal paths are declared before /{entry_id} so they are not
# captured as an id.


@router.get("/today", response_model=TodayResponse)
def today_entries(session: Session) -> TodayResponse:
    """Entries saved today and the most recent of them."""
    today = date.today()
    todays = entries_on(session.repository.list_all(), today)
    return TodayResponse(
        date=format_entry_date(today),
        entries=[entry_to_response(e) for e in todays],
        latest=entry_to_response(todays[-1]) if todays else None,
    )


@router.get("/timeline", response_model=TimelineResponse)
def timeline(session: Session) -> TimelineResponse:
    """Entries grouped by month, newest month first."""
    entries = session.repository.list_all()
    months = [
        MonthGroup(month=month, entries=[entry_to_response(e) for e in group])
        for month, group in group_by_month(entries)
    ]
    return TimelineResponse(
        months=months,
        dates=sorted(dates_with_entries(entries)),
        total=len(entries),
    )


@router.get("/{entry_id}", response_model=EntryResponse)
def get_entry(entry_id: str, session: Session) -> EntryResponse:
    """Fetch a single entry by id."""
    return entry_to_response(_get_or_404(session, entry_id))


@router.post("/{entry_id}/edit", response_model=DraftResponse)
def edit_entry(entry_id: str, session: Session) -> DraftResponse:
    """Load a saved entry into the draft; the next commit updates it in place."""
    session.draft.load_from_entry(_get_or_404(session, entry_id))
    return draft_to_response(session.draft)


@router.get("/{entry_id}/export", response_model=ExportResponse)
def export_saved_entry(
    entry_id: str,
    session: Session,
    ratio: ExportRatioEnum = "1:1",
) -> ExportResponse:
    """Describe a saved entry for rasterized download."""
    entry = _get_or_404(session, entry_id)
    return export_to_response(export_entry(entry, ratio, time.time_ns() // 1_000_000))
