"""REST endpoints for the daily writing prompt."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from api.deps import DiarySession, get_session
from api.schemas.diary import AdoptThemeRequest, CustomThemeRequest, ThemeStateResponse
from core.diary.themes import ThemePicker

router = APIRouter(prefix="/themes", tags=["themes"])

Session = Annotated[DiarySession, Depends(get_session)]


def _state(picker: ThemePicker) -> ThemeStateResponse:
    return ThemeStateResponse(
        mode=picker.mode.value,
        suggestion=picker.suggestion,
        active_theme=picker.active_theme,
    )


@router.get("/current", response_model=ThemeStateResponse)
def current_theme(session: Session) -> ThemeStateResponse:
    """Shown suggestion, active theme and which mode is on."""
    return _state(session.themes)


@router.post("/refresh", response_model=ThemeStateResponse)
def refresh_theme(session: Session) -> ThemeStateResponse:
    """Show a new random suggestion (not yet active)."""
    session.themes.refresh()
    return _state(session.themes)


@router.post("/adopt", response_model=ThemeStateResponse)
def adopt_theme(session: Session, body: AdoptThemeRequest | None = None) -> ThemeStateResponse:
    """Make the shown suggestion the draft's theme."""
    session.themes.adopt(body.theme if body else None)
    return _state(session.themes)


@router.post("/dismiss", response_model=ThemeStateResponse)
def dismiss_theme(session: Session) -> ThemeStateResponse:
    """Clear the active theme; the suggestion stays available."""
    session.themes.dismiss()
    return _state(session.themes)


@router.put("/custom", response_model=ThemeStateResponse)
def custom_theme(body: CustomThemeRequest, session: Session) -> ThemeStateResponse:
    """Use the user's own prompt, active immediately."""
    session.themes.set_custom(body.text)
    return _state(session.themes)
