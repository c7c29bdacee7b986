"""
Writing-prompt selection.

A suggestion is only *shown* until the user adopts it; the draft's active
theme changes only through ``adopt``, ``dismiss`` and ``set_custom``.
Exactly one mode is active at a time:

    NONE       no suggestion, no theme
    SUGGESTED  a suggestion is shown, draft theme is ""
    ADOPTED    the suggestion was copied into the draft theme
    CUSTOM     the user types the theme directly

Switching mode clears the draft theme first so text from the previous
mode never leaks into the next one.
"""

from __future__ import annotations

import random
from collections.abc import Sequence
from enum import Enum

from core.diary.catalog import DAILY_THEMES
from core.diary.draft import DraftNoteStore


class ThemeMode(Enum):
    NONE = "none"
    SUGGESTED = "suggested"
    ADOPTED = "adopted"
    CUSTOM = "custom"


class ThemePicker:
    """Suggests prompts and moves them into a draft on request.

    Args:
        draft: Draft whose ``theme`` field this picker manages.
        themes: Non-empty prompt list to pick from.
        rng: Random source; pass a seeded ``random.Random`` in tests.
    """

    def __init__(
        self,
        draft: DraftNoteStore,
        themes: Sequence[str] = DAILY_THEMES,
        rng: random.Random | None = None,
    ) -> None:
        if not themes:
            raise ValueError("themes must not be empty")
        self._draft = draft
        self._themes = tuple(themes)
        self._rng = rng or random.Random()
        self._suggestion = ""
        self._mode = ThemeMode.NONE

    @property
    def mode(self) -> ThemeMode:
        return self._mode

    @property
    def suggestion(self) -> str:
        return self._suggestion

    @property
    def active_theme(self) -> str:
        return self._draft.theme

    def pick(self) -> str:
        """Return a uniformly random prompt. Does not touch any state."""
        return self._rng.choice(self._themes)

    def _switch_mode(self, mode: ThemeMode) -> None:
        if mode is not self._mode:
            self._draft.set_theme("")
            self._mode = mode

    def suggest(self) -> str:
        """Show a fresh suggestion. The previous active theme is cleared."""
        self._suggestion = self.pick()
        self._draft.set_theme("")
        self._mode = ThemeMode.SUGGESTED
        return self._suggestion

    refresh = suggest

    def adopt(self, theme: str | None = None) -> str:
        """Make the current suggestion (or ``theme``) the draft's theme."""
        chosen = theme if theme is not None else self._suggestion
        if not chosen:
            return self._draft.theme
        self._switch_mode(ThemeMode.ADOPTED)
        self._suggestion = chosen
        self._draft.set_theme(chosen)
        return chosen

    def dismiss(self) -> None:
        """Clear the active theme but keep the suggestion for re-adoption."""
        self._draft.set_theme("")
        self._mode = ThemeMode.SUGGESTED if self._suggestion else ThemeMode.NONE

    def set_custom(self, text: str) -> None:
        """Use ``text`` as the theme immediately, no adopt step."""
        self._switch_mode(ThemeMode.CUSTOM)
        self._draft.set_theme(text)
