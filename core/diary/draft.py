"""
In-progress note state.

``DraftNoteStore`` is the single source of truth for the note the user is
composing. Every field mutation goes through it. All operations are
synchronous and total: the store accepts any value of the right type, and
word-count capping is left to the caller (see ``within_word_limit``).

Pure module — no I/O, no clock.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from core.diary.types import (
    ARTIST_STYLES,
    DEFAULT_STYLE,
    ArtistStyle,
    DiaryEntry,
    primary_image,
)

LAYOUT_VARIANT_COUNT = 6
"""Number of fixed layout templates a note can cycle through."""

MAX_WORDS = 200
"""Soft cap on note length, enforced by callers before ``set_text``."""


def count_words(text: str) -> int:
    """Count whitespace-separated words."""
    return len(text.split())


def within_word_limit(text: str, max_words: int = MAX_WORDS) -> bool:
    """True if ``text`` is at most ``max_words`` words long."""
    return count_words(text) <= max_words


def can_proceed(text: str) -> bool:
    """Gate for leaving the writing step: the note needs non-blank text."""
    return bool(text.strip())


@dataclass(frozen=True)
class RenderSnapshot:
    """Read-only view of a note handed to rendering and export collaborators."""

    text: str
    images: tuple[str, ...]
    style: ArtistStyle
    layout_variant: int

    @property
    def image(self) -> str | None:
        return primary_image(self.images)


@dataclass
class DraftNote:
    """Mutable fields of the note being composed."""

    text: str = ""
    images: list[str] = field(default_factory=list)
    mood: str = ""
    selected_style: ArtistStyle = DEFAULT_STYLE
    layout_variant: int = 0
    theme: str = ""
    editing_entry_id: str | None = None


class DraftNoteStore:
    """Holds the single in-flight note and mediates every field mutation.

    Args:
        draft: Optional initial state. A fresh empty draft when omitted.
    """

    def __init__(self, draft: DraftNote | None = None) -> None:
        self._draft = draft if draft is not None else DraftNote()

    # ------------------------------------------------------------------ #
    # Read access                                                          #
    # ------------------------------------------------------------------ #

    @property
    def text(self) -> str:
        return self._draft.text

    @property
    def images(self) -> tuple[str, ...]:
        return tuple(self._draft.images)

    @property
    def image(self) -> str | None:
        """Primary image, used by single-image layouts."""
        return primary_image(self._draft.images)

    @property
    def mood(self) -> str:
        return self._draft.mood

    @property
    def selected_style(self) -> ArtistStyle:
        return self._draft.selected_style

    @property
    def layout_variant(self) -> int:
        return self._draft.layout_variant

    @property
    def theme(self) -> str:
        return self._draft.theme

    @property
    def editing_entry_id(self) -> str | None:
        return self._draft.editing_entry_id

    @property
    def is_editing(self) -> bool:
        return self._draft.editing_entry_id is not None

    def snapshot(self) -> RenderSnapshot:
        """Return the read-only ``(text, images, style, layout_variant)`` tuple."""
        return RenderSnapshot(
            text=self._draft.text,
            images=tuple(self._draft.images),
            style=self._draft.selected_style,
            layout_variant=self._draft.layout_variant,
        )

    # ------------------------------------------------------------------ #
    # Field setters                                                        #
    # ------------------------------------------------------------------ #

    def set_text(self, text: str) -> None:
        self._draft.text = text

    def set_image(self, image: str | None) -> None:
        """Replace the primary image, or clear all images when ``None``."""
        if image is None:
            self._draft.images = []
        elif self._draft.images:
            self._draft.images = [image, *self._draft.images[1:]]
        else:
            self._draft.images = [image]

    def set_images(self, images: Sequence[str]) -> None:
        self._draft.images = list(images)

    def set_theme(self, theme: str) -> None:
        self._draft.theme = theme

    def set_mood(self, mood: str) -> None:
        self._draft.mood = mood

    def toggle_mood(self, mood: str) -> None:
        """Select ``mood``, or clear it if it is already the selected one."""
        self._draft.mood = "" if self._draft.mood == mood else mood

    def set_style(self, style: ArtistStyle) -> None:
        """Select the illustration style; unknown names are refused."""
        if style not in ARTIST_STYLES:
            raise ValueError(f"style must be one of {list(ARTIST_STYLES)}, got {style!r}")
        self._draft.selected_style = style

    def cycle_layout_variant(self) -> int:
        """Advance to the next layout template, wrapping after the last one."""
        self._draft.layout_variant = (self._draft.layout_variant + 1) % LAYOUT_VARIANT_COUNT
        return self._draft.layout_variant

    def clear_editing(self) -> None:
        self._draft.editing_entry_id = None

    # ------------------------------------------------------------------ #
    # Lifecycle                                                            #
    # ------------------------------------------------------------------ #

    def load_from_entry(self, entry: DiaryEntry) -> None:
        """Resume editing a saved entry.

        Copies text, images, style and mood into the draft and points
        ``editing_entry_id`` at the entry. Layout and theme are untouched.
        """
        self._draft.text = entry.text
        self._draft.images = list(entry.images)
        self._draft.selected_style = entry.style
        self._draft.mood = entry.mood
        self._draft.editing_entry_id = entry.id

    def reset(self) -> None:
        """Return to an empty new-entry draft.

        The theme is kept. Its lifecycle is owned by ``ThemePicker``.
        """
        self._draft.text = ""
        self._draft.images = []
        self._draft.mood = ""
        self._draft.selected_style = DEFAULT_STYLE
        self._draft.layout_variant = 0
        self._draft.editing_entry_id = None
