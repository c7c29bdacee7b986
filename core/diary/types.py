"""Diary note types — pure value objects.

These are the core data contracts shared by the draft store, the composer
and the entry repository. No I/O, no date.today(), no imports from
ingestion/ or api/.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date
from typing import Literal, Protocol, runtime_checkable

ArtistStyle = Literal["floral", "ink", "geometric"]

ARTIST_STYLES: tuple[str, ...] = ("floral", "ink", "geometric")
DEFAULT_STYLE: ArtistStyle = "floral"


def primary_image(images: Sequence[str]) -> str | None:
    """Return the primary image of an image list (the first one), or None."""
    return images[0] if images else None


def format_entry_date(day: date) -> str:
    """Format a calendar date as ``YYYY-MM-DD``."""
    return f"{day.year:04d}-{day.month:02d}-{day.day:02d}"


@dataclass(frozen=True)
class DiaryEntry:
    """A single saved diary note.

    Attributes:
        id: Stable identity, time-based string.
        text: Note body.
        images: Image references (data URIs); the first one is primary.
        style: Artist style the note is decorated with.
        date: Calendar date the note was saved, ``YYYY-MM-DD``.
        theme: Writing prompt active when the note was saved ("" = none).
        mood: Optional mood token ("" = unset).
    """

    id: str
    text: str
    images: tuple[str, ...]
    style: ArtistStyle
    date: str
    theme: str = ""
    mood: str = ""

    def __post_init__(self) -> None:
        if not self.id.strip():
            raise ValueError("id must not be empty")
        if self.style not in ARTIST_STYLES:
            raise ValueError(f"style must be one of {list(ARTIST_STYLES)}, got {self.style!r}")

    @property
    def image(self) -> str | None:
        """Primary image, if any."""
        return primary_image(self.images)


@runtime_checkable
class EntryRepository(Protocol):
    """Storage boundary for saved entries.

    Only two write operations are required: append a new entry, and replace
    an existing entry in place by id.
    """

    def append(self, entry: DiaryEntry) -> None: ...

    def replace(self, entry: DiaryEntry) -> bool: ...

    def contains(self, entry_id: str) -> bool: ...
