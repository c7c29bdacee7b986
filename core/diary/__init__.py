"""Diary note composition engine — pure state and rules.

Exports:
    DiaryEntry, ArtistStyle, primary_image     (types)
    DraftNoteStore, RenderSnapshot             (draft)
    ArtistSlotInventory, MAX_SLOTS             (slots)
    ThemePicker, ThemeMode                     (themes)
    NoteComposer                               (composer)
    BackgroundRemover, BackgroundRemovalPipeline, RemovalState  (background)
"""

from core.diary.background import (
    BackgroundRemovalPipeline,
    BackgroundRemover,
    RemovalFailure,
    RemovalState,
    RemovalSuccess,
)
from core.diary.composer import NoteComposer
from core.diary.draft import DraftNoteStore, RenderSnapshot
from core.diary.slots import MAX_SLOTS, ArtistSlotInventory
from core.diary.themes import ThemeMode, ThemePicker
from core.diary.types import ArtistStyle, DiaryEntry, primary_image

__all__ = [
    "ArtistStyle",
    "DiaryEntry",
    "primary_image",
    "DraftNoteStore",
    "RenderSnapshot",
    "ArtistSlotInventory",
    "MAX_SLOTS",
    "ThemePicker",
    "ThemeMode",
    "NoteComposer",
    "BackgroundRemover",
    "BackgroundRemovalPipeline",
    "RemovalState",
    "RemovalSuccess",
    "RemovalFailure",
]
