"""
Commit orchestration: turns the draft into a saved entry.

The composer decides create-vs-update from ``editing_entry_id``:

    editing_entry_id is None  →  new entry, fresh time-based id, appended
    editing_entry_id == X     →  entry X replaced in place (same position)

After either path the draft is reset, so ``editing_entry_id`` is None and
the style is back to the default.

Commit never fails. Non-blank text is a precondition checked by the caller
with ``can_proceed``.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from datetime import date

from core.diary.draft import DraftNoteStore
from core.diary.types import DiaryEntry, EntryRepository, format_entry_date


def time_based_id() -> str:
    """Millisecond epoch timestamp as a string."""
    return str(time.time_ns() // 1_000_000)


class NoteComposer:
    """Coordinates a draft and a repository across a commit.

    Args:
        clock: Returns today's local calendar date. Defaults to ``date.today``.
        id_factory: Generates candidate ids for new entries.
    """

    def __init__(
        self,
        clock: Callable[[], date] = date.today,
        id_factory: Callable[[], str] = time_based_id,
    ) -> None:
        self._clock = clock
        self._id_factory = id_factory

    def _fresh_id(self, repository: EntryRepository) -> str:
        candidate = self._id_factory()
        # Two commits within the same millisecond would collide.
        suffix = 1
        unique = candidate
        while repository.contains(unique):
            unique = f"{candidate}-{suffix}"
            suffix += 1
        return unique

    def build_entry(self, draft: DraftNoteStore, entry_id: str) -> DiaryEntry:
        """Snapshot the draft's current fields into an entry dated today."""
        return DiaryEntry(
            id=entry_id,
            text=draft.text,
            images=draft.images,
            style=draft.selected_style,
            date=format_entry_date(self._clock()),
            theme=draft.theme,
            mood=draft.mood,
        )

    def commit(self, draft: DraftNoteStore, repository: EntryRepository) -> DiaryEntry:
        """Save the draft as a new entry or as an update, then reset it.

        The draft only ever holds a known style (``set_style`` refuses
        others), so building the entry cannot fail here.

        Returns:
            The committed entry.
        """
        editing_id = draft.editing_entry_id
        if editing_id is not None:
            entry = self.build_entry(draft, editing_id)
            if not repository.replace(entry):
                # The edited entry vanished from the repository; keep the edit.
                repository.append(entry)
            draft.clear_editing()
        else:
            entry = self.build_entry(draft, self._fresh_id(repository))
            repository.append(entry)

        draft.reset()
        return entry
