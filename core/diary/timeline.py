"""Read-side helpers over saved entries: today's notes and the month timeline.

Pure functions — callers pass the date in.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date

from core.diary.types import DiaryEntry, format_entry_date


def entries_on(entries: Iterable[DiaryEntry], day: date) -> list[DiaryEntry]:
    """Entries saved on ``day``, in repository order."""
    key = format_entry_date(day)
    return [e for e in entries if e.date == key]


def latest_entry_on(entries: Sequence[DiaryEntry], day: date) -> DiaryEntry | None:
    """The most recently saved entry for ``day``, if any."""
    todays = entries_on(entries, day)
    return todays[-1] if todays else None


def group_by_month(entries: Iterable[DiaryEntry]) -> list[tuple[str, list[DiaryEntry]]]:
    """Group entries by ``YYYY-MM``, newest month first.

    Entries keep repository order inside each month.
    """
    groups: dict[str, list[DiaryEntry]] = {}
    for entry in entries:
        groups.setdefault(entry.date[:7], []).append(entry)
    return sorted(groups.items(), key=lambda item: item[0], reverse=True)


def dates_with_entries(entries: Iterable[DiaryEntry]) -> set[str]:
    """Set of ``YYYY-MM-DD`` dates that have at least one entry."""
    return {e.date for e in entries}
