"""In-memory store for saved diary entries.

Entries live for the lifetime of the process. Order is insertion order;
``replace`` keeps an entry at its original position.

Schema (one list, no indexes beyond a linear scan — a personal diary holds
a few hundred entries at most):
    entries: list[DiaryEntry]
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable

from core.diary.types import DiaryEntry

logger = logging.getLogger(__name__)


class InMemoryEntryRepository:
    """Ordered collection of saved entries with append and replace-by-id.

    Thread-safety: a single lock guards the list, since FastAPI runs sync
    routes on a worker thread pool.

    Args:
        entries: Optional initial entries, kept in the given order.
    """

    def __init__(self, entries: Iterable[DiaryEntry] = ()) -> None:
        self._entries: list[DiaryEntry] = list(entries)
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    # ------------------------------------------------------------------ #
    # Writes                                                               #
    # ------------------------------------------------------------------ #

    def append(self, entry: DiaryEntry) -> None:
        """Add a new entry at the end.

        Raises:
            ValueError: If an entry with the same id already exists.
        """
        with self._lock:
            if any(e.id == entry.id for e in self._entries):
                raise ValueError(f"entry id already exists: {entry.id!r}")
            self._entries.append(entry)
        logger.info("entry created: id=%s date=%s", entry.id, entry.date)

    def replace(self, entry: DiaryEntry) -> bool:
        """Swap the entry with the same id, keeping its position.

        Returns:
            True if an entry was replaced, False if the id was not found.
        """
        with self._lock:
            for index, existing in enumerate(self._entries):
                if existing.id == entry.id:
                    self._entries[index] = entry
                    break
            else:
                logger.warning("replace: entry id not found: %s", entry.id)
                return False
        logger.info("entry updated: id=%s", entry.id)
        return True

    # ------------------------------------------------------------------ #
    # Reads                                                                #
    # ------------------------------------------------------------------ #

    def contains(self, entry_id: str) -> bool:
        with self._lock:
            return any(e.id == entry_id for e in self._entries)

    def get(self, entry_id: str) -> DiaryEntry | None:
        """Fetch a single entry by id. Returns None if not found."""
        with self._lock:
            for entry in self._entries:
                if entry.id == entry_id:
                    return entry
        return None

    def list_all(self) -> list[DiaryEntry]:
        """Return all entries in insertion order."""
        with self._lock:
            return list(self._entries)
