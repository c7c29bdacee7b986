"""Fixed-capacity collection of saved artists (the stamp box)."""

from __future__ import annotations

from collections.abc import Iterable

MAX_SLOTS = 5
"""Maximum number of artists a user can keep saved at once."""

DEFAULT_SAVED_ARTISTS: tuple[str, ...] = ("flora", "sumi")


class ArtistSlotInventory:
    """Ordered, unique set of saved artist ids bounded by ``MAX_SLOTS``.

    Insertion order is preserved for display. ``toggle`` is the only
    mutation and the only place the "full" condition is modelled: a full
    inventory rejects additions by returning False, never by raising.

    Args:
        initial: Artist ids to start with. Duplicates are collapsed and
            anything past ``MAX_SLOTS`` is dropped.
    """

    def __init__(self, initial: Iterable[str] = DEFAULT_SAVED_ARTISTS) -> None:
        self._ids: list[str] = []
        for artist_id in initial:
            if artist_id not in self._ids and len(self._ids) < MAX_SLOTS:
                self._ids.append(artist_id)

    def __len__(self) -> int:
        return len(self._ids)

    def __contains__(self, artist_id: object) -> bool:
        return artist_id in self._ids

    @property
    def saved_ids(self) -> tuple[str, ...]:
        return tuple(self._ids)

    @property
    def is_full(self) -> bool:
        return len(self._ids) >= MAX_SLOTS

    @property
    def capacity(self) -> int:
        return MAX_SLOTS

    def slots(self) -> list[str | None]:
        """All slots in order, ``None`` for the empty ones."""
        return [*self._ids, *([None] * (MAX_SLOTS - len(self._ids)))]

    def toggle(self, artist_id: str) -> bool:
        """Remove ``artist_id`` if saved, otherwise add it if there is room.

        Returns:
            True if the inventory changed, False if it was full and
            ``artist_id`` could not be added.
        """
        if artist_id in self._ids:
            self._ids.remove(artist_id)
            return True
        if len(self._ids) >= MAX_SLOTS:
            return False
        self._ids.append(artist_id)
        return True
