"""
FastAPI dependency providers.

The core components all have plain constructors returning fresh state.
This module is the thin adapter that wires one long-lived ``DiarySession``
into the HTTP layer; tests override ``get_session`` with a fresh one.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from core.config import DEFAULT_QUOTA_CONFIG, DEFAULT_REMOVAL_CONFIG
from core.diary.background import BackgroundRemovalPipeline, BackgroundRemover, BackgroundTransport
from core.diary.composer import NoteComposer
from core.diary.draft import DraftNoteStore
from core.diary.slots import ArtistSlotInventory
from core.diary.themes import ThemePicker
from infrastructure.circuit_breaker import CircuitBreaker
from infrastructure.rate_limiter import RateLimiter
from ingestion.background_remover import RemoveBgApiTransport, create_background_transport
from ingestion.entry_repository import InMemoryEntryRepository


@dataclass
class DiarySession:
    """Everything one user's diary needs, owned together.

    Attributes:
        draft: The note being composed.
        inventory: Saved artists (stamp box).
        repository: Saved entries.
        themes: Prompt picker bound to ``draft``.
        composer: Commit orchestrator.
        pipeline: Background-removal state machine.
        notices: User-facing messages raised by the pipeline, newest last.
    """

    draft: DraftNoteStore
    inventory: ArtistSlotInventory
    repository: InMemoryEntryRepository
    themes: ThemePicker
    composer: NoteComposer
    pipeline: BackgroundRemovalPipeline
    notices: list[str] = field(default_factory=list)

    def pop_notices(self) -> list[str]:
        pending, self.notices = self.notices, []
        return pending


def create_session(
    transport: BackgroundTransport | None = None,
    *,
    composer: NoteComposer | None = None,
) -> DiarySession:
    """Build a fresh session.

    Args:
        transport: Background-removal transport. Defaults to the one chosen
            by ``create_background_transport`` with the shared breaker.
        composer: Commit orchestrator override (e.g. with a fixed clock).
    """
    draft = DraftNoteStore()
    notices: list[str] = []
    remover = BackgroundRemover(
        transport or create_background_transport(breaker=get_removal_breaker())
    )
    session = DiarySession(
        draft=draft,
        inventory=ArtistSlotInventory(),
        repository=InMemoryEntryRepository(),
        themes=ThemePicker(draft),
        composer=composer or NoteComposer(),
        pipeline=BackgroundRemovalPipeline(remover, notify=notices.append),
        notices=notices,
    )
    session.themes.suggest()
    return session


_session: DiarySession | None = None


def get_session() -> DiarySession:
    """Return the process-wide ``DiarySession`` singleton.

    Single user, single session: the diary lives for the lifetime of the
    server process.
    """
    global _session  # noqa: PLW0603
    if _session is None:
        _session = create_session()
    return _session


# ---------------------------------------------------------------------------
# Background-removal service dependencies
# ---------------------------------------------------------------------------

_removal_breaker: CircuitBreaker | None = None


def get_removal_breaker() -> CircuitBreaker:
    """Return the remove.bg circuit breaker singleton.

    Shared by the draft pipeline and the /remove-bg route so failure counts
    accumulate across both.
    """
    global _removal_breaker  # noqa: PLW0603
    if _removal_breaker is None:
        _removal_breaker = CircuitBreaker.from_config(DEFAULT_REMOVAL_CONFIG)
    return _removal_breaker


_remove_bg_transport: RemoveBgApiTransport | None = None


def get_remove_bg_transport() -> RemoveBgApiTransport:
    """Return the direct remove.bg transport used by the service route."""
    global _remove_bg_transport  # noqa: PLW0603
    if _remove_bg_transport is None:
        _remove_bg_transport = RemoveBgApiTransport(breaker=get_removal_breaker())
    return _remove_bg_transport


_rate_limiter: RateLimiter | None = None


def get_rate_limiter() -> RateLimiter:
    """Return the per-client remove.bg budget singleton."""
    global _rate_limiter  # noqa: PLW0603
    if _rate_limiter is None:
        _rate_limiter = RateLimiter(DEFAULT_QUOTA_CONFIG)
    return _rate_limiter
