"""
Shared fixtures for the test suite.

Centralizes reusable test infrastructure so individual test files
don't need to repeat override/fake boilerplate.
"""

from __future__ import annotations

from datetime import date

import pytest
from fastapi.testclient import TestClient

from api.deps import DiarySession, create_session, get_session
from api.main import app
from core.diary.composer import NoteComposer

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

ORIGINAL_IMAGE = "data:image/jpeg;base64,T1JJR0lOQUw="
"""A small, valid data URI standing in for an uploaded photo."""

PROCESSED_IMAGE = "data:image/png;base64,UFJPQ0VTU0VE"
"""What the fake transport returns on success."""

FROZEN_DAY = date(2024, 3, 5)


# ---------------------------------------------------------------------------
# Fake background-removal transport
# ---------------------------------------------------------------------------


class FakeTransport:
    """Deterministic transport, no network calls.

    Returns ``result`` or raises ``error``; records every image it was given.
    """

    def __init__(self, result: str = PROCESSED_IMAGE, error: Exception | None = None) -> None:
        self.result = result
        self.error = error
        self.calls: list[str] = []

    async def remove(self, image: str) -> str:
        self.calls.append(image)
        if self.error is not None:
            raise self.error
        return self.result


def frozen_composer(day: date = FROZEN_DAY) -> NoteComposer:
    counter = iter(range(1_700_000_000_000, 1_800_000_000_000))
    return NoteComposer(clock=lambda: day, id_factory=lambda: str(next(counter)))


# ---------------------------------------------------------------------------
# Session + API client fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def fake_transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture()
def session(fake_transport: FakeTransport) -> DiarySession:
    """Fresh diary session on a fixed date with a fake transport."""
    return create_session(fake_transport, composer=frozen_composer())


@pytest.fixture()
def api_client(session: DiarySession):
    """FastAPI ``TestClient`` bound to the ``session`` fixture."""
    app.dependency_overrides[get_session] = lambda: session
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
