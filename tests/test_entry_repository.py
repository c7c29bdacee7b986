"""Tests for ingestion/entry_repository.py"""

import threading

import pytest

from core.diary.types import DiaryEntry, EntryRepository
from ingestion.entry_repository import InMemoryEntryRepository


def _entry(entry_id: str, text: str = "note", day: str = "2024-03-05") -> DiaryEntry:
    return DiaryEntry(id=entry_id, text=text, images=(), style="floral", date=day)


@pytest.fixture()
def repo() -> InMemoryEntryRepository:
    return InMemoryEntryRepository()


class TestAppend:
    def test_append_and_list(self, repo: InMemoryEntryRepository) -> None:
        repo.append(_entry("1"))
        repo.append(_entry("2"))
        assert [e.id for e in repo.list_all()] == ["1", "2"]
        assert len(repo) == 2

    def test_duplicate_id_raises(self, repo: InMemoryEntryRepository) -> None:
        repo.append(_entry("1"))
        with pytest.raises(ValueError, match="already exists"):
            repo.append(_entry("1", text="other"))
        assert len(repo) == 1

    def test_initial_entries(self) -> None:
        repo = InMemoryEntryRepository([_entry("a"), _entry("b")])
        assert [e.id for e in repo.list_all()] == ["a", "b"]


class TestReplace:
    def test_replace_keeps_position(self, repo: InMemoryEntryRepository) -> None:
        for entry_id in ("1", "2", "3"):
            repo.append(_entry(entry_id))
        assert repo.replace(_entry("2", text="edited")) is True
        entries = repo.list_all()
        assert [e.id for e in entries] == ["1", "2", "3"]
        assert entries[1].text == "edited"

    def test_replace_unknown_returns_false(self, repo: InMemoryEntryRepository) -> None:
        repo.append(_entry("1"))
        assert repo.replace(_entry("missing")) is False
        assert [e.id for e in repo.list_all()] == ["1"]


class TestReads:
    def test_get(self, repo: InMemoryEntryRepository) -> None:
        entry = _entry("1")
        repo.append(entry)
        assert repo.get("1") == entry
        assert repo.get("2") is None

    def test_contains(self, repo: InMemoryEntryRepository) -> None:
        repo.append(_entry("1"))
        assert repo.contains("1") is True
        assert repo.contains("2") is False

    def test_list_all_is_a_copy(self, repo: InMemoryEntryRepository) -> None:
        repo.append(_entry("1"))
        repo.list_all().clear()
        assert len(repo) == 1

    def test_satisfies_protocol(self, repo: InMemoryEntryRepository) -> None:
        assert isinstance(repo, EntryRepository)


class TestConcurrency:
    def test_concurrent_appends(self, repo: InMemoryEntryRepository) -> None:
        def worker(start: int) -> None:
            for i in range(start, start + 50):
                repo.append(_entry(str(i)))

        threads = [threading.Thread(target=worker, args=(n * 50,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(repo) == 200
        assert len({e.id for e in repo.list_all()}) == 200


class TestDiaryEntry:
    def test_blank_id_rejected(self) -> None:
        with pytest.raises(ValueError, match="id must not be empty"):
            _entry("  ")

    def test_unknown_style_rejected(self) -> None:
        with pytest.raises(ValueError, match="style must be one of"):
            DiaryEntry(id="1", text="", images=(), style="pastel", date="2024-03-05")  # type: ignore[arg-type]

    def test_primary_image(self) -> None:
        entry = DiaryEntry(id="1", text="", images=("a", "b"), style="ink", date="2024-03-05")
        assert entry.image == "a"
        assert _entry("2").image is None
