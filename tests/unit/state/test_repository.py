import json
import threading

import pytest

from gemini_companion.constants import LIBRARY_STORAGE_KEY
from gemini_companion.core.shapes import BookSearchResult
from gemini_companion.core.types import Failure, Success
from gemini_companion.exceptions import RequestInFlightError
from gemini_companion.state.inflight import InFlightTracker
from gemini_companion.state.repository import LibraryRepository
from gemini_companion.state.store import JSONFileStore, MemoryStore, PersistentStore

pytestmark = pytest.mark.unit


def book(book_id):
    return BookSearchResult(id=book_id, title=f"Title {book_id}", author="Someone")


class TestStores:
    def test_memory_store(self):
        store = MemoryStore({"k": "v"})
        assert isinstance(store, PersistentStore)
        assert store.load("k") == "v"
        assert store.load("missing") is None
        store.save("k", "w")
        assert store.data == {"k": "w"}
        assert store.save_count == 1

    def test_json_file_store_round_trip(self, tmp_path):
        path = tmp_path / "nested" / "library.json"
        store = JSONFileStore(path)
        assert store.load("savedBooks") is None

        store.save("savedBooks", "[]")
        store.save("other", "x")

        reopened = JSONFileStore(path)
        assert reopened.load("savedBooks") == "[]"
        assert reopened.load("other") == "x"
        assert not path.with_suffix(".json.tmp").exists()

    def test_json_file_store_ignores_corrupt_file(self, tmp_path, caplog):
        path = tmp_path / "library.json"
        path.write_text("{broken", encoding="utf-8")
        store = JSONFileStore(path)

        with caplog.at_level("WARNING"):
            assert store.load("savedBooks") is None
        assert "unreadable" in caplog.text

    def test_json_file_store_ignores_non_string_values(self, tmp_path):
        path = tmp_path / "library.json"
        path.write_text(json.dumps({"savedBooks": [1, 2]}), encoding="utf-8")
        assert JSONFileStore(path).load("savedBooks") is None


class TestRepository:
    @pytest.fixture
    def repo(self, memory_store, fake_clock):
        return LibraryRepository(memory_store, clock=fake_clock, window=10)

    def test_starts_empty_without_stored_data(self, repo, memory_store):
        assert len(repo.collection) == 0
        assert memory_store.save_count == 0

    def test_every_mutation_is_persisted(self, repo, memory_store):
        repo.save_book(book("1"))
        repo.save_book(book("2"))
        assert memory_store.save_count == 2

        stored = json.loads(memory_store.data[LIBRARY_STORAGE_KEY])
        assert [r["id"] for r in stored] == ["2", "1"]

    def test_failed_mutation_is_not_persisted(self, repo, memory_store):
        repo.save_book(book("1"))
        outcome = repo.mark_read("nope")
        assert isinstance(outcome, Failure)
        assert memory_store.save_count == 1

    def test_hydrates_from_store(self, memory_store, fake_clock):
        first = LibraryRepository(memory_store, clock=fake_clock)
        first.save_book(book("1"))
        first.attach_excerpt("1", "hello world")

        second = LibraryRepository(memory_store, clock=fake_clock)

        assert "1" in second
        assert second.get("1").excerpt == "hello world"

    def test_corrupt_data_is_replaced_with_empty_list(self, caplog):
        store = MemoryStore({LIBRARY_STORAGE_KEY: "not json"})

        with caplog.at_level("WARNING"):
            repo = LibraryRepository(store)

        assert len(repo.collection) == 0
        assert store.data[LIBRARY_STORAGE_KEY] == "[]"
        assert "corrupt" in caplog.text

    def test_negative_stored_page_count_does_not_break_hydration(self):
        record = {
            "id": "b1",
            "title": "T",
            "author": "A",
            "generatedExcerpt": "abc",
            "totalPagesInExcerpt": -2,
        }
        store = MemoryStore({LIBRARY_STORAGE_KEY: json.dumps([record])})

        repo = LibraryRepository(store)

        entry = repo.get("b1")
        assert (entry.page_count, entry.cursor) == (1, 0)
        assert entry.has_excerpt

    def test_reopening_with_another_window_repaginates(self, memory_store, fake_clock):
        first = LibraryRepository(memory_store, clock=fake_clock, window=300)
        first.save_book(book("1"))
        first.attach_excerpt("1", "p" * 1500)
        first.move_cursor("1", 4)
        assert (first.get("1").page_count, first.get("1").cursor) == (5, 4)

        second = LibraryRepository(memory_store, clock=fake_clock, window=600)

        entry = second.get("1")
        assert entry.page_count == 3
        assert entry.cursor == 2
        assert len(entry.pages(second.window)) == entry.page_count
        second.move_cursor("1", 9)
        assert second.get("1").cursor == 2

    def test_mark_read_reorders(self, repo):
        repo.save_book(book("1"))
        repo.save_book(book("2"))
        outcome = repo.mark_read("1")
        assert isinstance(outcome, Success)
        assert repo.collection.keys() == ["1", "2"]

    def test_cursor_uses_repository_window(self, repo):
        repo.save_book(book("1"))
        repo.attach_excerpt("1", "a" * 25)
        assert repo.get("1").page_count == 3

        repo.move_cursor("1", 7)
        assert repo.get("1").cursor == 2

    def test_remove(self, repo, memory_store):
        assert repo.save_book(book("1")).keys() == ["1"]
        assert len(repo.remove("1")) == 0
        assert "1" not in repo
        assert json.loads(memory_store.data[LIBRARY_STORAGE_KEY]) == []

    def test_file_backed_repository(self, tmp_path, fake_clock):
        store = JSONFileStore(tmp_path / "lib.json")
        LibraryRepository(store, clock=fake_clock).save_book(book("x"))
        assert LibraryRepository(JSONFileStore(tmp_path / "lib.json")).get("x") is not None

    def test_concurrent_saves_are_serialized(self, memory_store):
        repo = LibraryRepository(memory_store)
        threads = [
            threading.Thread(target=repo.save_book, args=(book(str(i)),))
            for i in range(20)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(repo.collection) == 20
        assert memory_store.save_count == 20


class TestInFlightTracker:
    def test_begin_and_end(self):
        tracker = InFlightTracker()
        assert tracker.begin(("recipe", "Soup"))
        assert not tracker.begin(("recipe", "Soup"))
        assert tracker.is_active(("recipe", "Soup"))
        tracker.end(("recipe", "Soup"))
        assert tracker.active() == frozenset()

    def test_track_rejects_second_request_for_same_key(self):
        tracker = InFlightTracker()
        with tracker.track("a"):
            with pytest.raises(RequestInFlightError):
                with tracker.track("a"):
                    pass
            with tracker.track("b"):
                assert tracker.active() == {"a", "b"}
        assert tracker.active() == frozenset()

    def test_track_releases_on_error(self):
        tracker = InFlightTracker()
        with pytest.raises(RuntimeError):
            with tracker.track("a"):
                raise RuntimeError("boom")
        assert not tracker.is_active("a")
