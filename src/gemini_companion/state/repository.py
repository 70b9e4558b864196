"""Library repository: the single owner of the persisted collection.

Hydrates once from the store, then serializes every operation behind one
lock and writes the full collection back after each mutation.
"""

from __future__ import annotations

from collections.abc import Callable
import logging
import threading
import time

from gemini_companion.constants import DEFAULT_PAGE_WINDOW, LIBRARY_STORAGE_KEY
from gemini_companion.core.shapes import BookSearchResult
from gemini_companion.core.types import Failure, Result, Success
from gemini_companion.exceptions import EntryNotFoundError

from . import library
from .library import LibraryCollection, LibraryEntry
from .store import PersistentStore

logger = logging.getLogger(__name__)

type Clock = Callable[[], float]
type Mutation = Callable[
    [LibraryCollection], Result[LibraryCollection, EntryNotFoundError]
]


class LibraryRepository:
    def __init__(
        self,
        store: PersistentStore,
        storage_key: str = LIBRARY_STORAGE_KEY,
        *,
        window: int = DEFAULT_PAGE_WINDOW,
        clock: Clock = time.time,
    ) -> None:
        self._store = store
        self._storage_key = storage_key
        self.window = window
        self._clock = clock
        self._lock = threading.Lock()
        self._collection = self._hydrate()

    def _hydrate(self) -> LibraryCollection:
        raw = self._store.load(self._storage_key)
        if raw is None:
            return LibraryCollection()
        decoded = library.collection_from_json(raw, self.window)
        if isinstance(decoded, Failure):
            logger.warning(
                "Discarding corrupt library data under %r: %s",
                self._storage_key,
                decoded.error.message,
            )
            empty = LibraryCollection()
            self._store.save(self._storage_key, library.collection_to_json(empty))
            return empty
        logger.debug("Loaded %d saved books", len(decoded.value))
        return decoded.value

    def _persist(self) -> None:
        self._store.save(self._storage_key, library.collection_to_json(self._collection))

    def _mutate(self, mutation: Mutation) -> Result[LibraryCollection, EntryNotFoundError]:
        with self._lock:
            outcome = mutation(self._collection)
            if isinstance(outcome, Success):
                self._collection = outcome.value
                self._persist()
            return outcome

    def _apply(
        self, change: Callable[[LibraryCollection], LibraryCollection]
    ) -> LibraryCollection:
        with self._lock:
            self._collection = change(self._collection)
            self._persist()
            return self._collection

    # --- Reads ---

    @property
    def collection(self) -> LibraryCollection:
        with self._lock:
            return self._collection

    def get(self, key: str) -> LibraryEntry | None:
        with self._lock:
            return self._collection.get(key)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    # --- Mutations ---

    def save_book(self, book: BookSearchResult) -> LibraryCollection:
        """Add ``book`` to the library, or refresh its access time if present."""
        now = self._clock()
        candidate = LibraryEntry(book=book, last_accessed=now)
        return self._apply(lambda c: library.upsert_entry(c, candidate, now))

    def mark_read(self, key: str) -> Result[LibraryCollection, EntryNotFoundError]:
        now = self._clock()
        return self._mutate(lambda c: library.mark_read(c, key, now))

    def attach_excerpt(
        self, key: str, excerpt: str
    ) -> Result[LibraryCollection, EntryNotFoundError]:
        return self._mutate(
            lambda c: library.attach_excerpt(c, key, excerpt, self.window)
        )

    def move_cursor(
        self, key: str, cursor: int
    ) -> Result[LibraryCollection, EntryNotFoundError]:
        now = self._clock()
        return self._mutate(lambda c: library.move_cursor(c, key, cursor, now))

    def remove(self, key: str) -> LibraryCollection:
        return self._apply(lambda c: library.remove_entry(c, key))
