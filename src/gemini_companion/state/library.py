"""Reader library: saved books ordered by most recent access.

All operations are pure and return a new ``LibraryCollection``. Identity is
first-write-wins: saving a book whose id is already present leaves its
stored content alone and only refreshes the access time.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field, replace
import json
import logging

from gemini_companion.constants import DEFAULT_PAGE_WINDOW
from gemini_companion.core.shapes import BookSearchResult
from gemini_companion.core.types import Failure, Result, Success, _require
from gemini_companion.exceptions import (
    EntryNotFoundError,
    JsonParseError,
    SchemaMismatchError,
)
from gemini_companion.response.validation import validate_shape

from .paging import PagedText, clamp_cursor, page_count_for, paginate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LibraryEntry:
    """One saved book and its reading state.

    ``cursor`` always satisfies ``0 <= cursor < page_count`` when
    ``page_count > 0`` and is 0 otherwise.
    """

    book: BookSearchResult
    last_accessed: float
    excerpt: str | None = None
    page_count: int = 0
    cursor: int = 0

    def __post_init__(self) -> None:
        _require(
            condition=self.page_count >= 0,
            message="must be >= 0",
            field_name="page_count",
        )
        _require(
            condition=self.cursor == clamp_cursor(self.cursor, self.page_count),
            message=f"{self.cursor} outside [0, {max(self.page_count - 1, 0)}]",
            field_name="cursor",
        )

    @property
    def key(self) -> str:
        return self.book.id

    @property
    def has_excerpt(self) -> bool:
        return bool(self.excerpt) and self.page_count > 0

    def pages(self, window: int = DEFAULT_PAGE_WINDOW) -> PagedText:
        return paginate(self.excerpt or "", window)


def set_cursor(entry: LibraryEntry, cursor: int) -> LibraryEntry:
    """Move the cursor, saturating at the first and last page."""
    return replace(entry, cursor=clamp_cursor(cursor, entry.page_count))


@dataclass(frozen=True)
class LibraryCollection:
    """Entries unique by key, sorted by ``last_accessed`` descending"""

    entries: tuple[LibraryEntry, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        keys = [e.key for e in self.entries]
        _require(
            condition=len(keys) == len(set(keys)),
            message="duplicate keys",
            field_name="entries",
        )

    def __iter__(self) -> Iterator[LibraryEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, key: object) -> bool:
        return any(e.key == key for e in self.entries)

    def get(self, key: str) -> LibraryEntry | None:
        return next((e for e in self.entries if e.key == key), None)

    def keys(self) -> list[str]:
        return [e.key for e in self.entries]


def _sorted(entries: list[LibraryEntry] | tuple[LibraryEntry, ...]) -> LibraryCollection:
    # sorted() is stable, ties keep their previous relative order
    return LibraryCollection(
        tuple(sorted(entries, key=lambda e: e.last_accessed, reverse=True))
    )


def _update(
    collection: LibraryCollection, key: str, updated: LibraryEntry
) -> LibraryCollection:
    return _sorted([updated if e.key == key else e for e in collection.entries])


def _not_found(key: str) -> Failure[EntryNotFoundError]:
    return Failure(EntryNotFoundError(f"No saved book with id {key!r}"))


def upsert_entry(
    collection: LibraryCollection, candidate: LibraryEntry, now: float
) -> LibraryCollection:
    """Insert ``candidate`` or, if its key exists, only touch the stored entry."""
    existing = collection.get(candidate.key)
    if existing is not None:
        logger.debug("Book %r already saved, refreshing access time", candidate.key)
        return _update(collection, existing.key, replace(existing, last_accessed=now))
    return _sorted([*collection.entries, replace(candidate, last_accessed=now)])


def mark_read(
    collection: LibraryCollection, key: str, now: float
) -> Result[LibraryCollection, EntryNotFoundError]:
    entry = collection.get(key)
    if entry is None:
        return _not_found(key)
    return Success(_update(collection, key, replace(entry, last_accessed=now)))


def attach_excerpt(
    collection: LibraryCollection,
    key: str,
    excerpt: str,
    window: int = DEFAULT_PAGE_WINDOW,
) -> Result[LibraryCollection, EntryNotFoundError]:
    """Store generated excerpt text and its page count on an entry."""
    entry = collection.get(key)
    if entry is None:
        return _not_found(key)
    excerpt = excerpt.strip()
    pages = page_count_for(excerpt, window)
    updated = replace(
        entry,
        excerpt=excerpt or None,
        page_count=pages,
        cursor=clamp_cursor(entry.cursor, pages),
    )
    return Success(_update(collection, key, updated))


def move_cursor(
    collection: LibraryCollection, key: str, cursor: int, now: float
) -> Result[LibraryCollection, EntryNotFoundError]:
    """Clamp and store a new cursor; counts as an access."""
    entry = collection.get(key)
    if entry is None:
        return _not_found(key)
    updated = replace(set_cursor(entry, cursor), last_accessed=now)
    return Success(_update(collection, key, updated))


def remove_entry(collection: LibraryCollection, key: str) -> LibraryCollection:
    return LibraryCollection(tuple(e for e in collection.entries if e.key != key))


# --- Storage format ---


class StoredBook(BookSearchResult):
    """Persisted record layout, camelCase on disk."""

    generated_excerpt: str | None = None
    total_pages_in_excerpt: int | None = None
    current_page_in_excerpt: int = 0
    last_read_timestamp: float = 0


def _to_record(entry: LibraryEntry) -> dict:
    record = StoredBook(
        **entry.book.model_dump(),
        generated_excerpt=entry.excerpt,
        total_pages_in_excerpt=entry.page_count or None,
        current_page_in_excerpt=entry.cursor,
        # milliseconds since the epoch
        last_read_timestamp=int(entry.last_accessed * 1000),
    )
    return record.to_json_dict()


def _from_record(record: StoredBook, window: int) -> LibraryEntry:
    book = BookSearchResult.model_validate(
        record.model_dump(include=set(BookSearchResult.model_fields))
    )
    excerpt = record.generated_excerpt or None
    # the stored page count is only a hint; pages follow the current window
    pages = page_count_for(excerpt, window) if excerpt else 0
    if record.total_pages_in_excerpt not in (None, pages):
        logger.debug(
            "Book %r stored %s pages, repaginated to %d at window %d",
            record.id,
            record.total_pages_in_excerpt,
            pages,
            window,
        )
    return LibraryEntry(
        book=book,
        last_accessed=record.last_read_timestamp / 1000,
        excerpt=excerpt,
        page_count=pages,
        cursor=clamp_cursor(record.current_page_in_excerpt, pages),
    )


def collection_to_json(collection: LibraryCollection) -> str:
    return json.dumps([_to_record(e) for e in collection], ensure_ascii=False)


def collection_from_json(
    raw: str, window: int = DEFAULT_PAGE_WINDOW
) -> Result[LibraryCollection, JsonParseError | SchemaMismatchError]:
    """Decode a stored collection.

    Duplicate ids keep the first record seen. Page counts are recomputed
    from each excerpt at ``window`` and cursors are clamped to them. Callers
    decide what to do with a failure; the repository replaces corrupt data
    with an empty list.
    """
    try:
        data = json.loads(raw)
    except (TypeError, json.JSONDecodeError) as e:
        return Failure(JsonParseError(f"Stored library is not valid JSON ({e})"))

    validated = validate_shape(data, list[StoredBook])
    if isinstance(validated, Failure):
        return validated

    entries: dict[str, LibraryEntry] = {}
    for record in validated.value:
        entries.setdefault(record.id, _from_record(record, window))
    return Success(_sorted(list(entries.values())))
