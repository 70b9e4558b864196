"""Book search, reader library and paged reading.

Excerpts are generated once per book and cached on the library entry;
reopening a book re-paginates the cached text. Page translations live only
on the open reader's ``PagedText`` and are discarded when the book is
closed.
"""

from __future__ import annotations

from collections.abc import Callable
import logging
import time

from gemini_companion.context import CompanionContext
from gemini_companion.core.shapes import BookSearchResult
from gemini_companion.core.types import Failure, Result, Success
from gemini_companion.exceptions import (
    CompanionError,
    EmptyPayloadError,
    EntryNotFoundError,
    InvalidRequestError,
)
from gemini_companion.prompts import templates
from gemini_companion.state.library import LibraryCollection, LibraryEntry
from gemini_companion.state.paging import PagedText, paginate
from gemini_companion.state.repository import LibraryRepository
from gemini_companion.state.translation import language_label, translate_in_place

from .base import FeatureSession, require_text

logger = logging.getLogger(__name__)


class BookReaderSession(FeatureSession):
    def __init__(
        self,
        context: CompanionContext,
        *,
        repository: LibraryRepository | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        super().__init__(context)
        self.library = repository or LibraryRepository(
            context.store,
            context.config.storage_key,
            window=context.config.page_window,
            clock=clock,
        )
        self.search_results: list[BookSearchResult] = []
        self.current_key: str | None = None
        self.pages: PagedText | None = None

    # --- Search and library ---

    def search(self, query: str) -> Result[list[BookSearchResult], CompanionError]:
        checked = require_text(query, "Enter a book title or author to search for")
        if isinstance(checked, Failure):
            return checked
        self.close()
        with self.tele("books.search"):
            outcome = self._generate_structured(
                templates.book_search_prompt(checked.value),
                list[BookSearchResult],
                web_search=True,
            )
        self.search_results = outcome.value if isinstance(outcome, Success) else []
        return outcome

    def save(self, book: BookSearchResult) -> LibraryCollection:
        return self.library.save_book(book)

    def remove(self, key: str) -> LibraryCollection:
        if key == self.current_key:
            self.close()
        return self.library.remove(key)

    # --- Reader ---

    @property
    def current_entry(self) -> LibraryEntry | None:
        if self.current_key is None:
            return None
        return self.library.get(self.current_key)

    @property
    def current_page(self) -> str | None:
        entry = self.current_entry
        if entry is None or self.pages is None:
            return None
        return self.pages[min(entry.cursor, len(self.pages) - 1)]

    def close(self) -> None:
        self.current_key = None
        self.pages = None

    def open(self, key: str) -> Result[PagedText, CompanionError]:
        """Open a saved book, generating its excerpt on first use."""
        touched = self.library.mark_read(key)
        if isinstance(touched, Failure):
            return touched
        self.current_key = key
        self.pages = None
        entry = self.library.get(key)
        if entry is None:
            # removed by another caller since mark_read
            self.close()
            return Failure(EntryNotFoundError(f"No saved book with id {key!r}"))

        if entry.has_excerpt:
            self.pages = entry.pages(self.library.window)
            return Success(self.pages)

        with self.tele("books.open.generate_excerpt"):
            generated = self._generate(
                templates.book_excerpt_prompt(entry.book.title, entry.book.author)
            )
        if isinstance(generated, Failure):
            return generated

        excerpt = (generated.value.text or "").strip()
        if not excerpt:
            self.pages = paginate("", self.library.window)
            return Failure(
                EmptyPayloadError(f"No readable passage could be generated for {entry.book.title!r}")
            )

        attached = self.library.attach_excerpt(key, excerpt)
        if isinstance(attached, Failure):
            return attached
        self.pages = paginate(excerpt, self.library.window)
        return Success(self.pages)

    def go_to_page(self, page: int) -> Result[LibraryEntry, CompanionError]:
        """Move the cursor; out-of-range requests saturate at the ends."""
        if self.current_key is None:
            return Failure(InvalidRequestError("No book is open"))
        moved = self.library.move_cursor(self.current_key, page)
        if isinstance(moved, Failure):
            return moved
        entry = moved.value.get(self.current_key)
        if entry is None:
            return Failure(EntryNotFoundError(f"No saved book with id {self.current_key!r}"))
        return Success(entry)

    def next_page(self) -> Result[LibraryEntry, CompanionError]:
        entry = self.current_entry
        if entry is None:
            return Failure(InvalidRequestError("No book is open"))
        return self.go_to_page(entry.cursor + 1)

    def previous_page(self) -> Result[LibraryEntry, CompanionError]:
        entry = self.current_entry
        if entry is None:
            return Failure(InvalidRequestError("No book is open"))
        return self.go_to_page(entry.cursor - 1)

    def translate_current_page(self, language_code: str) -> Result[PagedText, CompanionError]:
        """Translate the page under the cursor.

        A page already marked as translated into the same language is
        returned unchanged without a service call.
        """
        entry = self.current_entry
        if entry is None or self.pages is None or self.pages.is_placeholder:
            return Failure(InvalidRequestError("Open a book with content before translating"))
        label = language_label(language_code)

        def translate(text: str) -> Result[str, CompanionError]:
            with self.tele("books.translate"):
                generated = self._generate(templates.translation_prompt(text, label))
            if isinstance(generated, Failure):
                return generated
            translated = (generated.value.text or "").strip()
            if not translated:
                return Failure(EmptyPayloadError("The translation came back empty"))
            return Success(translated)

        outcome = translate_in_place(self.pages, entry.cursor, label, translate)
        if isinstance(outcome, Success):
            self.pages = outcome.value
        return outcome
