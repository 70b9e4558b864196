"""Fixed-width pagination of long text.

Pages are character windows: page ``i`` is ``text[i * window:(i + 1) * window]``.
"""

from __future__ import annotations

from dataclasses import dataclass
import math

from gemini_companion.constants import DEFAULT_PAGE_WINDOW, NO_CONTENT_MARKER


def _check_window(window: int) -> None:
    if window <= 0:
        raise ValueError(f"window must be positive, got {window}")


@dataclass(frozen=True)
class PagedText:
    """Pages derived from one source string"""

    pages: tuple[str, ...]
    window: int = DEFAULT_PAGE_WINDOW

    def __post_init__(self) -> None:
        _check_window(self.window)
        if not self.pages:
            raise ValueError("PagedText needs at least one page")

    def __len__(self) -> int:
        return len(self.pages)

    def __getitem__(self, index: int) -> str:
        return self.pages[index]

    @property
    def page_count(self) -> int:
        return len(self.pages)

    @property
    def is_placeholder(self) -> bool:
        return self.pages == (NO_CONTENT_MARKER,)

    def replace_page(self, index: int, text: str) -> PagedText:
        pages = list(self.pages)
        pages[index] = text
        return PagedText(tuple(pages), self.window)


def page_count_for(text: str, window: int = DEFAULT_PAGE_WINDOW) -> int:
    _check_window(window)
    return math.ceil(len(text) / window)


def paginate(text: str, window: int = DEFAULT_PAGE_WINDOW) -> PagedText:
    """Split ``text`` into pages of ``window`` characters.

    Empty text yields a single page holding ``NO_CONTENT_MARKER`` so callers
    always have something to render.
    """
    count = page_count_for(text, window)
    if count == 0:
        return PagedText((NO_CONTENT_MARKER,), window)
    return PagedText(
        tuple(text[i * window : (i + 1) * window] for i in range(count)), window
    )


def clamp_cursor(requested: int, page_count: int) -> int:
    """Saturate ``requested`` into ``[0, page_count - 1]``."""
    upper = max(page_count - 1, 0)
    return min(max(requested, 0), upper)
