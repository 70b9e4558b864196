"""Per-page translation with a marker-based idempotence guard.

A translated page ends with a literal marker naming the target language.
Before translating, the page is searched for that marker; if present, the
translation step is skipped entirely.
"""

from __future__ import annotations

from collections.abc import Callable
import logging
from types import MappingProxyType

from gemini_companion.constants import (
    TRANSLATION_MARKER_PREFIX,
    TRANSLATION_MARKER_TEMPLATE,
)
from gemini_companion.core.types import Failure, Result, Success
from gemini_companion.exceptions import CompanionError, IndexOutOfRangeError

from .paging import PagedText

logger = logging.getLogger(__name__)

TARGET_LANGUAGES = MappingProxyType(
    {
        "tr": "Türkçe",
        "en": "English",
        "de": "Deutsch (German)",
        "fr": "Français (French)",
        "es": "Español (Spanish)",
        "it": "Italiano (Italian)",
        "pt": "Português (Portuguese)",
        "ru": "Русский (Russian)",
        "ja": "日本語 (Japanese)",
        "ko": "한국어 (Korean)",
        "zh": "中文 (Chinese)",
        "ar": "العربية (Arabic)",
    }
)

type Translator = Callable[[str], Result[str, CompanionError]]


def language_label(code: str) -> str:
    """Display label for a language code; unknown codes pass through."""
    return TARGET_LANGUAGES.get(code, code)


def translation_marker(language: str) -> str:
    return TRANSLATION_MARKER_TEMPLATE.format(language=language)


def has_translation_marker(text: str, language: str) -> bool:
    # Literal search, the marker text is the only record of a translation
    return translation_marker(language).strip() in text


def original_text(page: str) -> str:
    """Page text with any translation marker suffix removed."""
    return page.split(TRANSLATION_MARKER_PREFIX, 1)[0]


def _check_index(paged: PagedText, index: int) -> IndexOutOfRangeError | None:
    if 0 <= index < len(paged):
        return None
    return IndexOutOfRangeError(f"Page {index} does not exist ({len(paged)} pages)")


def apply_translation(
    paged: PagedText, index: int, translated_text: str, language: str
) -> Result[PagedText, IndexOutOfRangeError]:
    """Replace page ``index`` with ``translated_text`` plus the marker."""
    error = _check_index(paged, index)
    if error is not None:
        return Failure(error)
    return Success(
        paged.replace_page(index, translated_text.strip() + translation_marker(language))
    )


def translate_in_place(
    paged: PagedText, index: int, language: str, translate: Translator
) -> Result[PagedText, CompanionError]:
    """Translate one page unless it already carries the marker for ``language``.

    ``translate`` receives the page text without any earlier marker and is
    only invoked when the guard does not match.
    """
    error = _check_index(paged, index)
    if error is not None:
        return Failure(error)

    if has_translation_marker(paged[index], language):
        logger.debug("Page %d already translated to %s", index, language)
        return Success(paged)

    translated = translate(original_text(paged[index]))
    if isinstance(translated, Failure):
        return translated
    return apply_translation(paged, index, translated.value, language)
