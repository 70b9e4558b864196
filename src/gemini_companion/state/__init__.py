"""Session state reconciliation: plans, pagination, translation and the library"""

from .inflight import InFlightTracker
from .library import (
    LibraryCollection,
    LibraryEntry,
    attach_excerpt,
    collection_from_json,
    collection_to_json,
    mark_read,
    move_cursor,
    remove_entry,
    set_cursor,
    upsert_entry,
)
from .paging import PagedText, clamp_cursor, page_count_for, paginate
from .plan import item_at_slot, replace_at_slot
from .repository import LibraryRepository
from .store import JSONFileStore, MemoryStore, PersistentStore
from .translation import (
    TARGET_LANGUAGES,
    apply_translation,
    has_translation_marker,
    language_label,
    original_text,
    translate_in_place,
    translation_marker,
)

__all__ = [
    "TARGET_LANGUAGES",
    "InFlightTracker",
    "JSONFileStore",
    "LibraryCollection",
    "LibraryEntry",
    "LibraryRepository",
    "MemoryStore",
    "PagedText",
    "PersistentStore",
    "apply_translation",
    "attach_excerpt",
    "clamp_cursor",
    "collection_from_json",
    "collection_to_json",
    "has_translation_marker",
    "item_at_slot",
    "language_label",
    "mark_read",
    "move_cursor",
    "original_text",
    "page_count_for",
    "paginate",
    "remove_entry",
    "replace_at_slot",
    "set_cursor",
    "translate_in_place",
    "translation_marker",
    "upsert_entry",
]
