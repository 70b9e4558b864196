"""Per-item in-flight markers.

Keys are structured values (``NestedListSlot``, tuples) rather than strings
built by concatenation, so two different items can never share a marker.
"""

from __future__ import annotations

from collections.abc import Hashable, Iterator
from contextlib import contextmanager
import threading

from gemini_companion.exceptions import RequestInFlightError


class InFlightTracker:
    """Tracks which items currently have an outstanding request."""

    def __init__(self) -> None:
        self._active: set[Hashable] = set()
        self._lock = threading.Lock()

    def begin(self, key: Hashable) -> bool:
        """Mark ``key`` active. Returns False if it already was."""
        with self._lock:
            if key in self._active:
                return False
            self._active.add(key)
            return True

    def end(self, key: Hashable) -> None:
        with self._lock:
            self._active.discard(key)

    def is_active(self, key: Hashable) -> bool:
        with self._lock:
            return key in self._active

    def active(self) -> frozenset[Hashable]:
        with self._lock:
            return frozenset(self._active)

    @contextmanager
    def track(self, key: Hashable) -> Iterator[None]:
        """Hold the marker for ``key`` for the duration of the block.

        Raises:
            RequestInFlightError: another request for ``key`` is outstanding.
        """
        if not self.begin(key):
            raise RequestInFlightError(f"A request for {key} is already in progress")
        try:
            yield
        finally:
            self.end(key)
