"""Resolved, immutable configuration passed to every component."""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class FrozenConfig:
    """Immutable configuration built once at process start.

    Components receive this object explicitly; there is no module-level
    client or configuration singleton.
    """

    api_key: str | None
    model: str
    safety_threshold: str
    page_window: int
    library_path: Path | None
    storage_key: str
    diagnostic_excerpt_chars: int
    user_excerpt_chars: int

    def __str__(self) -> str:
        """String representation with redacted API key for safe logging."""
        api_key_display = "[REDACTED]" if self.api_key else None
        return (
            f"FrozenConfig(api_key={api_key_display!r}, model={self.model!r}, "
            f"safety_threshold={self.safety_threshold!r}, "
            f"page_window={self.page_window!r}, library_path={self.library_path!r}, "
            f"storage_key={self.storage_key!r})"
        )

    def __repr__(self) -> str:
        return self.__str__()
