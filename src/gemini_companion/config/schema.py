"""Configuration schema and validation using Pydantic.

Values come from programmatic overrides and ``GEMINI_COMPANION_*``
environment variables. The API key is read from ``GEMINI_API_KEY`` and,
for compatibility with older deployments, ``API_KEY``.
"""

from pathlib import Path
from typing import Any

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from gemini_companion.constants import (
    DEFAULT_MODEL,
    DEFAULT_PAGE_WINDOW,
    DEFAULT_SAFETY_THRESHOLD,
    DIAGNOSTIC_EXCERPT_CHARS,
    LIBRARY_STORAGE_KEY,
    USER_EXCERPT_CHARS,
)

_THRESHOLDS = (
    "BLOCK_NONE",
    "BLOCK_ONLY_HIGH",
    "BLOCK_MEDIUM_AND_ABOVE",
    "BLOCK_LOW_AND_ABOVE",
    "OFF",
)


class CompanionSettings(BaseSettings):
    """Pydantic settings schema for the companion."""

    model_config = SettingsConfigDict(
        env_prefix="GEMINI_COMPANION_",
        env_file=None,  # .env loading goes through resolve_config
        case_sensitive=False,
        extra="ignore",
    )

    api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("GEMINI_API_KEY", "API_KEY", "api_key"),
        description="Google Gemini API key",
    )

    model: str = Field(
        default=DEFAULT_MODEL,
        description="Gemini model identifier",
        min_length=1,
    )

    safety_threshold: str = Field(
        default=DEFAULT_SAFETY_THRESHOLD,
        description="Block threshold applied to every default safety category",
    )

    page_window: int = Field(
        default=DEFAULT_PAGE_WINDOW,
        description="Characters per reader page",
        ge=1,
    )

    library_path: Path | None = Field(
        default=None,
        description="JSON file backing the reader library; memory only when unset",
    )

    storage_key: str = Field(default=LIBRARY_STORAGE_KEY, min_length=1)

    diagnostic_excerpt_chars: int = Field(default=DIAGNOSTIC_EXCERPT_CHARS, ge=0)

    user_excerpt_chars: int = Field(default=USER_EXCERPT_CHARS, ge=0)

    @field_validator("api_key", mode="before")
    @classmethod
    def blank_key_is_missing(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("safety_threshold", mode="before")
    @classmethod
    def parse_threshold(cls, v: Any) -> str:
        normalized = str(v).strip().upper()
        if normalized not in _THRESHOLDS:
            raise ValueError(
                f"Invalid safety threshold: {v}. Must be one of: {', '.join(_THRESHOLDS)}"
            )
        return normalized
