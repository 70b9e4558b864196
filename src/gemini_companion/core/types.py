"""Core data types shared by the extractor and the reconciler.

Results are expressed as ``Success``/``Failure`` values so that every
extraction or reconciliation outcome is part of the data flow instead of
an exception crossing the library boundary.
"""

from __future__ import annotations

import dataclasses
from enum import Enum
import typing

# --- Guard helpers ---


def _require(
    *,
    condition: bool,
    message: str,
    exc: type[Exception] = ValueError,
    field_name: str | None = None,
) -> None:
    """Centralized validation with optional field context for clearer errors."""
    if not condition:
        if field_name:
            raise exc(f"{field_name}: {message}")
        raise exc(message)


# --- Result type ---

TSuccess = typing.TypeVar("TSuccess")
TFailure = typing.TypeVar("TFailure", bound=Exception)


@dataclasses.dataclass(frozen=True, slots=True)
class Success[TSuccess]:
    """A successful outcome."""

    value: TSuccess


@dataclasses.dataclass(frozen=True, slots=True)
class Failure[TFailure]:
    """A failed outcome, carrying the error."""

    error: TFailure

    @property
    def reason(self) -> str:
        return getattr(self.error, "reason", type(self.error).__name__)


Result = Success[TSuccess] | Failure[TFailure]


# --- Addressing ---


class PlanSection(str, Enum):
    """Two-level collections inside a generated plan."""

    DIET = "diet"  # meal category -> meals
    EXERCISE = "exercise"  # day label -> activities


@dataclasses.dataclass(frozen=True, slots=True)
class NestedListSlot:
    """Address of one element inside a two-level nested list.

    Hashable, so it doubles as the key for in-flight request tracking.
    """

    section: PlanSection
    key: str
    index: int

    def __post_init__(self) -> None:
        _require(
            condition=isinstance(self.section, PlanSection),
            message="must be a PlanSection",
            field_name="section",
            exc=TypeError,
        )
        _require(
            condition=isinstance(self.key, str),
            message="must be str",
            field_name="key",
            exc=TypeError,
        )
        _require(
            condition=isinstance(self.index, int) and not isinstance(self.index, bool),
            message="must be int",
            field_name="index",
            exc=TypeError,
        )

    @classmethod
    def meal(cls, category: str, index: int) -> NestedListSlot:
        return cls(PlanSection.DIET, category, index)

    @classmethod
    def exercise(cls, day: str, index: int) -> NestedListSlot:
        return cls(PlanSection.EXERCISE, day, index)

    def __str__(self) -> str:
        return f"{self.section.value}[{self.key!r}][{self.index}]"
