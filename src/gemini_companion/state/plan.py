"""Replace one element of a generated plan by slot address.

Plans are treated as snapshots: every replacement returns a deep copy and
leaves the caller's plan untouched, so earlier snapshots can be kept as
history.
"""

from __future__ import annotations

import logging

from gemini_companion.core.shapes import Exercise, GeneratedPlan, Meal
from gemini_companion.core.types import (
    Failure,
    NestedListSlot,
    PlanSection,
    Result,
    Success,
)
from gemini_companion.exceptions import IndexOutOfRangeError, SlotNotFoundError

logger = logging.getLogger(__name__)

type PlanItem = Meal | Exercise
type SlotError = SlotNotFoundError | IndexOutOfRangeError


def _locate(plan: GeneratedPlan, slot: NestedListSlot) -> list | None:
    if slot.section is PlanSection.DIET:
        return plan.diet_plan.category(slot.key)
    for day in plan.exercise_plan:
        if day.day == slot.key:
            return day.activities
    return None


def _resolve(
    plan: GeneratedPlan, slot: NestedListSlot
) -> Result[list, SlotError]:
    items = _locate(plan, slot)
    if items is None:
        return Failure(SlotNotFoundError(f"No {slot.section.value} group named {slot.key!r}"))
    if not 0 <= slot.index < len(items):
        return Failure(
            IndexOutOfRangeError(
                f"Index {slot.index} is outside {slot.key!r} (size {len(items)})"
            )
        )
    return Success(items)


def item_at_slot(plan: GeneratedPlan, slot: NestedListSlot) -> Result[PlanItem, SlotError]:
    """Return the element currently stored at ``slot``."""
    resolved = _resolve(plan, slot)
    if isinstance(resolved, Failure):
        return resolved
    return Success(resolved.value[slot.index])


def replace_at_slot(
    plan: GeneratedPlan, slot: NestedListSlot, item: PlanItem
) -> Result[GeneratedPlan, SlotError]:
    """Return a copy of ``plan`` with the element at ``slot`` replaced.

    Every other category, day and index in the returned plan is equal to
    the original. Raises ``TypeError`` if ``item`` does not belong in the
    slot's section (a meal into the exercise plan or vice versa).
    """
    expected = Meal if slot.section is PlanSection.DIET else Exercise
    if not isinstance(item, expected):
        raise TypeError(
            f"{slot.section.value} slots hold {expected.__name__}, got {type(item).__name__}"
        )

    updated = plan.model_copy(deep=True)
    resolved = _resolve(updated, slot)
    if isinstance(resolved, Failure):
        logger.info("Slot %s not replaced: %s", slot, resolved.error.message)
        return resolved
    resolved.value[slot.index] = item.model_copy(deep=True)
    return Success(updated)
