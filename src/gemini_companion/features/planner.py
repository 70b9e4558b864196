"""Diet and fitness planner.

Holds the current plan as an immutable snapshot. Replacing a meal or an
exercise with a generated alternative produces a new snapshot; previous
snapshots are kept in ``history``.
"""

from __future__ import annotations

import logging

from gemini_companion.context import CompanionContext
from gemini_companion.core.requests import PlanRequest
from gemini_companion.core.shapes import Exercise, GeneratedPlan, Meal, Recipe
from gemini_companion.core.types import Failure, NestedListSlot, PlanSection, Result, Success
from gemini_companion.exceptions import (
    CompanionError,
    InvalidRequestError,
    RequestInFlightError,
)
from gemini_companion.prompts import templates
from gemini_companion.state.inflight import InFlightTracker
from gemini_companion.state.plan import item_at_slot, replace_at_slot

from .base import FeatureSession

logger = logging.getLogger(__name__)


class PlannerSession(FeatureSession):
    def __init__(
        self,
        context: CompanionContext,
        *,
        in_flight: InFlightTracker | None = None,
    ) -> None:
        super().__init__(context)
        self.plan: GeneratedPlan | None = None
        self.history: list[GeneratedPlan] = []
        self.in_flight = in_flight or InFlightTracker()

    def generate_plan(self, request: PlanRequest) -> Result[GeneratedPlan, CompanionError]:
        """Generate a new plan and make it current."""
        with self.tele("planner.generate_plan"):
            outcome = self._generate_structured(templates.plan_prompt(request), GeneratedPlan)
        if isinstance(outcome, Success):
            if self.plan is not None:
                self.history.append(self.plan)
            self.plan = outcome.value
        return outcome

    def get_recipe(self, meal: Meal) -> Result[Recipe, CompanionError]:
        key = ("recipe", meal.name)
        try:
            with self.in_flight.track(key), self.tele("planner.get_recipe"):
                return self._generate_structured(
                    templates.recipe_prompt(meal.name, meal.description), Recipe
                )
        except RequestInFlightError as e:
            return Failure(e)

    def generate_alternative(
        self, slot: NestedListSlot
    ) -> Result[GeneratedPlan, CompanionError]:
        """Replace the item at ``slot`` with a generated alternative.

        Only one request per slot may be outstanding; a second concurrent
        request for the same slot fails with ``RequestInFlightError``.
        """
        if self.plan is None:
            return Failure(InvalidRequestError("No plan has been generated yet"))
        current = item_at_slot(self.plan, slot)
        if isinstance(current, Failure):
            return current

        try:
            with self.in_flight.track(slot), self.tele("planner.generate_alternative"):
                alternative = self._request_alternative(slot, current.value)
        except RequestInFlightError as e:
            return Failure(e)
        if isinstance(alternative, Failure):
            return alternative

        if alternative.value.model_dump() == current.value.model_dump():
            logger.debug("Alternative for %s is identical to the original", slot)

        replaced = replace_at_slot(self.plan, slot, alternative.value)
        if isinstance(replaced, Success):
            self.history.append(self.plan)
            self.plan = replaced.value
        return replaced

    def _request_alternative(
        self, slot: NestedListSlot, original: Meal | Exercise
    ) -> Result[Meal | Exercise, CompanionError]:
        if slot.section is PlanSection.EXERCISE:
            prompt = templates.exercise_alternative_prompt(original.name, slot.key)
            return self._generate_structured(prompt, Exercise)
        prompt = templates.meal_alternative_prompt(original.name, slot.key)
        return self._generate_structured(prompt, Meal)
