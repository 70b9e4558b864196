"""Free-text research requests: price analysis and health review"""

from __future__ import annotations

from dataclasses import dataclass, field

from gemini_companion.client.generation import GroundingReference
from gemini_companion.core.types import Failure, Result, Success
from gemini_companion.exceptions import CompanionError, EmptyPayloadError, InvalidRequestError
from gemini_companion.prompts import templates

from .base import FeatureSession, require_text


@dataclass(frozen=True)
class PriceAnalysis:
    text: str
    sources: tuple[GroundingReference, ...] = field(default_factory=tuple)


class ResearchDesk(FeatureSession):
    def analyze_price(
        self, product: str, region: str = "Türkiye"
    ) -> Result[PriceAnalysis, CompanionError]:
        """Search-grounded price analysis; sources come from grounding metadata."""
        checked = require_text(product, "Enter a product or service to analyse")
        if isinstance(checked, Failure):
            return checked
        prompt = templates.price_analysis_prompt(checked.value, region.strip() or "Türkiye")
        with self.tele("research.analyze_price"):
            generated = self._generate(prompt, web_search=True)
        if isinstance(generated, Failure):
            return generated
        text = (generated.value.text or "").strip()
        if not text:
            return Failure(EmptyPayloadError("The price analysis came back empty"))
        return Success(PriceAnalysis(text, generated.value.grounding_references))

    def health_check(
        self, plan_id: str = "", conditions: str = ""
    ) -> Result[str, CompanionError]:
        """Markdown health review. At least one of the inputs is required."""
        plan_id, conditions = plan_id.strip(), conditions.strip()
        if not plan_id and not conditions:
            return Failure(
                InvalidRequestError("Enter a plan ID or health conditions to analyse")
            )
        with self.tele("research.health_check"):
            generated = self._generate(templates.health_check_prompt(plan_id, conditions))
        if isinstance(generated, Failure):
            return generated
        text = (generated.value.text or "").strip()
        if not text:
            return Failure(EmptyPayloadError("The health analysis came back empty"))
        return Success(text)
