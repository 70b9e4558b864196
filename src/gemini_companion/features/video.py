"""Video strategy: niche analysis, market research and production blueprints.

Results are kept on the session because later steps build on earlier ones:
the blueprint names the researched niche from the analysis or the market
research, falling back to the raw query.
"""

from __future__ import annotations

import logging

from gemini_companion.context import CompanionContext
from gemini_companion.core.requests import BlueprintRequest
from gemini_companion.core.shapes import MarketResearchData, NicheAnalysis, VideoBlueprint
from gemini_companion.core.types import Failure, Result, Success
from gemini_companion.exceptions import CompanionError, SchemaMismatchError
from gemini_companion.prompts import templates

from .base import FeatureSession, require_text

logger = logging.getLogger(__name__)


def suggested_topic(analysis: NicheAnalysis | None, fallback: str) -> str:
    """First popular sub-topic of ``analysis``, else ``fallback``."""
    if analysis is not None:
        for topic in analysis.popular_sub_topics:
            if topic.strip():
                return topic.strip()
    return fallback


class VideoStrategist(FeatureSession):
    def __init__(self, context: CompanionContext) -> None:
        super().__init__(context)
        self.query = ""
        self.niche_analysis: NicheAnalysis | None = None
        self.market_research: MarketResearchData | None = None
        self.blueprint: VideoBlueprint | None = None

    def _reset(self, query: str) -> None:
        if query != self.query:
            self.niche_analysis = None
            self.market_research = None
            self.blueprint = None
        self.query = query

    @property
    def researched_niche(self) -> str:
        if self.niche_analysis is not None and self.niche_analysis.niche_summary:
            return self.niche_analysis.niche_summary
        if self.market_research is not None:
            return self.market_research.analyzed_niche
        return self.query

    def analyze_niche(self, query: str) -> Result[NicheAnalysis, CompanionError]:
        checked = require_text(query, "Enter a niche to analyse")
        if isinstance(checked, Failure):
            return checked
        self.query = checked.value
        self.niche_analysis = self.market_research = self.blueprint = None
        with self.tele("video.analyze_niche"):
            outcome = self._generate_structured(
                templates.niche_analysis_prompt(checked.value), NicheAnalysis, web_search=True
            )
        if isinstance(outcome, Success):
            self.niche_analysis = outcome.value
        return outcome

    def research_market(self, query: str) -> Result[MarketResearchData, CompanionError]:
        checked = require_text(query, "Enter a niche to research")
        if isinstance(checked, Failure):
            return checked
        self._reset(checked.value)
        self.market_research = None
        with self.tele("video.research_market"):
            outcome = self._generate_structured(
                templates.market_research_prompt(checked.value),
                MarketResearchData,
                web_search=True,
            )
        if isinstance(outcome, Success) and not outcome.value.analyzed_niche.strip():
            return Failure(
                SchemaMismatchError("MarketResearchData", invalid_fields=("analyzedNiche",))
            )
        if isinstance(outcome, Success):
            self.market_research = outcome.value
        return outcome

    def suggested_topic(self) -> str:
        return suggested_topic(self.niche_analysis, self.query)

    def build_blueprint(self, request: BlueprintRequest) -> Result[VideoBlueprint, CompanionError]:
        """Generate a production blueprint for ``request``.

        The niche, video type and tone on the result always reflect the
        request rather than whatever the model echoed back.
        """
        checked = require_text(request.topic, "Enter a video topic")
        if isinstance(checked, Failure):
            return checked
        niche = self.researched_niche or checked.value
        with self.tele("video.build_blueprint", video_type=request.video_type):
            outcome = self._generate_structured(
                templates.blueprint_prompt(request, niche), VideoBlueprint
            )
        if isinstance(outcome, Failure):
            return outcome
        blueprint = outcome.value.model_copy(
            update={
                "generated_for_niche": niche,
                "video_type": request.video_type,
                "video_tone": request.tone,
            }
        )
        self.blueprint = blueprint
        return Success(blueprint)
