import json

import pytest

from gemini_companion.core.requests import BlueprintRequest
from gemini_companion.core.shapes import NicheAnalysis
from gemini_companion.core.types import Failure, Success
from gemini_companion.features import VideoStrategist, suggested_topic

pytestmark = pytest.mark.integration

NICHE_REPLY = json.dumps(
    {
        "nicheSummary": "Urban balcony gardening",
        "popularSubTopics": ["  ", "Herbs in pots", "Vertical planters"],
        "targetAudienceInsights": "Renters aged 25-40",
        "contentOpportunities": ["Budget builds"],
        "keywords": ["balcony garden"],
    }
)

MARKET_REPLY = json.dumps(
    {
        "analyzedNiche": "Balcony gardening",
        "highlyViewedVideos": [{"title": "Tiny garden", "views": 1200000}],
        "platformAnalysis": [
            {"platformName": "TikTok", "contentVolume": "HIGH", "audienceEngagement": "Medium"}
        ],
    }
)

BLUEPRINT_REPLY = json.dumps(
    {
        "generatedForNiche": "something the model made up",
        "videoType": "long",
        "videoTone": "Serious",
        "titleSuggestions": ["Grow herbs anywhere"],
        "descriptionDraft": "Learn how...",
        "storyboard": [{"sceneNumber": 1, "durationSeconds": 5, "visualDescription": "Pan"}],
        "thumbnailConcepts": [
            {"conceptNumber": 1, "description": "Bold", "suggestedElements": ["Basil"]}
        ],
    }
)


@pytest.fixture
def strategist(companion_context):
    return VideoStrategist(companion_context)


class TestNicheAnalysis:
    def test_analysis_is_stored(self, strategist, scripted_service):
        scripted_service.queue(NICHE_REPLY)

        outcome = strategist.analyze_niche("balcony gardening")

        assert isinstance(outcome, Success)
        assert strategist.niche_analysis.keywords == ["balcony garden"]
        assert scripted_service.calls[0]["web_search"] is True
        assert strategist.suggested_topic() == "Herbs in pots"

    def test_new_analysis_clears_previous_results(self, strategist, scripted_service):
        scripted_service.queue(NICHE_REPLY, BLUEPRINT_REPLY, "not json")
        strategist.analyze_niche("balcony gardening")
        strategist.build_blueprint(BlueprintRequest(topic="Herbs"))
        assert strategist.blueprint is not None

        outcome = strategist.analyze_niche("vans")

        assert isinstance(outcome, Failure)
        assert strategist.niche_analysis is None
        assert strategist.blueprint is None
        assert strategist.suggested_topic() == "vans"

    def test_blank_query(self, strategist, scripted_service):
        assert strategist.analyze_niche("").reason == "invalid-request"
        assert scripted_service.calls == []


class TestMarketResearch:
    def test_levels_are_normalised(self, strategist, scripted_service):
        scripted_service.queue(MARKET_REPLY)

        outcome = strategist.research_market("balcony gardening")

        platform = outcome.value.platform_analysis[0]
        assert (platform.content_volume, platform.audience_engagement) == ("high", "medium")
        assert outcome.value.highly_viewed_videos[0].views == "1200000"

    def test_blank_analyzed_niche_is_rejected(self, strategist, scripted_service):
        scripted_service.queue('{"analyzedNiche": "  "}')
        outcome = strategist.research_market("balcony gardening")
        assert outcome.reason == "schema-mismatch"
        assert outcome.error.invalid_fields == ("analyzedNiche",)
        assert strategist.market_research is None

    def test_same_query_keeps_niche_analysis(self, strategist, scripted_service):
        scripted_service.queue(NICHE_REPLY, MARKET_REPLY)
        strategist.analyze_niche("balcony gardening")
        strategist.research_market("balcony gardening")
        assert strategist.niche_analysis is not None
        assert strategist.market_research is not None


class TestBlueprint:
    def test_request_fields_override_model_echo(self, strategist, scripted_service):
        scripted_service.queue(NICHE_REPLY, BLUEPRINT_REPLY)
        strategist.analyze_niche("balcony gardening")

        outcome = strategist.build_blueprint(
            BlueprintRequest(topic="Herbs", video_type="reels", tone="Calm")
        )

        blueprint = outcome.value
        assert blueprint.generated_for_niche == "Urban balcony gardening"
        assert blueprint.video_type == "reels"
        assert blueprint.video_tone == "Calm"
        assert blueprint.storyboard[0].duration_seconds == "5"
        assert blueprint.thumbnail_concepts[0].elements == ["Basil"]
        prompt = scripted_service.calls[1]["prompt"]
        assert '"storyboard"' in prompt
        assert "scriptSegments" not in prompt

    def test_niche_falls_back_to_market_research_then_topic(self, strategist, scripted_service):
        scripted_service.queue(BLUEPRINT_REPLY)
        first = strategist.build_blueprint(BlueprintRequest(topic="Herbs"))
        assert first.value.generated_for_niche == "Herbs"

        scripted_service.queue(MARKET_REPLY, BLUEPRINT_REPLY)
        strategist.research_market("balcony")
        second = strategist.build_blueprint(BlueprintRequest(topic="Herbs"))
        assert second.value.generated_for_niche == "Balcony gardening"

    def test_long_form_prompt_asks_for_full_scripts(self, strategist, scripted_service):
        scripted_service.queue(BLUEPRINT_REPLY)
        strategist.build_blueprint(BlueprintRequest(topic="Herbs", video_type="long"))
        prompt = scripted_service.calls[0]["prompt"]
        assert '"scriptSegments"' in prompt
        assert '"fullVoiceoverScript"' in prompt
        assert "13." in prompt

    def test_missing_titles_is_schema_mismatch(self, strategist, scripted_service):
        scripted_service.queue('{"descriptionDraft": "x"}')
        outcome = strategist.build_blueprint(BlueprintRequest(topic="Herbs"))
        assert outcome.reason == "schema-mismatch"
        assert strategist.blueprint is None

    def test_invalid_video_type(self):
        with pytest.raises(ValueError):
            BlueprintRequest(topic="x", video_type="short")  # type: ignore[arg-type]


class TestSuggestedTopic:
    def test_fallback_without_analysis(self):
        assert suggested_topic(None, "query") == "query"

    def test_fallback_without_sub_topics(self):
        analysis = NicheAnalysis(niche_summary="x")
        assert suggested_topic(analysis, "query") == "query"
