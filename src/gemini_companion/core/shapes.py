"""Structured shapes returned by the generation service.

The service answers in camelCase JSON; models accept either camelCase or
snake_case keys, ignore unknown keys, and dump back to camelCase so stored
and displayed data keeps the wire naming.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

Level = Literal["high", "medium", "low", "unknown"]
VideoType = Literal["reels", "long"]
Number = int | float

MEAL_CATEGORIES = ("breakfast", "lunch", "dinner", "snacks")


class Shape(BaseModel):
    """Base model for every generated shape."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_json_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


def _stringify(v: Any) -> Any:
    if isinstance(v, bool):
        return v
    if isinstance(v, int | float):
        return str(v)
    return v


# --- Planner ---


class Meal(Shape):
    name: str
    description: str | None = None
    calories: Number | str | None = None


class DailyDiet(Shape):
    breakfast: list[Meal]
    lunch: list[Meal]
    dinner: list[Meal]
    snacks: list[Meal] | None = None

    def category(self, key: str) -> list[Meal] | None:
        if key not in MEAL_CATEGORIES:
            return None
        return getattr(self, key)


class Exercise(Shape):
    name: str
    duration: str
    sets_reps: str | None = None
    notes: str | None = None

    @field_validator("duration", "sets_reps", mode="before")
    @classmethod
    def _text(cls, v: Any) -> Any:
        return _stringify(v)


class ExerciseDay(Shape):
    day: str
    activities: list[Exercise]


class DetoxSuggestion(Shape):
    name: str
    description: str
    preparation: str | None = None


class GeneratedPlan(Shape):
    plan_id: str
    diet_plan: DailyDiet
    exercise_plan: list[ExerciseDay]
    detox_suggestions: list[DetoxSuggestion] = Field(default_factory=list)
    motivation_quote: str = ""
    timeframe_assessment: str = ""
    estimated_total_daily_calories: Number | str | None = None

    @field_validator("plan_id", mode="before")
    @classmethod
    def _plan_id_text(cls, v: Any) -> Any:
        return _stringify(v)


class Recipe(Shape):
    name: str
    ingredients: list[str]
    steps: list[str]
    cooking_time: str | None = None
    servings: str | None = None

    @field_validator("cooking_time", "servings", mode="before")
    @classmethod
    def _text(cls, v: Any) -> Any:
        return _stringify(v)


# --- Books ---


class BookSearchResult(Shape):
    id: str
    title: str
    author: str
    description: str | None = None
    cover_image_url: str | None = None
    free_source_url: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _id_text(cls, v: Any) -> Any:
        return _stringify(v)


# --- Video strategy ---


class NicheAnalysis(Shape):
    niche_summary: str
    popular_sub_topics: list[str] = Field(default_factory=list)
    target_audience_insights: str = ""
    content_opportunities: list[str] = Field(default_factory=list)
    keywords: list[str] = Field(default_factory=list)


class HighlyViewedVideo(Shape):
    title: str
    platform: str | None = None
    views: str | None = None
    link: str | None = None
    notes: str | None = None

    @field_validator("views", mode="before")
    @classmethod
    def _views_text(cls, v: Any) -> Any:
        return _stringify(v)


class PlatformDistribution(Shape):
    platform_name: str
    content_volume: Level = "unknown"
    audience_engagement: Level = "unknown"
    notes: str | None = None

    @field_validator("content_volume", "audience_engagement", mode="before")
    @classmethod
    def _normalize_level(cls, v: Any) -> str:
        if isinstance(v, str) and v.strip().lower() in ("high", "medium", "low"):
            return v.strip().lower()
        return "unknown"


class MarketResearchData(Shape):
    analyzed_niche: str
    highly_viewed_videos: list[HighlyViewedVideo] = Field(default_factory=list)
    platform_analysis: list[PlatformDistribution] = Field(default_factory=list)
    general_observations: str | None = None
    data_sources_used: list[str] | None = None


class BrollSuggestionLink(Shape):
    site_name: str
    url: str


class BrollSuggestion(Shape):
    description: str
    search_links: list[BrollSuggestionLink] = Field(default_factory=list)


class StoryboardScene(Shape):
    scene_number: int
    duration_seconds: str | None = None
    visual_description: str
    on_screen_text: str | None = None
    voiceover_script: str | None = None
    sound_suggestion: str | None = None
    broll_suggestions: list[BrollSuggestion] | None = None

    @field_validator("duration_seconds", mode="before")
    @classmethod
    def _duration_text(cls, v: Any) -> Any:
        return _stringify(v)


class ScriptSegment(Shape):
    segment_title: str
    duration_minutes: str | None = None
    visual_ideas: str
    voiceover_script: str
    broll_suggestions: list[BrollSuggestion] | None = None

    @field_validator("duration_minutes", mode="before")
    @classmethod
    def _duration_text(cls, v: Any) -> Any:
        return _stringify(v)


class ThumbnailConcept(Shape):
    concept_number: int
    description: str
    suggested_elements: list[str] | str

    @property
    def elements(self) -> list[str]:
        if isinstance(self.suggested_elements, str):
            return [self.suggested_elements]
        return list(self.suggested_elements)


class ScenePrompt(Shape):
    scene_number: int | None = None
    scene_description: str
    prompt_suggestion: str


class AIToolSuggestions(Shape):
    thumbnail_prompts: list[str] | None = None
    voiceover_notes: str | None = None
    visual_prompts_for_scenes: list[ScenePrompt] | None = None


class VideoBlueprint(Shape):
    generated_for_niche: str = ""
    video_type: VideoType = "long"
    video_tone: str | None = None
    title_suggestions: list[str]
    description_draft: str
    tags_keywords: list[str] = Field(default_factory=list)
    storyboard: list[StoryboardScene] | None = None
    script_segments: list[ScriptSegment] | None = None
    full_voiceover_script: str | None = None
    full_subtitle_script: str | None = None
    thumbnail_concepts: list[ThumbnailConcept] = Field(default_factory=list)
    soundtrack_suggestion: str | None = None
    potential_interaction_assessment: str = ""
    ai_tool_suggestions: AIToolSuggestions | None = None

    @field_validator("video_type", mode="before")
    @classmethod
    def _video_type(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower()
        return v
