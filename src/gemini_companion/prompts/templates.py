"""Prompt builders, one per request kind.

JSON prompts spell out the camelCase keys the shapes in
``gemini_companion.core.shapes`` expect.
"""

from __future__ import annotations

from textwrap import dedent

from gemini_companion.constants import EXCERPT_TARGET_WORDS
from gemini_companion.core.requests import BlueprintRequest, PlanRequest

MEAL_LABELS = {
    "breakfast": "breakfast",
    "lunch": "lunch",
    "dinner": "dinner",
    "snacks": "snack",
}

_MEDICAL_DISCLAIMER = (
    "IMPORTANT: This analysis is general information generated by an AI model and "
    "is not a substitute for personalised medical advice. Always consult a qualified "
    "health professional before making decisions about your health."
)


def _or_none(value: str) -> str:
    return value.strip() or "None"


# --- Planner ---


def plan_prompt(request: PlanRequest) -> str:
    return dedent(
        f"""\
        Create a detailed diet and fitness plan for a person with these details:
        Age: {request.age}
        Weight: {request.current_weight_kg} kg
        Target weight: {request.target_weight_kg} kg
        Height: {request.height_cm} cm
        Gender: {request.gender}
        Activity level: {request.activity_level}
        Goal timeframe: {request.goal_months} months
        Disliked foods: {_or_none(request.disliked_foods)}
        Dietary preferences / restrictions: {_or_none(request.dietary_restrictions)}
        Disliked exercises: {_or_none(request.disliked_exercises)}
        Desired physique and details: {_or_none(request.desired_physique)}

        The plan must contain:
        1. "planId": a random UUID or a meaningful identifier string.
        2. "dietPlan": an object with "breakfast", "lunch", "dinner" and "snacks"
           arrays; each meal has "name", "description" and approximate "calories".
        3. "exercisePlan": an array with one entry per weekday, each with "day" and
           "activities" (each activity has "name", "duration", "setsReps", "notes").
        4. "detoxSuggestions": 2-3 healthy drinks with "name", "description" and
           "preparation".
        5. "motivationQuote": a motivating quote.
        6. "timeframeAssessment": a short assessment of the goal timeframe.
        7. "estimatedTotalDailyCalories": the approximate total daily calories.
        Respond with JSON only."""
    )


def recipe_prompt(meal_name: str, description: str | None = None) -> str:
    return (
        f'Give a simple, healthy recipe for "{meal_name}" '
        f"({description or 'no details'}). Respond with JSON containing "
        '"name", "ingredients" (string array), "steps" (string array), '
        '"cookingTime" and "servings".'
    )


def meal_alternative_prompt(meal_name: str, category: str) -> str:
    label = MEAL_LABELS.get(category, category)
    return (
        f'Suggest an alternative to the meal "{meal_name}" ({label}) in the diet plan. '
        'Respond with JSON containing "name", "description" and "calories".'
    )


def exercise_alternative_prompt(exercise_name: str, day: str) -> str:
    return (
        f'Suggest an alternative to the exercise "{exercise_name}" scheduled for '
        f'"{day}" in the fitness plan. Respond with JSON containing "name", '
        '"duration", "setsReps" and "notes".'
    )


# --- Research ---


def health_check_prompt(plan_id: str, conditions: str) -> str:
    """Markdown health review for a plan id and/or stated health conditions."""
    parts = [
        "PLEASE NOTE: this analysis is not medical advice and is for general "
        "information only. Answer in clear Markdown with headings and lists.",
        "",
        "Acting as a health advisor, analyse the following:",
    ]
    if plan_id:
        parts.append(
            f"\n## General assessment for diet plan ID: {plan_id}\n"
            "You do not know the specific contents of this plan, so state that you "
            "are working from general assumptions. Cover likely positives and "
            "negatives such as energy levels, variety and sustainability."
        )
    if conditions:
        parts.append(
            f'\n## General advice for existing conditions: "{conditions}"\n'
            "Give general nutrition and lifestyle advice, highlighting what to watch "
            "for and which food groups to prefer or avoid."
        )
    if plan_id and conditions:
        parts.append(
            "\n## Plan and condition synthesis\n"
            "Combine the two sections above into a balanced summary of risks and "
            "benefits for this person."
        )
    parts.append(f"\n---\n**{_MEDICAL_DISCLAIMER}**")
    return "\n".join(parts)


def price_analysis_prompt(product: str, region: str) -> str:
    return dedent(
        f"""\
        Produce a detailed price analysis of "{product}" in "{region}". Include:
        1. The general market price range, per model or tier where relevant.
        2. Where the best deals are usually found.
        3. The main factors affecting the price (supply and demand, brand,
           features, seasonality, regional taxes or customs).
        4. Using Google Search, a summary of news, trends and market changes for
           this product in "{region}" over the last 1-3 months.
        Write clearly and list the sources you used, if any."""
    )


# --- Books ---


def book_search_prompt(query: str) -> str:
    return (
        f'Find books related to "{query}". Respond with a JSON array. Each book has '
        '"id" (unique string such as an ISBN or a random UUID), "title", "author", '
        '"description" (short summary), "coverImageUrl" (empty string if unknown) '
        'and "freeSourceUrl" (a legal free reading URL, empty string if none). '
        "Return between 3 and 7 results and use Google Search to enrich them."
    )


def book_excerpt_prompt(title: str, author: str, target_words: int = EXCERPT_TARGET_WORDS) -> str:
    return (
        f'Give a meaningful passage of roughly {target_words} words from the start of '
        f'"{title}" ({author}). Return only the plain text of the book, with no '
        "commentary or headings."
    )


def translation_prompt(text: str, language: str) -> str:
    return f"Translate the following text into {language}. Return only the translation:\n\n{text}"


# --- Video strategy ---


def niche_analysis_prompt(query: str) -> str:
    return dedent(
        f"""\
        Research the YouTube niche "{query}" using Google Search for current trends,
        popular sub-topics and audience insights. Respond with JSON containing:
        1. "nicheSummary": a summary of the niche and its potential (string).
        2. "popularSubTopics": 3-5 popular sub-topics (string array).
        3. "targetAudienceInsights": demographics, interests and search intent (string).
        4. "contentOpportunities": 2-3 content opportunities or angles (string array).
        5. "keywords": important SEO keywords (string array)."""
    )


def market_research_prompt(query: str) -> str:
    return dedent(
        f"""\
        Carry out detailed YouTube market research for the niche "{query}" using
        Google Search. Respond with JSON containing:
        1. "analyzedNiche": the analysed niche (string).
        2. "highlyViewedVideos": 3-5 of the most viewed videos on YouTube, TikTok and
           similar platforms, each with "title", "platform", "views", "link", "notes".
        3. "platformAnalysis": one entry per platform (YouTube, TikTok, Instagram
           Reels) with "platformName", "contentVolume" and "audienceEngagement"
           (each one of 'high', 'medium', 'low', 'unknown') and "notes".
        4. "generalObservations": competition, saturation and trends (string).
        5. "dataSourcesUsed": keywords or queries you used (string array).
        Focus on the last 6-12 months and make sure links are valid."""
    )


def blueprint_prompt(request: BlueprintRequest, researched_niche: str) -> str:
    if request.video_type == "reels":
        type_description = "a short vertical video (Reels/Shorts, about 15-60 seconds)"
        sections = [
            '"storyboard": at least 5-7 scenes, each with "sceneNumber" (number), '
            '"durationSeconds", "visualDescription", "onScreenText", '
            '"voiceoverScript", "soundSuggestion" and "brollSuggestions" (each with '
            '"description" and "searchLinks" of {"siteName", "url"}).'
        ]
    else:
        type_description = "a long-form video (about 5-15 minutes)"
        sections = [
            '"scriptSegments": an intro, at least 2-3 main segments and an outro, '
            'each with "segmentTitle", "durationMinutes", "visualIdeas", '
            '"voiceoverScript" and "brollSuggestions" (each with "description" and '
            '"searchLinks" of {"siteName", "url"}).',
            '"fullVoiceoverScript": the complete voiceover text.',
            '"fullSubtitleScript": subtitles derived from the voiceover.',
        ]
    fields = [
        '"generatedForNiche": the niche (string).',
        f'"videoType": "{request.video_type}".',
        f'"videoTone": "{request.tone}".',
        '"titleSuggestions": 3-5 SEO friendly titles (string array).',
        '"descriptionDraft": a keyword rich description with a call to action.',
        '"tagsKeywords": tags and keywords (string array).',
        *sections,
        '"thumbnailConcepts": 2-3 concepts with "conceptNumber", "description" and '
        '"suggestedElements" (string array).',
        '"aiToolSuggestions": {"thumbnailPrompts": string array, "voiceoverNotes": '
        'string, "visualPromptsForScenes": [{"sceneNumber", "sceneDescription", '
        '"promptSuggestion"}]}.',
        '"soundtrackSuggestion": royalty-free music or sound effect ideas.',
        '"potentialInteractionAssessment": a qualitative engagement assessment.',
    ]
    numbered = "\n".join(f"{i}. {line}" for i, line in enumerate(fields, start=1))
    header = dedent(
        f"""\
        Create a YouTube video production plan from the following. Respond with JSON.
        - Topic: "{request.topic}"
        - Video type: {type_description}
        - Tone: "{request.tone}"
        - Extra focus: "{_or_none(request.specific_focus)}"
        - Researched niche: "{researched_niche}"

        The plan must contain:
        """
    )
    footer = dedent(
        """
        For b-roll use stock search URLs such as https://www.pexels.com/search/QUERY/
        and https://pixabay.com/videos/search/QUERY/ with QUERY URL-encoded.
        Make sure the JSON is strictly valid: double-quoted keys and strings, no
        trailing commas, escaped special characters."""
    )
    return header + numbered + "\n" + footer
