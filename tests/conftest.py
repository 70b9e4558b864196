"""
Global test configuration and shared fixtures.
"""

from collections.abc import Iterable
from contextlib import suppress
import copy
import json
import os

import pytest

from gemini_companion.client.generation import GenerationResponse
from gemini_companion.config import resolve_config
from gemini_companion.context import CompanionContext
from gemini_companion.core.shapes import GeneratedPlan
from gemini_companion.core.types import Failure, Success
from gemini_companion.exceptions import GenerationServiceError
from gemini_companion.state.store import MemoryStore

# --- Environment Isolation (Autouse) ---


@pytest.fixture(autouse=True)
def block_dotenv(request, monkeypatch):
    """Prevent python-dotenv from loading project .env files during tests.

    Mark a test with @pytest.mark.allow_dotenv to permit .env loading.
    """
    if request.node.get_closest_marker("allow_dotenv"):
        return
    with suppress(Exception):
        monkeypatch.setattr(
            "gemini_companion.config.load_dotenv",
            lambda *_args, **_kwargs: False,
        )


@pytest.fixture(autouse=True)
def isolate_gemini_env(request, monkeypatch):
    """Remove GEMINI_*, API_KEY and debug toggles before each test."""
    if request.node.get_closest_marker("allow_env_pollution") or (
        "api" in request.node.keywords
    ):
        return
    for key in list(os.environ.keys()):
        if key.startswith("GEMINI_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.delenv("API_KEY", raising=False)
    monkeypatch.delenv("DEBUG", raising=False)


def pytest_configure(config):
    """Configure custom markers for test organization."""
    markers = [
        "unit: Fast, isolated unit tests",
        "integration: Feature flows against a scripted generation service",
        "api: Real API tests (requires GEMINI_API_KEY and ENABLE_API_TESTS=1)",
        "allow_dotenv: Permit .env loading for this test",
        "allow_env_pollution: Keep the ambient environment",
    ]
    for marker in markers:
        config.addinivalue_line("markers", marker)


def pytest_collection_modifyitems(config, items):  # noqa: ARG001
    """Skip API tests unless explicitly enabled."""
    if not (os.getenv("GEMINI_API_KEY") and os.getenv("ENABLE_API_TESTS")):
        skip_api = pytest.mark.skip(
            reason="API tests require GEMINI_API_KEY and ENABLE_API_TESTS=1",
        )
        for item in items:
            if "api" in item.keywords:
                item.add_marker(skip_api)


# --- Test doubles ---


class ScriptedGenerationService:
    """Generation service that replays scripted replies in order.

    Each reply is a string (returned as response text), a
    ``GenerationResponse``, or an exception (returned as a failure).
    """

    def __init__(self, replies: Iterable[object] = ()):
        self.replies = list(replies)
        self.calls: list[dict[str, object]] = []

    def queue(self, *replies: object) -> None:
        self.replies.extend(replies)

    def generate(self, prompt, response_format="text", *, web_search=False):
        self.calls.append(
            {
                "prompt": prompt,
                "response_format": response_format,
                "web_search": web_search,
            }
        )
        if not self.replies:
            raise AssertionError(f"Unexpected generation call: {prompt[:80]!r}")
        reply = self.replies.pop(0)
        if isinstance(reply, GenerationServiceError):
            return Failure(reply)
        if isinstance(reply, Exception):
            return Failure(GenerationServiceError(str(reply)))
        if isinstance(reply, GenerationResponse):
            return Success(reply)
        return Success(GenerationResponse(text=reply))


class FakeClock:
    """Deterministic clock advancing one second per reading."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        self.now += 1.0
        return self.now


# --- Core Fixtures ---


@pytest.fixture
def mock_api_key():
    """Provide a consistent, fake API key for tests."""
    return "test_api_key_12345_67890_abcdef_ghijkl"


@pytest.fixture
def companion_config(mock_api_key):
    return resolve_config({"api_key": mock_api_key})


@pytest.fixture
def scripted_service():
    return ScriptedGenerationService()


@pytest.fixture
def memory_store():
    return MemoryStore()


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def companion_context(companion_config, scripted_service, memory_store):
    return CompanionContext.create(
        companion_config, service=scripted_service, store=memory_store
    )


# --- Sample data ---

PLAN_DATA = {
    "planId": "plan-42",
    "dietPlan": {
        "breakfast": [
            {"name": "Oatmeal", "description": "With berries", "calories": 350},
            {"name": "Greek yogurt", "calories": "200 kcal"},
        ],
        "lunch": [{"name": "Chicken salad", "calories": 450}],
        "dinner": [
            {"name": "Salmon", "description": "Baked", "calories": 500},
            {"name": "Quinoa", "calories": 220},
        ],
    },
    "exercisePlan": [
        {
            "day": "Monday",
            "activities": [
                {"name": "Squats", "duration": "15 min", "setsReps": "3x12"},
                {"name": "Plank", "duration": "5 min"},
            ],
        },
        {
            "day": "Tuesday",
            "activities": [{"name": "Cycling", "duration": "30 min"}],
        },
    ],
    "detoxSuggestions": [
        {"name": "Lemon water", "description": "Refreshing", "preparation": "Mix"}
    ],
    "motivationQuote": "Keep going.",
    "timeframeAssessment": "Realistic.",
    "estimatedTotalDailyCalories": 1800,
}


@pytest.fixture
def plan_data():
    return copy.deepcopy(PLAN_DATA)


@pytest.fixture
def plan_json(plan_data):
    return json.dumps(plan_data)


@pytest.fixture
def sample_plan(plan_data):
    return GeneratedPlan.model_validate(plan_data)
