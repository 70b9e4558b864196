"""User inputs for the multi-field requests."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from .types import _require

ActivityLevel = Literal["sedentary", "light", "moderate", "active", "veryActive"]


@dataclass(frozen=True)
class PlanRequest:
    """Inputs for a personalised diet and fitness plan."""

    age: int = 30
    current_weight_kg: float = 70
    target_weight_kg: float = 65
    height_cm: float = 170
    gender: str = "male"
    activity_level: ActivityLevel = "moderate"
    goal_months: int = 3
    desired_physique: str = ""
    disliked_foods: str = ""
    dietary_restrictions: str = ""
    disliked_exercises: str = ""

    def __post_init__(self) -> None:
        _require(condition=self.age > 0, message="must be positive", field_name="age")
        _require(
            condition=self.current_weight_kg > 0 and self.target_weight_kg > 0,
            message="weights must be positive",
            field_name="weight",
        )
        _require(
            condition=self.height_cm > 0, message="must be positive", field_name="height_cm"
        )
        _require(
            condition=self.goal_months >= 1, message="must be >= 1", field_name="goal_months"
        )


@dataclass(frozen=True)
class BlueprintRequest:
    """Inputs for a video production blueprint."""

    topic: str
    video_type: Literal["reels", "long"] = "long"
    tone: str = "Informative and entertaining"
    specific_focus: str = ""

    def __post_init__(self) -> None:
        _require(
            condition=self.video_type in ("reels", "long"),
            message="must be 'reels' or 'long'",
            field_name="video_type",
        )
