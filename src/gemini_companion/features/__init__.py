"""Application flows built on the generation service and the state layer"""

from .books import BookReaderSession
from .planner import PlannerSession
from .research import PriceAnalysis, ResearchDesk
from .video import VideoStrategist, suggested_topic

__all__ = [
    "BookReaderSession",
    "PlannerSession",
    "PriceAnalysis",
    "ResearchDesk",
    "VideoStrategist",
    "suggested_topic",
]
