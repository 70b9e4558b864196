from .types import Failure, NestedListSlot, PlanSection, Result, Success

__all__ = ["Failure", "NestedListSlot", "PlanSection", "Result", "Success"]
