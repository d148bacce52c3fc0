"""Block planning strategies."""

from .base import Planner, Sink
from .context import PlanContext
from .continuous import ContinuousPlanner
from .custom import CustomMetricPlanner
from .realistic import RolloutPlanner

__all__ = [
    "ContinuousPlanner",
    "CustomMetricPlanner",
    "PlanContext",
    "Planner",
    "RolloutPlanner",
    "Sink",
]
