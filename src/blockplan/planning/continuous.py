from __future__ import annotations

from collections.abc import Sequence
from datetime import timedelta

from .base import UniformPlanner, _validate_count


class ContinuousPlanner(UniformPlanner):
    """
    Stable synthetic series with no churn: every block carries the same
    `continuous_app_metric<i>` series for its full window.
    """

    kind = "continuous"

    def __init__(
        self,
        ranges: Sequence[int | str | timedelta],
        apps: int,
        metrics_per_app: int,
    ) -> None:
        super().__init__(ranges, apps)
        self.metrics_per_app = _validate_count("metrics_per_app", metrics_per_app)

    def _metric_names(self) -> Sequence[str]:
        return [f"continuous_app_metric{i}" for i in range(self.metrics_per_app)]
