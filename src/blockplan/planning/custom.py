from __future__ import annotations

import logging
import random
import threading
from collections.abc import Sequence
from datetime import timedelta

from blockplan.core.config import GaugeConfig
from blockplan.core.errors import InvalidConfigurationError
from blockplan.core.types import SeriesCharacteristics

from .base import UniformPlanner

logger = logging.getLogger(__name__)

JITTER_MIN = 1
JITTER_MAX = 10


class CustomMetricPlanner(UniformPlanner):
    """
    Continuous planner over an explicit list of metric names (e.g. recording
    rule outputs), with small gauges that change every 5 minutes.

    Jitter is drawn once per plan() call from `rng`, so every series of a run
    shares it. Pass a seeded random.Random for reproducible output: the n-th
    plan() call gets the seed's n-th draw. Runs sharing one instance (or one
    rng) concurrently each take their own draw from that sequence, but which
    run gets which draw follows scheduling. Give each run its own planner when
    that matters.
    """

    kind = "custom"

    def __init__(
        self,
        ranges: Sequence[int | str | timedelta],
        apps: int,
        metrics: Sequence[str],
        gauge: GaugeConfig | None = None,
        rng: random.Random | None = None,
    ) -> None:
        super().__init__(ranges, apps)
        names = [str(m) for m in metrics]
        if any(not m for m in names):
            raise InvalidConfigurationError("custom metric names must be non-empty")
        self.metrics = names
        self.gauge = gauge or GaugeConfig.from_env()
        self.rng = rng or random.Random()
        self._rng_lock = threading.Lock()

    def _metric_names(self) -> Sequence[str]:
        return self.metrics

    def _characteristics(self) -> SeriesCharacteristics:
        with self._rng_lock:
            jitter = self.rng.randint(JITTER_MIN, JITTER_MAX)
        logger.debug(
            "custom: min=%s max=%s jitter=%d", self.gauge.min, self.gauge.max, jitter
        )
        return SeriesCharacteristics(
            max=self.gauge.max,
            min=self.gauge.min,
            jitter=float(jitter),
            scrape_interval_s=15.0,
            change_interval_s=300.0,
        )
