from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping, Sequence
from datetime import timedelta

from blockplan.core.errors import InvalidConfigurationError
from blockplan.core.labels import METRIC_NAME, Labels, as_labels
from blockplan.core.timeutil import (
    BLOCK_ALIGN_MS,
    align_forward,
    duration_ms,
    format_timestamp,
)
from blockplan.core.types import (
    GAUGE,
    BlockMeta,
    BlockSpec,
    SeriesCharacteristics,
    SeriesSpec,
    TimeWindow,
)

from .context import PlanContext

logger = logging.getLogger(__name__)

Sink = Callable[[BlockSpec], object]
"""Receives each planned block exactly once; raising aborts the run."""

ExternalLabels = Labels | Mapping[str, str] | None

# Large gauges, as the default K8s-ish app metric shape.
DEFAULT_CHARACTERISTICS = SeriesCharacteristics(
    max=200_000_000,
    min=10_000_000,
    jitter=30_000_000,
    scrape_interval_s=15.0,
    change_interval_s=3600.0,
)


def _validate_ranges(ranges: Sequence[int | str | timedelta]) -> list[int]:
    out: list[int] = []
    for r in ranges:
        ms = duration_ms(r)
        if ms <= 0:
            raise InvalidConfigurationError(f"block width must be > 0, got {r!r}")
        out.append(ms)
    return out


def _validate_count(name: str, value: int) -> int:
    if value < 0:
        raise InvalidConfigurationError(f"{name} must be >= 0, got {value}")
    return int(value)


class Planner(ABC):
    """
    Turns an upper time bound into a newest-to-oldest stream of BlockSpecs.

    Minimal contract:
    - ranges: block widths, newest first (e.g. 2h, 2h, 8h, 48h ...)
    - plan(): calls sink once per block; stops at the first sink error
      or cancellation and lets it propagate unchanged

    Planners keep no per-run state, so one instance can serve concurrent runs.
    Randomized parameters are the exception: concurrent runs of one seeded
    planner share its draws in the order the runs reach them.
    """

    kind: str = "base"

    def __init__(self, ranges: Sequence[int | str | timedelta], apps: int) -> None:
        self.ranges_ms = _validate_ranges(ranges)
        self.apps = _validate_count("apps", apps)

    @property
    def block_count(self) -> int:
        return len(self.ranges_ms)

    @property
    def total_range_ms(self) -> int:
        return sum(self.ranges_ms)

    @abstractmethod
    def plan(
        self,
        ctx: PlanContext,
        upper_time_bound_ms: int,
        external_labels: ExternalLabels,
        sink: Sink,
    ) -> int:
        """
        Plan all blocks and hand them to sink. Returns the number of blocks emitted.
        """
        ...

    @staticmethod
    def _new_block(mint: int, maxt: int, ext: Labels) -> BlockSpec:
        return BlockSpec(
            window=TimeWindow(mint, maxt),
            meta=BlockMeta(labels=ext.to_map()),
        )

    def _emit(self, sink: Sink, block: BlockSpec, index: int) -> None:
        logger.debug(
            "%s: block %d/%d [%s, %s] series=%d",
            self.kind,
            index + 1,
            self.block_count,
            format_timestamp(block.min_time),
            format_timestamp(block.max_time),
            block.series_count,
        )
        sink(block)

    def _log_done(self, emitted: int, started_at: int) -> None:
        logger.info(
            "%s: planned %d blocks ending at %s", self.kind, emitted, format_timestamp(started_at)
        )


class UniformPlanner(Planner):
    """
    One full-block series per metric name, identical for every block.
    """

    def _metric_names(self) -> Sequence[str]:
        raise NotImplementedError

    def _characteristics(self) -> SeriesCharacteristics:
        """
        Characteristics for one run; resolved once per plan() call.
        """
        return DEFAULT_CHARACTERISTICS

    def plan(
        self,
        ctx: PlanContext,
        upper_time_bound_ms: int,
        external_labels: ExternalLabels,
        sink: Sink,
    ) -> int:
        ext = as_labels(external_labels)
        names = list(self._metric_names())
        common = self._characteristics()

        maxt = align_forward(upper_time_bound_ms, BLOCK_ALIGN_MS)
        newest = maxt
        emitted = 0
        for i, r in enumerate(self.ranges_ms):
            mint = maxt - r + 1
            ctx.check()

            b = self._new_block(mint, maxt, ext)
            for name in names:
                b.series.append(
                    SeriesSpec(
                        window=b.window,
                        targets=self.apps,
                        labels=Labels.of((METRIC_NAME, name)),
                        characteristics=common,
                        type=GAUGE,
                    )
                )

            self._emit(sink, b, i)
            emitted += 1
            maxt = mint - 1

        self._log_done(emitted, newest)
        return emitted
