from __future__ import annotations

from collections.abc import Sequence
from datetime import timedelta

from blockplan.core.errors import InvalidConfigurationError
from blockplan.core.labels import METRIC_NAME, Labels, as_labels
from blockplan.core.timeutil import BLOCK_ALIGN_MS, align_forward, duration_ms, format_timestamp
from blockplan.core.types import GAUGE, SeriesSpec, TimeWindow

from .base import DEFAULT_CHARACTERISTICS, ExternalLabels, Planner, Sink, _validate_count
from .context import PlanContext

ROLLOUT_LABEL = "next_rollout_time"


class RolloutPlanner(Planner):
    """
    Approximates a continuously deployed Kubernetes fleet.

    Every rollout_interval each app gets new pods, so each metric's series
    identity changes. A block therefore holds one series set per rollout
    tick overlapping it, each bounded to the part of the block the tick
    covers and tagged with `next_rollout_time`.

    With 100 apps x 50 metrics and 1h rollouts a 2h block has ~15k series,
    an 8h block ~45k.
    """

    kind = "realistic"

    def __init__(
        self,
        ranges: Sequence[int | str | timedelta],
        rollout_interval: int | str | timedelta,
        apps: int,
        metrics_per_app: int,
    ) -> None:
        super().__init__(ranges, apps)
        interval = duration_ms(rollout_interval)
        if interval <= 0:
            raise InvalidConfigurationError(
                f"rollout interval must be > 0, got {rollout_interval!r}"
            )
        self.rollout_interval_ms = interval
        self.metrics_per_app = _validate_count("metrics_per_app", metrics_per_app)

    def plan(
        self,
        ctx: PlanContext,
        upper_time_bound_ms: int,
        external_labels: ExternalLabels,
        sink: Sink,
    ) -> int:
        ext = as_labels(external_labels)
        interval = self.rollout_interval_ms

        maxt = align_forward(upper_time_bound_ms, BLOCK_ALIGN_MS)
        newest = maxt
        # Half an interval off so rollouts never coincide with block edges.
        last_rollout = maxt - interval // 2

        emitted = 0
        for i, r in enumerate(self.ranges_ms):
            mint = maxt - r + 1
            b = self._new_block(mint, maxt, ext)

            # A tick starting exactly at the newer block's min_time was already
            # emitted there.
            while last_rollout > maxt:
                last_rollout -= interval

            while True:
                ctx.check()

                smaxt = min(last_rollout + interval, maxt)
                smint = max(last_rollout, mint)
                window = TimeWindow(smint, smaxt)
                rollout = format_timestamp(last_rollout)

                for m in range(self.metrics_per_app):
                    b.series.append(
                        SeriesSpec(
                            window=window,
                            targets=self.apps,
                            labels=Labels.of(
                                (METRIC_NAME, f"k8s_app_metric{m}"),
                                (ROLLOUT_LABEL, rollout),
                            ),
                            characteristics=DEFAULT_CHARACTERISTICS,
                            type=GAUGE,
                        )
                    )

                if last_rollout <= mint:
                    break
                last_rollout -= interval

            self._emit(sink, b, i)
            emitted += 1
            maxt = mint - 1

        self._log_done(emitted, newest)
        return emitted
