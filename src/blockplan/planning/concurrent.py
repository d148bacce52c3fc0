from __future__ import annotations

import logging
from dataclasses import dataclass, field

import anyio
import anyio.to_thread

from .base import ExternalLabels, Planner, Sink
from .context import PlanContext

logger = logging.getLogger(__name__)


@dataclass
class PlanJob:
    """
    One planning run: a planner plus everything plan() needs.
    """

    planner: Planner
    upper_time_bound_ms: int
    sink: Sink
    external_labels: ExternalLabels = None
    ctx: PlanContext = field(default_factory=PlanContext.background)


async def run_plans(jobs: list[PlanJob], max_workers: int = 4) -> list[int]:
    """
    Run several plans in worker threads. Returns emitted block counts in job order.

    If any job raises, the other jobs' contexts are cancelled, they are awaited,
    and the first error is re-raised unchanged. The PlanCancelled errors the
    siblings raise as a result are discarded.
    """
    results: list[int] = [0] * len(jobs)
    limiter = anyio.CapacityLimiter(max(1, max_workers))
    failures: list[Exception] = []

    def _cancel_all(reason: str) -> None:
        for j in jobs:
            j.ctx.cancel(reason)

    async def _one(idx: int, job: PlanJob) -> None:
        try:
            results[idx] = await anyio.to_thread.run_sync(
                job.planner.plan,
                job.ctx,
                job.upper_time_bound_ms,
                job.external_labels,
                job.sink,
                limiter=limiter,
            )
        except Exception as exc:
            logger.debug("plan job %d (%s) failed: %r", idx, job.planner.kind, exc)
            failures.append(exc)
            if len(failures) == 1:
                _cancel_all(f"sibling plan job {idx} failed")

    async with anyio.create_task_group() as tg:
        for idx, job in enumerate(jobs):
            tg.start_soon(_one, idx, job)

    if failures:
        raise failures[0]
    return results
