from __future__ import annotations

from dataclasses import dataclass, field
from typing import IO, Any

from blockplan.core.config import stable_json_dumps
from blockplan.core.types import BlockSpec


@dataclass
class PlanSummary:
    """
    Running totals over the blocks a sink has seen.
    """

    blocks: int = 0
    series: int = 0
    targets: int = 0
    min_time: int | None = None
    max_time: int | None = None

    def add(self, b: BlockSpec) -> None:
        self.blocks += 1
        self.series += b.series_count
        self.targets += b.total_targets
        self.min_time = b.min_time if self.min_time is None else min(self.min_time, b.min_time)
        self.max_time = b.max_time if self.max_time is None else max(self.max_time, b.max_time)


@dataclass
class CollectingSink:
    """
    Keeps every block in memory. For tests and small profiles only.
    """

    blocks: list[BlockSpec] = field(default_factory=list)

    def __call__(self, b: BlockSpec) -> None:
        self.blocks.append(b)


class JsonlSink:
    """
    Writes one JSON object per block to a text stream and keeps a summary.
    Nothing but the summary is retained between blocks.
    """

    def __init__(self, stream: IO[str], include_series: bool = True) -> None:
        self.stream = stream
        self.include_series = include_series
        self.summary = PlanSummary()

    def __call__(self, b: BlockSpec) -> None:
        obj: dict[str, Any] = b.to_dict()
        if not self.include_series:
            obj["series"] = []
            obj["series_count"] = b.series_count
        self.stream.write(stable_json_dumps(obj) + "\n")
        self.stream.flush()
        self.summary.add(b)
