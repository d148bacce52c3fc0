from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

from .errors import InvalidConfigurationError
from .labels import Labels
from .timeutil import format_timestamp

# ---- Time ----


@dataclass(frozen=True)
class TimeWindow:
    """
    Millisecond interval, inclusive on both ends.
    """

    min_time: int
    max_time: int

    def __post_init__(self) -> None:
        if self.min_time > self.max_time:
            raise InvalidConfigurationError(
                f"time window min_time {self.min_time} > max_time {self.max_time}"
            )

    @property
    def duration_ms(self) -> int:
        return self.max_time - self.min_time + 1

    def contains(self, other: TimeWindow) -> bool:
        return self.min_time <= other.min_time and other.max_time <= self.max_time

    def to_dict(self) -> dict[str, Any]:
        return {
            "min_time": self.min_time,
            "max_time": self.max_time,
            "min": format_timestamp(self.min_time),
            "max": format_timestamp(self.max_time),
        }


# ---- Series ----

SeriesType = Literal["gauge"]
GAUGE: SeriesType = "gauge"


@dataclass(frozen=True)
class SeriesCharacteristics:
    """
    Value generation parameters handed to the sample generator.
    """

    max: float
    min: float
    jitter: float
    scrape_interval_s: float = 15.0
    change_interval_s: float = 3600.0


@dataclass
class SeriesSpec:
    window: TimeWindow
    targets: int
    labels: Labels
    characteristics: SeriesCharacteristics
    type: SeriesType = GAUGE

    @property
    def metric_name(self) -> str | None:
        return self.labels.metric_name

    def to_dict(self) -> dict[str, Any]:
        c = self.characteristics
        return {
            "type": self.type,
            "labels": self.labels.to_map(),
            "targets": self.targets,
            "min_time": self.window.min_time,
            "max_time": self.window.max_time,
            "characteristics": {
                "max": c.max,
                "min": c.min,
                "jitter": c.jitter,
                "scrape_interval_s": c.scrape_interval_s,
                "change_interval_s": c.change_interval_s,
            },
        }


# ---- Block ----


@dataclass
class BlockMeta:
    # external labels, as a plain map
    labels: dict[str, str] = field(default_factory=dict)
    compaction_level: int = 1
    version: int = 1
    downsample_resolution: int = 0
    source: str = "blockgen"


@dataclass
class BlockSpec:
    window: TimeWindow
    meta: BlockMeta
    series: list[SeriesSpec] = field(default_factory=list)

    @property
    def min_time(self) -> int:
        return self.window.min_time

    @property
    def max_time(self) -> int:
        return self.window.max_time

    @property
    def series_count(self) -> int:
        return len(self.series)

    @property
    def total_targets(self) -> int:
        # number of concrete series the encoder will write
        return sum(s.targets for s in self.series)

    def to_dict(self) -> dict[str, Any]:
        return {
            **self.window.to_dict(),
            "meta": {
                "labels": dict(self.meta.labels),
                "compaction_level": self.meta.compaction_level,
                "version": self.meta.version,
                "downsample_resolution": self.meta.downsample_resolution,
                "source": self.meta.source,
            },
            "series": [s.to_dict() for s in self.series],
        }
