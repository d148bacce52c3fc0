from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator, model_validator

from blockplan.core.timeutil import duration_ms, format_duration

ProfileKind = Literal["realistic", "continuous", "custom"]


class ProfileConfig(BaseModel):
    """
    Declarative profile: which planner to build and with what shape.

    ranges are block widths, newest first, as duration strings ("2h", "8h",
    "67d") or integer milliseconds.
    """

    kind: ProfileKind
    ranges: list[str | int] = Field(default_factory=list)
    apps: int = Field(1, ge=0)

    # realistic / continuous
    metrics_per_app: int | None = Field(None, ge=0)

    # custom
    metrics: list[str] | None = None

    # realistic
    rollout_interval: str | int | None = None

    # Optional metadata
    description: str = ""

    @field_validator("ranges")
    @classmethod
    def _validate_ranges(cls, v: list[str | int]) -> list[str | int]:
        for r in v:
            if duration_ms(r) <= 0:
                raise ValueError(f"block width must be > 0, got {r!r}")
        return v

    @model_validator(mode="after")
    def _validate_kind_fields(self) -> ProfileConfig:
        if self.kind in ("realistic", "continuous") and self.metrics_per_app is None:
            raise ValueError(f"kind={self.kind} requires metrics_per_app")
        if self.kind == "realistic":
            if self.rollout_interval is None:
                raise ValueError("kind=realistic requires rollout_interval")
            if duration_ms(self.rollout_interval) <= 0:
                raise ValueError(
                    f"rollout_interval must be > 0, got {self.rollout_interval!r}"
                )
        if self.kind == "custom" and not self.metrics:
            raise ValueError("kind=custom requires a non-empty metrics list")
        return self

    @property
    def ranges_ms(self) -> list[int]:
        return [duration_ms(r) for r in self.ranges]

    @property
    def series_per_block(self) -> int:
        """
        Logical series per block (before rollout churn and target fan-out).
        """
        if self.kind == "custom":
            return len(self.metrics or [])
        return self.metrics_per_app or 0

    def summary(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "blocks": len(self.ranges),
            "total_range": format_duration(sum(self.ranges_ms)),
            "apps": self.apps,
            "series_per_block": self.series_per_block,
            "description": self.description,
        }
