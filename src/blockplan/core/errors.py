from __future__ import annotations

__all__ = [
    "BlockPlanError",
    "PlanCancelled",
    "PlanDeadlineExceeded",
    "UnknownProfileError",
    "InvalidConfigurationError",
]


class BlockPlanError(Exception):
    """Base error for the blockplan package."""


class PlanCancelled(BlockPlanError):
    """Raised when a planning run observes its context was cancelled."""

    def __init__(self, reason: str = "plan cancelled"):
        self.reason = reason
        super().__init__(reason)


class PlanDeadlineExceeded(PlanCancelled):
    """Raised when a planning run outlives its context deadline."""

    def __init__(self, timeout_s: float):
        self.timeout_s = timeout_s
        super().__init__(f"plan deadline exceeded after {timeout_s:g}s")


class UnknownProfileError(BlockPlanError, KeyError):
    """Raised when a profile name is not registered in a catalog."""

    def __init__(self, name: str, known: list[str]):
        self.name = name
        self.known = known
        msg = f"Unknown profile: {name}"
        if known:
            msg += f" (known: {', '.join(known)})"
        super().__init__(msg)

    def __str__(self) -> str:
        # KeyError would repr() the message
        return str(self.args[0])


class InvalidConfigurationError(BlockPlanError, ValueError):
    """Raised when planner or profile configuration would yield degenerate blocks."""
