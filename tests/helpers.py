from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

import anyio

# Ensure src/ imports work whether package is installed or not.
_REPO_ROOT = Path(__file__).resolve().parents[1]
_SRC_DIR = _REPO_ROOT / "src"
if str(_SRC_DIR) not in sys.path:
    sys.path.insert(0, str(_SRC_DIR))

HOUR_MS = 3_600_000
TWO_HOURS_MS = 2 * HOUR_MS


def run_async(coro: Any) -> Any:
    """Run a coroutine in tests without requiring pytest-anyio."""

    async def _runner() -> Any:
        return await coro

    return anyio.run(_runner)


class RecordingSink:
    """
    Records every block; optionally raises `error` on the fail_on-th call (1-based).
    """

    def __init__(self, fail_on: int | None = None, error: Exception | None = None) -> None:
        self.blocks: list[Any] = []
        self.calls = 0
        self.fail_on = fail_on
        self.error = error or RuntimeError("sink failed")

    def __call__(self, block: Any) -> None:
        self.calls += 1
        self.blocks.append(block)
        if self.fail_on is not None and self.calls == self.fail_on:
            raise self.error


class CancelAfterSink(RecordingSink):
    """
    Cancels ctx after recording the n-th block.
    """

    def __init__(self, ctx: Any, after: int) -> None:
        super().__init__()
        self.ctx = ctx
        self.after = after

    def __call__(self, block: Any) -> None:
        super().__call__(block)
        if self.calls == self.after:
            self.ctx.cancel("test cancel")


def assert_contiguous(blocks: list[Any]) -> None:
    for newer, older in zip(blocks, blocks[1:]):
        assert older.max_time == newer.min_time - 1
        assert older.min_time <= older.max_time


def series_names(block: Any) -> list[str]:
    return [s.labels.metric_name for s in block.series]
