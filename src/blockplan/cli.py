from __future__ import annotations

import random
import signal
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import IO, Iterator, Optional

import typer
from rich.console import Console
from rich.table import Table

from blockplan.core.config import GaugeConfig
from blockplan.core.errors import (
    InvalidConfigurationError,
    PlanCancelled,
    UnknownProfileError,
)
from blockplan.core.labels import Labels
from blockplan.core.logging import setup_logging
from blockplan.core.timeutil import format_duration, format_timestamp, resolve_upper_bound
from blockplan.planning.context import PlanContext
from blockplan.profiles.catalog import (
    ProfileCatalog,
    catalog_from_configs,
    default_catalog,
    load_profiles_yaml,
)
from blockplan.sinks import JsonlSink

app = typer.Typer(add_completion=False, help="blockplan: synthetic TSDB block planner")
console = Console(stderr=True)


# ---------------------------
# Utilities
# ---------------------------


def _build_catalog(profiles_file: str, seed: int | None) -> ProfileCatalog:
    rng = random.Random(seed) if seed is not None else None
    gauge = GaugeConfig.from_env()
    try:
        cat = default_catalog(gauge=gauge, rng=rng)
        if profiles_file:
            catalog_from_configs(load_profiles_yaml(profiles_file), cat, gauge=gauge, rng=rng)
    except (InvalidConfigurationError, FileNotFoundError, ValueError) as e:
        raise typer.BadParameter(str(e)) from e
    return cat


@contextmanager
def _open_out(out: str) -> Iterator[IO[str]]:
    if not out or out == "-":
        yield sys.stdout
        return
    p = Path(out)
    p.parent.mkdir(parents=True, exist_ok=True)
    with p.open("w", encoding="utf-8") as f:
        yield f


@contextmanager
def _cancel_on_sigint(ctx: PlanContext) -> Iterator[None]:
    prev = signal.getsignal(signal.SIGINT)

    def _handler(signum, frame) -> None:
        ctx.cancel("interrupted")

    signal.signal(signal.SIGINT, _handler)
    try:
        yield
    finally:
        signal.signal(signal.SIGINT, prev)


# ---------------------------
# CLI Commands
# ---------------------------


@app.callback()
def _main(log_level: str = typer.Option("INFO", help="Log level (INFO/DEBUG/...)")) -> None:
    setup_logging(log_level)


@app.command()
def profiles(
    profiles_file: str = typer.Option(
        "", "--profiles-file", help="Extra profiles YAML (name -> profile mapping)"
    ),
) -> None:
    """
    List registered profiles.
    """
    cat = _build_catalog(profiles_file, seed=None)

    table = Table(title="Profiles")
    table.add_column("name")
    table.add_column("kind")
    table.add_column("blocks", justify="right")
    table.add_column("range", justify="right")
    table.add_column("apps", justify="right")
    for name, planner in cat.items():
        table.add_row(
            name,
            planner.kind,
            str(planner.block_count),
            format_duration(planner.total_range_ms),
            str(planner.apps),
        )
    console.print(table)


@app.command()
def plan(
    profile: str = typer.Option(..., "--profile", help="Profile name (see `profiles`)"),
    max_time: str = typer.Option(
        "0s", "--max-time", help="Newest block end: RFC3339 time or duration relative to now"
    ),
    label: list[str] = typer.Option(
        [], "--label", help='External label stamped on every block, e.g. cluster="eu-1"'
    ),
    profiles_file: str = typer.Option("", "--profiles-file", help="Extra profiles YAML"),
    out: str = typer.Option("", "--out", help="JSONL output path (default: stdout)"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Seed for randomized parameters"),
    timeout_s: Optional[float] = typer.Option(
        None, "--timeout-s", help="Abort planning after N seconds"
    ),
    no_series: bool = typer.Option(False, "--no-series", help="Only write block metadata"),
) -> None:
    """
    Plan blocks for a profile and write them as JSON lines, newest first.
    """
    cat = _build_catalog(profiles_file, seed)
    try:
        planner = cat.lookup(profile)
        upper = resolve_upper_bound(max_time)
        ext = Labels.parse(label)
    except (UnknownProfileError, InvalidConfigurationError, ValueError) as e:
        raise typer.BadParameter(str(e)) from e

    ctx = PlanContext(timeout_s=timeout_s)
    with _open_out(out) as stream, _cancel_on_sigint(ctx):
        sink = JsonlSink(stream, include_series=not no_series)
        try:
            planner.plan(ctx, upper, ext, sink)
        except PlanCancelled as e:
            console.print(f"[red]Planning aborted:[/red] {e}")
            raise typer.Exit(code=1) from e

    s = sink.summary
    table = Table(title=f"Plan: {profile}")
    table.add_column("field")
    table.add_column("value", justify="right")
    table.add_row("blocks", str(s.blocks))
    table.add_row("series_specs", str(s.series))
    table.add_row("series_total", str(s.targets))
    if s.min_time is not None and s.max_time is not None:
        table.add_row("min_time", format_timestamp(s.min_time))
        table.add_row("max_time", format_timestamp(s.max_time))
    table.add_row("external_labels", str(ext))
    console.print(table)
