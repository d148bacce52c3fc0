from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

DEFAULT_MIN_GAUGE = 2.0
DEFAULT_MAX_GAUGE = 8.0


def load_yaml(path: str | Path) -> dict[str, Any]:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"YAML not found: {p}")
    with p.open("r", encoding="utf-8") as f:
        obj = yaml.safe_load(f) or {}
    if not isinstance(obj, dict):
        raise ValueError(f"YAML must be a mapping: {p}")
    return obj


def stable_json_dumps(obj: Any) -> str:
    return json.dumps(obj, ensure_ascii=False, sort_keys=True, separators=(",", ":"))


def _env_float(environ: Mapping[str, str], key: str, default: float) -> float:
    raw = environ.get(key)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.debug("ignoring unparsable %s=%r, using %s", key, raw, default)
        return default


@dataclass(frozen=True)
class GaugeConfig:
    """
    Value bounds for custom-metric gauges.

    Defaults: min=2.0, max=8.0. from_env() reads MIN_GAUGE / MAX_GAUGE and
    falls back to the defaults when a variable is unset or not a float.
    """

    min: float = DEFAULT_MIN_GAUGE
    max: float = DEFAULT_MAX_GAUGE

    @staticmethod
    def from_env(environ: Mapping[str, str] | None = None) -> GaugeConfig:
        env = os.environ if environ is None else environ
        return GaugeConfig(
            min=_env_float(env, "MIN_GAUGE", DEFAULT_MIN_GAUGE),
            max=_env_float(env, "MAX_GAUGE", DEFAULT_MAX_GAUGE),
        )
