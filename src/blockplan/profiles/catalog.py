from __future__ import annotations

import random
import threading
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from blockplan.core.config import GaugeConfig, load_yaml
from blockplan.core.errors import InvalidConfigurationError, UnknownProfileError
from blockplan.planning.base import Planner
from blockplan.planning.continuous import ContinuousPlanner
from blockplan.planning.custom import CustomMetricPlanner
from blockplan.planning.realistic import RolloutPlanner

from .builtin import BUILTIN_PROFILES
from .schema import ProfileConfig


class ProfileCatalog:
    """
    Name -> planner registry. Lookups and registrations are thread-safe.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._planners: dict[str, Planner] = {}

    def register(self, name: str, planner: Planner) -> None:
        if not name:
            raise ValueError("profile name must be non-empty")
        with self._lock:
            if name in self._planners and self._planners[name] is not planner:
                raise ValueError(f"Profile '{name}' already registered.")
            self._planners[name] = planner

    def lookup(self, name: str) -> Planner:
        with self._lock:
            planner = self._planners.get(name)
            if planner is None:
                raise UnknownProfileError(name, sorted(self._planners))
            return planner

    def list_names(self) -> list[str]:
        with self._lock:
            return sorted(self._planners)

    def items(self) -> list[tuple[str, Planner]]:
        with self._lock:
            return sorted(self._planners.items())

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._planners

    def __len__(self) -> int:
        with self._lock:
            return len(self._planners)


def parse_profile_config(raw: ProfileConfig | Mapping[str, Any], name: str = "") -> ProfileConfig:
    if isinstance(raw, ProfileConfig):
        return raw
    try:
        return ProfileConfig.model_validate(dict(raw))
    except ValidationError as e:
        where = f"profile '{name}'" if name else "profile"
        raise InvalidConfigurationError(f"invalid {where}: {e}") from e


def _required(cfg: ProfileConfig, field: str) -> Any:
    value = getattr(cfg, field)
    if value is None:
        raise InvalidConfigurationError(f"kind={cfg.kind} requires {field}")
    return value


def build_planner(
    config: ProfileConfig | Mapping[str, Any],
    gauge: GaugeConfig | None = None,
    rng: random.Random | None = None,
) -> Planner:
    cfg = parse_profile_config(config)
    if cfg.kind == "realistic":
        return RolloutPlanner(
            cfg.ranges,
            rollout_interval=_required(cfg, "rollout_interval"),
            apps=cfg.apps,
            metrics_per_app=_required(cfg, "metrics_per_app"),
        )
    if cfg.kind == "continuous":
        return ContinuousPlanner(
            cfg.ranges, apps=cfg.apps, metrics_per_app=_required(cfg, "metrics_per_app")
        )
    if cfg.kind == "custom":
        return CustomMetricPlanner(
            cfg.ranges, apps=cfg.apps, metrics=_required(cfg, "metrics"), gauge=gauge, rng=rng
        )
    raise InvalidConfigurationError(f"Unknown profile kind: {cfg.kind}")


def catalog_from_configs(
    configs: Mapping[str, ProfileConfig | Mapping[str, Any]],
    catalog: ProfileCatalog | None = None,
    gauge: GaugeConfig | None = None,
    rng: random.Random | None = None,
) -> ProfileCatalog:
    cat = catalog if catalog is not None else ProfileCatalog()
    for name, raw in configs.items():
        cat.register(name, build_planner(parse_profile_config(raw, name), gauge=gauge, rng=rng))
    return cat


def default_catalog(
    gauge: GaugeConfig | None = None,
    rng: random.Random | None = None,
) -> ProfileCatalog:
    """
    Catalog with every built-in profile. Gauge bounds for custom profiles
    are read from the environment here when `gauge` is not given.
    """
    return catalog_from_configs(BUILTIN_PROFILES, gauge=gauge or GaugeConfig.from_env(), rng=rng)


def load_profiles_yaml(path: str | Path) -> dict[str, ProfileConfig]:
    """
    Parse a profiles YAML file: either a mapping of name -> profile, or the
    same mapping nested under a top-level `profiles:` key.
    """
    raw = load_yaml(path)
    profiles = raw.get("profiles", raw)
    if not isinstance(profiles, dict):
        raise InvalidConfigurationError(f"profiles must be a mapping: {path}")
    out: dict[str, ProfileConfig] = {}
    for name, body in profiles.items():
        if not isinstance(body, dict):
            raise InvalidConfigurationError(f"profile '{name}' must be a mapping: {path}")
        out[str(name)] = parse_profile_config(body, str(name))
    return out
