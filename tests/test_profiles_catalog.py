from __future__ import annotations

import random
import threading

import pytest


def _continuous():
    from blockplan.planning.continuous import ContinuousPlanner

    return ContinuousPlanner(["2h"], apps=1, metrics_per_app=1)


def test_lookup_unknown_profile_raises() -> None:
    from blockplan.core.errors import UnknownProfileError
    from blockplan.profiles.catalog import ProfileCatalog

    cat = ProfileCatalog()
    cat.register("known", _continuous())

    with pytest.raises(UnknownProfileError) as ei:
        cat.lookup("nope")
    assert ei.value.name == "nope"
    assert ei.value.known == ["known"]
    assert "Unknown profile: nope" in str(ei.value)
    # still a KeyError for dict-style callers
    assert isinstance(ei.value, KeyError)


def test_register_two_and_list_sorted() -> None:
    from blockplan.profiles.catalog import ProfileCatalog

    cat = ProfileCatalog()
    p1, p2 = _continuous(), _continuous()
    cat.register("zeta", p1)
    cat.register("alpha", p2)

    assert cat.list_names() == ["alpha", "zeta"]
    assert cat.lookup("zeta") is p1
    assert "alpha" in cat
    assert len(cat) == 2


def test_register_duplicate_name_rejected() -> None:
    from blockplan.profiles.catalog import ProfileCatalog

    cat = ProfileCatalog()
    p = _continuous()
    cat.register("x", p)
    cat.register("x", p)  # same planner is a no-op
    with pytest.raises(ValueError):
        cat.register("x", _continuous())


def test_concurrent_lookups_are_safe() -> None:
    from blockplan.profiles.catalog import default_catalog

    cat = default_catalog(rng=random.Random(0))
    names = cat.list_names()
    errors: list[BaseException] = []

    def _worker() -> None:
        try:
            for _ in range(200):
                for n in names:
                    assert cat.lookup(n) is not None
        except BaseException as e:  # noqa: BLE001
            errors.append(e)

    threads = [threading.Thread(target=_worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert errors == []


def test_default_catalog_has_builtin_profiles() -> None:
    from blockplan.core.config import GaugeConfig
    from blockplan.planning.continuous import ContinuousPlanner
    from blockplan.planning.custom import CustomMetricPlanner
    from blockplan.planning.realistic import RolloutPlanner
    from blockplan.profiles.catalog import default_catalog

    cat = default_catalog(gauge=GaugeConfig(min=1.0, max=2.0), rng=random.Random(0))
    assert cat.list_names() == [
        "cc-1w-small-rs",
        "continuous-1w-1series-10000apps",
        "continuous-1w-small",
        "continuous-30d-tiny",
        "continuous-365d-tiny",
        "realistic-k8s-1w-small",
        "realistic-k8s-2d-small",
        "realistic-k8s-30d-tiny",
        "realistic-k8s-365d-tiny",
    ]

    small = cat.lookup("realistic-k8s-2d-small")
    assert isinstance(small, RolloutPlanner)
    assert small.apps == 100
    assert small.metrics_per_app == 50
    assert small.rollout_interval_ms == 3_600_000
    assert small.total_range_ms == 48 * 3_600_000

    year = cat.lookup("continuous-365d-tiny")
    assert isinstance(year, ContinuousPlanner)
    assert year.block_count == 13
    assert year.ranges_ms[-1] == 67 * 24 * 3_600_000

    many = cat.lookup("continuous-1w-1series-10000apps")
    assert (many.apps, many.metrics_per_app) == (10000, 1)

    rs = cat.lookup("cc-1w-small-rs")
    assert isinstance(rs, CustomMetricPlanner)
    assert len(rs.metrics) == 12
    assert rs.gauge == GaugeConfig(min=1.0, max=2.0)
    assert rs.total_range_ms == 7 * 24 * 3_600_000


def test_profile_config_validation() -> None:
    from blockplan.core.errors import InvalidConfigurationError
    from blockplan.profiles.catalog import build_planner

    bad = [
        {"kind": "realistic", "ranges": ["2h"], "metrics_per_app": 1},
        {"kind": "realistic", "ranges": ["2h"], "metrics_per_app": 1, "rollout_interval": "0s"},
        {"kind": "continuous", "ranges": ["2h", "0h"], "metrics_per_app": 1},
        {"kind": "continuous", "ranges": ["2h"]},
        {"kind": "custom", "ranges": ["2h"], "metrics": []},
        {"kind": "custom", "ranges": ["bogus"], "metrics": ["m"]},
        {"kind": "nope", "ranges": ["2h"]},
        {"kind": "continuous", "ranges": ["2h"], "metrics_per_app": 1, "apps": -1},
    ]
    for raw in bad:
        with pytest.raises(InvalidConfigurationError):
            build_planner(raw)


def test_build_planner_rejects_unvalidated_config_missing_fields() -> None:
    from blockplan.core.errors import InvalidConfigurationError
    from blockplan.profiles.catalog import build_planner
    from blockplan.profiles.schema import ProfileConfig

    unvalidated = [
        ProfileConfig.model_construct(kind="realistic", ranges=["2h"], metrics_per_app=1),
        ProfileConfig.model_construct(kind="continuous", ranges=["2h"]),
        ProfileConfig.model_construct(kind="custom", ranges=["2h"]),
    ]
    for cfg in unvalidated:
        with pytest.raises(InvalidConfigurationError, match="requires"):
            build_planner(cfg)


def test_profile_config_summary() -> None:
    from blockplan.profiles.schema import ProfileConfig

    cfg = ProfileConfig.model_validate(
        {"kind": "custom", "ranges": ["2h", "8h"], "apps": 3, "metrics": ["a", "b", "c"]}
    )
    assert cfg.ranges_ms == [7_200_000, 28_800_000]
    assert cfg.summary() == {
        "kind": "custom",
        "blocks": 2,
        "total_range": "10h",
        "apps": 3,
        "series_per_block": 3,
        "description": "",
    }


def test_load_profiles_yaml_and_register(tmp_path) -> None:
    from blockplan.planning.context import PlanContext
    from blockplan.profiles.catalog import (
        ProfileCatalog,
        catalog_from_configs,
        load_profiles_yaml,
    )

    p = tmp_path / "profiles.yaml"
    p.write_text(
        "profiles:\n"
        "  tiny-churn:\n"
        "    kind: realistic\n"
        "    ranges: [2h, 2h]\n"
        "    rollout_interval: 30m\n"
        "    apps: 2\n"
        "    metrics_per_app: 1\n"
        "  tiny-rs:\n"
        "    kind: custom\n"
        "    ranges: [2h]\n"
        "    metrics: [foo, bar]\n",
        encoding="utf-8",
    )

    configs = load_profiles_yaml(p)
    assert sorted(configs) == ["tiny-churn", "tiny-rs"]

    cat = catalog_from_configs(configs, ProfileCatalog(), rng=random.Random(0))
    assert cat.list_names() == ["tiny-churn", "tiny-rs"]

    blocks = []
    cat.lookup("tiny-churn").plan(PlanContext(), 0, None, blocks.append)
    assert len(blocks) == 2


def test_load_profiles_yaml_rejects_bad_entries(tmp_path) -> None:
    from blockplan.core.errors import InvalidConfigurationError
    from blockplan.profiles.catalog import load_profiles_yaml

    p = tmp_path / "bad.yaml"
    p.write_text("x:\n  kind: continuous\n  ranges: [2h]\n", encoding="utf-8")
    with pytest.raises(InvalidConfigurationError, match="profile 'x'"):
        load_profiles_yaml(p)

    p.write_text("x: 3\n", encoding="utf-8")
    with pytest.raises(InvalidConfigurationError):
        load_profiles_yaml(p)

    with pytest.raises(FileNotFoundError):
        load_profiles_yaml(tmp_path / "missing.yaml")
