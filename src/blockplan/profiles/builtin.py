from __future__ import annotations

from typing import Any

# Block widths newest to oldest, in the same way the Thanos compactor would
# leave them: a few fresh 2h blocks, then progressively wider compacted ones.
RANGES_2D = ["2h", "2h", "2h", "8h", "8h", "8h", "8h", "8h", "2h"]
RANGES_1W = ["2h", "2h", "2h", "8h", "8h", "48h", "48h", "48h", "2h"]
RANGES_30D = ["2h", "2h", "2h", "8h", "176h", "176h", "176h", "176h", "2h"]
RANGES_365D = [
    "2h", "2h", "2h", "8h",
    "176h", "176h", "176h", "176h",
    "67d", "67d", "67d", "67d", "67d",
]  # fmt: skip

ACM_RS_METRICS = [
    "acm_rs:namespace:cpu_request",
    "acm_rs:namespace:cpu_usage",
    "acm_rs:namespace:memory_request",
    "acm_rs:namespace:memory_usage",
    "acm_rs:namespace:cpu_recommendation",
    "acm_rs:namespace:memory_recommendation",
    "acm_rs:cluster:cpu_request",
    "acm_rs:cluster:cpu_usage",
    "acm_rs:cluster:memory_request",
    "acm_rs:cluster:memory_usage",
    "acm_rs:cluster:cpu_recommendation",
    "acm_rs:cluster:memory_recommendation",
]

BUILTIN_PROFILES: dict[str, dict[str, Any]] = {
    # 100 apps, 50 metrics each, all rolling out every 1h: a 2h block has
    # 15k series, an 8h block 45k.
    "realistic-k8s-2d-small": {
        "kind": "realistic",
        "ranges": RANGES_2D,
        "rollout_interval": "1h",
        "apps": 100,
        "metrics_per_app": 50,
        "description": "2 days of K8s-like churn, 100 apps x 50 metrics",
    },
    "realistic-k8s-1w-small": {
        "kind": "realistic",
        "ranges": RANGES_1W,
        "rollout_interval": "1h",
        "apps": 100,
        "metrics_per_app": 50,
        "description": "1 week of K8s-like churn, 100 apps x 50 metrics",
    },
    "realistic-k8s-30d-tiny": {
        "kind": "realistic",
        "ranges": RANGES_30D,
        "rollout_interval": "1h",
        "apps": 1,
        "metrics_per_app": 5,
        "description": "30 days of K8s-like churn, 1 app x 5 metrics",
    },
    "realistic-k8s-365d-tiny": {
        "kind": "realistic",
        "ranges": RANGES_365D,
        "rollout_interval": "1h",
        "apps": 1,
        "metrics_per_app": 5,
        "description": "1 year of K8s-like churn, 1 app x 5 metrics",
    },
    # 10k series per block.
    "continuous-1w-small": {
        "kind": "continuous",
        "ranges": RANGES_1W,
        "apps": 100,
        "metrics_per_app": 100,
        "description": "1 week, 100 apps x 100 stable metrics",
    },
    "continuous-30d-tiny": {
        "kind": "continuous",
        "ranges": RANGES_30D,
        "apps": 1,
        "metrics_per_app": 5,
        "description": "30 days, 1 app x 5 stable metrics",
    },
    "continuous-365d-tiny": {
        "kind": "continuous",
        "ranges": RANGES_365D,
        "apps": 1,
        "metrics_per_app": 5,
        "description": "1 year, 1 app x 5 stable metrics",
    },
    "continuous-1w-1series-10000apps": {
        "kind": "continuous",
        "ranges": RANGES_1W,
        "apps": 10000,
        "metrics_per_app": 1,
        "description": "1 week, 10000 apps x 1 stable metric",
    },
    "cc-1w-small-rs": {
        "kind": "custom",
        "ranges": RANGES_1W,
        "apps": 1,
        "metrics": ACM_RS_METRICS,
        "description": "1 week of resource recommendation recording rules",
    },
}
