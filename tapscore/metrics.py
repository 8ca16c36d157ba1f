from __future__ import annotations

from prometheus_client import CollectorRegistry, Counter, Histogram, generate_latest

REGISTRY = CollectorRegistry()
SCORE_WRITES = Counter(
    "tapscore_score_writes_total",
    "Scorecard mutations",
    ["operation", "status"],
    registry=REGISTRY,
)
FINALIZE_RUNS = Counter(
    "tapscore_finalize_total",
    "Competition finalize runs",
    ["status"],
    registry=REGISTRY,
)
FINALIZE_LATENCY = Histogram(
    "tapscore_finalize_seconds",
    "Competition finalize latency (seconds)",
    registry=REGISTRY,
)
STANDINGS_LATENCY = Histogram(
    "tapscore_standings_seconds",
    "Standings aggregation latency (seconds)",
    ["scope_kind"],
    registry=REGISTRY,
)


def render_latest() -> bytes:
    return generate_latest(REGISTRY)


__all__ = [
    "REGISTRY",
    "SCORE_WRITES",
    "FINALIZE_RUNS",
    "FINALIZE_LATENCY",
    "STANDINGS_LATENCY",
    "render_latest",
]
