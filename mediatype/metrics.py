"""Prometheus metrics helpers."""

from __future__ import annotations

from collections.abc import Sequence

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    generate_latest,
)

REGISTRY = CollectorRegistry()

PARSE_TOTAL = Counter(
    "media_type_parse_total",
    "Number of parsed media type strings by outcome",
    labelnames=("outcome",),
    registry=REGISTRY,
)

PARAMETERS_DROPPED = Counter(
    "media_type_parameters_dropped_total",
    "Number of parameter tokens discarded while parsing",
    labelnames=("reason",),
    registry=REGISTRY,
)


def observe_parse(*, reason: str | None, anomalies: Sequence[str]) -> None:
    PARSE_TOTAL.labels(outcome=reason or "valid").inc()
    for anomaly in anomalies:
        # "duplicate_parameter:charset" -> "duplicate_parameter"
        PARAMETERS_DROPPED.labels(reason=anomaly.split(":", 1)[0]).inc()


def render_metrics() -> tuple[bytes, str]:
    payload = generate_latest(REGISTRY)
    return payload, CONTENT_TYPE_LATEST
