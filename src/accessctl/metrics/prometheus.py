from __future__ import annotations

from typing import Any, Dict

from ..core.ports import MetricsSink

DECISIONS_TOTAL = "accessctl_decisions_total"
DECISION_SECONDS = "accessctl_decision_seconds"


def _prometheus_client() -> Any:
    try:
        import prometheus_client  # type: ignore[import-untyped]
    except ImportError as e:
        raise RuntimeError("Install accessctl[metrics-prometheus] to export Prometheus metrics") from e
    return prometheus_client


class PrometheusMetrics(MetricsSink):
    """Decision counter and latency histogram, both labelled by ``decision``.

    Pass a ``registry`` to keep the instruments out of the global default
    registry, e.g. when several AccessControl instances share a process.
    """

    def __init__(self, registry: Any = None) -> None:
        client = _prometheus_client()
        kwargs: Dict[str, Any] = {"labelnames": ("decision",)}
        if registry is not None:
            kwargs["registry"] = registry
        self._counter = client.Counter(DECISIONS_TOTAL, "accessctl decisions by outcome.", **kwargs)
        self._hist = client.Histogram(DECISION_SECONDS, "accessctl check duration in seconds.", **kwargs)

    def inc(self, name: str, labels: Dict[str, str] | None = None) -> None:
        # only one counter exists; *name* is part of the sink protocol
        self._counter.labels(decision=(labels or {}).get("decision", "unknown")).inc()

    def observe(self, name: str, value: float, labels: Dict[str, str] | None = None) -> None:
        self._hist.labels(decision=(labels or {}).get("decision", "unknown")).observe(float(value))


__all__ = ["PrometheusMetrics", "DECISIONS_TOTAL", "DECISION_SECONDS"]
