from __future__ import annotations

from typing import Any, Dict, Optional

from ..core.ports import MetricsSink
from .prometheus import DECISION_SECONDS, DECISIONS_TOTAL


def _default_meter() -> Any:
    try:
        from opentelemetry.metrics import get_meter  # type: ignore[import-untyped]
    except ImportError as e:
        raise RuntimeError("Install accessctl[metrics-otel] to export OpenTelemetry metrics") from e
    return get_meter("accessctl.metrics")


class OpenTelemetryMetrics(MetricsSink):
    """Records decisions on an OpenTelemetry meter.

    The histogram is only created when the meter offers ``create_histogram``.
    """

    def __init__(self, meter: Any = None) -> None:
        if meter is None:
            meter = _default_meter()
        self._counter = meter.create_counter(
            name=DECISIONS_TOTAL, description="accessctl decisions by outcome."
        )
        self._hist: Optional[Any] = None
        create_hist = getattr(meter, "create_histogram", None)
        if create_hist is not None:
            self._hist = create_hist(
                name=DECISION_SECONDS, description="accessctl check duration in seconds.", unit="s"
            )

    def inc(self, name: str, labels: Dict[str, str] | None = None) -> None:
        self._counter.add(1, {"decision": (labels or {}).get("decision", "unknown")})

    def observe(self, name: str, value: float, labels: Dict[str, str] | None = None) -> None:
        if self._hist is not None:
            self._hist.record(float(value), {"decision": (labels or {}).get("decision", "unknown")})


__all__ = ["OpenTelemetryMetrics"]
