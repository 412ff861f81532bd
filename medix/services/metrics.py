"""Cloud Monitoring custom metrics for backend calls and pipeline outcomes.

Everything here is fire-and-forget: disabled unless a project is configured
and the client library is importable, and write failures are only logged.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from medix.providers.base import ProviderCallRecord

logger = logging.getLogger(__name__)

METRIC_PREFIX = "custom.googleapis.com/medix"

# Lazy import to avoid hard dependency in test/local dev
_client = None
_project_path: str = ""


def _get_client() -> Any:
    global _client  # noqa: PLW0603
    if _client is None:
        try:
            from google.cloud import monitoring_v3

            _client = monitoring_v3.MetricServiceClient()
        except Exception:
            logger.debug("Cloud Monitoring client not available; metrics disabled")
    return _client


def init_metrics(project_id: str) -> None:
    """Enable metrics for ``project_id``; an empty id disables them."""
    global _project_path  # noqa: PLW0603
    _project_path = f"projects/{project_id}" if project_id else ""


def _write(points: list[tuple[str, dict[str, str], int]]) -> None:
    """Write one int64 point per ``(metric suffix, labels, value)`` entry."""
    if not _project_path:
        return
    client = _get_client()
    if client is None:
        return

    try:
        from google.api import metric_pb2, monitored_resource_pb2
        from google.cloud.monitoring_v3 import (
            CreateTimeSeriesRequest,
            Point,
            TimeInterval,
            TimeSeries,
            TypedValue,
        )

        now = time.time()
        seconds = int(now)
        interval = TimeInterval(
            end_time={"seconds": seconds, "nanos": int((now - seconds) * 1e9)}
        )
        resource = monitored_resource_pb2.MonitoredResource(
            type="global",
            labels={"project_id": _project_path.split("/")[-1]},
        )
        series = [
            TimeSeries(
                metric=metric_pb2.Metric(type=f"{METRIC_PREFIX}/{suffix}", labels=labels),
                resource=resource,
                points=[Point(interval=interval, value=TypedValue(int64_value=value))],
            )
            for suffix, labels, value in points
        ]
        client.create_time_series(
            request=CreateTimeSeriesRequest(name=_project_path, time_series=series)
        )
    except Exception:
        logger.debug("Failed to write metrics", exc_info=True)


def record_provider_call(record: ProviderCallRecord) -> None:
    """Latency and request count for one backend attempt."""
    labels = {
        "provider": record.provider_name,
        "success": str(record.success).lower(),
        "fallback": str(record.used_fallback).lower(),
    }
    _write(
        [
            ("provider/latency_ms", labels, record.latency_ms),
            ("provider/request_count", labels, 1),
        ]
    )


def record_pipeline_outcome(kind: str, provider_used: str | None, repaired: bool) -> None:
    """One count per finished request, labelled by how it was answered."""
    labels = {
        "kind": kind,
        "provider_used": provider_used or "short_circuit",
        "repaired": str(repaired).lower(),
    }
    _write([("pipeline/outcome_count", labels, 1)])
