"""
Prometheus metrics for the ordering engine.

Exposes ingest and reconstruction metrics via HTTP /metrics endpoint.

Environment Variables:
    METRICS_ENABLED: Enable metrics server (true/false) - default: false
    METRICS_PORT: HTTP port for /metrics endpoint - default: 8080

Usage:
    from orderq.metrics import start_metrics_server, track_submission

    start_metrics_server(enabled=True, port=8080)
    track_submission("accepted")

    with track_reconstruction_duration("presenter"):
        ...
"""

import logging
import threading
import time
from contextlib import contextmanager
from typing import Generator, Optional

from prometheus_client import Counter, Histogram, start_http_server

logger = logging.getLogger(__name__)

SUBMISSION_OUTCOMES = ("accepted", "schema", "type_mismatch", "malformed")

SUBMISSIONS_TOTAL: Optional[Counter] = None
PROGRESS_EVENTS_TOTAL: Optional[Counter] = None
RECONSTRUCTION_DURATION: Optional[Histogram] = None

_metrics_initialized = False
_metrics_lock = threading.Lock()


def init_metrics() -> None:
    """
    Initialize Prometheus metrics (call once at startup).

    Thread-safe via module-level lock; later calls are no-ops.
    """
    global SUBMISSIONS_TOTAL, PROGRESS_EVENTS_TOTAL, RECONSTRUCTION_DURATION
    global _metrics_initialized

    with _metrics_lock:
        if _metrics_initialized:
            return

        # Submission counter (labels: outcome)
        SUBMISSIONS_TOTAL = Counter(
            "orderq_submissions_total",
            "Total number of ingested ordering submissions by outcome",
            labelnames=["outcome"],
        )

        PROGRESS_EVENTS_TOTAL = Counter(
            "orderq_progress_events_total",
            "Total number of progress events pushed to presenters",
        )

        # Reconstruction duration histogram (labels: view)
        RECONSTRUCTION_DURATION = Histogram(
            "orderq_reconstruction_duration_seconds",
            "Duration of presenter/viewer reconstructions in seconds",
            labelnames=["view"],
            buckets=(0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0),
        )

        _metrics_initialized = True
        logger.info("Prometheus metrics initialized")


def start_metrics_server(enabled: bool, port: int) -> None:
    """
    Start Prometheus metrics HTTP server in background thread.

    Args:
        enabled: Whether to start metrics server
        port: HTTP port for /metrics endpoint
    """
    if not enabled:
        logger.info("Metrics server disabled")
        return

    init_metrics()
    start_http_server(port)
    logger.info(f"Metrics server started on port {port}")


def track_submission(outcome: str) -> None:
    """Count one ingested submission (no-op before init_metrics)."""
    if SUBMISSIONS_TOTAL is not None:
        SUBMISSIONS_TOTAL.labels(outcome=outcome).inc()


def track_progress_event() -> None:
    if PROGRESS_EVENTS_TOTAL is not None:
        PROGRESS_EVENTS_TOTAL.inc()


@contextmanager
def track_reconstruction_duration(view: str) -> Generator[None, None, None]:
    """
    Context manager to time a reconstruction.

    Example:
        with track_reconstruction_duration("viewer"):
            restore_viewer(...)
    """
    start = time.monotonic()
    try:
        yield
    finally:
        if RECONSTRUCTION_DURATION is not None:
            RECONSTRUCTION_DURATION.labels(view=view).observe(time.monotonic() - start)
