from __future__ import annotations

from dataclasses import dataclass

from prometheus_client import CollectorRegistry, Counter, Histogram, generate_latest
from prometheus_client.exposition import CONTENT_TYPE_LATEST

from app.notices.core.config import settings


@dataclass
class MetricsSnapshot:
    content: bytes
    content_type: str


class Metrics:
    def __init__(self) -> None:
        self.enabled = bool(settings.METRICS_ENABLED)
        self._registry = None
        self._http_requests_total = None
        self._http_request_duration_ms = None
        self._notices_rendered_total = None
        self._notice_dismissals_total = None
        self._notice_dismiss_rejected_total = None
        if self.enabled:
            self._initialize_registry()

    def _initialize_registry(self) -> None:
        self._registry = CollectorRegistry()
        self._http_requests_total = Counter(
            "http_requests_total",
            "HTTP requests by route/method/status.",
            ["route", "method", "status"],
            registry=self._registry,
        )
        self._http_request_duration_ms = Histogram(
            "http_request_duration_ms",
            "HTTP request latency in milliseconds.",
            ["route", "method", "status"],
            buckets=(5, 10, 25, 50, 100, 250, 500, 1000, 2500, 5000, 10000),
            registry=self._registry,
        )
        self._notices_rendered_total = Counter(
            "notices_rendered_total",
            "Notices emitted into an admin page.",
            registry=self._registry,
        )
        self._notice_dismissals_total = Counter(
            "notice_dismissals_total",
            "Notices dismissed, by storage scope.",
            ["scope"],
            registry=self._registry,
        )
        self._notice_dismiss_rejected_total = Counter(
            "notice_dismiss_rejected_total",
            "Dismiss requests for a known notice that failed nonce verification.",
            registry=self._registry,
        )

    def record_http_request(self, *, route: str, method: str, status_code: int, latency_ms: float) -> None:
        if not self.enabled:
            return
        labels = {"route": route, "method": method, "status": str(status_code)}
        self._http_requests_total.labels(**labels).inc()
        self._http_request_duration_ms.labels(**labels).observe(latency_ms)

    def increment_notices_rendered(self, count: int = 1) -> None:
        if not self.enabled or count <= 0:
            return
        self._notices_rendered_total.inc(count)

    def increment_notice_dismissed(self, scope: str) -> None:
        if not self.enabled:
            return
        self._notice_dismissals_total.labels(scope=scope).inc()

    def increment_notice_dismiss_rejected(self) -> None:
        if not self.enabled:
            return
        self._notice_dismiss_rejected_total.inc()

    def render(self) -> MetricsSnapshot:
        if not self.enabled:
            return MetricsSnapshot(content=b"metrics_disabled\n", content_type="text/plain")
        return MetricsSnapshot(content=generate_latest(self._registry), content_type=CONTENT_TYPE_LATEST)


metrics = Metrics()
