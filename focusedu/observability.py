"""Lightweight observability helpers (logging + metrics)."""

from __future__ import annotations

import json
import logging
import time
import uuid
from collections import defaultdict
from contextvars import ContextVar
from threading import Lock
from typing import Iterable, Protocol

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from focusedu.core.config import get_settings

request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)
logger = logging.getLogger(__name__)

DEFAULT_BUCKETS_MS = [1, 5, 10, 50, 100, 250, 500, 1000, 2500, 5000, 10000]


def get_request_id() -> str | None:
    """Return the current request id if set by middleware."""
    return request_id_ctx.get()


class MetricsBackend(Protocol):
    """Metrics backend interface."""

    def observe_request(
        self,
        method: str,
        path: str,
        status_code: int,
        duration_ms: float,
    ) -> None:
        ...

    def observe_external_api(
        self,
        provider: str,
        operation: str,
        status_code: int,
        duration_ms: float,
    ) -> None:
        ...

    def observe_retrieval(self, operation: str, success: bool, duration_ms: float) -> None:
        ...

    def observe_context(self, source: str) -> None:
        ...

    def render_prometheus(self) -> str:
        ...


class _Histogram:
    """Sum/count/bucket tracking keyed by label tuples."""

    def __init__(self, buckets_ms: list[int]) -> None:
        self.buckets_ms = buckets_ms
        self.sums: dict[tuple[str, ...], float] = defaultdict(float)
        self.counts: dict[tuple[str, ...], int] = defaultdict(int)
        self.buckets: dict[tuple[str, ...], dict[str, int]] = defaultdict(
            lambda: defaultdict(int)
        )

    def observe(self, key: tuple[str, ...], duration_ms: float) -> None:
        self.sums[key] += duration_ms
        self.counts[key] += 1
        self.buckets[key][self._bucket_for(duration_ms)] += 1

    def render(self, name: str, label_names: tuple[str, ...]) -> list[str]:
        lines: list[str] = []
        for key, total in sorted(self.sums.items()):
            labels = ",".join(f'{n}="{v}"' for n, v in zip(label_names, key))
            buckets = self.buckets[key]
            cumulative = 0
            for bound in self.buckets_ms:
                cumulative += buckets.get(str(bound), 0)
                lines.append(f'{name}_bucket{{{labels},le="{bound}"}} {cumulative}')
            cumulative += buckets.get("+Inf", 0)
            lines.append(f'{name}_bucket{{{labels},le="+Inf"}} {cumulative}')
            lines.append(f"{name}_sum{{{labels}}} {total:.2f}")
            lines.append(f"{name}_count{{{labels}}} {self.counts[key]}")
        return lines

    def _bucket_for(self, duration_ms: float) -> str:
        for bound in self.buckets_ms:
            if duration_ms <= bound:
                return str(bound)
        return "+Inf"


class MetricsCollector:
    """In-process metrics collector with Prometheus text output."""

    def __init__(self, buckets_ms: Iterable[int] | None = None) -> None:
        self._lock = Lock()
        self._buckets_ms = list(buckets_ms or DEFAULT_BUCKETS_MS)
        self._request_counts: dict[tuple[str, str, str], int] = defaultdict(int)
        self._request_durations = _Histogram(self._buckets_ms)
        self._external_counts: dict[tuple[str, str, str], int] = defaultdict(int)
        self._external_durations = _Histogram(self._buckets_ms)
        self._retrieval_counts: dict[tuple[str, str], int] = defaultdict(int)
        self._retrieval_durations = _Histogram(self._buckets_ms)
        self._context_counts: dict[str, int] = defaultdict(int)

    def observe_request(
        self,
        method: str,
        path: str,
        status_code: int,
        duration_ms: float,
    ) -> None:
        """Record a single request observation."""
        with self._lock:
            self._request_counts[(method, path, str(status_code))] += 1
            self._request_durations.observe((method, path), duration_ms)

    def observe_external_api(
        self,
        provider: str,
        operation: str,
        status_code: int,
        duration_ms: float,
    ) -> None:
        """Record an external API call observation."""
        with self._lock:
            self._external_counts[(provider, operation, str(status_code))] += 1
            self._external_durations.observe((provider, operation), duration_ms)

    def observe_retrieval(self, operation: str, success: bool, duration_ms: float) -> None:
        """Record a knowledge retrieval call."""
        status = "success" if success else "error"
        with self._lock:
            self._retrieval_counts[(operation, status)] += 1
            self._retrieval_durations.observe((operation,), duration_ms)

    def observe_context(self, source: str) -> None:
        """Record how a context block was produced (assembled or fallback)."""
        with self._lock:
            self._context_counts[source] += 1

    def render_prometheus(self) -> str:
        """Render metrics in Prometheus text format."""
        lines: list[str] = [
            "# HELP http_requests_total Total HTTP requests",
            "# TYPE http_requests_total counter",
        ]
        with self._lock:
            for (method, path, status), count in sorted(self._request_counts.items()):
                lines.append(
                    f'http_requests_total{{method="{method}",path="{path}",status="{status}"}} {count}'
                )
            lines.extend(
                [
                    "# HELP http_request_duration_ms Request duration in milliseconds",
                    "# TYPE http_request_duration_ms histogram",
                ]
            )
            lines.extend(
                self._request_durations.render("http_request_duration_ms", ("method", "path"))
            )

            lines.extend(
                [
                    "# HELP external_api_requests_total External API requests",
                    "# TYPE external_api_requests_total counter",
                ]
            )
            for (provider, operation, status), count in sorted(self._external_counts.items()):
                lines.append(
                    "external_api_requests_total"
                    f'{{provider="{provider}",operation="{operation}",status="{status}"}} {count}'
                )
            lines.extend(
                [
                    "# HELP external_api_duration_ms External API duration in milliseconds",
                    "# TYPE external_api_duration_ms histogram",
                ]
            )
            lines.extend(
                self._external_durations.render(
                    "external_api_duration_ms", ("provider", "operation")
                )
            )

            lines.extend(
                [
                    "# HELP retrieval_requests_total Knowledge retrieval calls",
                    "# TYPE retrieval_requests_total counter",
                ]
            )
            for (operation, status), count in sorted(self._retrieval_counts.items()):
                lines.append(
                    f'retrieval_requests_total{{operation="{operation}",status="{status}"}} {count}'
                )
            lines.extend(
                [
                    "# HELP retrieval_duration_ms Knowledge retrieval duration in milliseconds",
                    "# TYPE retrieval_duration_ms histogram",
                ]
            )
            lines.extend(self._retrieval_durations.render("retrieval_duration_ms", ("operation",)))

            lines.extend(
                [
                    "# HELP context_builds_total Context blocks built by source",
                    "# TYPE context_builds_total counter",
                ]
            )
            for source, count in sorted(self._context_counts.items()):
                lines.append(f'context_builds_total{{source="{source}"}} {count}')
        return "\n".join(lines) + "\n"


class PrometheusMetrics:
    """Prometheus client-based metrics backend."""

    def __init__(self, buckets_ms: Iterable[int]) -> None:
        from prometheus_client import CollectorRegistry, Counter, Histogram

        self._registry = CollectorRegistry()
        self._buckets_ms = list(buckets_ms)

        self._http_requests_total = Counter(
            "http_requests_total",
            "Total HTTP requests",
            ["method", "path", "status"],
            registry=self._registry,
        )
        self._http_request_duration_ms = Histogram(
            "http_request_duration_ms",
            "Request duration in milliseconds",
            ["method", "path"],
            buckets=self._buckets_ms,
            registry=self._registry,
        )
        self._external_api_requests_total = Counter(
            "external_api_requests_total",
            "External API requests",
            ["provider", "operation", "status"],
            registry=self._registry,
        )
        self._external_api_duration_ms = Histogram(
            "external_api_duration_ms",
            "External API duration in milliseconds",
            ["provider", "operation"],
            buckets=self._buckets_ms,
            registry=self._registry,
        )
        self._retrieval_requests_total = Counter(
            "retrieval_requests_total",
            "Knowledge retrieval calls",
            ["operation", "status"],
            registry=self._registry,
        )
        self._retrieval_duration_ms = Histogram(
            "retrieval_duration_ms",
            "Knowledge retrieval duration in milliseconds",
            ["operation"],
            buckets=self._buckets_ms,
            registry=self._registry,
        )
        self._context_builds_total = Counter(
            "context_builds_total",
            "Context blocks built by source",
            ["source"],
            registry=self._registry,
        )

    def observe_request(
        self,
        method: str,
        path: str,
        status_code: int,
        duration_ms: float,
    ) -> None:
        self._http_requests_total.labels(method, path, str(status_code)).inc()
        self._http_request_duration_ms.labels(method, path).observe(duration_ms)

    def observe_external_api(
        self,
        provider: str,
        operation: str,
        status_code: int,
        duration_ms: float,
    ) -> None:
        self._external_api_requests_total.labels(
            provider, operation, str(status_code)
        ).inc()
        self._external_api_duration_ms.labels(provider, operation).observe(duration_ms)

    def observe_retrieval(self, operation: str, success: bool, duration_ms: float) -> None:
        status = "success" if success else "error"
        self._retrieval_requests_total.labels(operation, status).inc()
        self._retrieval_duration_ms.labels(operation).observe(duration_ms)

    def observe_context(self, source: str) -> None:
        self._context_builds_total.labels(source).inc()

    def render_prometheus(self) -> str:
        from prometheus_client import generate_latest

        return generate_latest(self._registry).decode("utf-8")


_metrics_backend: MetricsBackend | None = None


def get_metrics_backend() -> MetricsBackend:
    """Return a cached metrics backend instance."""
    global _metrics_backend
    if _metrics_backend is None:
        settings = get_settings()
        _metrics_backend = _build_metrics_backend(settings.metrics_backend)
    return _metrics_backend


def _build_metrics_backend(backend: str) -> MetricsBackend:
    if backend == "prometheus":
        return PrometheusMetrics(DEFAULT_BUCKETS_MS)
    return MetricsCollector(DEFAULT_BUCKETS_MS)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Attach request_id, log request/response, and emit metrics."""

    def __init__(
        self,
        app: ASGIApp,
        metrics: MetricsBackend | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        super().__init__(app)
        self.metrics = metrics or get_metrics_backend()
        self.logger = logger or logging.getLogger("focusedu.request")

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        token = request_id_ctx.set(request_id)
        request.state.request_id = request_id

        start = time.perf_counter()
        response: Response | None = None
        try:
            response = await call_next(request)
            return response
        finally:
            duration_ms = (time.perf_counter() - start) * 1000
            status_code = response.status_code if response else 500

            if response is not None:
                response.headers["X-Request-ID"] = request_id

            route = request.scope.get("route")
            route_path = getattr(route, "path", None)
            # Normalize unmatched paths to avoid label cardinality explosion
            path = route_path or "/__unknown__"

            if self.metrics:
                self.metrics.observe_request(
                    request.method,
                    path,
                    status_code,
                    duration_ms,
                )

            log_payload = {
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "route": route_path,
                "status_code": status_code,
                "elapsed_ms": round(duration_ms, 2),
                "client": request.client.host if request.client else None,
            }
            self.logger.info(json.dumps(log_payload))
            request_id_ctx.reset(token)
