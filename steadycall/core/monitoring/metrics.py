"""Prometheus metrics helpers for steadycall executors and gates."""

from __future__ import annotations

from prometheus_client import CollectorRegistry, Counter, Histogram, generate_latest

_ALLOWED_GATE_DECISIONS = {
    "armed",
    "superseded",
    "executed",
    "dropped",
}


class MetricsCollector:
    """Collects Prometheus metrics for retries, safe runs and gated calls."""

    def __init__(self, *, registry: CollectorRegistry | None = None) -> None:
        self.registry = registry or CollectorRegistry()
        self.attempts_total = Counter(
            "steadycall_attempts_total",
            "Operation attempts made by retrying executors.",
            ("operation", "outcome"),
            registry=self.registry,
        )
        self.retry_exhausted_total = Counter(
            "steadycall_retry_exhausted_total",
            "Retry sequences that ended without a successful attempt.",
            ("operation",),
            registry=self.registry,
        )
        self.backoff_seconds = Histogram(
            "steadycall_backoff_seconds",
            "Backoff waits between consecutive attempts.",
            buckets=(0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 4.0, 8.0, 16.0, 32.0, float("inf")),
            registry=self.registry,
        )
        self.safe_run_failures_total = Counter(
            "steadycall_safe_run_failures_total",
            "Failures captured into outcomes by safe_run.",
            ("operation",),
            registry=self.registry,
        )
        self.gate_calls_total = Counter(
            "steadycall_gate_calls_total",
            "Calls routed through debounce and throttle gates grouped by decision.",
            ("policy", "decision"),
            registry=self.registry,
        )

    def record_attempt(self, operation: str, *, success: bool) -> None:
        """Record one attempt of a retried operation."""

        self.attempts_total.labels(operation=operation, outcome="success" if success else "failure").inc()

    def observe_backoff(self, delay_seconds: float) -> None:
        self.backoff_seconds.observe(delay_seconds)

    def record_exhausted(self, operation: str) -> None:
        self.retry_exhausted_total.labels(operation=operation).inc()

    def record_safe_run_failure(self, operation: str) -> None:
        self.safe_run_failures_total.labels(operation=operation).inc()

    def record_gate_call(self, policy: str, decision: str) -> None:
        """Track gate activity with constrained decision labels."""

        label = decision if decision in _ALLOWED_GATE_DECISIONS else "__other__"
        self.gate_calls_total.labels(policy=policy, decision=label).inc()

    def render(self) -> bytes:
        """Render metrics in Prometheus exposition format."""

        return generate_latest(self.registry)


_DEFAULT_COLLECTOR: MetricsCollector | None = None


def get_metrics_collector() -> MetricsCollector:
    """Return the global metrics collector instance."""

    global _DEFAULT_COLLECTOR
    if _DEFAULT_COLLECTOR is None:
        _DEFAULT_COLLECTOR = MetricsCollector()
    return _DEFAULT_COLLECTOR


def configure_metrics_collector(collector: MetricsCollector | None) -> None:
    """Override the global metrics collector for application wiring or tests."""

    global _DEFAULT_COLLECTOR
    _DEFAULT_COLLECTOR = collector
