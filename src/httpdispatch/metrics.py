"""Fault counter for errors that reach the client.

Only server faults are counted: a 500 (or a response whose status was never
set) on a request that produced no usable payload. Partial responses are
expected degradation and stay out of the counter.
"""

from dataclasses import dataclass
from typing import Protocol

from prometheus_client import REGISTRY, CollectorRegistry, Counter

from httpdispatch.logging import LogSink
from httpdispatch.schemas.error import ErrorResponse

DB_ERROR_LABEL = "DB Error"
UNKNOWN_ERROR_LABEL = "Unknown Error"

FAULT_STATUS_CODES = frozenset({500, 0})


@dataclass(frozen=True)
class ErrorLabel:
    """Counter labels for one increment: error category, route template, method."""

    type: str
    path: str
    method: str

    def as_labels(self) -> dict[str, str]:
        return {"type": self.type, "path": self.path, "method": self.method}


class CounterSink(Protocol):
    def increment(self, labels: dict[str, str]) -> None: ...


class PrometheusCounterSink:
    """CounterSink backed by a prometheus_client Counter.

    prometheus_client counters are safe to increment from many threads, so one
    instance is shared by every request.
    """

    def __init__(
        self,
        namespace: str,
        name: str = "error_types",
        registry: CollectorRegistry = REGISTRY,
    ) -> None:
        self.counter = Counter(
            name,
            "Count of server faults returned to clients, by error type, path and method",
            labelnames=("type", "path", "method"),
            namespace=namespace,
            registry=registry,
        )

    def increment(self, labels: dict[str, str]) -> None:
        self.counter.labels(**labels).inc()


class MetricsReporter:
    def __init__(self, counter: CounterSink, logger: LogSink) -> None:
        self.counter = counter
        self.logger = logger

    def report(self, is_partial: bool, response: ErrorResponse, label: ErrorLabel) -> None:
        if response.status_code not in FAULT_STATUS_CODES or is_partial:
            return

        self.logger.error("error_occurred", reason=response.reason, **label.as_labels())
        self.counter.increment(label.as_labels())
