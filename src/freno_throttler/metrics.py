"""
Prometheus metrics for the throttler.

Registered in the global REGISTRY on import; PrometheusInstrumenter feeds them.
"""

from prometheus_client import Counter, Histogram

THROTTLE_EVENTS_TOTAL = Counter(
    "freno_throttler_events_total",
    "Total number of throttler lifecycle events",
    ["app", "event"],
)

THROTTLE_WAITED_SECONDS = Histogram(
    "freno_throttler_waited_seconds",
    "Seconds spent waiting for stores before work ran",
    ["app"],
    buckets=[0, 0.5, 1, 2.5, 5, 10, 30, 60],
)

THROTTLE_CALL_SECONDS = Histogram(
    "freno_throttler_call_seconds",
    "Duration of a full throttle call, including the unit of work",
    ["app"],
)
