"""
Instrumenters receive lifecycle events from the throttler.

Any object with ``instrument(event_name, payload=None, body=None)`` works.
It records the event, calls ``body`` if given and returns its result, letting
exceptions from ``body`` propagate unchanged. Because the ``throttle.called``
event wraps the whole operation, an instrumenter that times ``body`` measures
the full throttle duration.

AsyncThrottler prefers an optional ``async ainstrument(event_name, payload,
body)`` for the ``throttle.called`` event, where ``body()`` returns an
awaitable that must be awaited inside the instrumenter's scope. Instrumenters
without it still work; their ``called`` scope then closes before the awaited
body runs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from time import monotonic
from types import MappingProxyType
from typing import (
    Any,
    Awaitable,
    Callable,
    Mapping,
    Optional,
    Protocol,
    TypeVar,
    runtime_checkable,
)

from .metrics import THROTTLE_CALL_SECONDS, THROTTLE_EVENTS_TOTAL, THROTTLE_WAITED_SECONDS

R = TypeVar("R")

CALLED = "throttle.called"
SUCCEEDED = "throttle.succeeded"
WAITED = "throttle.waited"
WAITED_TOO_LONG = "throttle.waited_too_long"
FRENO_ERRORED = "throttle.freno_errored"


@runtime_checkable
class Instrumenter(Protocol):
    """Protocol for throttler event sinks."""

    def instrument(
        self,
        event_name: str,
        payload: Optional[Mapping[str, Any]] = None,
        body: Optional[Callable[[], R]] = None,
    ) -> Optional[R]: ...


class NoopInstrumenter:
    """Discards events; only runs the body. Default instrumenter."""

    def instrument(self, event_name, payload=None, body=None):
        if body is not None:
            return body()
        return None

    async def ainstrument(
        self,
        event_name: str,
        payload: Optional[Mapping[str, Any]] = None,
        body: Optional[Callable[[], Awaitable[R]]] = None,
    ) -> Optional[R]:
        if body is not None:
            return await body()
        return None


@dataclass(frozen=True)
class ThrottleEvent:
    """Event recorded by MemoryInstrumenter. The payload is read-only."""

    name: str
    payload: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "payload", MappingProxyType(dict(self.payload)))


class MemoryInstrumenter:
    """
    Keeps every event in memory, in emission order.

    Handy in tests and for ad-hoc debugging:

        instrumenter = MemoryInstrumenter()
        throttler = Throttler(client, "github", mapper, instrumenter=instrumenter)
        throttler.throttle(work)
        instrumenter.names()  # ["throttle.called", "throttle.succeeded"]
    """

    def __init__(self) -> None:
        self.events: list[ThrottleEvent] = []

    def instrument(self, event_name, payload=None, body=None):
        self.events.append(ThrottleEvent(event_name, payload or {}))
        if body is not None:
            return body()
        return None

    async def ainstrument(self, event_name, payload=None, body=None):
        self.events.append(ThrottleEvent(event_name, payload or {}))
        if body is not None:
            return await body()
        return None

    def events_for(self, event_name: str) -> list[dict]:
        """Payloads of every event with the given name, as plain dicts."""
        return [dict(e.payload) for e in self.events if e.name == event_name]

    def count(self, event_name: str) -> int:
        return sum(1 for e in self.events if e.name == event_name)

    def names(self) -> list[str]:
        return [e.name for e in self.events]

    def clear(self) -> None:
        self.events.clear()


class PrometheusInstrumenter:
    """
    Publishes throttler events as Prometheus metrics.

    Every event bumps ``freno_throttler_events_total{app, event}``. The
    ``waited`` value of a succeeded event lands in
    ``freno_throttler_waited_seconds`` and the duration of the whole
    ``throttle.called`` body in ``freno_throttler_call_seconds``, for both
    Throttler and AsyncThrottler.

    Event payloads do not carry the app, so ``app`` is the metric label only.
    Pass the same value the throttler is built with:

        Throttler(client, "github", mapper, instrumenter=PrometheusInstrumenter("github"))
    """

    def __init__(self, app: str = "default"):
        self.app = app

    def _record(self, event_name, payload) -> None:
        THROTTLE_EVENTS_TOTAL.labels(app=self.app, event=event_name).inc()
        if event_name == SUCCEEDED and payload:
            THROTTLE_WAITED_SECONDS.labels(app=self.app).observe(payload.get("waited", 0))

    def instrument(self, event_name, payload=None, body=None):
        self._record(event_name, payload)

        if body is None:
            return None
        if event_name != CALLED:
            return body()

        t0 = monotonic()
        try:
            return body()
        finally:
            THROTTLE_CALL_SECONDS.labels(app=self.app).observe(monotonic() - t0)

    async def ainstrument(self, event_name, payload=None, body=None):
        self._record(event_name, payload)

        if body is None:
            return None
        if event_name != CALLED:
            return await body()

        t0 = monotonic()
        try:
            return await body()
        finally:
            THROTTLE_CALL_SECONDS.labels(app=self.app).observe(monotonic() - t0)
