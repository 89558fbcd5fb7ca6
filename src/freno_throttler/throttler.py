from __future__ import annotations

import time
from typing import Any, Callable, Optional, TypeVar

from loguru import logger

from .config import DEFAULT_MAX_WAIT_SECONDS, DEFAULT_WAIT_SECONDS, ThrottlerConfig
from .errors import ClientError, FrenoError, WaitedTooLong
from .instrumenter import (
    CALLED,
    FRENO_ERRORED,
    SUCCEEDED,
    WAITED,
    WAITED_TOO_LONG,
)
from .settings import ThrottlerSettings, get_settings

T = TypeVar("T")

_UNSET: Any = object()


def sleep_for(seconds: float) -> float:
    """Default sleep primitive. Returns the seconds it was asked to wait."""
    time.sleep(seconds)
    return seconds


class BaseThrottler:
    """
    Construction and validation shared by Throttler and AsyncThrottler.

    Arguments may be given directly, or set on the ThrottlerConfig passed to
    ``configure`` before validation:

        def configure(c):
            c.client = client
            c.app = "github"
            c.mapper = static_mapper("mysqla")

        throttler = Throttler(configure=configure)

    Raises ConfigurationError listing every violated rule.
    """

    def __init__(
        self,
        client: Any = None,
        app: Optional[str] = None,
        mapper: Optional[Callable[[Any], Any]] = None,
        *,
        instrumenter: Any = _UNSET,
        wait_seconds: Optional[float] = DEFAULT_WAIT_SECONDS,
        max_wait_seconds: Optional[float] = DEFAULT_MAX_WAIT_SECONDS,
        sleep: Optional[Callable[[float], Any]] = None,
        configure: Optional[Callable[[ThrottlerConfig], None]] = None,
    ):
        cfg = ThrottlerConfig(
            client=client,
            app=app,
            mapper=mapper,
            wait_seconds=wait_seconds,
            max_wait_seconds=max_wait_seconds,
        )
        if instrumenter is not _UNSET:
            cfg.instrumenter = instrumenter
        if configure is not None:
            configure(cfg)
        cfg.validate()

        self._client = cfg.client
        self._app = cfg.app
        self._mapper = cfg.mapper
        self._instrumenter = cfg.instrumenter
        self._wait_seconds = cfg.wait_seconds
        self._max_wait_seconds = cfg.max_wait_seconds
        self._sleep = sleep or self._default_sleep()

    @classmethod
    def from_settings(
        cls,
        client: Any,
        mapper: Callable[[Any], Any],
        settings: Optional[ThrottlerSettings] = None,
        **overrides: Any,
    ):
        """Build a throttler with app and timings taken from ThrottlerSettings."""
        s = settings or get_settings()
        kwargs = {
            "app": s.app,
            "wait_seconds": s.wait_seconds,
            "max_wait_seconds": s.max_wait_seconds,
        }
        kwargs.update(overrides)
        return cls(client, mapper=mapper, **kwargs)

    def _default_sleep(self) -> Callable[[float], Any]:
        return sleep_for

    # ---------- read-only configuration

    @property
    def client(self) -> Any:
        return self._client

    @property
    def app(self) -> str:
        return self._app

    @property
    def mapper(self) -> Callable[[Any], Any]:
        return self._mapper

    @property
    def instrumenter(self) -> Any:
        return self._instrumenter

    @property
    def wait_seconds(self) -> float:
        return self._wait_seconds

    @property
    def max_wait_seconds(self) -> float:
        return self._max_wait_seconds

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(app={self._app!r}, wait_seconds={self._wait_seconds}, "
            f"max_wait_seconds={self._max_wait_seconds})"
        )

    # ---------- event helpers

    def _client_failed(self, exc: FrenoError, store_name: Any) -> ClientError:
        logger.warning(
            f"freno check failed: app={self._app} store={store_name} "
            f"error={type(exc).__name__}: {exc}"
        )
        self._instrumenter.instrument(FRENO_ERRORED, {"error": exc})
        return ClientError(exc)

    def _check_waited(self, waited: float) -> None:
        logger.debug(
            f"stores behind for app={self._app}: waited {waited}s of {self._max_wait_seconds}s"
        )
        self._instrumenter.instrument(
            WAITED, {"waited": waited, "max": self._max_wait_seconds}
        )
        if waited > self._max_wait_seconds:
            logger.warning(
                f"gave up waiting for stores: app={self._app} waited={waited}s "
                f"max={self._max_wait_seconds}s"
            )
            self._instrumenter.instrument(
                WAITED_TOO_LONG, {"waited": waited, "max": self._max_wait_seconds}
            )
            raise WaitedTooLong(waited, self._max_wait_seconds)

    def _record_success(self, waited: float) -> None:
        if waited:
            logger.debug(f"stores caught up for app={self._app} after {waited}s")
        self._instrumenter.instrument(SUCCEEDED, {"waited": waited})


class Throttler(BaseThrottler):
    """
    Runs a unit of work only once every store it touches is healthy.

    Usage:
        throttler = Throttler(client, "github", static_mapper("mysqla"))
        throttler.throttle(lambda: write_rows(rows))

    Polls every ``wait_seconds`` while any store is behind; raises
    WaitedTooLong once the accumulated wait exceeds ``max_wait_seconds``,
    and ClientError if the client raises FrenoError. The work never runs on
    either failure path.
    """

    def throttle(self, work: Callable[[], T], context: Any = None) -> T:
        return self._instrumenter.instrument(CALLED, {}, lambda: self._throttle(work, context))

    def wait(self) -> float:
        """Sleep one poll interval; returns the seconds actually waited."""
        return self._sleep(self._wait_seconds)

    # ---------- internals

    def _throttle(self, work: Callable[[], T], context: Any) -> T:
        waited = 0
        while True:
            if self._all_stores_caught_up(context):
                self._record_success(waited)
                return work()
            waited += self.wait()
            self._check_waited(waited)

    def _all_stores_caught_up(self, context: Any) -> bool:
        for store_name in self._mapper(context):
            try:
                healthy = self._client.check(app=self._app, store_name=store_name)
            except FrenoError as e:
                raise self._client_failed(e, store_name) from e
            if not healthy:
                return False
        return True

