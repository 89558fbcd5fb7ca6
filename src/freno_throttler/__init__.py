"""
freno throttler

Guards writes behind freno health checks: a unit of work only runs once every
store it touches reports healthy, polling at a fixed interval up to a maximum
total wait.

Usage:
    from freno_throttler import Throttler, static_mapper

    throttler = Throttler(freno_client, "github", static_mapper("mysqla"))
    throttler.throttle(lambda: write_rows(rows))

    # asyncio
    athrottler = AsyncThrottler(async_client, "github", static_mapper("mysqla"))
    await athrottler.throttle(lambda: awrite_rows(rows))
"""

from .athrottler import AsyncThrottler
from .client import AsyncFrenoClient, FrenoClient
from .config import ThrottlerConfig
from .errors import ClientError, ConfigurationError, FrenoError, ThrottlerError, WaitedTooLong
from .instrumenter import (
    Instrumenter,
    MemoryInstrumenter,
    NoopInstrumenter,
    PrometheusInstrumenter,
    ThrottleEvent,
)
from .mapper import identity_mapper, static_mapper
from .settings import ThrottlerSettings, get_settings
from .throttler import Throttler

__version__ = "1.0.0"
__all__ = [
    "Throttler",
    "AsyncThrottler",
    "ThrottlerConfig",
    "ThrottlerSettings",
    "get_settings",
    # collaborators
    "FrenoClient",
    "AsyncFrenoClient",
    "Instrumenter",
    "NoopInstrumenter",
    "MemoryInstrumenter",
    "PrometheusInstrumenter",
    "ThrottleEvent",
    "identity_mapper",
    "static_mapper",
    # errors
    "ThrottlerError",
    "ConfigurationError",
    "ClientError",
    "WaitedTooLong",
    "FrenoError",
]
