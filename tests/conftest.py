"""
Pytest configuration and fixtures for freno-throttler.

Provides fake freno clients, a stubbed sleep primitive and a recording
instrumenter so the throttle loop runs deterministically and instantly.
"""

import asyncio
import sys

import pytest

from freno_throttler import FrenoError, MemoryInstrumenter

# Set policy *before* pytest-asyncio creates any loops
if sys.platform.startswith("win"):
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())


class FakeFrenoClient:
    """Replays scripted answers; the last answer repeats forever.

    Answers are booleans, or exceptions to raise from ``check``.
    """

    def __init__(self, *answers):
        self._answers = list(answers) or [True]
        self.calls = []

    def _next(self, app, store_name):
        self.calls.append((app, store_name))
        answer = self._answers.pop(0) if len(self._answers) > 1 else self._answers[0]
        if isinstance(answer, BaseException):
            raise answer
        return answer

    def check(self, *, app, store_name):
        return self._next(app, store_name)


class FakeAsyncFrenoClient(FakeFrenoClient):
    async def check(self, *, app, store_name):
        await asyncio.sleep(0)
        return self._next(app, store_name)


class RecordingSleep:
    """Sleep stub: records requested durations and returns them unchanged."""

    def __init__(self):
        self.calls = []

    def __call__(self, seconds):
        self.calls.append(seconds)
        return seconds


class RecordingAsyncSleep(RecordingSleep):
    async def __call__(self, seconds):
        self.calls.append(seconds)
        return seconds


@pytest.fixture
def make_client():
    """Factory for scripted sync clients."""
    return FakeFrenoClient


@pytest.fixture
def make_async_client():
    """Factory for scripted async clients."""
    return FakeAsyncFrenoClient


@pytest.fixture
def fake_sleep():
    return RecordingSleep()


@pytest.fixture
def fake_async_sleep():
    return RecordingAsyncSleep()


@pytest.fixture
def instrumenter():
    return MemoryInstrumenter()


@pytest.fixture
def freno_error():
    return FrenoError("freno unavailable")


@pytest.fixture
def clean_settings(monkeypatch, tmp_path):
    """Isolate settings from the host environment and any local .env file."""
    from freno_throttler.settings import get_settings

    monkeypatch.chdir(tmp_path)
    for var in ("FRENO_THROTTLER_APP", "FRENO_THROTTLER_WAIT_SECONDS", "FRENO_THROTTLER_MAX_WAIT_SECONDS"):
        monkeypatch.delenv(var, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
