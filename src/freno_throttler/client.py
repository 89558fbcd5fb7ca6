"""
Health-check client interfaces consumed by the throttler.

The freno protocol itself lives elsewhere; a client only has to answer
whether ``store_name`` is healthy for ``app`` and raise FrenoError (or a
subclass) when it cannot tell.
"""

from __future__ import annotations

from typing import Hashable, Protocol, runtime_checkable


@runtime_checkable
class FrenoClient(Protocol):
    def check(self, *, app: str, store_name: Hashable) -> bool: ...


@runtime_checkable
class AsyncFrenoClient(Protocol):
    async def check(self, *, app: str, store_name: Hashable) -> bool: ...
