"""
Example usage of the freno throttler.

Runs against an in-process stand-in for freno so it can be executed anywhere:
the replica is reported behind for the first two checks, then caught up.
"""

import asyncio

from freno_throttler import (
    AsyncThrottler,
    FrenoError,
    MemoryInstrumenter,
    Throttler,
    WaitedTooLong,
    static_mapper,
)


class LaggingReplicaClient:
    """Pretends a replica needs a couple of polls to catch up."""

    def __init__(self, behind_for: int = 2):
        self._behind_for = behind_for

    def check(self, *, app: str, store_name: str) -> bool:
        if store_name == "broken":
            raise FrenoError(f"freno has no store named {store_name}")
        if self._behind_for > 0:
            self._behind_for -= 1
            return False
        return True


class AsyncLaggingReplicaClient(LaggingReplicaClient):
    async def check(self, *, app: str, store_name: str) -> bool:
        await asyncio.sleep(0)
        return super().check(app=app, store_name=store_name)


def sync_example():
    print("=== Synchronous Usage ===")

    instrumenter = MemoryInstrumenter()
    throttler = Throttler(
        LaggingReplicaClient(),
        "github",
        static_mapper("mysqla"),
        instrumenter=instrumenter,
        wait_seconds=0.1,
        max_wait_seconds=1,
    )

    rows = throttler.throttle(lambda: 500)
    print(f"Wrote {rows} rows")
    print(f"Events: {instrumenter.names()}")

    # Never catches up within the budget
    impatient = Throttler(
        LaggingReplicaClient(behind_for=100),
        "github",
        static_mapper("mysqla"),
        wait_seconds=0.1,
        max_wait_seconds=0.3,
    )
    try:
        impatient.throttle(lambda: 500)
    except WaitedTooLong as e:
        print(f"Gave up: {e}")


async def async_example():
    print("\n=== Asynchronous Usage ===")

    def configure(c):
        c.client = AsyncLaggingReplicaClient()
        c.app = "github"
        c.mapper = lambda context: context["clusters"]
        c.wait_seconds = 0.1
        c.max_wait_seconds = 1

    throttler = AsyncThrottler(configure=configure)

    async def write():
        await asyncio.sleep(0)
        return 250

    rows = await throttler.throttle(write, context={"clusters": ["mysqla", "mysqlb"]})
    print(f"Wrote {rows} rows")


if __name__ == "__main__":
    sync_example()
    asyncio.run(async_example())
