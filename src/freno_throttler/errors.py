"""
Exceptions raised by the freno throttler.

Health clients raise FrenoError (or a subclass) for client-level failures;
the throttler wraps those into ClientError. Everything the throttler raises
itself derives from ThrottlerError.
"""

from __future__ import annotations

from typing import Sequence


class FrenoError(Exception):
    """Base error for health-check client failures."""

    pass


class ThrottlerError(Exception):
    """Any throttler-related error."""

    pass


class ConfigurationError(ThrottlerError):
    """Invalid throttler configuration. Lists every violated rule."""

    def __init__(self, errors: Sequence[str]):
        self.errors = list(errors)
        super().__init__("Invalid throttler configuration: " + "; ".join(self.errors))


class ClientError(ThrottlerError):
    """Raised if the freno client errored."""

    def __init__(self, cause: BaseException):
        self.cause = cause
        super().__init__(f"{type(cause).__name__}: {cause}")


class WaitedTooLong(ThrottlerError):
    """Raised if the throttler waited too long for the stores to catch up."""

    def __init__(self, waited_seconds: float, max_wait_seconds: float):
        self.waited_seconds = waited_seconds
        self.max_wait_seconds = max_wait_seconds
        super().__init__(
            f"Waited {waited_seconds} seconds. Max allowed was {max_wait_seconds} seconds"
        )
