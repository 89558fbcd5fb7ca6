"""
Mutable throttler configuration and its validation rules.

The throttler builds a ThrottlerConfig from its constructor arguments, lets an
optional ``configure`` callback mutate it, then validates it once. Every
violated rule is collected into a single ConfigurationError.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from .errors import ConfigurationError
from .instrumenter import NoopInstrumenter

DEFAULT_WAIT_SECONDS = 0.5
DEFAULT_MAX_WAIT_SECONDS = 10.0

REQUIRED_FIELDS = ("client", "app", "mapper", "instrumenter", "wait_seconds", "max_wait_seconds")


@dataclass
class ThrottlerConfig:
    client: Any = None
    app: Optional[str] = None
    mapper: Any = None
    instrumenter: Any = field(default_factory=NoopInstrumenter)
    wait_seconds: Optional[float] = DEFAULT_WAIT_SECONDS
    max_wait_seconds: Optional[float] = DEFAULT_MAX_WAIT_SECONDS

    def errors(self) -> list[str]:
        """All violated rules, in a stable order. Empty when valid."""
        errors = [f"{name} must be provided" for name in REQUIRED_FIELDS if getattr(self, name) is None]

        if self.wait_seconds is not None and self.wait_seconds <= 0:
            errors.append(f"wait_seconds ({self.wait_seconds}) has to be greater than 0")

        if self.wait_seconds is not None and self.max_wait_seconds is not None:
            if self.max_wait_seconds <= self.wait_seconds:
                errors.append(
                    f"max_wait_seconds ({self.max_wait_seconds}) has to be greater than "
                    f"wait_seconds ({self.wait_seconds})"
                )
        return errors

    def validate(self) -> None:
        errors = self.errors()
        if errors:
            raise ConfigurationError(errors)
