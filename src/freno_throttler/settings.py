from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ThrottlerSettings(BaseSettings):
    """Throttler settings read from FRENO_THROTTLER_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="FRENO_THROTTLER_",
        env_file=".env",
        extra="ignore",
        case_sensitive=False,
    )

    app: Optional[str] = Field(None, description="App identifier sent to freno")
    wait_seconds: float = Field(0.5, gt=0, description="Poll interval while stores are behind")
    max_wait_seconds: float = Field(10.0, gt=0, description="Give up once total wait exceeds this")


@lru_cache()
def get_settings() -> ThrottlerSettings:
    return ThrottlerSettings()
