"""
Pydantic models

Configuration for the functional toolkit.
"""

from typing import Final

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Size hint assumed for iterators that cannot report their remaining length.
DEFAULT_SIZE_HINT: Final[int] = 16


class FunctionalSettings(BaseSettings):
    """Runtime settings, read from FUNCTIONAL_* environment variables"""

    model_config = SettingsConfigDict(env_prefix="FUNCTIONAL_", frozen=True, extra="ignore")

    default_size_hint: int = Field(
        default=DEFAULT_SIZE_HINT,
        ge=1,
        description="Buffer/pre-allocation size used when an iterator has no count()"
    )
    log_level: str = Field(
        default="WARNING",
        description="Level passed to logging when setup_logging() is called without one"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        """Ensure the level is one logging understands"""
        level = v.strip().upper()
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if level not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Valid levels: {valid_levels}")
        return level
