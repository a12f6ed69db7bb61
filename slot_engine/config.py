"""
Engine configuration.

Defaults mirror the booking system: ceremonies between 15 and 480 minutes,
60 minutes when unspecified, a 90 day default search window and a hard cap
of one year per request.
"""

import os
import logging
from typing import Mapping, Optional, Set

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

ENV_PREFIX = "CEREMONY_SLOTS_"


def _to_bool(value: Optional[str], default: bool = False) -> bool:
    """Normalize environment strings such as "true"/"1" into booleans."""
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


class EngineSettings(BaseModel):
    """Immutable snapshot of the engine's tunables."""

    min_duration_minutes: int = Field(default=15, ge=1)
    max_duration_minutes: int = Field(default=480, ge=1)
    default_duration_minutes: int = Field(default=60, ge=1)

    default_window_days: int = Field(default=90, ge=0, description="Window length when the caller gives no end date")
    max_window_days: int = Field(default=366, ge=1, description="Upper bound on (end - start) to bound work per request")

    # Skip malformed rule rows (with a warning) instead of aborting the load
    best_effort: bool = Field(default=False)

    # Assumed when a persisted celebrant or ceremony type carries no languages
    default_languages: Set[str] = Field(default_factory=lambda: {"nl"})

    @field_validator('default_languages')
    @classmethod
    def normalize_languages(cls, v):
        return {lang.strip().lower() for lang in v if lang.strip()}

    @model_validator(mode='after')
    def validate_bounds(self):
        if not (self.min_duration_minutes <= self.default_duration_minutes <= self.max_duration_minutes):
            raise ValueError("default_duration_minutes must lie between min and max duration")
        if self.default_window_days > self.max_window_days:
            raise ValueError("default_window_days cannot exceed max_window_days")
        return self

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "EngineSettings":
        """Build settings from CEREMONY_SLOTS_* environment variables."""
        env = os.environ if environ is None else environ
        values = {}

        for field_name in ("min_duration_minutes", "max_duration_minutes", "default_duration_minutes",
                           "default_window_days", "max_window_days"):
            raw = env.get(ENV_PREFIX + field_name.upper())
            if raw is not None and raw.strip():
                try:
                    values[field_name] = int(raw)
                except ValueError:
                    raise ConfigurationError(f"{ENV_PREFIX}{field_name.upper()} must be an integer, got {raw!r}") from None

        if (ENV_PREFIX + "BEST_EFFORT") in env:
            values["best_effort"] = _to_bool(env.get(ENV_PREFIX + "BEST_EFFORT"))

        languages = env.get(ENV_PREFIX + "DEFAULT_LANGUAGES")
        if languages:
            values["default_languages"] = {lang for lang in languages.split(",") if lang.strip()}

        try:
            settings = cls(**values)
        except ValueError as e:
            raise ConfigurationError(f"Invalid {ENV_PREFIX}* settings: {e}") from e
        logger.debug(f"Loaded engine settings: {settings.model_dump()}")
        return settings
