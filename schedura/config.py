"""
Environment-driven settings for the Schedura API.
Values come from the process environment or a local .env file.
"""

import os
from dotenv import load_dotenv
from .scheduling.core.constants import DEFAULT_HORIZON_DAYS, DEFAULT_ROUNDING_MINUTES
from .scheduling.core.exceptions import ConfigurationError

load_dotenv()


def _int_setting(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}")


class Settings:
    """Scheduler defaults applied when a request leaves them out."""
    def __init__(self):
        self.horizon_days = _int_setting("SCHEDULER_HORIZON_DAYS", DEFAULT_HORIZON_DAYS)
        self.rounding_minutes = _int_setting("SCHEDULER_ROUNDING_MINUTES", DEFAULT_ROUNDING_MINUTES)
        self.tie_break = os.getenv("SCHEDULER_TIE_BREAK", "shortest_first")
        self.default_timezone = os.getenv("SCHEDULER_DEFAULT_TIMEZONE", "UTC")
        self.log_level = os.getenv("SCHEDURA_LOG_LEVEL", "INFO").upper()
        self.host = os.getenv("SCHEDURA_HOST", "0.0.0.0")
        self.port = _int_setting("SCHEDURA_PORT", 8000)

        if self.horizon_days <= 0:
            raise ConfigurationError(f"SCHEDULER_HORIZON_DAYS must be positive, got {self.horizon_days}")


def get_settings() -> Settings:
    return Settings()
