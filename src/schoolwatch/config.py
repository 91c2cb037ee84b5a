"""Client configuration loaded from environment variables.

Every field can be overridden with a ``SCHOOLWATCH_``-prefixed variable or a
.env file in the working directory.
"""

from pydantic import Field
from pydantic_settings import BaseSettings


class SchoolWatchConfig(BaseSettings):
    """SchoolWatch client configuration.

    Settings are loaded from environment variables with sensible defaults.
    For local development, create a .env file in the project root.
    """

    # Remote school API (plain HTTPS GET, no auth)
    api_base_url: str = Field(
        default="https://school-api-1i8w.onrender.com",
        description="Base URL of the school data API",
    )
    request_timeout: float | None = Field(
        default=None,
        description="Per-request timeout in seconds (None keeps the transport default)",
    )

    # Local state
    state_dir: str = Field(
        default="data/state",
        description="Directory for the cached timetable and saved preferences",
    )
    cache_key: str = Field(
        default="cachedTimetable",
        description="Name of the single timetable cache slot",
    )

    # Caller defaults when no preference has been saved
    default_grade: int = Field(default=2, ge=1)
    default_classno: int = Field(default=6, ge=1)
    school_name: str = Field(
        default="",
        description="School name sent to the calendar events endpoint",
    )
    meal_lookahead_days: int = Field(
        default=15,
        ge=0,
        description="How many days ahead the meal listing covers",
    )

    # Logging
    log_json: bool = Field(
        default=False,
        description="Output logs in JSON format (for production)",
    )
    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    model_config = {
        "env_prefix": "SCHOOLWATCH_",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


_config: SchoolWatchConfig | None = None


def get_config() -> SchoolWatchConfig:
    """Return the process-wide configuration, loading it on first use."""
    global _config
    if _config is None:
        _config = SchoolWatchConfig()
    return _config


def reset_config() -> None:
    """Forget the loaded configuration so the next get_config() re-reads it."""
    global _config
    _config = None
