"""
Configuration for the Prediction Timeline client.

Tuning constants for the timeline, session ids and the hosted database
client live here so they are easy to find and adjust. Environment
overrides are read by load_service_config() and load_timeline_settings(),
which raise ConfigError for missing or malformed values.
"""

import math
import os
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Mapping, Optional


class ConfigError(RuntimeError):
    """Raised when configuration is missing or malformed."""


def _env(name: str, default: str) -> str:
    return os.environ.get(name, default)


# ============================================================================
# HOSTED DATABASE
# ============================================================================

# Environment variables holding the service endpoint and anon key.
# SB_* names are accepted as fallbacks.
URL_ENV_VARS = ("SUPABASE_URL", "SB_URL")
KEY_ENV_VARS = ("SUPABASE_ANON_KEY", "SB_ANON_KEY")
TIMEOUT_ENV_VAR = "PREDICTION_TIMELINE_TIMEOUT"

PREDICTIONS_TABLE = "predictions"
REST_PATH = "/rest/v1"

REQUEST_TIMEOUT = 15                # seconds

MAX_NAME_LENGTH = 255               # VARCHAR(255) on the table


# ============================================================================
# DISPLAY
# ============================================================================

# Aware timestamps (created_at) are shown in this zone.
DISPLAY_TIMEZONE = _env("PREDICTION_TIMELINE_TZ", "US/Eastern")


# ============================================================================
# SESSION IDS
# ============================================================================

# "base36" (random + timestamp) or "uuid4"
SESSION_ID_SCHEME = _env("PREDICTION_TIMELINE_SESSION_SCHEME", "base36")


# ============================================================================
# DEFAULT TIMELINE
# ============================================================================

TIMELINE_START = date(2025, 1, 1)
TIMELINE_END = date(2025, 12, 31)
TIMELINE_WIDTH = 1000.0

START_ENV_VAR = "PREDICTION_TIMELINE_START"
END_ENV_VAR = "PREDICTION_TIMELINE_END"
WIDTH_ENV_VAR = "PREDICTION_TIMELINE_WIDTH"


def _parse_env(env: Mapping[str, str], name: str, parse: Callable[[str], Any], default: Any) -> Any:
    """Parse an optional environment value, raising ConfigError if malformed."""
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return parse(raw.strip())
    except ValueError as e:
        raise ConfigError(f"Invalid {name}={raw!r}: {e}") from e


@dataclass(frozen=True)
class ServiceConfig:
    """Endpoint and credentials for the hosted predictions table."""

    url: str
    key: str
    table: str = PREDICTIONS_TABLE
    timeout: int = REQUEST_TIMEOUT

    @property
    def table_url(self) -> str:
        return f"{self.url.rstrip('/')}{REST_PATH}/{self.table}"


@dataclass(frozen=True)
class TimelineSettings:
    """Date range and pixel width of the timeline."""

    start_date: date = TIMELINE_START
    end_date: date = TIMELINE_END
    width: float = TIMELINE_WIDTH


def _first_set(env: Mapping[str, str], names) -> Optional[str]:
    for name in names:
        value = env.get(name)
        if value:
            return value
    return None


def load_service_config(env: Optional[Mapping[str, str]] = None) -> ServiceConfig:
    """
    Build the service config from environment variables.

    Args:
        env: Mapping to read from (defaults to os.environ)

    Returns:
        ServiceConfig

    Raises:
        ConfigError: If the URL or key is not set, or the timeout is invalid
    """
    if env is None:
        env = os.environ

    url = _first_set(env, URL_ENV_VARS)
    key = _first_set(env, KEY_ENV_VARS)

    missing = []
    if not url:
        missing.append(URL_ENV_VARS[0])
    if not key:
        missing.append(KEY_ENV_VARS[0])
    if missing:
        raise ConfigError(f"Missing service configuration: {', '.join(missing)}")

    timeout = _parse_env(env, TIMEOUT_ENV_VAR, int, REQUEST_TIMEOUT)
    if timeout <= 0:
        raise ConfigError(f"{TIMEOUT_ENV_VAR} must be positive, got {timeout}")

    return ServiceConfig(url=url, key=key, timeout=timeout)


def load_timeline_settings(env: Optional[Mapping[str, str]] = None) -> TimelineSettings:
    """
    Build the timeline settings, applying environment overrides.

    Raises:
        ConfigError: If a value is malformed, start equals end, or width is 0
    """
    if env is None:
        env = os.environ

    start = _parse_env(env, START_ENV_VAR, date.fromisoformat, TIMELINE_START)
    end = _parse_env(env, END_ENV_VAR, date.fromisoformat, TIMELINE_END)
    width = _parse_env(env, WIDTH_ENV_VAR, float, TIMELINE_WIDTH)

    if start == end:
        raise ConfigError(f"{START_ENV_VAR} and {END_ENV_VAR} are both {start}")
    if width == 0 or not math.isfinite(width):
        raise ConfigError(f"{WIDTH_ENV_VAR} must be a finite non-zero number, got {width}")

    return TimelineSettings(start_date=start, end_date=end, width=width)
