"""
Centralized configuration for the LiveStatz platform.

All settings come from environment variables; entry points load `.env` and
`.env.local` with python-dotenv before anything here is read.
"""

import os
from datetime import timedelta

WEEKDAY_NAMES = [
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
]


def is_dev_mode() -> bool:
    """Check if running in development mode (DEV_MODE env)."""
    return os.getenv("DEV_MODE", "").lower() in ("true", "1", "yes")


def get_api_port() -> int:
    """Get API server port from env or default."""
    return int(os.getenv("API_PORT", "8000"))


def get_frontend_url() -> str:
    """Get frontend URL, used for CORS."""
    return os.environ.get("FRONTEND_URL", "http://localhost:5173").rstrip("/")


def get_calendar_domain() -> str:
    """Domain used in calendar UIDs and the Google `sprop` parameter."""
    return os.environ.get("CALENDAR_DOMAIN", "livestatz.app")


def get_invite_function_url() -> str | None:
    """URL of the hosted function that emails calendar invites."""
    return os.environ.get("INVITE_FUNCTION_URL") or None


def get_invite_function_key() -> str | None:
    """Bearer key for the invite function, if it requires one."""
    return os.environ.get("INVITE_FUNCTION_KEY") or None


def get_invite_sender_name() -> str:
    return os.environ.get("INVITE_SENDER_NAME", "LiveStatz")


def get_week_start_day() -> int:
    """
    First day of the reporting week as a Python weekday (Monday=0).

    WEEK_START_DAY accepts a day name ("monday") or a number 0-6.
    """
    value = os.environ.get("WEEK_START_DAY", "monday").strip().lower()
    if value.isdigit():
        day = int(value)
        if 0 <= day <= 6:
            return day
        raise ValueError(f"WEEK_START_DAY must be between 0 and 6, got {day}")
    if value not in WEEKDAY_NAMES:
        raise ValueError(f"WEEK_START_DAY must be a weekday name, got {value!r}")
    return WEEKDAY_NAMES.index(value)


def get_rsvp_cache_max_age() -> timedelta:
    """How long the in-memory RSVP mirror is trusted without a refetch."""
    return timedelta(seconds=float(os.getenv("RSVP_CACHE_MAX_AGE_SECONDS", "30")))


# Format: (name, description, required_in_dev)
REQUIRED_ENV_VARS = [
    ("DATABASE_URL", "PostgreSQL connection string", True),
    ("INVITE_FUNCTION_URL", "Hosted calendar invite email function", False),
]


def check_required_env_vars() -> tuple[bool, list[str]]:
    """
    Check that required environment variables are set.

    Returns:
        (all_ok, warnings): Tuple of success flag and list of warning messages
    """
    warnings = []
    errors = []
    in_dev = is_dev_mode()

    for name, description, required_in_dev in REQUIRED_ENV_VARS:
        if os.environ.get(name):
            continue
        if required_in_dev and not in_dev:
            errors.append(f"  ✗ {name}: Not set ({description})")
        else:
            warnings.append(f"  ⚠ {name}: Not set ({description})")

    if errors:
        for error in errors:
            print(error)
        return False, warnings

    return True, warnings
