# omikuji/core/time_service.py

from datetime import datetime
import pytz
from .config import settings

def get_app_timezone():
    """Returns the configured APP_TIMEZONE, falling back to UTC if it is unknown."""
    try:
        return pytz.timezone(settings.APP_TIMEZONE)
    except pytz.UnknownTimeZoneError:
        return pytz.utc

def now_in_app_timezone() -> datetime:
    """
    Current time as a timezone-aware datetime in the app timezone.
    This is the default clock used to stamp `drawn_at` on draw results.
    """
    return datetime.now(get_app_timezone())
