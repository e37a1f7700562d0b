"""
Timezone utility functions for the motoshop backend.
Invoice dates are "today" in the display timezone (configurable, default America/Bogota).
"""

from datetime import date, datetime, timezone
from typing import Optional

import pytz
from flask import current_app, has_app_context

DEFAULT_DISPLAY_TIMEZONE = "America/Bogota"


def get_display_timezone() -> str:
    """Configured display timezone name (DISPLAY_TIMEZONE)."""
    if has_app_context():
        return current_app.config.get('DISPLAY_TIMEZONE') or DEFAULT_DISPLAY_TIMEZONE
    return DEFAULT_DISPLAY_TIMEZONE


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def convert_utc_to_display(utc_dt: datetime, tz_name: Optional[str] = None) -> datetime:
    """
    Convert a UTC datetime to the display timezone. Naive values are taken as UTC.
    """
    if utc_dt.tzinfo is None:
        utc_dt = utc_dt.replace(tzinfo=timezone.utc)
    try:
        display_tz = pytz.timezone(tz_name or get_display_timezone())
    except pytz.UnknownTimeZoneError:
        display_tz = pytz.timezone(DEFAULT_DISPLAY_TIMEZONE)
    return utc_dt.astimezone(display_tz)


def display_today(tz_name: Optional[str] = None) -> date:
    """Calendar date right now in the display timezone."""
    return convert_utc_to_display(utc_now(), tz_name).date()
