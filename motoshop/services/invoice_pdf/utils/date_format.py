"""
Spanish weekday-prefixed dates for invoices: ``2024-01-06`` -> ``Sábado 2024-01-06``.

localize_date() never raises; anything it cannot make sense of comes back as
it went in.
"""
import logging
import re
from datetime import date, datetime
from typing import Optional

from dateutil import parser as date_parser

logger = logging.getLogger(__name__)

# week starting Sunday
WEEKDAY_NAMES = ('Domingo', 'Lunes', 'Martes', 'Miércoles', 'Jueves', 'Viernes', 'Sábado')

_ISO_DATE = re.compile(r'(\d{4}-\d{2}-\d{2})')


def to_iso_date(value) -> Optional[str]:
    """Best-effort ``YYYY-MM-DD`` for a date, datetime or loose string; None if hopeless."""
    if isinstance(value, (date, datetime)):
        return value.strftime('%Y-%m-%d')
    if not isinstance(value, str):
        return None

    s = value.strip()
    match = _ISO_DATE.search(s)
    if match:
        return match.group(1)
    try:
        return date_parser.parse(s).strftime('%Y-%m-%d')
    except (ValueError, OverflowError):
        pass
    if len(s) >= 10:
        return s[:10]
    return None


def weekday_name(iso_date: str) -> Optional[str]:
    try:
        y, m, d = (int(p) for p in iso_date.split('-'))
        # date.weekday() is Monday=0; the name table starts on Sunday
        return WEEKDAY_NAMES[(date(y, m, d).weekday() + 1) % 7]
    except ValueError:
        return None


def localize_date(value):
    if value is None or value == '':
        return ''
    try:
        iso = to_iso_date(value)
        if iso is None:
            return value if isinstance(value, str) else ''
        name = weekday_name(iso)
        if name is None:
            # an embedded YYYY-MM-DD that is not a real date leaves the input alone
            if isinstance(value, str) and _ISO_DATE.search(value):
                return value
            return iso
        return f"{name} {iso}"
    except Exception as e:
        logger.warning(f"Could not localize date {value!r}: {e}")
        return value
