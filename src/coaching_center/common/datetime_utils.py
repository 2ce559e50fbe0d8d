from __future__ import annotations

import re
from datetime import date, datetime

_PERIOD_RE = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local() -> datetime:
    """Current local time.

    Services take it as their default clock.
    """
    return datetime.now()


def period_key(moment: date) -> str:
    """Billing period (``YYYY-MM``) that ``moment`` falls in."""
    return f"{moment.year:04d}-{moment.month:02d}"


def is_period_key(value: str) -> bool:
    return bool(value) and bool(_PERIOD_RE.match(value))
