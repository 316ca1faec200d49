from __future__ import annotations

import re
from datetime import date, datetime
from enum import IntEnum
from typing import Any

from dateutil.relativedelta import relativedelta

from src.domain.errors import ValidationError

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class Duration(IntEnum):
    MONTHLY = 1
    YEARLY = 2


def parse_duration(code: Any) -> Duration:
    """Missing codes default to YEARLY; anything but the two known codes is rejected."""
    if code is None or (isinstance(code, str) and not code.strip()):
        return Duration.YEARLY
    if isinstance(code, bool):
        raise ValidationError("Duration is invalid")
    if isinstance(code, float) and not code.is_integer():
        raise ValidationError("Duration is invalid")
    try:
        return Duration(int(code))
    except (TypeError, ValueError):
        raise ValidationError("Duration is invalid") from None


def parse_entitlement_date(value: Any, today: date) -> date:
    """Only calendar dates written as YYYY-MM-DD are accepted."""
    if value is None:
        return today
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return today
    if not _ISO_DATE.match(text):
        raise ValidationError("Date is invalid")
    try:
        return date.fromisoformat(text)
    except ValueError:
        raise ValidationError("Date is invalid") from None


def end_date(start: date, duration: int) -> date:
    # relativedelta clamps to the last day of the month (Jan 31 -> Feb 28/29).
    if duration == Duration.MONTHLY:
        return start + relativedelta(months=1)
    if duration == Duration.YEARLY:
        return start + relativedelta(years=1)
    raise ValidationError("Duration is invalid")


def is_expired(start: date | None, duration: int | None, today: date) -> bool:
    """A grant with no start or no duration is not configured yet, so never expired."""
    if start is None or duration is None:
        return False
    if duration not in (Duration.MONTHLY, Duration.YEARLY):
        return False
    return today > end_date(start, duration)
