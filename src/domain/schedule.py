from __future__ import annotations

import re
from enum import IntEnum


class DayOption(IntEnum):
    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6
    SUNDAY = 7

    @property
    def label(self) -> str:
        return self.name.capitalize()


DEFAULT_FROM_DAY = DayOption.MONDAY
DEFAULT_TO_DAY = DayOption.SUNDAY
DEFAULT_FROM_TIME = 0
DEFAULT_TO_TIME = 23


def is_valid_day(code: int | None) -> bool:
    return code is not None and code in DayOption._value2member_map_


def is_valid_hour(code: int | None) -> bool:
    return code is not None and 0 <= code <= 23


def day_label(code: int | None) -> str:
    if not is_valid_day(code):
        return ""
    return DayOption(code).label


def hour_label(code: int | None) -> str:
    if not is_valid_hour(code):
        return ""
    return f"{code:02d}:00"


def format_day_time(day_code: int | None, time_code: int | None) -> str:
    return f"{day_label(day_code)} ({hour_label(time_code)})"


_MARKDOWN_LINK = re.compile(r"\[([^\]]+)]\(([^)]+)\)")
_CODE_FENCE_OPEN = re.compile(r"^```[a-zA-Z0-9_+\-]*\s*")
_LEADING_MARKUP = re.compile(r"^[>#*\-\s]+")
_WHITESPACE = re.compile(r"\s+")


def first_line_plain_text(description: str | None) -> str:
    """First line of a markdown description with the markup stripped, for list previews."""
    if not description or not description.strip():
        return ""
    first_line = description.replace("\r\n", "\n").split("\n", 1)[0].strip()
    first_line = _MARKDOWN_LINK.sub(r"\1", first_line)
    first_line = _CODE_FENCE_OPEN.sub("", first_line)
    first_line = first_line.replace("```", "")
    first_line = _LEADING_MARKUP.sub("", first_line)
    for token in ("**", "__", "`", "*", "_"):
        first_line = first_line.replace(token, "")
    return _WHITESPACE.sub(" ", first_line).strip()
