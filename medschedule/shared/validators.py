"""Shared validation utilities"""

from datetime import date, datetime
from typing import Optional, Union


def is_blank(value: Optional[str]) -> bool:
    """True for None, empty and whitespace-only strings"""
    return value is None or not str(value).strip()


def clean_text(value: Optional[str]) -> Optional[str]:
    """Strip surrounding whitespace; blank strings become None"""
    if value is None:
        return None
    value = value.strip()
    return value or None


def parse_calendar_date(value: Union[str, date, None]) -> date:
    """
    Parse an ISO-8601 date or datetime into a calendar date.

    Args:
        value: "2024-01-01", "2024-01-01T00:00:00Z" or a date

    Returns:
        The calendar date (time part dropped)

    Raises:
        ValueError: If value is missing or not ISO-8601
    """
    if value is None:
        raise ValueError("Date is required")
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = str(value).strip()
    if not text:
        raise ValueError("Date is required")
    if len(text) == 10:
        return date.fromisoformat(text)
    return datetime.fromisoformat(text.replace("Z", "+00:00")).date()


def coerce_int(value: Union[int, str, None]) -> int:
    """
    Coerce a JSON number or numeric string to int.

    Raises:
        ValueError: If value is missing or not a whole number
    """
    if value is None or isinstance(value, bool):
        raise ValueError("Number is required")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError("Number must be a whole number")
        return int(value)
    return int(str(value).strip())
