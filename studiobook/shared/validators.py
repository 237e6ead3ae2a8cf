"""Shared validation utilities"""

import re
from typing import Optional

from pydantic import ValidationError

# Basic email validation pattern used by every booking form
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

MIN_MOBILE_DIGITS = 7

# Event hours are whole hours of the day; 24 is only valid as an end hour
FIRST_HOUR = 0
LAST_HOUR = 24


def is_blank(value: Optional[str]) -> bool:
    """True for None, empty, or whitespace-only strings"""
    return value is None or not str(value).strip()


def is_valid_email(email: Optional[str]) -> bool:
    """Validate email format"""
    if not email:
        return False
    return bool(EMAIL_PATTERN.match(email.strip()))


def mobile_digits(mobile: Optional[str]) -> str:
    """Remove all non-digit characters from a phone number"""
    if not mobile:
        return ""
    return re.sub(r"\D", "", mobile)


def is_valid_mobile(mobile: Optional[str]) -> bool:
    """
    Validate a mobile number.

    Any formatting is accepted (spaces, dashes, brackets, leading +) as long as
    at least seven digits remain once it is stripped.
    """
    return len(mobile_digits(mobile)) >= MIN_MOBILE_DIGITS


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Args:
        email: Email address string

    Returns:
        Stripped email address

    Raises:
        ValueError: If email format is invalid
    """
    if not email:
        return email

    email = email.strip()
    if not EMAIL_PATTERN.match(email):
        raise ValueError("Please enter a valid email address")
    return email


def validate_mobile(mobile: Optional[str]) -> Optional[str]:
    """
    Validate a mobile number, keeping the user's formatting.

    Raises:
        ValueError: If fewer than seven digits are present
    """
    if not mobile:
        return mobile

    if not is_valid_mobile(mobile):
        raise ValueError("Please enter a valid mobile number")
    return mobile.strip()


def is_valid_hour_window(start_hour: int, end_hour: int) -> bool:
    """Check a start/end pair against the hour-of-day domain"""
    if start_hour < FIRST_HOUR or start_hour >= LAST_HOUR:
        return False
    if end_hour <= FIRST_HOUR or end_hour > LAST_HOUR:
        return False
    return start_hour < end_hour


def hour_to_minutes(hour: int) -> int:
    """Convert an hour of the day to minutes since midnight"""
    return hour * 60


def format_hour(hour: int) -> str:
    """Render an hour of the day as a 12-hour clock label"""
    if hour in (0, 24):
        return "12:00 AM"
    if hour == 12:
        return "12:00 PM"
    if hour > 12:
        return f"{hour - 12}:00 PM"
    return f"{hour}:00 AM"


def first_error_message(exc: ValidationError) -> str:
    """Pull the first human readable message out of a pydantic ValidationError"""
    errors = exc.errors()
    if not errors:
        return "Invalid data"
    message = errors[0].get("msg", "Invalid data")
    # Messages raised from our own validators come prefixed by pydantic
    return message.removeprefix("Value error, ")
