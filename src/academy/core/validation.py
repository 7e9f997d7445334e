"""
Validation & Parsing Helpers

Shared input checks used by every service:
- required-field presence (reports every missing field at once)
- dd-MM-yyyy dates and HH:mm times
- age from date of birth
- array shape and email format (email-validator through pydantic)
- non-blank updates, non-negative amounts and date ranges
"""

import re
from collections.abc import Iterable, Mapping
from datetime import date, datetime, time
from typing import Any

from pydantic.networks import validate_email
from pydantic_core import PydanticCustomError

from academy.core.exceptions import BadRequestError

DATE_FORMAT = "%d-%m-%Y"
TIME_FORMAT = "%H:%M"

_DATE_PATTERN = re.compile(r"^\d{2}-\d{2}-\d{4}$")
_TIME_PATTERN = re.compile(r"^\d{2}:\d{2}$")


class MissingFieldsError(BadRequestError):
    """Raised when one or more required fields are absent."""

    def __init__(self, missing_fields: list[str], context: str = ""):
        self.missing_fields = missing_fields
        prefix = f"{context}: " if context else ""
        super().__init__(
            f"{prefix}Required fields are missing: {', '.join(missing_fields)}",
            error_code="MISSING_FIELDS",
        )


class InvalidDateFormatError(BadRequestError):
    def __init__(self, field_label: str):
        super().__init__(
            f"Invalid date format for {field_label}. Use dd-MM-yyyy.",
            error_code="INVALID_DATE_FORMAT",
        )


class InvalidDateValueError(BadRequestError):
    def __init__(self, field_label: str):
        super().__init__(
            f"Invalid date value for {field_label}.",
            error_code="INVALID_DATE_VALUE",
        )


class InvalidTimeFormatError(BadRequestError):
    def __init__(self, field_label: str):
        super().__init__(
            f"Invalid time format for {field_label}. Use HH:mm.",
            error_code="INVALID_TIME_FORMAT",
        )


class InvalidTimeValueError(BadRequestError):
    def __init__(self, field_label: str):
        super().__init__(
            f"Invalid time value for {field_label}.",
            error_code="INVALID_TIME_VALUE",
        )


class InvalidEmailFormatError(BadRequestError):
    def __init__(self, field_label: str = "email"):
        super().__init__(
            f"Invalid email format for {field_label}.",
            error_code="INVALID_EMAIL_FORMAT",
        )


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str) and not value.strip():
        return True
    return False


def validate_required_fields(
    record: Mapping[str, Any],
    field_names: Iterable[str],
    context: str = "",
) -> None:
    """
    Ensure every named field is present and non-empty.

    Args:
        record: Field name -> value mapping
        field_names: Names that must be present
        context: Optional label prefixed to the error (e.g. "Child 2")

    Raises:
        MissingFieldsError: Listing every absent field, in the order given
    """
    missing = [name for name in field_names if _is_missing(record.get(name))]
    if missing:
        raise MissingFieldsError(missing, context)


def parse_date(text: str, field_label: str = "date") -> date:
    """Parse a dd-MM-yyyy string into a date."""
    if not isinstance(text, str) or not _DATE_PATTERN.match(text):
        raise InvalidDateFormatError(field_label)
    try:
        return datetime.strptime(text, DATE_FORMAT).date()
    except ValueError as e:
        raise InvalidDateValueError(field_label) from e


def format_date(value: date | None) -> str:
    """Render a date as dd-MM-yyyy (empty string for None)."""
    if value is None:
        return ""
    return value.strftime(DATE_FORMAT)


def parse_time(text: str, field_label: str = "time") -> time:
    """Parse an HH:mm string into a time."""
    if not isinstance(text, str) or not _TIME_PATTERN.match(text):
        raise InvalidTimeFormatError(field_label)
    try:
        return datetime.strptime(text, TIME_FORMAT).time()
    except ValueError as e:
        raise InvalidTimeValueError(field_label) from e


def format_time(value: time | None) -> str:
    if value is None:
        return ""
    return value.strftime(TIME_FORMAT)


def calculate_age(dob: date, today: date | None = None) -> int:
    """
    Whole years between dob and today.

    One year is subtracted while this year's birthday is still ahead.
    """
    today = today or date.today()
    age = today.year - dob.year
    if (today.month, today.day) < (dob.month, dob.day):
        age -= 1
    return age


def validate_array_input(
    value: Any,
    min_length: int = 1,
    message: str = "Invalid data format",
) -> None:
    """Require a list/tuple with at least min_length elements."""
    if not isinstance(value, list | tuple) or len(value) < min_length:
        raise BadRequestError(message, error_code="INVALID_ARRAY")


def is_valid_email(value: str | None) -> bool:
    if not value:
        return False
    try:
        validate_email(value)
    except PydanticCustomError:
        return False
    return True


def ensure_valid_email(value: str, field_label: str = "email") -> str:
    """Return the trimmed, lower-cased email or raise if it is malformed."""
    normalized = value.strip().lower()
    if not is_valid_email(normalized):
        raise InvalidEmailFormatError(field_label)
    return normalized


def validate_non_blank_fields(
    record: Mapping[str, Any],
    field_names: Iterable[str],
    context: str = "",
) -> None:
    """
    Partial-update counterpart of validate_required_fields.

    Only fields present in ``record`` are checked; a required field sent
    as null or blank is reported as missing.
    """
    blanked = [name for name in field_names if name in record and _is_missing(record[name])]
    if blanked:
        raise MissingFieldsError(blanked, context)


def ensure_non_negative(value: int | float | None, field_label: str) -> None:
    if value is not None and value < 0:
        raise BadRequestError(f"{field_label} cannot be negative.", error_code="NEGATIVE_VALUE")


def ensure_date_range(start: date, end: date) -> None:
    if end < start:
        raise BadRequestError(
            "End date cannot be before start date.",
            error_code="INVALID_DATE_RANGE",
        )
