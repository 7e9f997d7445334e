"""
Unit tests for the shared validation helpers.
"""

from datetime import date, time

import pytest

from academy.core.exceptions import BadRequestError
from academy.core.validation import (
    InvalidDateFormatError,
    InvalidDateValueError,
    InvalidEmailFormatError,
    InvalidTimeFormatError,
    MissingFieldsError,
    calculate_age,
    ensure_date_range,
    ensure_non_negative,
    ensure_valid_email,
    format_date,
    format_time,
    is_valid_email,
    parse_date,
    parse_time,
    validate_array_input,
    validate_non_blank_fields,
    validate_required_fields,
)


class TestDates:
    def test_parse_date_reads_day_month_year(self):
        assert parse_date("05-03-2012") == date(2012, 3, 5)

    def test_format_then_parse_returns_same_date(self):
        for value in (date(2000, 1, 1), date(2012, 2, 29), date(1999, 12, 31)):
            assert parse_date(format_date(value)) == value

    @pytest.mark.parametrize("text", ["2012-03-05", "5-3-2012", "05/03/2012", ""])
    def test_parse_date_rejects_other_shapes(self, text):
        with pytest.raises(InvalidDateFormatError):
            parse_date(text, "dob")

    def test_parse_date_rejects_impossible_day(self):
        with pytest.raises(InvalidDateValueError):
            parse_date("31-02-2020", "dob")

    def test_format_date_of_none_is_empty(self):
        assert format_date(None) == ""


class TestTimes:
    def test_parse_time(self):
        assert parse_time("09:30") == time(9, 30)

    def test_format_time(self):
        assert format_time(time(17, 5)) == "17:05"

    @pytest.mark.parametrize("text", ["9:30", "0930", "09:30:00"])
    def test_parse_time_rejects_other_shapes(self, text):
        with pytest.raises(InvalidTimeFormatError):
            parse_time(text, "startTime")

    def test_parse_time_rejects_out_of_range_value(self):
        with pytest.raises(BadRequestError) as exc_info:
            parse_time("25:00", "startTime")
        assert exc_info.value.error_code == "INVALID_TIME_VALUE"


class TestCalculateAge:
    def test_birthday_already_passed(self):
        assert calculate_age(date(2000, 3, 1), today=date(2024, 3, 1)) == 24

    def test_birthday_still_ahead(self):
        assert calculate_age(date(2000, 3, 2), today=date(2024, 3, 1)) == 23

    def test_seventeen_the_day_before_eighteenth_birthday(self):
        assert calculate_age(date(2006, 6, 15), today=date(2024, 6, 14)) == 17
        assert calculate_age(date(2006, 6, 15), today=date(2024, 6, 15)) == 18


class TestRequiredFields:
    def test_reports_every_missing_field_in_order(self):
        with pytest.raises(MissingFieldsError) as exc_info:
            validate_required_fields(
                {"firstName": "  ", "lastName": "Smith", "email": None},
                ["firstName", "lastName", "email", "password"],
                "Child 2",
            )

        assert exc_info.value.missing_fields == ["firstName", "email", "password"]
        assert exc_info.value.message.startswith("Child 2: ")
        assert exc_info.value.status_code == 400

    def test_all_present_passes(self):
        validate_required_fields({"name": "Art"}, ["name"])

    def test_non_blank_only_checks_sent_fields(self):
        validate_non_blank_fields({"title": "New"}, ["title", "mediaUrl"])

        with pytest.raises(MissingFieldsError) as exc_info:
            validate_non_blank_fields({"title": ""}, ["title", "mediaUrl"])
        assert exc_info.value.missing_fields == ["title"]


class TestArraysAndRanges:
    def test_array_input_requires_list(self):
        with pytest.raises(BadRequestError) as exc_info:
            validate_array_input({"not": "a list"})
        assert exc_info.value.error_code == "INVALID_ARRAY"

    def test_array_input_requires_min_length(self):
        with pytest.raises(BadRequestError):
            validate_array_input([], 1)
        validate_array_input([], 0)

    def test_date_range_allows_same_day(self):
        ensure_date_range(date(2025, 1, 1), date(2025, 1, 1))

    def test_date_range_rejects_end_before_start(self):
        with pytest.raises(BadRequestError) as exc_info:
            ensure_date_range(date(2025, 1, 2), date(2025, 1, 1))
        assert exc_info.value.error_code == "INVALID_DATE_RANGE"

    def test_non_negative(self):
        ensure_non_negative(None, "Fees")
        ensure_non_negative(0, "Fees")
        with pytest.raises(BadRequestError) as exc_info:
            ensure_non_negative(-1, "Available seats")
        assert exc_info.value.error_code == "NEGATIVE_VALUE"


class TestEmail:
    def test_valid_email(self):
        assert is_valid_email("parent@example.com")

    @pytest.mark.parametrize("value", [None, "", "no-at-sign", "a@b", "two@@example.com"])
    def test_invalid_email(self, value):
        assert not is_valid_email(value)

    def test_ensure_valid_email_normalizes(self):
        assert ensure_valid_email("  Parent@Example.COM ") == "parent@example.com"

    def test_ensure_valid_email_raises(self):
        with pytest.raises(InvalidEmailFormatError):
            ensure_valid_email("broken", "Parent email")
