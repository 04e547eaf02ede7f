from __future__ import annotations

import datetime as dt

import pytest

from passport_validation.pipeline.dates import (
    DATE_FORMATS,
    TWO_DIGIT_YEAR_PIVOT,
    InvalidDateFormat,
    apply_passport_century,
    check_claim_dates,
    is_passport_style,
    normalize_date,
    reassemble_passport_date,
    to_iso_string,
)
from passport_validation.schemas import ClaimRecord


SUPPORTED = [
    "2001/02/03",
    "2001-02-03",
    "2001.02.03",
    "03/02/2001",
    "03-02-2001",
    "03.02.2001",
    "03/02/01",
    "03-02-01",
    "03.02.01",
    "03 FEB 01",
    "03 FEB 2001",
]


@pytest.mark.parametrize("raw", SUPPORTED)
def test_supported_formats(raw: str) -> None:
    assert normalize_date(raw) == dt.date(2001, 2, 3)


def test_bilingual_passport_month() -> None:
    assert normalize_date("08 IAN/JAN 19") == dt.date(2019, 1, 8)


def test_passport_month_is_case_insensitive() -> None:
    assert normalize_date("03 feb 01") == dt.date(2001, 2, 3)


def test_reassemble_passport_date() -> None:
    assert reassemble_passport_date("08 IAN/JAN 19") == "08 JAN 19"
    assert reassemble_passport_date("03 FEB 01") == "03 FEB 01"


def test_passport_style_trigger() -> None:
    assert is_passport_style("08 IAN/JAN 19")
    assert is_passport_style("03 FEB 2001")
    assert not is_passport_style("2001/02/03")
    assert not is_passport_style("2001-02-03")


def test_word_month_rejected() -> None:
    with pytest.raises(InvalidDateFormat) as excinfo:
        normalize_date("2001/FEBRUARY/03")
    assert excinfo.value.raw == "2001/FEBRUARY/03"


def test_non_english_month_after_slash_rejected() -> None:
    # Only the month after the slash is used, and it must be English.
    with pytest.raises(InvalidDateFormat):
        normalize_date("03 FEB/FEV 01")


def test_empty_date_rejected() -> None:
    with pytest.raises(InvalidDateFormat):
        normalize_date("")


def test_truncated_slash_date_rejected() -> None:
    with pytest.raises(InvalidDateFormat):
        normalize_date("2001/02")


@pytest.mark.parametrize(
    "value",
    [dt.date(2001, 2, 3), dt.date(1969, 12, 31), dt.date(2030, 1, 1), dt.date(1900, 2, 28)],
)
def test_iso_round_trip(value: dt.date) -> None:
    assert to_iso_string(value) == value.strftime("%Y-%m-%d")
    assert normalize_date(to_iso_string(value)) == value


def test_day_first_wins_over_month_first() -> None:
    assert DATE_FORMATS.index("%d/%m/%y") < DATE_FORMATS.index("%m/%d/%y") < DATE_FORMATS.index("%y/%m/%d")
    assert normalize_date("03/02/01") == dt.date(2001, 2, 3)


def test_month_first_used_when_day_first_impossible() -> None:
    assert normalize_date("02/13/2001") == dt.date(2001, 2, 13)


def test_year_first_two_digit_fallback() -> None:
    # 32 cannot be a day or a month, so only the year-first pattern parses.
    assert normalize_date("32/02/03") == dt.date(2032, 2, 3)


def test_two_digit_year_window() -> None:
    below = TWO_DIGIT_YEAR_PIVOT - 1
    assert normalize_date(f"01.01.{below:02d}") == dt.date(2000 + below, 1, 1)
    assert normalize_date(f"01.01.{TWO_DIGIT_YEAR_PIVOT}") == dt.date(1900 + TWO_DIGIT_YEAR_PIVOT, 1, 1)
    assert normalize_date("08 IAN/JAN 99") == dt.date(1999, 1, 8)


def test_passport_two_digit_year_slides_with_today() -> None:
    today = dt.date(2026, 10, 19)
    assert normalize_date("15 MAR/MAR 62", today=today) == dt.date(1962, 3, 15)
    assert normalize_date("03 FEB 62", today=today) == dt.date(1962, 2, 3)
    assert normalize_date("15 MAR/MAR 46", today=today) == dt.date(2046, 3, 15)
    assert normalize_date("15 MAR/MAR 47", today=today) == dt.date(1947, 3, 15)
    # Same day and month as the window start stays in the older century.
    assert normalize_date("19 OCT 46", today=today) == dt.date(1946, 10, 19)
    assert normalize_date("18 OCT 46", today=today) == dt.date(2046, 10, 18)


def test_passport_four_digit_year_is_not_shifted() -> None:
    assert normalize_date("15 MAR/MAR 2062", today=dt.date(2026, 10, 19)) == dt.date(2062, 3, 15)


def test_passport_century_handles_leap_day() -> None:
    assert apply_passport_century(dt.date(2096, 2, 29), today=dt.date(2026, 10, 19)) == dt.date(1996, 2, 29)
    assert apply_passport_century(dt.date(2000, 2, 29), today=dt.date(2090, 1, 1)) == dt.date(2100, 2, 28)


def test_check_claim_dates() -> None:
    claim = ClaimRecord(
        first_name="Jane",
        last_name="Doe",
        birth_date="2030-01-01",
        gender="FEMALE",
        passport_number="X1",
        passport_date_of_expiry="2020-01-01",
        passport_date_of_issue="2029-01-01",
    )
    issues = check_claim_dates(claim, today=dt.date(2025, 6, 1))
    assert {issue.field for issue in issues} == {
        "birth_date",
        "passport_date_of_issue",
        "passport_date_of_expiry",
    }
    later = check_claim_dates(claim, today=dt.date(2029, 6, 1))
    assert {issue.field for issue in later} == {"birth_date", "passport_date_of_expiry"}
    assert [issue.rule for issue in later] == ["date_future", "date_past"]
