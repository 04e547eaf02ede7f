from __future__ import annotations

import datetime as dt

import pytest

from passport_validation.pipeline.dates import InvalidDateFormat
from passport_validation.pipeline.extract import (
    EMPTY_FIELD_VALUE,
    extract_claim,
    extract_report,
    gender_from_sex,
    read_field,
)
from passport_validation.schemas import Gender


def test_extract_claim(passport_fields: dict) -> None:
    claim = extract_claim(passport_fields)
    assert claim.first_name == "John"
    assert claim.last_name == "Doe"
    assert claim.birth_date == dt.date(1990, 3, 12)
    assert claim.place_of_birth == "Budapest"
    assert claim.country_of_citizenship == "Hungary"
    assert claim.gender is Gender.MALE
    assert claim.passport_number == "123456"
    assert claim.passport_date_of_expiry == dt.date(2031, 2, 3)
    assert claim.passport_date_of_issue == dt.date(2021, 2, 3)


def test_missing_text_field_is_tolerated(passport_fields: dict) -> None:
    del passport_fields["PlaceOfBirth"]
    report = extract_report(passport_fields)
    assert report.claim.place_of_birth == EMPTY_FIELD_VALUE
    assert report.presence["PlaceOfBirth"] == "absent"
    assert report.presence["FirstName"] == "present"
    assert any(w.code == "field_missing" and w.field == "PlaceOfBirth" for w in report.warnings)


def test_missing_date_field_is_fatal(passport_fields: dict) -> None:
    del passport_fields["DateOfIssue"]
    with pytest.raises(InvalidDateFormat):
        extract_claim(passport_fields)


def test_malformed_date_field_is_fatal(passport_fields: dict) -> None:
    passport_fields["DateOfBirth"] = "2001/FEBRUARY/03"
    with pytest.raises(InvalidDateFormat) as excinfo:
        extract_claim(passport_fields)
    assert excinfo.value.raw == "2001/FEBRUARY/03"


def test_unknown_country_is_kept_and_flagged(passport_fields: dict) -> None:
    passport_fields["CountryRegion"] = "ZZZ"
    report = extract_report(passport_fields)
    assert report.claim.country_of_citizenship == "ZZZ"
    assert not report.country_resolved
    assert any(w.code == "country_unresolved" for w in report.warnings)


def test_sex_mapping() -> None:
    assert gender_from_sex("M") is Gender.MALE
    assert gender_from_sex("F") is Gender.FEMALE
    assert gender_from_sex("X") is Gender.FEMALE
    assert gender_from_sex("") is Gender.FEMALE


def test_read_field_none_is_missing() -> None:
    value = read_field({"FirstName": None}, "FirstName")
    assert not value.present
    assert value.value == EMPTY_FIELD_VALUE
