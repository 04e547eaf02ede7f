from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Mapping, Optional

from .countries import lookup_country
from .dates import check_claim_dates, normalize_date
from ..schemas import ClaimRecord, ExtractionReport, Gender, WarningItem

LOGGER = logging.getLogger(__name__)


EMPTY_FIELD_VALUE = ""

FIRST_NAME = "FirstName"
LAST_NAME = "LastName"
DATE_OF_BIRTH = "DateOfBirth"
PLACE_OF_BIRTH = "PlaceOfBirth"
COUNTRY_REGION = "CountryRegion"
SEX = "Sex"
DOCUMENT_NUMBER = "DocumentNumber"
DATE_OF_EXPIRATION = "DateOfExpiration"
DATE_OF_ISSUE = "DateOfIssue"

PASSPORT_FIELDS = (
    FIRST_NAME,
    LAST_NAME,
    DATE_OF_BIRTH,
    PLACE_OF_BIRTH,
    COUNTRY_REGION,
    SEX,
    DOCUMENT_NUMBER,
    DATE_OF_EXPIRATION,
    DATE_OF_ISSUE,
)


@dataclass(frozen=True)
class FieldValue:
    key: str
    value: str
    present: bool


def read_field(fields: Mapping[str, Optional[str]], key: str) -> FieldValue:
    raw = fields.get(key)
    if raw is None:
        LOGGER.info("Passport field %s missing from OCR output.", key)
        return FieldValue(key=key, value=EMPTY_FIELD_VALUE, present=False)
    return FieldValue(key=key, value=str(raw), present=True)


def gender_from_sex(value: str) -> Gender:
    # Anything other than "M" (including a missing field) is read as female.
    return Gender.MALE if value == "M" else Gender.FEMALE


def extract_report(fields: Mapping[str, Optional[str]]) -> ExtractionReport:
    """Build a canonical claim from an OCR field map, tagging what was tolerated.

    Missing fields fall back to an empty value and are marked ``absent`` in
    ``presence``; an unknown country code is kept as-is with
    ``country_resolved=False``. A date field that cannot be normalized raises
    ``InvalidDateFormat`` and aborts the whole extraction.
    """
    values: Dict[str, FieldValue] = {key: read_field(fields, key) for key in PASSPORT_FIELDS}
    presence = {key: "present" if value.present else "absent" for key, value in values.items()}
    warnings = [
        WarningItem(code="field_missing", message=f"OCR did not return {key}.", field=key)
        for key, value in values.items()
        if not value.present
    ]

    country = lookup_country(values[COUNTRY_REGION].value)
    if not country.resolved and values[COUNTRY_REGION].present:
        warnings.append(
            WarningItem(
                code="country_unresolved",
                message=f"Country code {country.code!r} is not in the country table.",
                field=COUNTRY_REGION,
            )
        )

    claim = ClaimRecord(
        first_name=values[FIRST_NAME].value,
        last_name=values[LAST_NAME].value,
        birth_date=normalize_date(values[DATE_OF_BIRTH].value),
        place_of_birth=values[PLACE_OF_BIRTH].value,
        country_of_citizenship=country.name,
        gender=gender_from_sex(values[SEX].value),
        passport_number=values[DOCUMENT_NUMBER].value,
        passport_date_of_expiry=normalize_date(values[DATE_OF_EXPIRATION].value),
        passport_date_of_issue=normalize_date(values[DATE_OF_ISSUE].value),
    )
    for issue in check_claim_dates(claim):
        warnings.append(WarningItem(code=issue.rule, message=issue.message, field=issue.field))
    LOGGER.debug("Extracted passport claim: %s", claim)
    return ExtractionReport(
        claim=claim,
        presence=presence,
        country_resolved=country.resolved,
        warnings=warnings,
    )


def extract_claim(fields: Mapping[str, Optional[str]]) -> ClaimRecord:
    return extract_report(fields).claim
