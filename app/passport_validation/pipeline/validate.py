from __future__ import annotations

import logging
from typing import Mapping, Optional

from .compare import claims_match, mismatched_fields
from .extract import extract_claim
from .ledger import ValidationLedger
from ..schemas import ClaimRecord, ValidationResponse

LOGGER = logging.getLogger(__name__)


def validate_claim(
    user_claim: ClaimRecord,
    fields: Mapping[str, Optional[str]],
    ledger: ValidationLedger,
) -> ValidationResponse:
    """Check a user-declared claim against the passport's OCR fields.

    A claim the ledger already holds is valid without touching ``fields``.
    Otherwise the passport claim is extracted and compared; a match is stored
    and reported valid, a mismatch returns the extracted claim so the user can
    correct their data. ``InvalidDateFormat`` from extraction propagates.
    """
    if ledger.exists(user_claim):
        LOGGER.info("User is present in the validation ledger: %s", user_claim.passport_number)
        return ValidationResponse(is_valid=True)

    passport_claim = extract_claim(fields)
    if claims_match(passport_claim, user_claim):
        ledger.record(passport_claim)
        LOGGER.info("Passport validation data valid for %s", passport_claim.passport_number)
        return ValidationResponse(is_valid=True)

    LOGGER.info(
        "Passport validation not valid for %s; mismatched fields: %s",
        user_claim.passport_number,
        ", ".join(mismatched_fields(passport_claim, user_claim)),
    )
    return ValidationResponse(is_valid=False, claim=passport_claim)
