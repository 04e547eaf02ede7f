from __future__ import annotations

from typing import List, Tuple

from ..schemas import ClaimRecord

# Prose fields are compared ignoring case and surrounding whitespace.
FOLDED_FIELDS = (
    "first_name",
    "last_name",
    "place_of_birth",
    "country_of_citizenship",
)
# Identifiers and canonical values must match exactly.
EXACT_FIELDS = (
    "passport_number",
    "gender",
    "birth_date",
    "passport_date_of_issue",
    "passport_date_of_expiry",
)
COMPARED_FIELDS = FOLDED_FIELDS + EXACT_FIELDS


def _field_key(claim: ClaimRecord, name: str):
    value = getattr(claim, name)
    if name in FOLDED_FIELDS:
        return value.strip().lower()
    return value


def fold_claim(claim: ClaimRecord) -> Tuple:
    return tuple(_field_key(claim, name) for name in COMPARED_FIELDS)


def mismatched_fields(a: ClaimRecord, b: ClaimRecord) -> List[str]:
    return [name for name in COMPARED_FIELDS if _field_key(a, name) != _field_key(b, name)]


def claims_match(a: ClaimRecord, b: ClaimRecord) -> bool:
    """True when all nine fields agree after case-folding the prose fields."""
    return fold_claim(a) == fold_claim(b)
