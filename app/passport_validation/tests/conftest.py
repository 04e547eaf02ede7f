import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from passport_validation.pipeline.ledger import JsonFileLedgerStore, ValidationLedger  # noqa: E402
from passport_validation.schemas import ClaimRecord  # noqa: E402


PASSPORT_FIELDS = {
    "FirstName": "John",
    "LastName": "Doe",
    "DateOfBirth": "12 MAR/MAR 90",
    "PlaceOfBirth": "Budapest",
    "CountryRegion": "HUN",
    "Sex": "M",
    "DocumentNumber": "123456",
    "DateOfExpiration": "03 FEB 2031",
    "DateOfIssue": "2021.02.03",
}


@pytest.fixture
def passport_fields() -> dict:
    return dict(PASSPORT_FIELDS)


@pytest.fixture
def user_claim() -> ClaimRecord:
    return ClaimRecord(
        first_name="john",
        last_name="doe",
        birth_date="1990-03-12",
        place_of_birth="budapest",
        country_of_citizenship="hungary",
        gender="MALE",
        passport_number="123456",
        passport_date_of_expiry="2031-02-03",
        passport_date_of_issue="2021-02-03",
    )


@pytest.fixture
def ledger() -> ValidationLedger:
    return ValidationLedger()


@pytest.fixture
def json_ledger(tmp_path: Path) -> ValidationLedger:
    return ValidationLedger(JsonFileLedgerStore(tmp_path / "ledger.json"))
