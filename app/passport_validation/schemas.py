from __future__ import annotations

import datetime as dt
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel

from .pipeline.dates import normalize_date, to_iso_string


class Gender(str, Enum):
    MALE = "MALE"
    FEMALE = "FEMALE"


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ClaimRecord(ApiModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    first_name: str
    last_name: str
    birth_date: dt.date
    place_of_birth: str = ""
    country_of_citizenship: str = ""
    gender: Gender
    passport_number: str
    passport_date_of_expiry: dt.date
    passport_date_of_issue: dt.date

    @field_validator("birth_date", "passport_date_of_expiry", "passport_date_of_issue", mode="before")
    @classmethod
    def _normalize_dates(cls, value):
        if isinstance(value, str):
            return normalize_date(value)
        return value

    @field_validator("gender", mode="before")
    @classmethod
    def _upper_gender(cls, value):
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @field_serializer("birth_date", "passport_date_of_expiry", "passport_date_of_issue")
    def _dates_to_iso(self, value: dt.date) -> str:
        return to_iso_string(value)


class ValidationRecord(ApiModel):
    claim: ClaimRecord
    validated_at: dt.datetime

    @property
    def passport_number(self) -> str:
        return self.claim.passport_number


class ValidationResponse(ApiModel):
    is_valid: bool
    claim: Optional[ClaimRecord] = None


class WarningItem(ApiModel):
    code: str
    message: str
    field: Optional[str] = None


class ExtractionReport(ApiModel):
    claim: ClaimRecord
    presence: Dict[str, str] = Field(default_factory=dict)
    country_resolved: bool = True
    warnings: List[WarningItem] = Field(default_factory=list)


class ExtractionRequest(ApiModel):
    fields: Dict[str, Optional[str]] = Field(default_factory=dict)


class ValidationRequest(ApiModel):
    claim: ClaimRecord
    fields: Dict[str, Optional[str]] = Field(default_factory=dict)
