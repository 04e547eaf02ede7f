from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

LOGGER = logging.getLogger(__name__)


# Generic patterns use strptime's fixed %y window: 69-99 -> 1969-1999, 00-68 -> 2000-2068.
TWO_DIGIT_YEAR_PIVOT = 69

# Passport two-digit years slide with the calendar instead: they land in the
# hundred years starting this many years before today.
PASSPORT_CENTURY_LOOKBACK_YEARS = 80
PASSPORT_SHORT_YEAR_FORMAT = "%d %b %y"

# Passport dates with a bilingual month ("08 IAN/JAN 19") or three loose tokens ("03 FEB 01").
PASSPORT_DATE_COMPONENTS = 3
PASSPORT_DATE_FORMATS: Tuple[str, ...] = (
    PASSPORT_SHORT_YEAR_FORMAT,
    "%d %b %Y",
)

# Order matters: ambiguous strings resolve to the first pattern that parses.
DATE_FORMATS: Tuple[str, ...] = (
    "%Y/%m/%d",
    "%Y-%m-%d",
    "%Y.%m.%d",
    "%d/%m/%Y",
    "%d-%m-%Y",
    "%d.%m.%Y",
    "%m/%d/%Y",
    "%m-%d-%Y",
    "%m.%d.%Y",
    "%d/%m/%y",
    "%d-%m-%y",
    "%d.%m.%y",
    "%m/%d/%y",
    "%m-%d-%y",
    "%m.%d.%y",
    "%y/%m/%d",
    "%y-%m-%d",
    "%y.%m.%d",
    "%d %b %y",
    "%d %b %Y",
)


class InvalidDateFormat(ValueError):
    """Raised when a raw date string matches none of the known layouts."""

    def __init__(self, raw: str):
        self.raw = raw
        super().__init__(f"Invalid date format: {raw!r}")


def _match_format(value: str, formats: Tuple[str, ...]) -> Optional[Tuple[dt.date, str]]:
    for fmt in formats:
        try:
            return dt.datetime.strptime(value, fmt).date(), fmt
        except ValueError:
            continue
    return None


def _try_formats(value: str, formats: Tuple[str, ...]) -> Optional[dt.date]:
    match = _match_format(value, formats)
    return match[0] if match else None


def _shift_years(value: dt.date, years: int) -> dt.date:
    try:
        return value.replace(year=value.year + years)
    except ValueError:
        # Feb 29 in a non-leap target year.
        return value.replace(year=value.year + years, day=28)


def apply_passport_century(value: dt.date, today: Optional[dt.date] = None) -> dt.date:
    """Move a two-digit-year date into the window ``[today - 80y, today + 20y)``."""
    today = today or dt.date.today()
    window_start = _shift_years(today, -PASSPORT_CENTURY_LOOKBACK_YEARS)
    while value >= _shift_years(window_start, 100):
        value = _shift_years(value, -100)
    while value < window_start:
        value = _shift_years(value, 100)
    return value


def is_passport_style(raw: str) -> bool:
    return raw.count("/") == 1 or len(raw.split()) == PASSPORT_DATE_COMPONENTS


def reassemble_passport_date(raw: str) -> str:
    """Rebuild ``"<day> <month> <year>"`` from a passport date.

    ``"08 IAN/JAN 19"`` becomes ``"08 JAN 19"``: the day is the first two
    characters before the slash, the month is the first token after it and the
    year is the token that follows. Strings without a slash come back unchanged.
    """
    if "/" not in raw:
        return raw
    before, after = raw.split("/", 1)
    before = before.strip()
    after_tokens = after.split()
    if len(before) < 2 or len(after_tokens) < 2:
        raise InvalidDateFormat(raw)
    day = before[:2]
    month = after_tokens[0]
    year = after_tokens[1]
    return f"{day} {month} {year}"


def _normalize_passport_date(raw: str, today: Optional[dt.date] = None) -> dt.date:
    formatted = reassemble_passport_date(raw)
    LOGGER.debug("Formatted standard passport date: %s", formatted)
    match = _match_format(formatted, PASSPORT_DATE_FORMATS)
    if match is None:
        LOGGER.warning("Invalid passport date format: %s", formatted)
        raise InvalidDateFormat(raw)
    parsed, fmt = match
    if fmt == PASSPORT_SHORT_YEAR_FORMAT:
        return apply_passport_century(parsed, today)
    return parsed


def normalize_date(raw: str, today: Optional[dt.date] = None) -> dt.date:
    LOGGER.debug("Date to normalize: %s", raw)
    if raw is None:
        raise InvalidDateFormat("")
    value = str(raw).strip()
    if is_passport_style(value):
        return _normalize_passport_date(value, today)
    parsed = _try_formats(value, DATE_FORMATS)
    if parsed is None:
        LOGGER.warning("Invalid date format: %s", value)
        raise InvalidDateFormat(raw)
    return parsed


def to_iso_string(value: dt.date) -> str:
    return value.isoformat()


@dataclass(frozen=True)
class DateIssue:
    field: str
    rule: str
    message: str


def check_claim_dates(claim, today: Optional[dt.date] = None) -> List[DateIssue]:
    """Flag passport dates that cannot be right relative to ``today``.

    Advisory only: a claim with issues is still a valid claim.
    """
    today = today or dt.date.today()
    issues: List[DateIssue] = []
    if claim.birth_date > today:
        issues.append(DateIssue("birth_date", "date_future", "Birthdate cannot be in the future."))
    if claim.passport_date_of_issue > today:
        issues.append(
            DateIssue("passport_date_of_issue", "date_future", "Passport date of issue cannot be in the future.")
        )
    if claim.passport_date_of_expiry < today:
        issues.append(
            DateIssue("passport_date_of_expiry", "date_past", "Passport date of expiry cannot be in the past.")
        )
    return issues
