from __future__ import annotations

import datetime as dt
import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Callable, Dict, List, Optional

from dateutil import parser

from .compare import claims_match
from ..schemas import ClaimRecord, ValidationRecord

LOGGER = logging.getLogger(__name__)


class LedgerError(Exception):
    """Base class for validation ledger failures."""


class LedgerConflict(LedgerError):
    def __init__(self, passport_number: str):
        self.passport_number = passport_number
        super().__init__(f"Passport validation data with passport number {passport_number} already exists.")


class ValidationRecordNotFound(LedgerError):
    def __init__(self, passport_number: str):
        self.passport_number = passport_number
        super().__init__(f"Passport validation data with passport number {passport_number} not found.")


class InMemoryLedgerStore:
    """Records keyed by passport number; a second insert for a key is a conflict."""

    def __init__(self) -> None:
        self._records: Dict[str, ValidationRecord] = {}
        self._lock = threading.RLock()

    def insert(self, record: ValidationRecord) -> None:
        key = record.passport_number
        with self._lock:
            existing = self._records.setdefault(key, record)
            if existing is not record:
                raise LedgerConflict(key)

    def get(self, passport_number: str) -> Optional[ValidationRecord]:
        with self._lock:
            return self._records.get(passport_number)

    def remove(self, passport_number: str) -> Optional[ValidationRecord]:
        with self._lock:
            return self._records.pop(passport_number, None)

    def values(self) -> List[ValidationRecord]:
        with self._lock:
            return list(self._records.values())


class JsonFileLedgerStore(InMemoryLedgerStore):
    """In-memory store mirrored to a JSON file after every change.

    The file is replaced atomically, and a change whose write fails is undone
    in memory so the two never diverge.
    """

    def __init__(self, path: Path) -> None:
        super().__init__()
        self.path = Path(path)
        self._load()

    def _load(self) -> None:
        if not self.path.exists():
            return
        with self.path.open() as f:
            payload = json.load(f)
        for entry in payload.get("records", []):
            record = ValidationRecord(
                claim=ClaimRecord.model_validate(entry["claim"]),
                validated_at=parser.isoparse(entry["validatedAt"]),
            )
            self._records[record.passport_number] = record
        LOGGER.info("Loaded %d validation records from %s", len(self._records), self.path)

    def _flush(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = {"records": [record.model_dump(mode="json", by_alias=True) for record in self.values()]}
        fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent)
        try:
            with os.fdopen(fd, "w") as f:
                json.dump(payload, f, indent=2)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def insert(self, record: ValidationRecord) -> None:
        with self._lock:
            super().insert(record)
            try:
                self._flush()
            except Exception:
                self._records.pop(record.passport_number, None)
                raise

    def remove(self, passport_number: str) -> Optional[ValidationRecord]:
        with self._lock:
            removed = super().remove(passport_number)
            if removed is None:
                return None
            try:
                self._flush()
            except Exception:
                self._records[passport_number] = removed
                raise
            return removed


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class ValidationLedger:
    def __init__(self, store: Optional[InMemoryLedgerStore] = None, clock: Callable[[], dt.datetime] = _utcnow):
        self.store = store if store is not None else InMemoryLedgerStore()
        self.clock = clock

    def exists(self, claim: ClaimRecord) -> bool:
        # Full-claim comparison over every record, not a passport number lookup.
        return any(claims_match(record.claim, claim) for record in self.store.values())

    def record(self, claim: ClaimRecord) -> ValidationRecord:
        record = ValidationRecord(claim=claim, validated_at=self.clock())
        self.store.insert(record)
        LOGGER.info("Saved passport validation data for passport number %s", claim.passport_number)
        return record

    def get_by_passport_number(self, passport_number: str) -> Optional[ValidationRecord]:
        LOGGER.info("Retrieving passport validation data with passport number: %s", passport_number)
        return self.store.get(passport_number)

    def delete_by_passport_number(self, passport_number: str) -> ValidationRecord:
        removed = self.store.remove(passport_number)
        if removed is None:
            raise ValidationRecordNotFound(passport_number)
        LOGGER.info("Deleted passport validation data for passport number %s", passport_number)
        return removed

    def list_all(self) -> List[ValidationRecord]:
        return self.store.values()

    def page(self, page: int, size: int) -> List[ValidationRecord]:
        if page < 0 or size <= 0:
            return []
        start = page * size
        return self.list_all()[start : start + size]


def build_ledger(backend: str, path: Optional[Path] = None) -> ValidationLedger:
    if backend == "memory":
        return ValidationLedger(InMemoryLedgerStore())
    if backend == "json":
        if path is None:
            raise ValueError("A ledger path is required for the json backend.")
        return ValidationLedger(JsonFileLedgerStore(path))
    raise ValueError(f"Unknown ledger backend: {backend}")
