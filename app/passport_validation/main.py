from __future__ import annotations

import logging
from typing import Dict

import anyio
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .config import CONFIG, resolve_ledger_path
from .pipeline.dates import InvalidDateFormat
from .pipeline.extract import extract_report
from .pipeline.ledger import LedgerConflict, ValidationRecordNotFound, build_ledger
from .pipeline.validate import validate_claim
from .schemas import ClaimRecord, ExtractionRequest, ValidationRequest

logging.basicConfig(level=CONFIG.log_level, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
LOGGER = logging.getLogger("passport_validation")

LEDGER = build_ledger(CONFIG.ledger.backend, resolve_ledger_path())

app = FastAPI(title="Passport Validation")


def _dump(model) -> Dict:
    return model.model_dump(mode="json", by_alias=True)


@app.exception_handler(InvalidDateFormat)
async def invalid_date_format(request: Request, exc: InvalidDateFormat) -> JSONResponse:
    LOGGER.warning("Rejected %s: %s", request.url.path, exc)
    return JSONResponse(
        {"error": "invalid_date_format", "message": str(exc), "value": exc.raw},
        status_code=400,
    )


@app.exception_handler(LedgerConflict)
async def ledger_conflict(request: Request, exc: LedgerConflict) -> JSONResponse:
    return JSONResponse(
        {"error": "ledger_conflict", "message": str(exc), "passportNumber": exc.passport_number},
        status_code=409,
    )


@app.exception_handler(ValidationRecordNotFound)
async def record_not_found(request: Request, exc: ValidationRecordNotFound) -> JSONResponse:
    return JSONResponse(
        {"error": "not_found", "message": str(exc), "passportNumber": exc.passport_number},
        status_code=404,
    )


@app.get("/health")
async def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.post("/form/extract")
async def extract(payload: ExtractionRequest):
    report = extract_report(payload.fields)
    return JSONResponse(_dump(report))


@app.post("/validations/validate")
async def validate(payload: ValidationRequest):
    response = await anyio.to_thread.run_sync(validate_claim, payload.claim, payload.fields, LEDGER)
    return JSONResponse(_dump(response))


@app.get("/validations")
async def list_validations(page: int = 0, size: int = 10):
    records = await anyio.to_thread.run_sync(LEDGER.page, page, size)
    return JSONResponse({"page": page, "size": size, "records": [_dump(record) for record in records]})


@app.get("/validations/{passport_number}")
async def get_validation(passport_number: str):
    record = await anyio.to_thread.run_sync(LEDGER.get_by_passport_number, passport_number)
    if record is None:
        raise ValidationRecordNotFound(passport_number)
    return JSONResponse(_dump(record))


@app.post("/validations")
async def create_validation(claim: ClaimRecord):
    record = await anyio.to_thread.run_sync(LEDGER.record, claim)
    return JSONResponse(_dump(record), status_code=201)


@app.delete("/validations/{passport_number}")
async def delete_validation(passport_number: str):
    await anyio.to_thread.run_sync(LEDGER.delete_by_passport_number, passport_number)
    return JSONResponse(
        {"message": f"Passport validation data deleted for passport number: {passport_number}"}
    )
