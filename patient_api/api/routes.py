from __future__ import annotations

import re
from typing import Any, Awaitable, Callable, TypeVar

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.responses import JSONResponse
from loguru import logger
from pydantic import BaseModel, ValidationError
from sqlalchemy.exc import SQLAlchemyError

from patient_api.models.patient import Patient
from patient_api.schemas import INT64_MAX, INT64_MIN, PatientPayload, PatientResponse, PrescriptionPayload
from patient_api.services.db import Database, get_database
from patient_api.services.patients import PatientNotFoundError, get_patient_service

router = APIRouter()

PayloadT = TypeVar("PayloadT", bound=BaseModel)

# Roles are documentation labels only; nothing is enforced
RECEPTIONIST = "receptionist"
DOCTOR = "doctor"

_ID_PATTERN = re.compile(r"[+-]?[0-9]+")


def _parse_id(raw: str) -> int:
    # ASCII digits with an optional sign, within a signed 64-bit column
    if _ID_PATTERN.fullmatch(raw):
        value = int(raw)
        if INT64_MIN <= value <= INT64_MAX:
            return value
    logger.warning("Rejected patient id {raw!r}", raw=raw)
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid patient ID")


def json_payload(schema: type[PayloadT]) -> Callable[[Request], Awaitable[PayloadT]]:
    """
    Build a dependency that parses the request body into ``schema``.

    FastAPI's own body handling answers 422 for both undecodable JSON and type
    mismatches; this API answers 400 for either, carrying the parser's message.
    """

    async def dependency(request: Request) -> PayloadT:
        try:
            body: Any = await request.json()
        except ValueError as exc:
            logger.warning("Invalid JSON body: {error}", error=exc)
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Invalid JSON body: {exc}") from exc

        try:
            return schema.model_validate(body)
        except ValidationError as exc:
            logger.warning("Validation error for {schema}: {error}", schema=schema.__name__, error=exc)
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=exc.errors(include_url=False),
            ) from exc

    return dependency


def _store_error(action: str, exc: SQLAlchemyError) -> HTTPException:
    logger.exception("Failed to {action} patient", action=action)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"Failed to {action} patient: {exc}")


def _not_found(exc: PatientNotFoundError) -> HTTPException:
    logger.warning("Patient not found id={patient_id}", patient_id=exc.patient_id)
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Patient not found")


def _entity(patient: Patient, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=PatientResponse.model_validate(patient).to_json())


# Handlers are sync so FastAPI runs each in its threadpool around the blocking store call.


@router.post("/patients", status_code=status.HTTP_201_CREATED, tags=[RECEPTIONIST])
def create_patient(
    payload: PatientPayload = Depends(json_payload(PatientPayload)),
    database: Database = Depends(get_database),
) -> JSONResponse:
    try:
        with database.session() as session:
            patient = get_patient_service(session).create_patient(
                name=payload.name,
                age=payload.age,
                doctor=payload.doctor,
            )
    except SQLAlchemyError as exc:
        raise _store_error("insert", exc) from exc

    return _entity(patient, status.HTTP_201_CREATED)


@router.get("/patients/{patient_id}", tags=[RECEPTIONIST, DOCTOR])
def get_patient(patient_id: str, database: Database = Depends(get_database)) -> JSONResponse:
    pid = _parse_id(patient_id)

    try:
        with database.session() as session:
            patient = get_patient_service(session).get_patient(pid)
    except PatientNotFoundError as exc:
        raise _not_found(exc) from exc
    except SQLAlchemyError as exc:
        raise _store_error("query", exc) from exc

    return _entity(patient)


@router.put("/patients/{patient_id}", tags=[RECEPTIONIST])
def update_patient(
    patient_id: str,
    payload: PatientPayload = Depends(json_payload(PatientPayload)),
    database: Database = Depends(get_database),
) -> JSONResponse:
    pid = _parse_id(patient_id)

    try:
        with database.session() as session:
            patient = get_patient_service(session).update_patient(
                pid,
                name=payload.name,
                age=payload.age,
                doctor=payload.doctor,
            )
    except PatientNotFoundError as exc:
        raise _not_found(exc) from exc
    except SQLAlchemyError as exc:
        raise _store_error("update", exc) from exc

    return _entity(patient)


@router.put("/patients/{patient_id}/prescription", tags=[DOCTOR])
def update_prescription(
    patient_id: str,
    payload: PrescriptionPayload = Depends(json_payload(PrescriptionPayload)),
    database: Database = Depends(get_database),
) -> JSONResponse:
    pid = _parse_id(patient_id)

    try:
        with database.session() as session:
            patient = get_patient_service(session).update_prescription(pid, prescription=payload.prescription)
    except PatientNotFoundError as exc:
        raise _not_found(exc) from exc
    except SQLAlchemyError as exc:
        raise _store_error("update prescription for", exc) from exc

    return _entity(patient)


@router.delete("/patients/{patient_id}", status_code=status.HTTP_204_NO_CONTENT, tags=[RECEPTIONIST])
def delete_patient(patient_id: str, database: Database = Depends(get_database)) -> Response:
    pid = _parse_id(patient_id)

    try:
        with database.session() as session:
            get_patient_service(session).delete_patient(pid)
    except SQLAlchemyError as exc:
        raise _store_error("delete", exc) from exc

    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}
