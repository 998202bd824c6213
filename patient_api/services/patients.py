from __future__ import annotations

from loguru import logger
from sqlalchemy import delete, update
from sqlalchemy.orm import Session

from patient_api.models.patient import Patient


class PatientNotFoundError(LookupError):
    def __init__(self, patient_id: int) -> None:
        super().__init__(f"Patient {patient_id} not found")
        self.patient_id = patient_id


class PatientService:
    """Single-statement data access for the ``patients`` table."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def create_patient(self, *, name: str, age: int, doctor: str) -> Patient:
        patient = Patient(name=name, age=age, doctor=doctor, prescription=None)
        self.session.add(patient)
        self.session.flush()
        logger.info("Created patient id={patient_id}", patient_id=patient.id)
        return patient

    def get_patient(self, patient_id: int) -> Patient:
        logger.debug("Fetching patient id={patient_id}", patient_id=patient_id)
        patient = self.session.get(Patient, patient_id)
        if patient is None:
            raise PatientNotFoundError(patient_id)
        return patient

    def update_patient(self, patient_id: int, *, name: str, age: int, doctor: str) -> Patient:
        stmt = (
            update(Patient)
            .where(Patient.id == patient_id)
            .values(name=name, age=age, doctor=doctor)
            .returning(Patient)
            .execution_options(populate_existing=True)
        )
        patient = self.session.scalars(stmt).one_or_none()
        if patient is None:
            raise PatientNotFoundError(patient_id)
        logger.info("Updated patient id={patient_id}", patient_id=patient_id)
        return patient

    def update_prescription(self, patient_id: int, *, prescription: str | None) -> Patient:
        stmt = (
            update(Patient)
            .where(Patient.id == patient_id)
            .values(prescription=prescription)
            .returning(Patient)
            .execution_options(populate_existing=True)
        )
        patient = self.session.scalars(stmt).one_or_none()
        if patient is None:
            raise PatientNotFoundError(patient_id)
        logger.info(
            "Updated prescription for patient id={patient_id} (cleared={cleared})",
            patient_id=patient_id,
            cleared=prescription is None,
        )
        return patient

    def delete_patient(self, patient_id: int) -> bool:
        stmt = delete(Patient).where(Patient.id == patient_id).execution_options(synchronize_session=False)
        result = self.session.execute(stmt)
        deleted = result.rowcount > 0
        logger.info("Deleted patient id={patient_id} (existed={deleted})", patient_id=patient_id, deleted=deleted)
        return deleted


def get_patient_service(session: Session) -> PatientService:
    return PatientService(session=session)
