"""Tests for the patient data-access service."""

import pytest

from patient_api.services.patients import PatientNotFoundError, PatientService, get_patient_service


@pytest.fixture
def service(session):
    return get_patient_service(session)


@pytest.fixture
def bob(service):
    return service.create_patient(name="Bob", age=61, doctor="Dr. House")


class TestPatientService:
    def test_create_assigns_id_and_leaves_prescription_null(self, service, bob):
        assert bob.id is not None
        assert bob.prescription is None
        assert service.get_patient(bob.id) is bob

    def test_get_missing_raises(self, service):
        with pytest.raises(PatientNotFoundError) as excinfo:
            service.get_patient(404)
        assert excinfo.value.patient_id == 404

    def test_update_returns_stored_row(self, service, bob):
        service.update_prescription(bob.id, prescription="Vicodin")

        updated = service.update_patient(bob.id, name="Gregory", age=62, doctor="Dr. Cuddy")

        assert (updated.name, updated.age, updated.doctor) == ("Gregory", 62, "Dr. Cuddy")
        assert updated.prescription == "Vicodin"

    def test_update_missing_raises(self, service):
        with pytest.raises(PatientNotFoundError):
            service.update_patient(99, name="Nobody", age=1, doctor="None")

    def test_update_prescription_set_and_clear(self, service, bob):
        assert service.update_prescription(bob.id, prescription="").prescription == ""
        assert service.update_prescription(bob.id, prescription=None).prescription is None

    def test_update_prescription_missing_raises(self, service):
        with pytest.raises(PatientNotFoundError):
            service.update_prescription(99, prescription="x")

    def test_delete_reports_whether_row_existed(self, service, bob):
        assert service.delete_patient(bob.id) is True
        assert service.delete_patient(bob.id) is False


def test_changes_are_committed_across_sessions(database):
    with database.session() as session:
        patient_id = PatientService(session).create_patient(name="Carol", age=33, doctor="Dr. Grey").id

    with database.session() as session:
        assert PatientService(session).get_patient(patient_id).name == "Carol"


def test_failed_session_rolls_back(database):
    with pytest.raises(RuntimeError):
        with database.session() as session:
            patient_id = PatientService(session).create_patient(name="Dave", age=50, doctor="Dr. Yang").id
            raise RuntimeError("boom")

    with database.session() as session:
        with pytest.raises(PatientNotFoundError):
            PatientService(session).get_patient(patient_id)
