import pytest
from sqlalchemy.exc import OperationalError

from app.core.errors import NotFound, PersistenceFailed, ValidationFailed
from app.db.crud import patient as patient_crud
from app.db.crud.patient import create_patient, delete_patient, get_patient
from app.db.models import (
    AppointmentModel,
    CaseModel,
    EventModel,
    PatientModel,
    ProcedureModel,
)
from app.schemas.patient import PatientCreate
from tests._helpers import add_dependents, count_rows, patient_payload

pytestmark = pytest.mark.anyio

DEPENDENTS = (ProcedureModel, AppointmentModel, CaseModel, EventModel)


@pytest.fixture
async def patient_with_dependents(db, reference_data):
    patient = await create_patient(
        db,
        PatientCreate.model_validate(
            patient_payload(
                procedures=[
                    {"examId": "E1", "statusId": "S1"},
                    {"examId": "E2", "statusId": "S1"},
                ]
            )
        ),
    )
    await add_dependents(db, patient.id)
    return patient.id


async def test_delete_removes_patient_and_every_dependent(db, patient_with_dependents):
    patient_id = patient_with_dependents
    for model in DEPENDENTS:
        assert await count_rows(db, model, patient_id=patient_id) >= 1

    await delete_patient(db, patient_id)

    for model in DEPENDENTS:
        assert await count_rows(db, model, patient_id=patient_id) == 0
    with pytest.raises(NotFound):
        await get_patient(db, patient_id)


async def test_delete_leaves_other_patients_alone(db, patient_with_dependents):
    other = await create_patient(db, PatientCreate.model_validate(patient_payload(firstName="John", lastName="Roe")))
    await add_dependents(db, other.id)

    await delete_patient(db, patient_with_dependents)

    assert await count_rows(db, PatientModel) == 1
    for model in DEPENDENTS:
        assert await count_rows(db, model, patient_id=other.id) == 1


async def test_delete_of_unknown_patient_is_not_found(db, reference_data):
    with pytest.raises(NotFound):
        await delete_patient(db, "does-not-exist")
    assert not db.in_transaction()


@pytest.mark.parametrize("patient_id", [None, "", "   "])
async def test_delete_requires_an_id(db, patient_id):
    with pytest.raises(ValidationFailed, match="Patient ID is required"):
        await delete_patient(db, patient_id)


async def test_failed_patient_row_delete_rolls_back_dependents(db, patient_with_dependents, monkeypatch):
    patient_id = patient_with_dependents

    async def broken_delete(session, pid):
        raise OperationalError("DELETE FROM patients", {"id": pid}, Exception("disk I/O error"))

    monkeypatch.setattr(patient_crud, "_delete_patient_row", broken_delete)

    with pytest.raises(PersistenceFailed):
        await delete_patient(db, patient_id)

    assert await count_rows(db, PatientModel, id=patient_id) == 1
    assert await count_rows(db, ProcedureModel, patient_id=patient_id) == 2
    for model in (AppointmentModel, CaseModel, EventModel):
        assert await count_rows(db, model, patient_id=patient_id) == 1


async def test_cascade_order_ends_with_dependents_of_patient():
    models = [model for model, _ in patient_crud.CASCADE_DEPENDENTS]
    assert models == [ProcedureModel, AppointmentModel, CaseModel, EventModel]
    assert PatientModel not in models
