import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config.settings import settings
from app.db.crud import patient as patient_crud
from app.db.models import AppointmentModel, CaseModel, EventModel, PatientModel, ProcedureModel
import app.routes.patients.router as patients_router
from tests._helpers import add_dependents, count_rows, patient_payload

pytestmark = pytest.mark.anyio


async def _create(client, **overrides):
    r = await client.post("/patients", json=patient_payload(**overrides))
    assert r.status_code == 200, r.text
    return r.json()


@pytest.mark.parametrize(
    "method, url, body",
    [
        ("GET", "/patients", None),
        ("GET", "/patients/some-id", None),
        ("POST", "/patients", patient_payload()),
        ("PUT", "/patients", {"id": "some-id", "firstName": "Jane", "lastName": "Doe"}),
        ("DELETE", "/patients?id=some-id", None),
        ("GET", "/procedures", None),
    ],
)
async def test_patient_routes_require_authentication(anon_client, db, reference_data, method, url, body):
    r = await anon_client.request(method, url, json=body)

    assert r.status_code == 401
    assert await count_rows(db, PatientModel) == 0


async def test_bearer_header_is_accepted(anon_client, auth_cookies, reference_data):
    r = await anon_client.get("/patients", headers={"Authorization": f"Bearer {auth_cookies['session']}"})
    assert r.status_code == 200
    assert r.json() == []


async def test_create_patient_with_default_reference_rows(client, reference_data):
    body = await _create(client)

    assert body["firstName"] == "Jane"
    assert body["fullName"] == "Doe, Jane"
    assert len(body["procedures"]) == 1
    procedure = body["procedures"][0]
    assert procedure["facilityId"] == settings.default_facility_id
    assert procedure["physicianId"] == settings.default_physician_id
    assert procedure["exam"]["name"] == "MRI Brain"
    assert procedure["status"]["name"] == "Scheduled"


async def test_create_without_procedures_is_rejected(client, db, reference_data):
    r = await client.post("/patients", json=patient_payload(procedures=[]))

    assert r.status_code == 400
    assert r.json() == {"message": "At least one procedure is required"}
    assert await count_rows(db, PatientModel) == 0


async def test_create_without_last_name_is_rejected(client, reference_data):
    r = await client.post("/patients", json=patient_payload(lastName=""))

    assert r.status_code == 400
    assert r.json()["message"] == "First name and last name are required"


async def test_malformed_date_is_a_bad_request(client, reference_data):
    r = await client.post("/patients", json=patient_payload(dateOfBirth="not-a-date"))

    assert r.status_code == 400
    assert "dateOfBirth" in r.json()["message"]


async def test_unknown_exam_is_a_server_error_without_internals(client, db, reference_data):
    r = await client.post("/patients", json=patient_payload(procedures=[{"examId": "NOPE", "statusId": "S1"}]))

    assert r.status_code == 500
    assert r.json() == {"message": "Could not save changes"}
    assert await count_rows(db, PatientModel) == 0


async def test_list_is_ordered_by_last_then_first_name(client, reference_data):
    await _create(client, firstName="Zoe", lastName="Adams")
    await _create(client, firstName="Bob", lastName="Young")
    await _create(client, firstName="Amy", lastName="Adams")

    r = await client.get("/patients")

    assert r.status_code == 200
    assert [p["fullName"] for p in r.json()] == ["Adams, Amy", "Adams, Zoe", "Young, Bob"]


async def test_get_single_patient(client, reference_data):
    created = await _create(client)

    r = await client.get(f"/patients/{created['id']}")
    assert r.status_code == 200
    assert r.json()["id"] == created["id"]

    r = await client.get("/patients/missing")
    assert r.status_code == 404
    assert r.json() == {"message": "Patient not found"}


async def test_update_patient(client, reference_data):
    created = await _create(client, phone="813-555-0101")

    r = await client.put("/patients", json={"id": created["id"], "firstName": "Jane", "lastName": "Doe", "city": "Tampa", "statusId": "S2"})

    assert r.status_code == 200
    body = r.json()
    assert body["city"] == "Tampa"
    assert body["status"]["name"] == "Completed"
    assert body["phone"] == "813-555-0101"
    assert len(body["procedures"]) == 1


async def test_update_without_id_is_rejected(client, reference_data):
    r = await client.put("/patients", json={"city": "Tampa"})

    assert r.status_code == 400
    assert r.json() == {"message": "Patient ID is required"}


async def test_update_without_names_is_rejected(client, reference_data):
    created = await _create(client, city="Orlando")

    r = await client.put("/patients", json={"id": created["id"], "city": "Tampa"})

    assert r.status_code == 400
    assert r.json() == {"message": "First name and last name are required"}
    assert (await client.get(f"/patients/{created['id']}")).json()["city"] == "Orlando"


async def test_update_of_unknown_patient_is_not_found(client, reference_data):
    r = await client.put("/patients", json={"id": "missing", "firstName": "Jane", "lastName": "Doe", "city": "Tampa"})
    assert r.status_code == 404


async def test_delete_patient_and_dependents(client, db, reference_data):
    created = await _create(client)
    await add_dependents(db, created["id"])

    r = await client.delete("/patients", params={"id": created["id"]})

    assert r.status_code == 200
    assert r.json() == {"message": "Patient deleted successfully"}
    for model in (ProcedureModel, AppointmentModel, CaseModel, EventModel):
        assert await count_rows(db, model, patient_id=created["id"]) == 0
    assert (await client.get(f"/patients/{created['id']}")).status_code == 404


async def test_delete_without_id_is_rejected(client):
    r = await client.delete("/patients")

    assert r.status_code == 400
    assert r.json() == {"message": "Patient ID is required"}


async def test_delete_of_unknown_patient_is_not_found(client, reference_data):
    r = await client.delete("/patients", params={"id": "missing"})

    assert r.status_code == 404
    assert r.json() == {"message": "Patient not found"}


async def test_procedures_filtered_by_patient(client, reference_data):
    first = await _create(
        client,
        procedures=[
            {"examId": "E1", "statusId": "S1", "scheduleDate": "2025-01-05"},
            {"examId": "E2", "statusId": "S1", "scheduleDate": "2025-02-05"},
        ],
    )
    await _create(client, firstName="John")

    r = await client.get("/procedures", params={"patientId": first["id"]})
    assert r.status_code == 200
    body = r.json()
    assert [p["exam"]["name"] for p in body] == ["CT Head", "MRI Brain"]
    assert {p["patientId"] for p in body} == {first["id"]}

    r = await client.get("/procedures")
    assert len(r.json()) == 3


async def test_health_reports_database(anon_client):
    r = await anon_client.get("/health")

    assert r.status_code == 200
    assert r.json() == {"status": "ok", "database": "ok"}


def _connection_reset(*args, **kwargs):
    raise OperationalError("SELECT", {}, Exception("connection reset"))


async def test_provisioning_lookup_failure_returns_message(client, db, reference_data, monkeypatch):
    async def broken_get(self, *args, **kwargs):
        _connection_reset()

    monkeypatch.setattr(AsyncSession, "get", broken_get)

    r = await client.post("/patients", json=patient_payload())

    assert r.status_code == 500
    assert r.json() == {"message": "Could not provision default reference data"}
    assert await count_rows(db, PatientModel) == 0


async def test_store_failure_on_read_returns_message(client, monkeypatch):
    async def broken_list(db):
        _connection_reset()

    monkeypatch.setattr(patients_router, "list_patients", broken_list)

    r = await client.get("/patients")

    assert r.status_code == 500
    assert r.json() == {"message": "Could not save changes"}


async def test_store_failure_after_create_returns_message(client, db, reference_data, monkeypatch):
    async def broken_get_patient(session, patient_id):
        _connection_reset()

    monkeypatch.setattr(patient_crud, "get_patient", broken_get_patient)

    r = await client.post("/patients", json=patient_payload())

    assert r.status_code == 500
    assert r.json() == {"message": "Could not save changes"}
    # the create itself was committed before the re-read failed
    assert await count_rows(db, PatientModel) == 1
