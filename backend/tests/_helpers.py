from datetime import datetime, timezone

from sqlalchemy import select, func

from app.db.models import AppointmentModel, CaseModel, EventModel


def patient_payload(**overrides):
    payload = {
        "firstName": "Jane",
        "lastName": "Doe",
        "procedures": [{"examId": "E1", "statusId": "S1"}],
    }
    payload.update(overrides)
    return payload


async def count_rows(db, model, **filters):
    stmt = select(func.count()).select_from(model)
    for column, value in filters.items():
        stmt = stmt.where(getattr(model, column) == value)
    result = await db.execute(stmt)
    count = result.scalar_one()
    await db.commit()
    return count


async def add_dependents(db, patient_id):
    """One appointment, case and event pointing at the patient."""
    when = datetime(2025, 3, 1, 14, 30, tzinfo=timezone.utc)
    db.add_all(
        [
            AppointmentModel(patient_id=patient_id, doctor_id="D1", exam_id="E1", status_id="S1", starts_at=when),
            CaseModel(patient_id=patient_id, case_number=f"C-{patient_id[:8]}", status="OPEN"),
            EventModel(patient_id=patient_id, title="Intake call", starts_at=when),
        ]
    )
    await db.commit()
