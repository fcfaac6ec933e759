# app/schemas/patient.py
from __future__ import annotations

from datetime import datetime
from typing import Any, List, Optional

from pydantic import computed_field, field_validator

from app.schemas.shared import (
    CamelModel,
    StatusOut,
    PayerOut,
    ExamOut,
    FacilityOut,
    PhysicianOut,
    DoctorOut,
)


def _blank_to_none(value: Any) -> Any:
    # HTML forms post "" for untouched date inputs
    if isinstance(value, str) and not value.strip():
        return None
    return value


# --------------------------------------------------------------------------
# 1.  Incoming payloads
# --------------------------------------------------------------------------
class ProcedureIn(CamelModel):
    """
    One procedure submitted with a new patient.

    `exam_id` and `status_id` are checked by the writer rather than here so that
    a missing one is reported as a 400 with a readable message.
    `facility_id` / `physician_id` fall back to the default reference rows.
    """
    exam_id: Optional[str] = None
    status_id: Optional[str] = None
    facility_id: Optional[str] = None
    physician_id: Optional[str] = None
    schedule_date: Optional[datetime] = None
    schedule_time: Optional[str] = None
    lop: Optional[str] = None
    is_completed: bool = False

    @field_validator("schedule_date", mode="before")
    @classmethod
    def blank_dates_to_none(cls, value: Any) -> Any:
        return _blank_to_none(value)


class PatientFields(CamelModel):
    first_name: Optional[str] = None
    middle_name: Optional[str] = None
    last_name: Optional[str] = None
    date_of_birth: Optional[datetime] = None
    gender: Optional[str] = None
    phone: Optional[str] = None
    alt_number: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    zip: Optional[str] = None
    lawyer: Optional[str] = None
    order_date: Optional[datetime] = None
    order_for: Optional[str] = None
    status_id: Optional[str] = None
    payer_id: Optional[str] = None

    @field_validator("date_of_birth", "order_date", mode="before")
    @classmethod
    def blank_dates_to_none(cls, value: Any) -> Any:
        return _blank_to_none(value)


class PatientCreate(PatientFields):
    procedures: Optional[List[ProcedureIn]] = None


class PatientUpdate(PatientFields):
    id: Optional[str] = None
    # accepted so clients can send the full object back; the update path ignores it
    procedures: Optional[List[Any]] = None


# --------------------------------------------------------------------------
# 2.  Projections
# --------------------------------------------------------------------------
class ProcedureOut(CamelModel):
    id: str
    patient_id: str
    exam_id: str
    status_id: str
    facility_id: str
    physician_id: str
    schedule_date: Optional[datetime] = None
    schedule_time: Optional[str] = None
    lop: Optional[str] = None
    is_completed: bool
    exam: Optional[ExamOut] = None
    facility: Optional[FacilityOut] = None
    physician: Optional[PhysicianOut] = None
    status: Optional[StatusOut] = None


class AppointmentOut(CamelModel):
    id: str
    patient_id: str
    doctor_id: Optional[str] = None
    exam_id: Optional[str] = None
    status_id: Optional[str] = None
    starts_at: datetime
    notes: Optional[str] = None
    doctor: Optional[DoctorOut] = None
    exam: Optional[ExamOut] = None
    status: Optional[StatusOut] = None


class PatientOut(PatientFields):
    id: str
    first_name: str
    last_name: str
    status: Optional[StatusOut] = None
    payer: Optional[PayerOut] = None
    procedures: List[ProcedureOut] = []
    appointments: List[AppointmentOut] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @computed_field(alias="fullName")
    @property
    def full_name(self) -> str:
        return f"{self.last_name}, {self.first_name}"


class MessageOut(CamelModel):
    message: str
