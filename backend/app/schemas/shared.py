# app/schemas/shared.py
from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, ConfigDict, EmailStr
from pydantic.alias_generators import to_camel

from app.config.constants import UserRole


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire (both accepted on input)."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class StatusOut(CamelModel):
    id: str
    name: str
    color: Optional[str] = None
    description: Optional[str] = None

class PayerOut(CamelModel):
    id: str
    name: str
    is_active: bool

class ExamOut(CamelModel):
    id: str
    name: str
    cpt_code: Optional[str] = None
    icd10_code: Optional[str] = None
    duration: Optional[int] = None
    price: Optional[Decimal] = None
    status: str

class FacilityOut(CamelModel):
    id: str
    name: str
    city: Optional[str] = None
    state: Optional[str] = None
    phone: Optional[str] = None
    status: str

class PhysicianOut(CamelModel):
    id: str
    prefix: Optional[str] = None
    name: str
    suffix: Optional[str] = None
    npi_number: Optional[str] = None
    status: str

class DoctorOut(CamelModel):
    id: str
    prefix: Optional[str] = None
    name: str
    clinic_name: Optional[str] = None


class UserOut(BaseModel):
    id: str
    email: EmailStr
    name: Optional[str] = None
    role: UserRole
    created_at: Optional[datetime] = None
