# app/db/models/reference.py
"""Reference tables procedures and appointments point at."""
from sqlalchemy import Column, String, Integer, Numeric, Boolean, Text, DateTime, func
from app.db.base import Base, new_id


class FacilityModel(Base):
    __tablename__ = "facilities"

    id       = Column(String(36), primary_key=True, default=new_id)
    name     = Column(String(255), nullable=False)
    address  = Column(String(255))
    city     = Column(String(100))
    state    = Column(String(2))
    zip      = Column(String(10))
    phone    = Column(String(30))
    fax      = Column(String(30))
    email    = Column(String(255))
    map_link = Column(Text)
    status   = Column(String(20), nullable=False, default="active")  # 'active', 'inactive'

    created_at = Column(DateTime(timezone=True), server_default=func.now())


class PhysicianModel(Base):
    __tablename__ = "physicians"

    id           = Column(String(36), primary_key=True, default=new_id)
    prefix       = Column(String(20))
    name         = Column(String(255), nullable=False)
    suffix       = Column(String(20))
    phone_number = Column(String(30))
    fax_number   = Column(String(30))
    email        = Column(String(255))
    npi_number   = Column(String(20))
    clinic_name  = Column(String(255))
    address      = Column(String(255))
    map_link     = Column(Text)
    status       = Column(String(20), nullable=False, default="Active")  # 'Active', 'Inactive'

    created_at = Column(DateTime(timezone=True), server_default=func.now())


class ExamModel(Base):
    __tablename__ = "exams"

    id          = Column(String(36), primary_key=True, default=new_id)
    name        = Column(String(255), nullable=False)
    cpt_code    = Column(String(20))
    icd10_code  = Column(String(20))
    duration    = Column(Integer)  # minutes
    price       = Column(Numeric(10, 2))
    description = Column(Text)
    status      = Column(String(20), nullable=False, default="active")


class StatusModel(Base):
    __tablename__ = "statuses"

    id          = Column(String(36), primary_key=True, default=new_id)
    name        = Column(String(100), nullable=False, unique=True)
    color       = Column(String(7))  # '#RRGGBB'
    description = Column(Text)


class PayerModel(Base):
    __tablename__ = "payers"

    id        = Column(String(36), primary_key=True, default=new_id)
    name      = Column(String(255), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
