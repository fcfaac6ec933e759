# app/db/models/doctor.py
from sqlalchemy import Column, String
from app.db.base import Base, new_id

class DoctorModel(Base):
    """Referring doctor (not a physician performing procedures)."""
    __tablename__ = "doctors"

    id           = Column(String(36), primary_key=True, default=new_id)
    prefix       = Column(String(20))
    name         = Column(String(255), nullable=False)
    email        = Column(String(255))
    phone_number = Column(String(30))
    clinic_name  = Column(String(255))
    status       = Column(String(20), nullable=False, default="Active")
