# app/db/models/case.py
from sqlalchemy import Column, String, Text, DateTime, ForeignKey
from sqlalchemy.sql import func
from app.db.base import Base, new_id


class CaseModel(Base):
    __tablename__ = "cases"

    id = Column(String(36), primary_key=True, default=new_id)
    patient_id = Column(String(36), ForeignKey("patients.id"), nullable=False, index=True)
    case_number = Column(String(50), nullable=False)
    status = Column(String(20), nullable=False, default="OPEN")  # OPEN, PENDING, CLOSED, ARCHIVED
    filing_date = Column(DateTime(timezone=True))
    notes = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
