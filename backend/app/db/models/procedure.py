# app/db/models/procedure.py
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from app.db.base import Base, new_id


class ProcedureModel(Base):
    __tablename__ = "procedures"

    id = Column(String(36), primary_key=True, default=new_id)
    # owned by exactly one patient, no independent lifecycle
    patient_id = Column(String(36), ForeignKey("patients.id"), nullable=False, index=True)
    exam_id = Column(String(36), ForeignKey("exams.id"), nullable=False)
    status_id = Column(String(36), ForeignKey("statuses.id"), nullable=False)
    facility_id = Column(String(36), ForeignKey("facilities.id"), nullable=False)
    physician_id = Column(String(36), ForeignKey("physicians.id"), nullable=False)

    schedule_date = Column(DateTime(timezone=True), nullable=True)
    schedule_time = Column(String(8), nullable=True)  # HH:MM or HH:MM:SS
    lop = Column(String(255), nullable=True)
    is_completed = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    patient = relationship("PatientModel", back_populates="procedures")
    exam = relationship("ExamModel")
    status = relationship("StatusModel")
    facility = relationship("FacilityModel")
    physician = relationship("PhysicianModel")
