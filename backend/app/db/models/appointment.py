# app/db/models/appointment.py
from sqlalchemy import (
    Column,
    DateTime,
    String,
    Text,
    ForeignKey,
)
from sqlalchemy.orm import relationship
from app.db.base import Base, new_id
from sqlalchemy.sql import func


class AppointmentModel(Base):
    __tablename__ = "appointments"

    id = Column(String(36), primary_key=True, default=new_id)
    # plain FK, removed by the patient cascade rather than the database
    patient_id = Column(String(36), ForeignKey("patients.id"), nullable=False, index=True)
    doctor_id = Column(String(36), ForeignKey("doctors.id"), nullable=True)
    exam_id = Column(String(36), ForeignKey("exams.id"), nullable=True)
    status_id = Column(String(36), ForeignKey("statuses.id"), nullable=True)
    starts_at = Column(DateTime(timezone=True), nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    patient = relationship("PatientModel", back_populates="appointments")
    doctor = relationship("DoctorModel")
    exam = relationship("ExamModel")
    status = relationship("StatusModel")
