# app/db/models/patient.py
from sqlalchemy import Column, String, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from app.db.base import Base, new_id

class PatientModel(Base):
    __tablename__ = "patients"

    id          = Column(String(36), primary_key=True, default=new_id)

    first_name  = Column(String(100), nullable=False)
    middle_name = Column(String(100))
    last_name   = Column(String(100), nullable=False, index=True)
    # stored as instants, see app.core.dates.to_utc_instant
    date_of_birth = Column(DateTime(timezone=True))
    gender      = Column(String(20))
    phone       = Column(String(30))
    alt_number  = Column(String(30))
    email       = Column(String(255))
    address     = Column(String(255))
    city        = Column(String(100))
    zip         = Column(String(10))
    lawyer      = Column(String(255))
    order_date  = Column(DateTime(timezone=True))
    order_for   = Column(String(255))

    status_id   = Column(String(36), ForeignKey("statuses.id"))
    payer_id    = Column(String(36), ForeignKey("payers.id"))

    created_at  = Column(DateTime(timezone=True), server_default=func.now())
    updated_at  = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    status = relationship("StatusModel")
    payer  = relationship("PayerModel")
    # No ORM cascade here: dependents are removed explicitly by
    # app.db.crud.patient.delete_patient, see CASCADE_DEPENDENTS.
    procedures = relationship(
        "ProcedureModel",
        back_populates="patient",
        order_by="ProcedureModel.schedule_date.desc()",
        passive_deletes="all",
    )
    appointments = relationship(
        "AppointmentModel",
        back_populates="patient",
        order_by="AppointmentModel.starts_at",
        passive_deletes="all",
    )
