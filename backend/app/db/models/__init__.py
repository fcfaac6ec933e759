from .user import UserModel
from .reference import FacilityModel, PhysicianModel, ExamModel, StatusModel, PayerModel
from .doctor import DoctorModel
from .patient import PatientModel
from .procedure import ProcedureModel
from .appointment import AppointmentModel
from .case import CaseModel
from .event import EventModel

__all__ = [
    "UserModel",
    "FacilityModel",
    "PhysicianModel",
    "ExamModel",
    "StatusModel",
    "PayerModel",
    "DoctorModel",
    "PatientModel",
    "ProcedureModel",
    "AppointmentModel",
    "CaseModel",
    "EventModel",
]
