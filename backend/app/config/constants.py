from enum import Enum

class FacilityStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"

class PhysicianStatus(str, Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"

class UserRole(str, Enum):
    ADMIN = "ADMIN"
    STAFF = "STAFF"
    DOCTOR = "DOCTOR"
    ATTORNEY = "ATTORNEY"


DEFAULT_FACILITY_NAME = "Default Facility"
DEFAULT_PHYSICIAN_NAME = "Default Physician"

# HH:MM or HH:MM:SS, 24h clock
SCHEDULE_TIME_PATTERN = r"^([01][0-9]|2[0-3]):[0-5][0-9](:[0-5][0-9])?$"
