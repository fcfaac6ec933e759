import logging
import re
from typing import Any, Dict, List, Optional

from sqlalchemy import select, delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.config.constants import SCHEDULE_TIME_PATTERN
from app.core.dates import to_utc_instant
from app.core.errors import ValidationFailed, NotFound, PersistenceFailed
from app.db.crud.reference import ensure_default_facility, ensure_default_physician
from app.db.models import (
    PatientModel,
    ProcedureModel,
    AppointmentModel,
    CaseModel,
    EventModel,
)
from app.schemas.patient import PatientCreate, PatientUpdate, ProcedureIn

logger = logging.getLogger(__name__)

NAMES_REQUIRED = "First name and last name are required"
ID_REQUIRED = "Patient ID is required"

TEXT_FIELDS = (
    "middle_name",
    "gender",
    "phone",
    "alt_number",
    "email",
    "address",
    "city",
    "zip",
    "lawyer",
    "order_for",
    "status_id",
    "payer_id",
)
DATE_FIELDS = ("date_of_birth", "order_date")
# a blank id on update leaves the existing link in place
LINK_FIELDS = ("status_id", "payer_id")

# Rows that reference a patient, deleted in this order before the patient row.
# The database has no ON DELETE CASCADE for these.
CASCADE_DEPENDENTS = (
    (ProcedureModel, ProcedureModel.patient_id),
    (AppointmentModel, AppointmentModel.patient_id),
    (CaseModel, CaseModel.patient_id),
    (EventModel, EventModel.patient_id),
)


# --------------------------------------------------------------------------
# Helpers
# --------------------------------------------------------------------------
def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _is_blank(value: Optional[str]) -> bool:
    return _clean(value) is None


def _patient_values(fields: Dict[str, Any]) -> Dict[str, Any]:
    """Map submitted patient fields to column values (only the keys present)."""
    values: Dict[str, Any] = {}
    for name in ("first_name", "last_name"):
        if name in fields:
            values[name] = _clean(fields[name])
    for name in TEXT_FIELDS:
        if name in fields:
            values[name] = _clean(fields[name])
    for name in DATE_FIELDS:
        if name in fields:
            values[name] = to_utc_instant(fields[name])
    return values


def _validate_procedures(procedures: List[ProcedureIn]) -> None:
    if not procedures:
        raise ValidationFailed("At least one procedure is required")
    for index, procedure in enumerate(procedures):
        if _is_blank(procedure.exam_id) or _is_blank(procedure.status_id):
            logger.warning(f"CRUD: procedure #{index} is missing examId/statusId")
            raise ValidationFailed("Each procedure requires an exam and a status")
        schedule_time = _clean(procedure.schedule_time)
        if schedule_time and not re.match(SCHEDULE_TIME_PATTERN, schedule_time):
            raise ValidationFailed("Invalid time format. Please use HH:mm or HH:mm:ss format")


def _patient_projection():
    """Loader options for the full patient aggregate as the API returns it."""
    return (
        selectinload(PatientModel.status),
        selectinload(PatientModel.payer),
        selectinload(PatientModel.procedures).options(
            selectinload(ProcedureModel.exam),
            selectinload(ProcedureModel.facility),
            selectinload(ProcedureModel.physician),
            selectinload(ProcedureModel.status),
        ),
        selectinload(PatientModel.appointments).options(
            selectinload(AppointmentModel.doctor),
            selectinload(AppointmentModel.exam),
            selectinload(AppointmentModel.status),
        ),
    )


# --------------------------------------------------------------------------
# Reads
# --------------------------------------------------------------------------
async def list_patients(db: AsyncSession) -> List[PatientModel]:
    """
    Retrieves every patient with status, payer, appointments and procedures joined

    Args:
        db (AsyncSession): the database session

    Returns:
        List[PatientModel]: patients ordered by last name, then first name
    """
    stmt = (
        select(PatientModel)
        .options(*_patient_projection())
        .order_by(PatientModel.last_name, PatientModel.first_name)
        .execution_options(populate_existing=True)
    )
    result = await db.execute(stmt)
    patients = result.scalars().all()
    logger.info(f"CRUD: listed {len(patients)} patients")
    return list(patients)


async def get_patient(db: AsyncSession, patient_id: str) -> PatientModel:
    """
    Retrieves one patient aggregate

    Args:
        db (AsyncSession): the database session
        patient_id (str): id of the patient

    Returns:
        PatientModel: the patient with its joined reference data

    Raises:
        NotFound: no patient has this id
    """
    stmt = (
        select(PatientModel)
        .options(*_patient_projection())
        .where(PatientModel.id == patient_id)
        .execution_options(populate_existing=True)
    )
    result = await db.execute(stmt)
    patient = result.scalar_one_or_none()
    if patient is None:
        logger.info(f"CRUD: patient '{patient_id}' not found")
        raise NotFound("Patient not found")
    return patient


async def _project_and_release(db: AsyncSession, patient_id: str) -> PatientModel:
    patient = await get_patient(db, patient_id)
    # end the read transaction; loaded state survives (expire_on_commit=False)
    await db.commit()
    return patient


async def list_procedures(db: AsyncSession, patient_id: Optional[str] = None) -> List[ProcedureModel]:
    """Procedures, newest schedule first, optionally for a single patient."""
    stmt = select(ProcedureModel).options(
        selectinload(ProcedureModel.exam),
        selectinload(ProcedureModel.facility),
        selectinload(ProcedureModel.physician),
        selectinload(ProcedureModel.status),
    )
    if patient_id:
        stmt = stmt.where(ProcedureModel.patient_id == patient_id)
    stmt = stmt.order_by(ProcedureModel.schedule_date.desc(), ProcedureModel.id)
    result = await db.execute(stmt)
    return list(result.scalars().all())


# --------------------------------------------------------------------------
# Writes
# --------------------------------------------------------------------------
async def create_patient(db: AsyncSession, data: PatientCreate) -> PatientModel:
    """
    Insert a patient together with its procedures in one transaction.

    Input is validated before anything touches the database. Procedures that
    omit a facility or physician get the default rows, which are provisioned
    (and committed) before the patient transaction opens.

    Args:
        db (AsyncSession): the database session, with no transaction open
        data (PatientCreate): patient fields plus a non-empty procedure list

    Returns:
        PatientModel: the created patient, projected like get_patient

    Raises:
        ValidationFailed: bad input, nothing written
        ProvisioningFailed: no default facility/physician could be established
        PersistenceFailed: the transaction was rolled back, nothing written
    """
    # 1. Validate
    if _is_blank(data.first_name) or _is_blank(data.last_name):
        raise ValidationFailed(NAMES_REQUIRED)
    procedures = data.procedures or []
    _validate_procedures(procedures)

    # 2. Provision defaults only when some procedure needs them
    default_facility_id = None
    default_physician_id = None
    if any(_is_blank(p.facility_id) for p in procedures):
        default_facility_id = await ensure_default_facility(db)
    if any(_is_blank(p.physician_id) for p in procedures):
        default_physician_id = await ensure_default_physician(db)

    # 3. Patient + procedures, all or nothing
    fields = data.model_dump(exclude={"procedures"})
    logger.info(
        f"CRUD: creating patient '{_clean(data.last_name)}, {_clean(data.first_name)}' "
        f"with {len(procedures)} procedures"
    )
    try:
        async with db.begin():
            patient = PatientModel(**_patient_values(fields))
            db.add(patient)
            await db.flush()  # assigns patient.id

            for procedure in procedures:
                db.add(
                    ProcedureModel(
                        patient_id=patient.id,
                        exam_id=_clean(procedure.exam_id),
                        status_id=_clean(procedure.status_id),
                        facility_id=_clean(procedure.facility_id) or default_facility_id,
                        physician_id=_clean(procedure.physician_id) or default_physician_id,
                        schedule_date=to_utc_instant(procedure.schedule_date),
                        schedule_time=_clean(procedure.schedule_time),
                        lop=_clean(procedure.lop),
                        is_completed=procedure.is_completed,
                    )
                )
            patient_id = patient.id
    except SQLAlchemyError as e:
        logger.error(f"CRUD: patient creation rolled back: {type(e).__name__} - {e}", exc_info=True)
        raise PersistenceFailed("Could not create patient") from e

    logger.info(f"CRUD: created patient '{patient_id}' with {len(procedures)} procedures")
    return await _project_and_release(db, patient_id)


async def update_patient(db: AsyncSession, patient_id: Optional[str], data: PatientUpdate) -> PatientModel:
    """
    Update the scalar fields of a patient. First and last name are always
    required; other fields change only when present in the payload, and a
    blank statusId/payerId keeps the current link. The procedure collection
    is never touched here.

    Args:
        db (AsyncSession): the database session, with no transaction open
        patient_id (Optional[str]): id of the patient to update
        data (PatientUpdate): names plus any other patient fields

    Returns:
        PatientModel: the updated patient, projected like get_patient
    """
    if _is_blank(patient_id):
        raise ValidationFailed(ID_REQUIRED)
    changes = data.model_dump(exclude_unset=True, exclude={"id", "procedures"})
    if _is_blank(changes.get("first_name")) or _is_blank(changes.get("last_name")):
        raise ValidationFailed(NAMES_REQUIRED)
    for name in LINK_FIELDS:
        if name in changes and _is_blank(changes[name]):
            del changes[name]
    if "procedures" in data.model_fields_set:
        logger.warning(f"CRUD: update of patient '{patient_id}' carried procedures; ignoring them")

    values = _patient_values(changes)
    try:
        async with db.begin():
            patient = await db.get(PatientModel, patient_id)
            if patient is None:
                logger.info(f"CRUD: patient '{patient_id}' not found for update")
                raise NotFound("Patient not found")
            for key, value in values.items():
                setattr(patient, key, value)
    except SQLAlchemyError as e:
        logger.error(f"CRUD: update of patient '{patient_id}' rolled back: {e}", exc_info=True)
        raise PersistenceFailed("Could not update patient") from e

    logger.info(f"CRUD: updated patient '{patient_id}' fields {sorted(values)}")
    return await _project_and_release(db, patient_id)


async def _delete_patient_row(db: AsyncSession, patient_id: str) -> int:
    result = await db.execute(delete(PatientModel).where(PatientModel.id == patient_id))
    return result.rowcount


async def delete_patient(db: AsyncSession, patient_id: Optional[str]) -> None:
    """
    Delete a patient and every row that references it.

    Dependents listed in CASCADE_DEPENDENTS go first, the patient row last, all
    inside one transaction. If the patient row does not exist the transaction is
    rolled back and NotFound is raised.

    Args:
        db (AsyncSession): the database session, with no transaction open
        patient_id (Optional[str]): id of the patient to delete
    """
    if _is_blank(patient_id):
        raise ValidationFailed(ID_REQUIRED)

    logger.info(f"CRUD: deleting patient '{patient_id}' and its dependents")
    try:
        async with db.begin():
            for model, column in CASCADE_DEPENDENTS:
                result = await db.execute(delete(model).where(column == patient_id))
                logger.debug(f"CRUD: removed {result.rowcount} rows from {model.__tablename__}")
            if await _delete_patient_row(db, patient_id) == 0:
                logger.info(f"CRUD: patient '{patient_id}' not found for delete, rolling back")
                raise NotFound("Patient not found")
    except SQLAlchemyError as e:
        logger.error(f"CRUD: delete of patient '{patient_id}' rolled back: {e}", exc_info=True)
        raise PersistenceFailed("Could not delete patient") from e

    logger.info(f"CRUD: deleted patient '{patient_id}'")
