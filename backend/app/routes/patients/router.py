from fastapi import APIRouter, Depends, Query
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from app.core.middleware import get_db, get_current_user
from app.db.crud.patient import (
    create_patient,
    delete_patient,
    get_patient,
    list_patients,
    update_patient,
)
from app.schemas.patient import PatientCreate, PatientUpdate, PatientOut, MessageOut

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/patients",
    tags=["patients"],
    dependencies=[Depends(get_current_user)],
)


@router.get("", response_model=List[PatientOut])
async def list_patients_route(db: AsyncSession = Depends(get_db)):
    """All patients, ordered by last name then first name."""
    return await list_patients(db)


@router.get("/{patient_id}", response_model=PatientOut)
async def get_patient_route(patient_id: str, db: AsyncSession = Depends(get_db)):
    return await get_patient(db, patient_id)


@router.post("", response_model=PatientOut)
async def create_patient_route(
    payload: PatientCreate,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    """Create a patient with at least one procedure."""
    logger.info(f"User {current_user['user_id']} creating a patient")
    return await create_patient(db, payload)


@router.put("", response_model=PatientOut)
async def update_patient_route(
    payload: PatientUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    """Update patient fields; `id` travels in the body."""
    logger.info(f"User {current_user['user_id']} updating patient {payload.id}")
    return await update_patient(db, payload.id, payload)


@router.delete("", response_model=MessageOut)
async def delete_patient_route(
    id: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    """Delete a patient along with its procedures, appointments, cases and events."""
    logger.info(f"User {current_user['user_id']} deleting patient {id}")
    await delete_patient(db, id)
    return MessageOut(message="Patient deleted successfully")
