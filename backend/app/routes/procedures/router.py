from fastapi import APIRouter, Depends, Query
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.middleware import get_db, get_current_user
from app.db.crud.patient import list_procedures
from app.schemas.patient import ProcedureOut

router = APIRouter(
    prefix="/procedures",
    tags=["procedures"],
    dependencies=[Depends(get_current_user)],
)


@router.get("", response_model=List[ProcedureOut])
async def list_procedures_route(
    patient_id: Optional[str] = Query(None, alias="patientId"),
    db: AsyncSession = Depends(get_db),
):
    """Procedures with exam, facility, physician and status, newest schedule first."""
    return await list_procedures(db, patient_id)
