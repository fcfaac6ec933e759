import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, Type

from sqlalchemy import select, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config.constants import (
    DEFAULT_FACILITY_NAME,
    DEFAULT_PHYSICIAN_NAME,
    FacilityStatus,
    PhysicianStatus,
)
from app.config.settings import settings
from app.core.errors import ProvisioningFailed
from app.db.models import FacilityModel, PhysicianModel

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DefaultRow:
    """How to find, create, and fall back for one kind of default reference row."""

    label: str
    model: Type[Any]
    well_known_id: Callable[[], str]
    placeholder: Callable[[str], Any]


def _default_facility(row_id: str) -> FacilityModel:
    return FacilityModel(
        id=row_id,
        name=DEFAULT_FACILITY_NAME,
        status=FacilityStatus.ACTIVE.value,
    )


def _default_physician(row_id: str) -> PhysicianModel:
    return PhysicianModel(
        id=row_id,
        name=DEFAULT_PHYSICIAN_NAME,
        status=PhysicianStatus.ACTIVE.value,
    )


DEFAULT_FACILITY = DefaultRow(
    label="facility",
    model=FacilityModel,
    well_known_id=lambda: settings.default_facility_id,
    placeholder=_default_facility,
)

DEFAULT_PHYSICIAN = DefaultRow(
    label="physician",
    model=PhysicianModel,
    well_known_id=lambda: settings.default_physician_id,
    placeholder=_default_physician,
)


async def _find_any_active(db: AsyncSession, row: DefaultRow) -> Optional[str]:
    # facilities use 'active', physicians 'Active'
    stmt = (
        select(row.model.id)
        .where(func.lower(row.model.status) == "active")
        .order_by(row.model.name, row.model.id)
        .limit(1)
    )
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def _ensure_default(db: AsyncSession, row: DefaultRow) -> str:
    """
    Return the id of a usable default row, creating one if needed.
    Every path leaves the session without an open transaction.

    The insert is committed on its own, outside any patient transaction. Two
    concurrent callers may both try to insert; the loser's insert fails and it
    falls back to whichever active row exists, so any active row is an
    acceptable default.

    Args:
        db (AsyncSession): the database session, with no transaction open
        row (DefaultRow): which reference table to provision

    Returns:
        str: id of the existing, created, or substituted default row

    Raises:
        ProvisioningFailed: when nothing could be found or created
    """
    well_known_id = row.well_known_id()

    # 1. Look up the well-known row
    try:
        existing = await db.get(row.model, well_known_id)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"CRUD: lookup of default {row.label} '{well_known_id}' failed: {e}", exc_info=True)
        raise ProvisioningFailed(f"No default {row.label} available") from e
    if existing is not None:
        await db.commit()
        logger.debug(f"CRUD: default {row.label} '{well_known_id}' present")
        return existing.id

    # 2. Try to create it
    logger.info(f"CRUD: default {row.label} '{well_known_id}' missing, creating it")
    try:
        db.add(row.placeholder(well_known_id))
        await db.commit()
        logger.info(f"CRUD: created default {row.label} '{well_known_id}'")
        return well_known_id
    except SQLAlchemyError as e:
        await db.rollback()
        logger.warning(
            f"CRUD: could not create default {row.label} '{well_known_id}' "
            f"({type(e).__name__}), looking for any active {row.label}"
        )

    # 3. Fall back to any active row, e.g. the one a concurrent request created
    try:
        fallback_id = await _find_any_active(db, row)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"CRUD: lookup of active {row.label} failed: {e}", exc_info=True)
        raise ProvisioningFailed(f"No default {row.label} available") from e
    if fallback_id is None:
        logger.error(f"CRUD: no active {row.label} exists and none could be created")
        raise ProvisioningFailed(f"No default {row.label} available")

    await db.commit()
    logger.info(f"CRUD: using active {row.label} '{fallback_id}' as default")
    return fallback_id


async def ensure_default_facility(db: AsyncSession) -> str:
    return await _ensure_default(db, DEFAULT_FACILITY)


async def ensure_default_physician(db: AsyncSession) -> str:
    return await _ensure_default(db, DEFAULT_PHYSICIAN)
