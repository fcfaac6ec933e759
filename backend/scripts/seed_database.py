# backend/scripts/seed_database.py
import asyncio
import logging
from typing import Any, Dict, List, Type

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy import text, select
from sqlalchemy.exc import IntegrityError

# Add project root to sys.path to allow importing from app
import sys
from pathlib import Path

backend_dir = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(backend_dir))

from app.core.auth import get_password_hash
from app.config.settings import settings as app_settings
from app.db.models import (
    UserModel,
    StatusModel,
    PayerModel,
    ExamModel,
    FacilityModel,
    PhysicianModel,
    DoctorModel,
)


logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("seed_database")

# --- Configuration for Seed Data ---
ADMIN_EMAIL = "admin@gulfcoast.com"
ADMIN_PASSWORD = "admin12345"

STATUSES = [
    {"name": "Scheduled", "color": "#4CAF50"},
    {"name": "Pending", "color": "#FFC107"},
    {"name": "Completed", "color": "#2196F3"},
    {"name": "Cancelled", "color": "#F44336"},
    {"name": "Rescheduled", "color": "#9C27B0"},
]

PAYERS = [
    {"id": "medicare", "name": "Medicare", "is_active": True},
    {"id": "medicaid", "name": "Medicaid", "is_active": True},
    {"id": "bcbs", "name": "Blue Cross Blue Shield", "is_active": True},
    {"id": "aetna", "name": "Aetna", "is_active": True},
    {"id": "uhc", "name": "UnitedHealthcare", "is_active": True},
]

EXAMS = [
    {"id": "mri-brain", "name": "MRI Brain w/o Contrast", "cpt_code": "70551", "icd10_code": "R51.9", "duration": 45, "price": 850},
    {"id": "mri-lumbar", "name": "MRI Lumbar Spine", "cpt_code": "72148", "icd10_code": "M54.5", "duration": 40, "price": 780},
    {"id": "ct-head", "name": "CT Head w/o Contrast", "cpt_code": "70450", "icd10_code": "S09.90XA", "duration": 20, "price": 420},
    {"id": "xray-chest", "name": "X-Ray Chest 2 Views", "cpt_code": "71046", "icd10_code": "R07.9", "duration": 15, "price": 120},
]

FACILITIES = [
    {"id": "facility1", "name": "Gulf Coast Medical Center", "address": "123 Medical Drive", "city": "Tampa", "state": "FL", "zip": "33601", "phone": "813-555-0101", "status": "active"},
    {"id": "facility2", "name": "Coastal Imaging Center", "address": "456 Imaging Way", "city": "St. Petersburg", "state": "FL", "zip": "33701", "phone": "727-555-0201", "status": "active"},
    {"id": "facility3", "name": "Bayfront Surgery Center", "address": "789 Surgery Blvd", "city": "Clearwater", "state": "FL", "zip": "33755", "phone": "727-555-0301", "status": "active"},
]

PHYSICIANS = [
    {"id": "physician1", "prefix": "Dr.", "name": "John Smith", "suffix": "MD", "npi_number": "1234567890", "status": "Active"},
    {"id": "physician2", "prefix": "Dr.", "name": "Sarah Johnson", "suffix": "DO", "npi_number": "0987654321", "status": "Active"},
    {"id": "physician3", "prefix": "Dr.", "name": "Michael Brown", "suffix": "MD", "npi_number": "1122334455", "status": "Active"},
]

DOCTORS = [
    {"id": "doctor1", "prefix": "Dr.", "name": "Elena Ruiz", "clinic_name": "Ruiz Chiropractic", "status": "Active"},
    {"id": "doctor2", "prefix": "Dr.", "name": "Marcus Lee", "clinic_name": "Bay Orthopedics", "status": "Active"},
]


async def clear_data(db: AsyncSession):
    logger.warning("Clearing existing data from tables...")
    # dependents before parents, same order the application uses
    for table in (
        "procedures",
        "appointments",
        "cases",
        "events",
        "patients",
        "doctors",
        "physicians",
        "facilities",
        "exams",
        "payers",
        "statuses",
    ):
        await db.execute(text(f"DELETE FROM {table};"))
    await db.execute(text("DELETE FROM users WHERE role <> 'ADMIN';"))
    await db.commit()
    logger.info("Relevant data cleared.")


async def upsert_rows(db: AsyncSession, model: Type[Any], rows: List[Dict[str, Any]], key: str = "id") -> int:
    """Insert rows whose `key` value is not present yet. Returns the number inserted."""
    created = 0
    for row in rows:
        existing = await db.execute(select(model).where(getattr(model, key) == row[key]))
        if existing.scalar_one_or_none() is not None:
            continue
        db.add(model(**row))
        created += 1
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        logger.error(f"Integrity error seeding {model.__tablename__}: {e.orig}", exc_info=True)
        return 0
    logger.info(f"Seeded {created} new rows into {model.__tablename__}.")
    return created


async def seed_admin(db: AsyncSession):
    existing = await db.execute(select(UserModel.id).where(UserModel.email == ADMIN_EMAIL))
    if existing.scalar_one_or_none():
        logger.info(f"Admin user {ADMIN_EMAIL} already exists.")
        return
    db.add(
        UserModel(
            email=ADMIN_EMAIL,
            password_hash=get_password_hash(ADMIN_PASSWORD),
            name="Admin User",
            role="ADMIN",
        )
    )
    await db.commit()
    logger.info(f"Created admin user {ADMIN_EMAIL}.")


async def seed_all_data(db: AsyncSession):
    await seed_admin(db)
    await upsert_rows(db, StatusModel, STATUSES, key="name")
    await upsert_rows(db, PayerModel, PAYERS)
    await upsert_rows(db, ExamModel, EXAMS)
    await upsert_rows(db, FacilityModel, FACILITIES)
    await upsert_rows(db, PhysicianModel, PHYSICIANS)
    await upsert_rows(db, DoctorModel, DOCTORS)
    logger.info("Database seeding completed.")


async def main(should_clear: bool):
    logger.info(f"Connecting to database at: {app_settings.database_url}")
    engine = create_async_engine(app_settings.database_url)
    AsyncSessionLocal = sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False
    )

    async with AsyncSessionLocal() as db:
        if should_clear:
            await clear_data(db)
        await seed_all_data(db)

    await engine.dispose()
    logger.info("Database connection closed.")


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(
        description="Seed the database with reference data and an admin user."
    )
    parser.add_argument(
        "--clear", action="store_true", help="Clear existing data before seeding."
    )
    args = parser.parse_args()
    asyncio.run(main(should_clear=args.clear))
