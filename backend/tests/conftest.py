import os

# settings are read at import time
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine

from app.core.auth import create_access_token
from app.db.base import Base, get_session_factory
from app.db.models import DoctorModel, ExamModel, PayerModel, StatusModel
from app.main import app


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
async def engine(anyio_backend, tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'clinic.db'}")

    # SQLite only enforces foreign keys when asked to
    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def session_factory(engine):
    return await get_session_factory(engine)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def reference_data(db):
    """Exams, statuses, a payer and a referring doctor. No facilities or physicians."""
    db.add_all(
        [
            ExamModel(id="E1", name="MRI Brain", cpt_code="70551", status="active"),
            ExamModel(id="E2", name="CT Head", cpt_code="70450", status="active"),
            StatusModel(id="S1", name="Scheduled", color="#4CAF50"),
            StatusModel(id="S2", name="Completed", color="#2196F3"),
            PayerModel(id="P1", name="Medicare", is_active=True),
            DoctorModel(id="D1", prefix="Dr.", name="Elena Ruiz", status="Active"),
        ]
    )
    await db.commit()


@pytest.fixture
def auth_cookies():
    token = create_access_token({"sub": "user-1", "role": "ADMIN"})
    return {"session": token}


@pytest.fixture
async def client(session_factory, auth_cookies):
    app.state.session_factory = session_factory
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test", cookies=auth_cookies) as c:
        yield c


@pytest.fixture
async def anon_client(session_factory):
    app.state.session_factory = session_factory
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
