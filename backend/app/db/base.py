import uuid

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import declarative_base, sessionmaker

Base = declarative_base()


def new_id() -> str:
    """Client-side primary key for every table (uuid4 text)."""
    return str(uuid.uuid4())


# Async engine and session factory
async def get_engine(database_url: str):
    return create_async_engine(database_url)

async def get_session_factory(engine):
    return sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False, autocommit=False, autoflush=False
    )
