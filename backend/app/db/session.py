from sqlalchemy.ext.asyncio import AsyncSession
from typing import AsyncGenerator
from fastapi import Request
import logging

logger = logging.getLogger(__name__)


# Session dependency for FastAPI routes
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Create and yield a database session using the shared engine.
    The session factory is built once in the application lifespan and stored on app.state.
    """
    async_session = getattr(request.app.state, "session_factory", None)
    if async_session is None:
        logger.error("Session factory accessed before application startup completed.")
        raise RuntimeError("Database session factory not initialized.")

    async with async_session() as session:
        try:
            yield session
        finally:
            await session.close()
