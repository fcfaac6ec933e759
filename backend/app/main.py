from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.config.settings import settings
from app.core.errors import register_exception_handlers
from app.core.middleware import verify_token_middleware
from app.db.base import get_engine
from app.db.base import get_session_factory

# -------------------------------------------------------------------------------------
# Logging
# -------------------------------------------------------------------------------------
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application start-up & shutdown hooks."""
    # ------------------------------------------------------------------ start‑up -----
    logger.info("Application startup …")

    # One engine (and connection pool) for the whole process
    engine = None
    try:
        logger.info("Initializing Database Engine...")
        engine = await get_engine(settings.database_url)
        app.state.engine = engine
        app.state.session_factory = await get_session_factory(engine)
        logger.info("DB engine and session factory ready.")
    except Exception as e:
        logger.critical(f"CRITICAL ERROR DURING DATABASE INITIALIZATION: {e}", exc_info=True)
        if engine:
            await engine.dispose()
        raise  # stop the server from starting

    # ------------------------------------------------ give control back
    yield

    # ------------------------------------------------ shutdown --------
    logger.info("Application shutdown …")
    try:
        await engine.dispose()
        logger.info("DB engine disposed")
    except Exception:
        logger.exception("Error disposing DB engine")

    logger.info("Shutdown complete")


# -------------------------------------------------------------------------------------
# FastAPI application instance
# -------------------------------------------------------------------------------------
app = FastAPI(title="Clinic Back Office", lifespan=lifespan)

# CORS -------------------------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=[str(o) for o in settings.cors_origins],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.middleware("http")(verify_token_middleware)

register_exception_handlers(app)


# ----------------------------------------------------------------- health‑check -----
@app.get("/health")
async def health_check(request: Request):
    database = "not initialized"
    if factory := getattr(request.app.state, "session_factory", None):
        try:
            async with factory() as session:
                await session.execute(text("SELECT 1"))
            database = "ok"
        except SQLAlchemyError:
            logger.exception("Health check could not reach the database")
            database = "error"

    return {"status": "ok", "database": database}


# ------------------------------------------------------------------- routes ---------
from app.routes.auth.router import router as auth_router  # noqa: E402  (after app creation)
from app.routes.patients.router import router as patients_router  # noqa: E402
from app.routes.procedures.router import router as procedures_router  # noqa: E402

app.include_router(auth_router)
app.include_router(patients_router)
app.include_router(procedures_router)
