import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class PatientServiceError(Exception):
    """Base class for failures of the patient write/read path."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    public_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.public_message
        super().__init__(self.message)


class ValidationFailed(PatientServiceError):
    """Caller input is unusable. Raised before any storage access."""

    status_code = status.HTTP_400_BAD_REQUEST
    public_message = "Invalid request"


class NotFound(PatientServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    public_message = "Patient not found"


class ProvisioningFailed(PatientServiceError):
    """No default facility/physician could be found or created. Safe to retry."""

    public_message = "Could not provision default reference data"


class PersistenceFailed(PatientServiceError):
    """The store aborted the transaction; nothing from it was written."""

    public_message = "Could not save changes"


async def patient_service_error_handler(request: Request, exc: PatientServiceError) -> JSONResponse:
    if exc.status_code >= 500:
        # the cause is logged where it was raised; keep internals out of the body
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        message = exc.public_message
    else:
        logger.info(f"{request.method} {request.url.path} rejected ({exc.status_code}): {exc.message}")
        message = exc.message
    return JSONResponse(status_code=exc.status_code, content={"message": message})


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{field}: {first.get('msg')}" if field else first.get("msg", "Invalid request")
    else:
        message = "Invalid request"
    logger.info(f"{request.method} {request.url.path} rejected (400): {message}")
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"message": message})


async def store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    # store failures outside a write transaction (reads, re-projection)
    logger.error(f"{request.method} {request.url.path} failed in the store: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": PersistenceFailed.public_message},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PatientServiceError, patient_service_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(SQLAlchemyError, store_error_handler)
