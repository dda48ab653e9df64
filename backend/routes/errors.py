import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from backend.core.exceptions import (
    AlreadyBookedError,
    ForbiddenError,
    InvalidRangeError,
    NotFoundError,
    OverlapConflictError,
    PastSlotError,
    SchedulingError,
    StoreUnavailableError,
    UnauthenticatedError,
    UserExistsError,
    ValidationFailedError,
    WindowBookedError,
)

logger = logging.getLogger(__name__)

ERROR_STATUS_CODES = {
    InvalidRangeError: status.HTTP_400_BAD_REQUEST,
    PastSlotError: status.HTTP_400_BAD_REQUEST,
    ValidationFailedError: status.HTTP_400_BAD_REQUEST,
    UnauthenticatedError: status.HTTP_401_UNAUTHORIZED,
    ForbiddenError: status.HTTP_403_FORBIDDEN,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    OverlapConflictError: status.HTTP_409_CONFLICT,
    AlreadyBookedError: status.HTTP_409_CONFLICT,
    WindowBookedError: status.HTTP_409_CONFLICT,
    UserExistsError: status.HTTP_409_CONFLICT,
    StoreUnavailableError: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def status_code_for(exc: SchedulingError) -> int:
    for error_type in type(exc).__mro__:
        if error_type in ERROR_STATUS_CODES:
            return ERROR_STATUS_CODES[error_type]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def scheduling_error_handler(request: Request, exc: SchedulingError) -> JSONResponse:
    status_code = status_code_for(exc)
    if status_code >= 500:
        logger.error('%s %s failed: %s', request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=status_code,
        content={'detail': exc.message, 'error': exc.kind},
    )


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error('%s %s hit a database error', request.method, request.url.path, exc_info=exc)
    return await scheduling_error_handler(request, StoreUnavailableError())


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(SchedulingError, scheduling_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
