# app/api/errors.py
"""Map service and ORM exceptions to HTTP responses at the request boundary."""
import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from app.services.errors import DomainValidationError, NotFoundError

logger = logging.getLogger("nexus.api.errors")


async def _not_found(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc) or "Not found"})


async def _domain_invalid(request: Request, exc: DomainValidationError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


async def _request_invalid(request: Request, exc: RequestValidationError):
    logger.info("Validation failed on %s %s: %d error(s)",
                request.method, request.url.path, len(exc.errors()))
    return JSONResponse(
        status_code=400,
        content={"detail": "Validation error", "errors": jsonable_encoder(exc.errors())},
    )


async def _store_failure(request: Request, exc: SQLAlchemyError):
    logger.error("Database error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(NotFoundError, _not_found)
    app.add_exception_handler(DomainValidationError, _domain_invalid)
    app.add_exception_handler(RequestValidationError, _request_invalid)
    app.add_exception_handler(SQLAlchemyError, _store_failure)
