"""
Exception handlers that keep every error response in the ResponseEnvelope shape.

Request validation failures become 400 envelopes listing the offending fields.
Store failures and anything unexpected become 500 envelopes; both are logged
with their traceback.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from world_api.core.logging import get_logger
from world_api.schemas.response import ResponseEnvelope, bad_request, server_error

logger = get_logger("world_api.errors")


def envelope_response(envelope: ResponseEnvelope, status_code: int | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code or envelope.code,
        content=envelope.model_dump(mode="json"),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {
            "field": " -> ".join(str(loc) for loc in error.get("loc", [])),
            "message": error.get("msg", "Unknown validation error"),
            "type": error.get("type", "unknown"),
        }
        for error in exc.errors()
    ]
    logger.warning("Request validation failed on %s %s: %d error(s)", request.method, request.url.path, len(errors))
    return envelope_response(bad_request("Invalid request. Data missing or incomplete.", {"errors": errors}))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    envelope = ResponseEnvelope(code=exc.status_code, message=str(exc.detail))
    return envelope_response(envelope)


async def database_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("Database error on %s %s", request.method, request.url.path)
    return envelope_response(server_error("Database error.", {"error": str(exc)}))


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return envelope_response(server_error("An unexpected error occurred."))


def register_exception_handlers(app: FastAPI) -> None:
    # Most specific first
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(SQLAlchemyError, database_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
