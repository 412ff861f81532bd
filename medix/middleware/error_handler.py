"""Exception handlers that keep patient text and internals out of error bodies."""

import logging
import uuid

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """422 with field locations and messages only; submitted values are not echoed."""
    errors = [
        {
            "loc": [str(part) for part in err.get("loc", ())],
            "msg": err.get("msg", ""),
            "type": err.get("type", ""),
        }
        for err in exc.errors()
    ]
    logger.info(
        "Rejected %s %s: %s",
        request.method,
        request.url.path,
        [e["loc"] for e in errors],
    )
    return JSONResponse(status_code=422, content={"detail": errors})


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log the traceback server-side under an error id; return only the id."""
    error_id = uuid.uuid4().hex
    logger.exception(
        "Unhandled exception on %s %s",
        request.method,
        request.url.path,
        extra={"error_id": error_id},
    )
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error", "errorId": error_id},
    )
