"""
Typed API errors and the global error handler

Services raise these directly; FastAPI turns them into responses through
the handlers registered in main.py.
"""

import logging
from datetime import datetime, timezone

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

ERROR_NAMES = {
    400: "Bad Request",
    401: "Unauthorized",
    403: "Forbidden",
    404: "Not Found",
    409: "Conflict",
    422: "Unprocessable Entity",
    500: "Internal Server Error",
}

# ==================== ERROR TAXONOMY ====================

class LMSError(HTTPException):
    """Base error with a stable kind and a human readable message"""
    status_code = 500
    kind = "internal_error"

    def __init__(self, message: str):
        super().__init__(status_code=self.status_code, detail=message)
        self.message = message

class BadRequestError(LMSError):
    status_code = 400
    kind = "bad_request"

class UnauthorizedError(LMSError):
    status_code = 401
    kind = "unauthorized"

class ForbiddenError(LMSError):
    status_code = 403
    kind = "forbidden"

class NotFoundError(LMSError):
    status_code = 404
    kind = "not_found"

class ConflictError(LMSError):
    status_code = 409
    kind = "conflict"

# ==================== HANDLERS ====================

def _error_body(status_code: int, message, path: str) -> dict:
    return {
        "status_code": status_code,
        "error": ERROR_NAMES.get(status_code, "Error"),
        "message": message,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "path": path,
    }

async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """
    Render every HTTPException in one shape:
    {status_code, error, message, timestamp, path}
    """
    body = _error_body(exc.status_code, exc.detail, request.url.path)

    if exc.status_code >= 500:
        logger.error("%s %s - %s - %s", request.method, request.url.path, exc.status_code, exc.detail)
    else:
        logger.warning("%s %s - %s - %s", request.method, request.url.path, exc.status_code, exc.detail)

    return JSONResponse(status_code=exc.status_code, content=body, headers=getattr(exc, "headers", None))

async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    body = _error_body(500, "Internal server error", request.url.path)
    return JSONResponse(status_code=500, content=body)
