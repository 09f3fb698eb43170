"""Exception handlers shared by every router."""

import structlog
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import SQLAlchemyError

logger = structlog.get_logger()


class ApiError(Exception):
    """A client-facing failure rendered as ``{"ok": false, "error": ...}``."""

    def __init__(self, message: str, status_code: int = status.HTTP_400_BAD_REQUEST) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def server_error_payload(detail: str) -> dict[str, object]:
    """Body returned for unexpected server-side failures."""
    return {"ok": False, "error": "Internal Server Error", "detail": detail}


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    """Render an ApiError."""
    return JSONResponse(status_code=exc.status_code, content={"ok": False, "error": exc.message})


async def server_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Turn storage and other unexpected failures into a single 500 response."""
    logger.error(
        "server_error",
        path=request.url.path,
        error_type=type(exc).__name__,
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=server_error_payload(type(exc).__name__),
    )



def register_exception_handlers(app: FastAPI) -> None:
    """Attach the application's exception handlers."""
    app.add_exception_handler(ApiError, api_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(SQLAlchemyError, server_error_handler)
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, server_error_handler)
