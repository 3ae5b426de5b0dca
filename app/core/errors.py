from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.exceptions import ProfileShareError
from app.schemas.response import ErrorResponse
from app.core.config import settings
from app.core.logging import get_logger

logger = get_logger(__name__)


def add_exception_handlers(app: FastAPI):
    """
    Registers exception handlers with the FastAPI app.
    Every error leaves as {success: false, message, code, error?, details?}.
    """
    @app.exception_handler(ProfileShareError)
    async def profile_share_exception_handler(request: Request, exc: ProfileShareError):
        if exc.status_code >= 500:
            logger.error(
                f"{exc.code}: {exc.message}",
                extra={"method": request.method, "path": request.url.path},
            )
            error = None if settings.is_production or exc.details is None else str(exc.details)
            details = None
        else:
            logger.info(f"Rejected {request.method} {request.url.path}: {exc.code}")
            error = None
            details = jsonable_encoder(exc.details)

        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                message=exc.message,
                code=exc.code,
                error=error,
                details=details
            ).model_dump()
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """
        Handles standard HTTP exceptions (404, 405, etc.)
        """
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                message=str(exc.detail),
                code="HTTP_ERROR",
            ).model_dump(),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """
        Handles Pydantic validation errors as client errors.
        """
        # ctx may hold exception objects and input may hold large payloads
        errors = [
            {key: value for key, value in err.items() if key not in ("ctx", "input")}
            for err in exc.errors()
        ]
        return JSONResponse(
            status_code=400,
            content=ErrorResponse(
                message="Input validation failed",
                code="VALIDATION_ERROR",
                details=jsonable_encoder(errors)
            ).model_dump()
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """
        Catch-all for unhandled exceptions.
        """
        logger.error(
            f"Unhandled exception: {str(exc)}",
            extra={
                "method": request.method,
                "path": request.url.path,
            },
            exc_info=True
        )

        return JSONResponse(
            status_code=500,
            content=ErrorResponse(
                message="Server error",
                code="INTERNAL_ERROR",
                error=None if settings.is_production else str(exc),
            ).model_dump()
        )
