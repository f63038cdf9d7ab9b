"""Domain exceptions and their HTTP mapping."""
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class CateringError(Exception):
    """Base class for errors raised by the catering core."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(CateringError):
    """A referenced client, menu item, order or supply item does not exist."""

    status_code = 404


class ValidationFailure(CateringError):
    """Input that cannot be priced or persisted as given."""

    status_code = 422


class BusinessRuleViolation(CateringError):
    """Well-formed request that breaks an ordering rule."""

    status_code = 400


class ConflictError(CateringError):
    """A unique field clashed with an existing row."""

    status_code = 409


async def catering_error_handler(request: Request, exc: CateringError) -> JSONResponse:
    """Render a domain error the same way HTTPException is rendered."""
    logger.info(
        f"[ERRORS] {type(exc).__name__} on {request.method} {request.url.path}: {exc.message}"
    )
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


def register_exception_handlers(app: FastAPI) -> None:
    """Attach domain error handlers to the application."""
    app.add_exception_handler(CateringError, catering_error_handler)
