"""Domain errors raised by the service layer.

Services never build HTTP responses themselves; ``register_error_handlers``
maps each error to its status code.
"""
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse


class ContestError(Exception):
    """Base class for service errors."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class NotFoundError(ContestError):
    """Referenced contest, question or attempt does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class InvalidInputError(ContestError):
    """Malformed identifiers or missing required fields."""

    status_code = status.HTTP_400_BAD_REQUEST


class InvalidStateError(ContestError):
    """Operation is not allowed in the attempt's current state."""

    status_code = status.HTTP_409_CONFLICT


class PermissionDeniedError(ContestError):
    status_code = status.HTTP_403_FORBIDDEN


class ConcurrencyConflictError(ContestError):
    """Write kept conflicting after all retries were used."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


async def _contest_error_handler(request: Request, exc: ContestError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


def register_error_handlers(app: FastAPI) -> None:
    """Translate service errors into JSON error responses."""
    app.add_exception_handler(ContestError, _contest_error_handler)
