from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response schema."""

    error: str
    detail: str | None = None
    status_code: int


class AppError(Exception):
    """Base application exception."""

    def __init__(self, message: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class NotFoundError(AppError):
    """A referenced employee, absence or leave request does not exist."""

    def __init__(self, message: str) -> None:
        super().__init__(message, status_code=status.HTTP_404_NOT_FOUND)


class InvalidRangeError(AppError):
    """A leave of absence whose end date is not after its start date."""

    def __init__(self, message: str = "End date must be after start date") -> None:
        super().__init__(message, status_code=status.HTTP_400_BAD_REQUEST)


class OverlapError(AppError):
    """A leave of absence that intersects an existing one for the same employee."""

    def __init__(self, message: str = "Leave of absence period overlaps with existing period") -> None:
        super().__init__(message, status_code=status.HTTP_409_CONFLICT)


class HireDateLockedError(AppError):
    """The hire date cannot change once grants have been issued against it."""

    def __init__(self, message: str = "Hire date cannot change after leave has been granted") -> None:
        super().__init__(message, status_code=status.HTTP_409_CONFLICT)


async def _app_exception_handler(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error=type(exc).__name__,
            detail=exc.message,
            status_code=exc.status_code,
        ).model_dump(),
    )


async def _validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=ErrorResponse(
            error="ValidationError",
            detail=str(exc.errors()),
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        ).model_dump(),
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers on the application."""
    app.add_exception_handler(AppError, _app_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)  # type: ignore[arg-type]
