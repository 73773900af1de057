"""Error taxonomy surfaced at the HTTP boundary."""

from fastapi import Request
from fastapi.responses import JSONResponse


class AppError(Exception):
    """Base class for errors that map to an HTTP status."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_body(self) -> dict:
        return {"error": self.message}


class ValidationError(AppError):
    """Missing or malformed request fields."""

    status_code = 400

    def __init__(self, errors: list[str] | str) -> None:
        if isinstance(errors, str):
            errors = [errors]
        super().__init__("; ".join(errors))
        self.errors = errors

    def to_body(self) -> dict:
        return {"errors": self.errors}


class BadRequestError(AppError):
    """A malformed query parameter."""

    status_code = 400


class NotFoundError(AppError):
    """A referenced record does not exist."""

    status_code = 404


class UpstreamError(AppError):
    """Database or external API failure; details stay in the server log."""

    status_code = 500


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Render an AppError as a JSON response."""
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())
