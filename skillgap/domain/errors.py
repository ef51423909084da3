"""Domain-specific exception hierarchy and FastAPI handlers."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from skillgap.instrumentation.trace import trace_exception


class AppError(Exception):
    """Base class for domain errors with structured metadata."""

    status_code: int = 400
    code: str = "app_error"
    message: str = "Application error"

    def __init__(self, message: str | None = None, *, code: str | None = None, status_code: int | None = None) -> None:
        super().__init__(message or self.message)
        if message:
            self.message = message
        if code:
            self.code = code
        if status_code:
            self.status_code = status_code

    def to_payload(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message}


class EmptyInputError(AppError):
    """Raised when an assignment has no graded responses to analyse."""

    status_code = 422
    code = "empty_input"
    message = "No graded responses supplied for analysis"


class InvalidResponseError(AppError):
    """Raised when a graded response carries a malformed identifier or score."""

    status_code = 422
    code = "invalid_response"
    message = "Invalid graded response"

    def __init__(self, message: str | None = None, *, question_id: Any = None, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.question_id = question_id

    def to_payload(self) -> Dict[str, Any]:
        payload = super().to_payload()
        if self.question_id is not None:
            payload["question_id"] = str(self.question_id)
        return payload


class InvalidConfigurationError(AppError):
    """Raised when the caller supplies inconsistent scoring thresholds."""

    status_code = 500
    code = "invalid_configuration"
    message = "Invalid scoring configuration"


def add_exception_handlers(app: FastAPI) -> None:
    """Register a JSON handler for :class:`AppError` on a hosting application."""

    @app.exception_handler(AppError)
    async def app_error_handler(_: Request, exc: AppError) -> JSONResponse:
        trace_exception("app_error", exc, code=exc.code, status=exc.status_code)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.to_payload()})
