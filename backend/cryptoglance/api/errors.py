from __future__ import annotations

from dataclasses import dataclass

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


@dataclass(slots=True)
class ApiError(Exception):
    status_code: int
    code: str
    message: str
    details: dict | None = None


def raise_api_error(
    *,
    status_code: int,
    code: str,
    message: str,
    details: dict | None = None,
) -> None:
    raise ApiError(status_code=status_code, code=code, message=message, details=details)


def _error_response(*, status_code: int, code: str, message: str, details: dict | None) -> JSONResponse:
    error_payload: dict = {"code": code, "message": message}
    if details is not None:
        error_payload["details"] = details
    return JSONResponse(status_code=status_code, content={"error": error_payload})


def install_api_error_handlers(application: FastAPI) -> None:
    """Renders every handled failure as ``{"error": {"code", "message", "details?"}}``."""

    @application.exception_handler(ApiError)
    async def _handle_api_error(_: Request, exc: ApiError) -> JSONResponse:  # type: ignore[override]
        return _error_response(
            status_code=exc.status_code,
            code=exc.code,
            message=exc.message,
            details=exc.details,
        )

    @application.exception_handler(RequestValidationError)
    async def _handle_validation_error(_: Request, exc: RequestValidationError) -> JSONResponse:  # type: ignore[override]
        return _error_response(
            status_code=422,
            code="REQUEST_VALIDATION_FAILED",
            message="Request payload is invalid",
            details={"errors": jsonable_encoder(exc.errors())},
        )
