"""Error taxonomy for the pipeline engine and structured API error helpers."""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


def build_error_payload(code: str, message: str, details: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    payload = {"error": {"code": code, "message": message}}
    if details is not None:
        payload["error"]["details"] = details
    return payload


class AppError(Exception):
    """Application-scoped error for standardized API responses."""

    status_code = 500
    code = "internal_error"

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None,
        code: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details
        if status_code is not None:
            self.status_code = status_code
        if code is not None:
            self.code = code

    @property
    def payload(self) -> Dict[str, Any]:
        return build_error_payload(self.code, self.message, self.details)


class DuplicateEntryError(AppError):
    """A record already exists for the unique key being inserted."""

    status_code = 409
    code = "duplicate_entry"


class NotFoundError(AppError):
    """The referenced pipeline entry, placement or scorecard does not exist."""

    status_code = 404
    code = "not_found"

    @classmethod
    def for_resource(cls, resource: str, resource_id: Any) -> "NotFoundError":
        return cls(f"{resource} {resource_id} not found", details={"resource": resource, "id": str(resource_id)})


class ValidationError(AppError):
    """Malformed or inconsistent input."""

    status_code = 422
    code = "validation_error"


class InvalidTransitionError(ValidationError):
    """Stage change rejected by the strict transition table."""

    code = "invalid_transition"


class StorageError(AppError):
    """Underlying read/write failure not covered by a more specific error."""

    status_code = 500
    code = "storage_error"


class ConcurrentUpdateError(StorageError):
    """The row changed underneath the operation and retries were exhausted."""

    status_code = 409
    code = "concurrent_update"


class OperationTimeoutError(StorageError):
    """The operation did not finish within its time budget."""

    status_code = 504
    code = "timeout"


async def app_error_handler(_: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.payload)


async def request_validation_error_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    payload = build_error_payload(
        ValidationError.code,
        "Request validation failed",
        {"errors": jsonable_encoder(exc.errors())},
    )
    return JSONResponse(status_code=ValidationError.status_code, content=payload)
