"""Uniform JSON envelopes for every response, success or error."""

from datetime import datetime
from http import HTTPStatus
from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from .errors import classify_cause, describe_cause
from .models import ErrorResponse, SuccessResponse


def rfc3339_now() -> str:
    """Current local time as RFC3339 with second precision, e.g. 2024-05-01T10:00:00+02:00."""
    stamp = datetime.now().astimezone().isoformat(timespec="seconds")
    if stamp.endswith("+00:00"):
        stamp = stamp[:-6] + "Z"
    return stamp


def status_text(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return ""


def write_success(status_code: int, message: str, data: Any = None) -> JSONResponse:
    body = SuccessResponse(
        status_code=status_code,
        status_text=status_text(status_code),
        message=message,
        timestamp=rfc3339_now(),
        data=jsonable_encoder(data),
    )
    return JSONResponse(status_code=status_code, content=body.model_dump())


def write_error(status_code: int, message: str, cause: Any = "") -> JSONResponse:
    error_type, error_description = describe_cause(classify_cause(cause))
    body = ErrorResponse(
        status_code=status_code,
        status_text=status_text(status_code),
        message=message,
        timestamp=rfc3339_now(),
        error_type=error_type,
        error_description=error_description,
    )
    return JSONResponse(status_code=status_code, content=body.model_dump())
