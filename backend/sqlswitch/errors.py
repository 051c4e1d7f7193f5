"""
Error types and cause classification.

Every error response carries an ``error_type``/``error_description`` pair
derived from the failure that caused it:

    SQLAdminError(404, "...")  -> googleapi_404       / provider message
    any other exception        -> internal_error      / str(exc)
    plain string               -> internal_error      / the string
    anything else              -> unknown_error       / str(value)
"""

from dataclasses import dataclass
from typing import Any, Union

PROVIDER_NAME = "googleapi"


class SQLAdminError(Exception):
    """The Cloud SQL Admin API answered with an error status."""

    def __init__(self, code: int, message: str):
        self.code = code
        self.message = message
        super().__init__(f"{PROVIDER_NAME}: Error {code}: {message}")


class AuthError(Exception):
    """Service account credentials could not be loaded or refreshed."""


class InstanceLookupError(Exception):
    """The instance could not be read, whether missing or unreachable."""


class ServiceError(Exception):
    """
    A request failure to be rendered as an error envelope.

    ``cause`` is classified by classify_cause(); it may be an exception, a
    plain string or any other value.
    """

    def __init__(self, status_code: int, message: str, cause: Any = ""):
        self.status_code = status_code
        self.message = message
        self.cause = cause
        super().__init__(message)


# ── Cause Classification ────────────────────────

@dataclass(frozen=True)
class ProviderCause:
    provider: str
    code: int
    message: str


@dataclass(frozen=True)
class GenericCause:
    message: str


@dataclass(frozen=True)
class PlainTextCause:
    text: str


@dataclass(frozen=True)
class UnclassifiedCause:
    rendering: str


Cause = Union[ProviderCause, GenericCause, PlainTextCause, UnclassifiedCause]


def classify_cause(cause: Any) -> Cause:
    """Sort an arbitrary failure value into one of the four cause kinds."""
    if isinstance(cause, SQLAdminError):
        return ProviderCause(PROVIDER_NAME, cause.code, cause.message)
    if isinstance(cause, BaseException):
        return GenericCause(str(cause))
    if isinstance(cause, str):
        return PlainTextCause(cause)
    return UnclassifiedCause(str(cause))


def describe_cause(cause: Cause) -> tuple[str, str]:
    """Return the (error_type, error_description) pair for a classified cause."""
    if isinstance(cause, ProviderCause):
        return f"{cause.provider}_{cause.code}", cause.message
    if isinstance(cause, GenericCause):
        return "internal_error", cause.message
    if isinstance(cause, PlainTextCause):
        return "internal_error", cause.text
    if isinstance(cause, UnclassifiedCause):
        return "unknown_error", cause.rendering
    raise TypeError(f"unhandled cause kind: {type(cause).__name__}")
