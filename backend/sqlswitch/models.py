"""Pydantic models for request/response validation."""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictStr, ValidationError


# ── Instance ────────────────────────────────────

class InstanceSnapshot(BaseModel):
    """Public projection of the instance, fetched fresh on every request."""

    name: str = ""
    database_version: str = ""
    region: str = ""
    state: str = ""
    tier: str = ""

    @classmethod
    def from_resource(cls, resource: dict) -> "InstanceSnapshot":
        """Project a Cloud SQL DatabaseInstance resource."""
        settings = resource.get("settings")
        if not isinstance(settings, dict):
            settings = {}
        return cls(
            name=resource.get("name", ""),
            database_version=resource.get("databaseVersion", ""),
            region=resource.get("region", ""),
            state=resource.get("state", ""),
            tier=settings.get("tier", ""),
        )


# ── Request Models ──────────────────────────────

class ActivationPolicy(str, Enum):
    ALWAYS = "ALWAYS"
    NEVER = "NEVER"


class ActivationRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    activation_policy: Optional[StrictStr] = Field(default=None, alias="ActivationPolicy")


INVALID_POLICY_MESSAGE = "Invalid value for ActivationPolicy. Must be 'ALWAYS' or 'NEVER'."


@dataclass(frozen=True)
class PolicyAccepted:
    policy: ActivationPolicy


@dataclass(frozen=True)
class PolicyRejected:
    reason: str


PolicyResult = Union[PolicyAccepted, PolicyRejected]


def decode_body(body: bytes) -> dict:
    """
    Decode a request body into a JSON object.

    Raises json.JSONDecodeError (a ValueError) for malformed data and
    ValueError for JSON that is not an object. ``null`` decodes to an
    empty object.
    """
    payload = json.loads(body)
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ValueError(f"expected a JSON object, got {type(payload).__name__}")
    return payload


def parse_activation_policy(payload: dict) -> PolicyResult:
    """Validate the ActivationPolicy field; only the exact literals are accepted."""
    try:
        request = ActivationRequest.model_validate(payload)
    except ValidationError:
        return PolicyRejected(INVALID_POLICY_MESSAGE)

    try:
        return PolicyAccepted(ActivationPolicy(request.activation_policy))
    except ValueError:
        return PolicyRejected(INVALID_POLICY_MESSAGE)


# ── Response Models ─────────────────────────────

class SuccessResponse(BaseModel):
    status_code: int
    status_text: str
    message: str
    timestamp: str
    data: Any = None


class ErrorResponse(BaseModel):
    status_code: int
    status_text: str
    message: str
    timestamp: str
    error_type: str
    error_description: str
