"""Error and request models shared by the fireline service facades."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict

from fireline.common import JsonValue


class ErrorKind(str, Enum):
    """Failure classification surfaced to callers."""

    ARGUMENT = "argument"
    TRANSPORT = "transport"
    PROTOCOL = "protocol"
    SHAPE_CONFLICT = "shape_conflict"


class RemoteErrorCode(str, Enum):
    """Known error codes of the remote services.

    Identity answers carry them as ``{"error": {"message": "EMAIL_EXISTS"}}``,
    the realtime database as ``{"error": "Permission denied"}``.
    """

    EMAIL_EXISTS = "EMAIL_EXISTS"
    EMAIL_NOT_FOUND = "EMAIL_NOT_FOUND"
    INVALID_PASSWORD = "INVALID_PASSWORD"
    INVALID_LOGIN_CREDENTIALS = "INVALID_LOGIN_CREDENTIALS"
    INVALID_EMAIL = "INVALID_EMAIL"
    INVALID_ID_TOKEN = "INVALID_ID_TOKEN"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    USER_DISABLED = "USER_DISABLED"
    WEAK_PASSWORD = "WEAK_PASSWORD"
    TOO_MANY_ATTEMPTS_TRY_LATER = "TOO_MANY_ATTEMPTS_TRY_LATER"
    OPERATION_NOT_ALLOWED = "OPERATION_NOT_ALLOWED"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    NOT_FOUND = "NOT_FOUND"
    NO_DATA = "NO_DATA"
    UNKNOWN = "UNKNOWN"


class BaseServiceError(BaseModel):
    """Base service error model."""

    model_config = ConfigDict(extra="forbid")

    message: str


class ArgumentError(BaseServiceError):
    """Invalid path, identifier or value, detected before any I/O."""

    kind: Literal[ErrorKind.ARGUMENT] = ErrorKind.ARGUMENT
    argument: str


class TransportError(BaseServiceError):
    """Network fault or task execution failure."""

    kind: Literal[ErrorKind.TRANSPORT] = ErrorKind.TRANSPORT


class ProtocolError(BaseServiceError):
    """Remote service answered with an unexpected status or an empty body."""

    kind: Literal[ErrorKind.PROTOCOL] = ErrorKind.PROTOCOL
    status: int
    body: str
    code: RemoteErrorCode = RemoteErrorCode.UNKNOWN


class ShapeConflictError(BaseServiceError):
    """Stored value or response has a shape that cannot be handled."""

    kind: Literal[ErrorKind.SHAPE_CONFLICT] = ErrorKind.SHAPE_CONFLICT


type ServiceError = ArgumentError | TransportError | ProtocolError | ShapeConflictError


@dataclass(frozen=True)
class HttpRequest:
    """A single HTTP round trip against one of the remote services."""

    method: Literal["GET", "PUT", "POST", "PATCH", "DELETE"]
    url: str
    params: dict[str, str] = field(default_factory=dict)
    headers: dict[str, str] = field(default_factory=dict)
    json: JsonValue = None
    content: bytes | None = None
    expected_status: int = 200
    allow_null: bool = False


def classify_remote_error(body: str) -> RemoteErrorCode:
    """Parse the remote error vocabulary out of an error body."""
    try:
        data = json.loads(body)
    except (json.JSONDecodeError, TypeError):
        return RemoteErrorCode.UNKNOWN

    if not isinstance(data, dict):
        return RemoteErrorCode.UNKNOWN

    error = data.get("error")
    if isinstance(error, dict):
        error = error.get("message")
    if not isinstance(error, str):
        return RemoteErrorCode.UNKNOWN

    # Identity messages look like "WEAK_PASSWORD : Password should be at least 6 characters"
    head = error.split(" : ", 1)[0].strip().rstrip(".")
    normalized = head.upper().replace(" ", "_")
    try:
        return RemoteErrorCode(normalized)
    except ValueError:
        return RemoteErrorCode.UNKNOWN


__all__ = [
    "ArgumentError",
    "BaseServiceError",
    "ErrorKind",
    "HttpRequest",
    "ProtocolError",
    "RemoteErrorCode",
    "ServiceError",
    "ShapeConflictError",
    "TransportError",
    "classify_remote_error",
]
