"""HTTP response interpretation shared by every facade."""

from __future__ import annotations

from pydantic import BaseModel, ValidationError
from result import Err, Ok, Result

from .models import ProtocolError, RemoteErrorCode, ServiceError, ShapeConflictError, classify_remote_error

NULL_BODY = "null"


def interpret_response(
    status: int,
    body: str,
    *,
    expected_status: int = 200,
    allow_null: bool = False,
) -> Result[str, ServiceError]:
    """Turn a completed, fully drained HTTP exchange into a task outcome.

    Any status other than ``expected_status`` is a failure whose message is
    ``"HTTP Error <status>: <body>"``. A literal ``null`` body at success status
    means there is no data at the location and is a failure too, unless the
    caller opts in with ``allow_null``.
    """
    if status != expected_status:
        return Err(
            ProtocolError(
                status=status,
                body=body,
                code=classify_remote_error(body),
                message=f"HTTP Error {status}: {body}",
            )
        )

    if body == NULL_BODY and not allow_null:
        return Err(
            ProtocolError(
                status=status,
                body=body,
                code=RemoteErrorCode.NO_DATA,
                message=f"HTTP {status}: Server returned null (No data at the specified path)",
            )
        )

    return Ok(body)


def parse_body[M: BaseModel](body: str, model_cls: type[M]) -> Result[M, ServiceError]:
    """Validate a successful JSON answer against the expected response model."""
    try:
        return Ok(model_cls.model_validate_json(body))
    except ValidationError as exc:
        details = exc.errors()
        reason = details[0].get("msg") if details else str(exc)
        return Err(ShapeConflictError(message=f"Unexpected {model_cls.__name__} response: {reason}"))
