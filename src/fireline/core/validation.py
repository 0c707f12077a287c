"""Argument validation performed before any request leaves the process."""

from __future__ import annotations

from pathlib import Path

from pydantic import EmailStr, TypeAdapter, ValidationError
from result import Err, Ok, Result

from fireline.common import DataPath

from .models import ArgumentError

_PATH_ADAPTER: TypeAdapter[str] = TypeAdapter(DataPath)
_EMAIL_ADAPTER: TypeAdapter[str] = TypeAdapter(EmailStr)

type Scalar = str | int


def validate_path(path: str) -> Result[str, ArgumentError]:
    """Validate a realtime database path; it must name at least one segment."""
    if not isinstance(path, str) or not path.strip().strip("/"):
        return Err(ArgumentError(argument="path", message="Path cannot be null or empty."))

    try:
        _PATH_ADAPTER.validate_python(path)
    except ValidationError:
        return Err(ArgumentError(argument="path", message="Path contains invalid characters."))

    return Ok(path)


def validate_key(key: str) -> Result[str, ArgumentError]:
    if not isinstance(key, str) or not key.strip():
        return Err(ArgumentError(argument="key", message="Key cannot be null or empty."))
    if any(char in key for char in ".$#[]/"):
        return Err(ArgumentError(argument="key", message=f"Key '{key}' contains invalid characters."))
    return Ok(key)


def is_scalar(value: object) -> bool:
    """Stored scalars are strings and integers; booleans are not integers here."""
    return isinstance(value, str) or (isinstance(value, int) and not isinstance(value, bool))


def validate_scalar(value: object, argument: str = "value") -> Result[Scalar, ArgumentError]:
    if not is_scalar(value):
        return Err(ArgumentError(argument=argument, message="Value must be a String or Integer."))
    return Ok(value)  # type: ignore[arg-type]


def validate_token(token: str, argument: str = "token") -> Result[str, ArgumentError]:
    if not isinstance(token, str) or not token.strip():
        return Err(ArgumentError(argument=argument, message="Token cannot be null or empty."))
    return Ok(token)


def validate_email(email: str) -> Result[str, ArgumentError]:
    try:
        return Ok(str(_EMAIL_ADAPTER.validate_python(email)))
    except ValidationError as exc:
        details = exc.errors()
        reason = details[0].get("msg") if details else str(exc)
        return Err(ArgumentError(argument="email", message=f"Invalid email: {reason}"))


def validate_password(password: str) -> Result[str, ArgumentError]:
    if not isinstance(password, str) or not password:
        return Err(ArgumentError(argument="password", message="Password cannot be null or empty."))
    return Ok(password)


def validate_object_name(name: str, argument: str = "remote_path") -> Result[str, ArgumentError]:
    """Validate a storage object name or prefix."""
    if not isinstance(name, str) or not name.strip():
        return Err(ArgumentError(argument=argument, message="Storage path cannot be null or empty."))
    if any(ord(char) < 0x20 or char == "\x7f" for char in name):
        return Err(ArgumentError(argument=argument, message="Storage path contains control characters."))
    return Ok(name)


def validate_local_file(source: Path | str) -> Result[Path, ArgumentError]:
    path = Path(source).expanduser()
    if not path.is_file():
        return Err(ArgumentError(argument="local_source", message=f"File not found: {path}"))
    return Ok(path)
