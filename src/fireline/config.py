"""Project credentials and their loading from YAML/JSON files."""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from result import Err, Ok, Result

from fireline.common import NonEmptyString


class ProjectConfig(BaseModel):
    """Credentials identifying one remote project."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    api_key: NonEmptyString
    auth_domain: NonEmptyString
    database_url: NonEmptyString
    storage_bucket: NonEmptyString

    @field_validator("database_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("storage_bucket")
    @classmethod
    def _strip_scheme(cls, value: str) -> str:
        # Console snippets give the bucket as "gs://<bucket>"
        return value.removeprefix("gs://").rstrip("/")


class ConfigNotFoundError(BaseModel):
    """Project file not found at expected location."""

    model_config = ConfigDict(extra="forbid")

    expected_path: Path
    message: str


class ConfigYamlError(BaseModel):
    """YAML parsing error in project file."""

    model_config = ConfigDict(extra="forbid")

    path: Path
    line: int | None = None
    column: int | None = None
    message: str


class ConfigValidationError(BaseModel):
    """Schema validation error in project credentials."""

    model_config = ConfigDict(extra="forbid")

    path: Path | None = None
    field: str | None = None
    message: str


class ConfigIOError(BaseModel):
    """File I/O error reading project file."""

    model_config = ConfigDict(extra="forbid")

    path: Path
    message: str


type ConfigError = ConfigNotFoundError | ConfigYamlError | ConfigValidationError | ConfigIOError


def load_project_config(path: Path) -> Result[ProjectConfig, ConfigError]:
    """Load and validate project credentials from a YAML (or JSON) file.

    Keys may use either snake_case (``api_key``) or the camelCase names of the
    web console snippet (``apiKey``, ``authDomain``, ``databaseURL``,
    ``storageBucket``).
    """
    if not path.exists() or not path.is_file():
        return Err(
            ConfigNotFoundError(
                expected_path=path,
                message="Project file not found.",
            ),
        )

    try:
        raw_text = path.read_text(encoding="utf-8")
    except OSError as exc:
        return Err(ConfigIOError(path=path, message=str(exc)))

    try:
        data = yaml.safe_load(raw_text) or {}
    except yaml.YAMLError as exc:
        mark = getattr(exc, "problem_mark", None)
        line = getattr(mark, "line", None)
        column = getattr(mark, "column", None)
        return Err(
            ConfigYamlError(
                path=path,
                line=(line + 1) if line is not None else None,
                column=(column + 1) if column is not None else None,
                message=str(exc),
            ),
        )

    if not isinstance(data, dict):
        return Err(
            ConfigValidationError(
                path=path,
                message="Project file root must be a mapping of keys to values.",
            ),
        )

    return validate_project_config(_normalize_keys(data), path=path)


def validate_project_config(data: dict[str, object], *, path: Path | None = None) -> Result[ProjectConfig, ConfigError]:
    try:
        return Ok(ProjectConfig.model_validate(data))
    except ValidationError as exc:
        error_details = exc.errors()
        field = None
        message = format_validation_error("project config", exc)
        if error_details:
            loc = error_details[0].get("loc") or ()
            field = ".".join(str(part) for part in loc) or None
        return Err(ConfigValidationError(path=path, field=field, message=message))


def format_validation_error(kind: str, error: ValidationError) -> str:
    """Return a concise validation error message scoped to the provided kind."""
    details = error.errors()
    if not details:
        return f"Invalid {kind}: {error}"
    first = details[0]
    loc = ".".join(str(part) for part in first.get("loc") or ())
    message = first.get("msg")
    return f"Invalid {kind}: {loc}: {message}" if loc else f"Invalid {kind}: {message}"


_CAMEL_CASE_KEYS = {
    "apiKey": "api_key",
    "authDomain": "auth_domain",
    "databaseURL": "database_url",
    "databaseUrl": "database_url",
    "storageBucket": "storage_bucket",
}


def _normalize_keys(data: dict[str, object]) -> dict[str, object]:
    return {_CAMEL_CASE_KEYS.get(str(key), str(key)): value for key, value in data.items()}


__all__ = [
    "ConfigError",
    "ConfigIOError",
    "ConfigNotFoundError",
    "ConfigValidationError",
    "ConfigYamlError",
    "ProjectConfig",
    "format_validation_error",
    "load_project_config",
    "validate_project_config",
]
