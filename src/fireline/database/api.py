"""Realtime database facade."""

from __future__ import annotations

import json
from collections.abc import Sequence

from result import Err, Ok, Result, is_err

from fireline.common import JsonDict, JsonValue, create_logger
from fireline.config import ProjectConfig
from fireline.core import (
    ArgumentError,
    HttpExecutor,
    HttpRequest,
    ServiceError,
    ShapeConflictError,
    classify_stored_value,
    resolve_append,
)
from fireline.core.merge import Incoming, StoredValue
from fireline.core.validation import Scalar, is_scalar, validate_key, validate_path, validate_scalar

logger = create_logger("database")


class Database:
    """Read, write and merge JSON values stored under slash separated paths.

    Every call returns its own ``Result``. Calls run on the shared worker pool
    and carry no ordering guarantee: two concurrent ``append`` calls on the
    same path can interleave their read and write steps and lose an update.
    Serialize appends to one path in the caller.
    """

    def __init__(self, config: ProjectConfig, executor: HttpExecutor) -> None:
        self._config = config
        self._executor = executor

    def read(self, path: str, token: str | None = None) -> Result[str, ServiceError]:
        """Return the JSON text stored at ``path``; a path holding nothing is an error."""
        path_result = validate_path(path)
        if is_err(path_result):
            return path_result

        return self._execute(self._request("GET", path, token), "read")

    def write(self, path: str, key: str, value: Scalar, token: str | None = None) -> Result[str, ServiceError]:
        """Replace the value at ``path`` with ``{key: value}``."""
        path_result = validate_path(path)
        if is_err(path_result):
            return path_result
        payload_result = _single_field_payload(key, value)
        if is_err(payload_result):
            return payload_result

        return self._execute(self._request("PUT", path, token, payload_result.unwrap()), "write")

    def update(self, path: str, key: str, value: Scalar, token: str | None = None) -> Result[str, ServiceError]:
        """Merge ``{key: value}`` into the object at ``path``, keeping its other fields."""
        path_result = validate_path(path)
        if is_err(path_result):
            return path_result
        payload_result = _single_field_payload(key, value)
        if is_err(payload_result):
            return payload_result

        return self._execute(self._request("PATCH", path, token, payload_result.unwrap()), "update")

    def push(self, path: str, value: JsonValue, token: str | None = None) -> Result[str, ServiceError]:
        """Add ``value`` as a new child of ``path`` under a server generated key.

        Returns the generated key.
        """
        path_result = validate_path(path)
        if is_err(path_result):
            return path_result

        return (
            self._execute(self._request("POST", path, token, value), "push")
            .and_then(_extract_generated_name)
        )

    def append(self, path: str, value: Incoming, token: str | None = None) -> Result[str, ServiceError]:
        """Add ``value`` to whatever is stored at ``path``.

        The stored value is read first and merged with the append rules of
        :mod:`fireline.core.merge`; the merged value then replaces it. The read
        and the write are two separate requests.
        """
        path_result = validate_path(path)
        if is_err(path_result):
            return path_result
        incoming_result = _validate_incoming(value)
        if is_err(incoming_result):
            return incoming_result

        return (
            self._read_stored_value(path, token)
            .and_then(lambda existing: self._merge(path, existing, value))
            .and_then(lambda merged: self._execute(self._request("PUT", path, token, merged), "append"))
        )

    def delete(self, path: str, token: str | None = None) -> Result[None, ServiceError]:
        path_result = validate_path(path)
        if is_err(path_result):
            return path_result

        request = self._request("DELETE", path, token, allow_null=True)
        return self._execute(request, "delete").map(lambda _: None)

    def list_as_objects(self, path: str, token: str | None = None) -> Result[dict[str, JsonDict], ServiceError]:
        """Return the members of the collection at ``path`` that are objects.

        Scalar members are dropped. No particular member order is guaranteed.
        """
        return self.read(path, token).and_then(_object_members)

    def _merge(self, path: str, existing: StoredValue, value: Incoming) -> Result[StoredValue, ServiceError]:
        return resolve_append(existing, value).inspect_err(
            lambda error: logger.warning("Append rejected", path=path, error=error.message)
        )

    def _read_stored_value(self, path: str, token: str | None) -> Result[StoredValue, ServiceError]:
        request = self._request("GET", path, token, allow_null=True)
        return self._execute(request, "read").and_then(classify_stored_value)

    def _execute(self, request: HttpRequest, operation: str) -> Result[str, ServiceError]:
        return self._executor.execute(request).inspect_err(
            lambda error: logger.error(
                "Database request failed",
                operation=operation,
                url=request.url,
                kind=error.kind.value,
                error=error.message,
            )
        )

    def _request(
        self,
        method: str,
        path: str,
        token: str | None,
        payload: object = None,
        *,
        allow_null: bool = False,
    ) -> HttpRequest:
        params = {"auth": token} if token else {}
        return HttpRequest(
            method=method,  # type: ignore[arg-type]
            url=f"{self._config.database_url}/{path.strip('/')}.json",
            params=params,
            json=payload,  # type: ignore[arg-type]
            allow_null=allow_null,
        )


def _single_field_payload(key: str, value: Scalar) -> Result[JsonDict, ArgumentError]:
    key_result = validate_key(key)
    if is_err(key_result):
        return key_result
    return validate_scalar(value).map(lambda scalar: {key: scalar})


def _validate_incoming(value: Incoming) -> Result[Incoming, ArgumentError]:
    if is_scalar(value):
        return Ok(value)
    if isinstance(value, Sequence) and not isinstance(value, str | bytes):
        if not value:
            return Err(ArgumentError(argument="value", message="Value list cannot be empty."))
        if all(is_scalar(item) for item in value):
            return Ok(value)
    return Err(ArgumentError(argument="value", message="Value must be a String, Integer or a list of them."))


def _extract_generated_name(body: str) -> Result[str, ServiceError]:
    try:
        data = json.loads(body)
    except json.JSONDecodeError as exc:
        return Err(ShapeConflictError(message=f"Push answer is not valid JSON: {exc}"))
    if not isinstance(data, dict) or not isinstance(data.get("name"), str):
        return Err(ShapeConflictError(message="Push answer carries no generated name."))
    return Ok(data["name"])


def _object_members(body: str) -> Result[dict[str, JsonDict], ServiceError]:
    try:
        data = json.loads(body)
    except json.JSONDecodeError as exc:
        return Err(ShapeConflictError(message=f"Stored data is not valid JSON: {exc}"))

    # Collections keyed 0..n come back from the server as JSON arrays
    if isinstance(data, list):
        data = {str(index): member for index, member in enumerate(data)}

    if not isinstance(data, dict):
        return Err(ShapeConflictError(message="Stored data is not a collection."))

    return Ok({key: member for key, member in data.items() if isinstance(member, dict)})
