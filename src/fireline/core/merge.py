"""Append/merge rules for values stored at a database path.

The value at a path is read right before the merge decision, so its shape is
only known at call time. Rules:

1. nothing stored + scalar: the scalar alone, never wrapped in a list
2. nothing stored + sequence: rejected, the first value must be a scalar
3. scalar stored: promoted to a one-element list, then rule 4 or 5
4. list stored + scalar: scalar appended at the end
5. list stored + sequence: replaced by ``{"0": a, "1": b, ...}`` built from
   the incoming sequence only; the stored elements are discarded
6. anything else stored: rejected

Rule 5 overwrites rather than concatenates. Callers relying on it should know
the stored list is lost. An empty sequence would resolve to ``{}``, which
removes the node on the server, so ``Database.append`` rejects it up front.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from enum import Enum

from result import Err, Ok, Result

from .models import ShapeConflictError
from .validation import Scalar, is_scalar


class Absent(Enum):
    """Marker for a path that holds no value."""

    ABSENT = "absent"

    def __repr__(self) -> str:
        return "ABSENT"


ABSENT = Absent.ABSENT

type StoredValue = Absent | Scalar | list[object] | dict[str, object]
type Incoming = Scalar | Sequence[Scalar]


def classify_stored_value(raw: str) -> Result[StoredValue, ShapeConflictError]:
    """Parse the JSON text read from the server into a stored value."""
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, TypeError) as exc:
        return Err(ShapeConflictError(message=f"Existing data is not valid JSON: {exc}"))

    if data is None:
        return Ok(ABSENT)
    return Ok(data)


def resolve_append(existing: StoredValue, incoming: Incoming) -> Result[StoredValue, ShapeConflictError]:
    """Compute the next value to write when appending ``incoming``."""
    incoming_is_sequence = _is_sequence(incoming)

    if existing is ABSENT:
        if incoming_is_sequence:
            return Err(ShapeConflictError(message="First value must be scalar."))
        return Ok(incoming)

    if is_scalar(existing):
        existing = [existing]

    if not isinstance(existing, list):
        return Err(ShapeConflictError(message="Unexpected existing data format."))

    if incoming_is_sequence:
        return Ok({str(index): item for index, item in enumerate(incoming)})  # type: ignore[arg-type]

    return Ok([*existing, incoming])


def _is_sequence(value: object) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, str | bytes)


__all__ = [
    "ABSENT",
    "Absent",
    "Incoming",
    "StoredValue",
    "classify_stored_value",
    "resolve_append",
]
