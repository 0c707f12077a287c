"""Reusable Pydantic field annotations."""

from __future__ import annotations

from typing import Annotated

from pydantic import Field, StrictStr

type JsonValue = dict[str, object] | list[object] | str | int | float | bool | None
type JsonDict = dict[str, object]

NonEmptyString = Annotated[StrictStr, Field(min_length=1, frozen=True)]

# Realtime Database path (e.g., "users/123/name")
DataPath = Annotated[
    StrictStr,
    Field(
        pattern=r"^[a-zA-Z0-9_/.-]+$",
        description="Slash separated database path",
    ),
]

__all__ = [
    "DataPath",
    "JsonDict",
    "JsonValue",
    "NonEmptyString",
]
