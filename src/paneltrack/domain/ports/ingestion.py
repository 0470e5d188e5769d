"""Port for turning an uploaded spreadsheet payload into raw rows."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol, runtime_checkable

type RawRow = Mapping[str, object]


class TabularParseError(ValueError):
    """Raised when a payload cannot be decoded into rows at all."""


@runtime_checkable
class TabularReader(Protocol):
    def __call__(self, payload: bytes, *, filename: str | None = None) -> list[RawRow]: ...
