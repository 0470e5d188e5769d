"""Identity base for persisted domain records."""

from __future__ import annotations

from dataclasses import dataclass, field
from uuid import UUID, uuid4


def new_id() -> UUID:
    return uuid4()


@dataclass(eq=False, kw_only=True)
class Entity:
    """Internal identity exists immediately in the domain and is never reused."""

    id: UUID = field(default_factory=new_id)
