"""Identity resolution of canonical rows against a read-only panel snapshot.

Matching is exact and case-sensitive on the trimmed serial number. The snapshot is
taken once per batch, so panels created earlier in the same batch are never
visible here.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING

from .contracts import (
    ABSENT,
    AmbiguousPanelResolution,
    MatchedPanelResolution,
    MatchScope,
    NewPanelResolution,
    RowValidationError,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping
    from uuid import UUID

    from paneltrack.domain.model import Panel

    from .contracts import CanonicalPanelRow, PanelResolution


@dataclass(frozen=True, slots=True)
class PanelSnapshot:
    """Existing panels grouped by serial number, frozen at batch start."""

    by_serial: Mapping[str, tuple[Panel, ...]]

    @classmethod
    def build(cls, panels: Iterable[Panel]) -> PanelSnapshot:
        grouped: defaultdict[str, list[Panel]] = defaultdict(list)
        for panel in panels:
            grouped[panel.serial_number.strip()].append(panel)
        return cls(
            by_serial=MappingProxyType({serial: tuple(found) for serial, found in grouped.items()})
        )

    def __len__(self) -> int:
        return sum(len(found) for found in self.by_serial.values())

    def candidates(self, serial_number: str, *, project_id: UUID | None = None) -> tuple[Panel, ...]:
        found = self.by_serial.get(serial_number.strip(), ())
        if project_id is None:
            return found
        return tuple(panel for panel in found if panel.project_id == project_id)


def identity_key(row: CanonicalPanelRow) -> str:
    """Return the row's trimmed serial number or reject the row."""

    if row.serial_number is ABSENT or not row.serial_number.strip():
        raise RowValidationError("missing serial number (no SerialNumber or Name column value)")
    return row.serial_number.strip()


def resolve_row(
    row: CanonicalPanelRow,
    snapshot: PanelSnapshot,
    *,
    match_scope: MatchScope = MatchScope.GLOBAL,
    project_id: UUID | None = None,
) -> PanelResolution:
    """Classify ``row`` as matching one panel, several panels, or none.

    With ``MatchScope.PROJECT`` only panels of ``project_id`` are considered; when
    the project is unknown the lookup stays global.
    """

    serial = identity_key(row)
    scope_project = project_id if match_scope is MatchScope.PROJECT else None
    found = snapshot.candidates(serial, project_id=scope_project)
    if not found:
        return NewPanelResolution(serial_number=serial, reason="no_exact_match")
    if len(found) == 1:
        return MatchedPanelResolution(target=found[0], reason="exact_match")
    return AmbiguousPanelResolution(candidates=found, reason="multiple_exact_matches")
