from __future__ import annotations

import pytest

from paneltrack.domain.model import new_id
from paneltrack.domain.reconciliation import (
    AmbiguousPanelResolution,
    CanonicalPanelRow,
    MatchedPanelResolution,
    MatchScope,
    NewPanelResolution,
    PanelSnapshot,
    RowValidationError,
    identity_key,
    resolve_row,
)
from tests.helpers.panels import make_panel


def test_identity_key_requires_serial() -> None:
    with pytest.raises(RowValidationError, match="missing serial number"):
        identity_key(CanonicalPanelRow(name="Facade"))


def test_no_match_creates() -> None:
    snapshot = PanelSnapshot.build([])

    resolution = resolve_row(CanonicalPanelRow(serial_number="PNL-1"), snapshot)

    assert isinstance(resolution, NewPanelResolution)
    assert resolution.serial_number == "PNL-1"
    assert resolution.reason == "no_exact_match"


def test_exact_match_is_case_sensitive() -> None:
    panel = make_panel("PNL-1", project_id=new_id())
    snapshot = PanelSnapshot.build([panel])

    matched = resolve_row(CanonicalPanelRow(serial_number=" PNL-1 "), snapshot)
    other_case = resolve_row(CanonicalPanelRow(serial_number="pnl-1"), snapshot)

    assert isinstance(matched, MatchedPanelResolution)
    assert matched.target is panel
    assert isinstance(other_case, NewPanelResolution)


def test_same_serial_in_two_projects_is_ambiguous_globally() -> None:
    first_project, second_project = new_id(), new_id()
    panels = [
        make_panel("PNL-1", project_id=first_project),
        make_panel("PNL-1", project_id=second_project),
    ]
    snapshot = PanelSnapshot.build(panels)
    row = CanonicalPanelRow(serial_number="PNL-1")

    resolution = resolve_row(row, snapshot)
    scoped = resolve_row(
        row, snapshot, match_scope=MatchScope.PROJECT, project_id=second_project
    )

    assert isinstance(resolution, AmbiguousPanelResolution)
    assert len(resolution.candidates) == 2
    assert len(snapshot) == 2
    assert isinstance(scoped, MatchedPanelResolution)
    assert scoped.target.project_id == second_project


def test_project_scope_without_project_falls_back_to_global() -> None:
    panel = make_panel("PNL-1", project_id=new_id())
    snapshot = PanelSnapshot.build([panel])

    resolution = resolve_row(
        CanonicalPanelRow(serial_number="PNL-1"), snapshot, match_scope=MatchScope.PROJECT
    )

    assert isinstance(resolution, MatchedPanelResolution)


def test_ambiguous_resolution_needs_two_candidates() -> None:
    with pytest.raises(ValueError, match="at least two"):
        AmbiguousPanelResolution(candidates=(make_panel(project_id=new_id()),))
