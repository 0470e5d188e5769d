from __future__ import annotations

import pytest

from paneltrack.domain.model import Building, Dimensions, PanelStatus, new_id
from tests.helpers.panels import make_panel


def test_panel_defaults() -> None:
    panel = make_panel("  PNL-1 ", project_id=new_id())

    assert panel.serial_number == "PNL-1"
    assert panel.name == "PNL-1"
    assert panel.panel_type == "Standard"
    assert panel.status is PanelStatus.MANUFACTURED
    assert panel.dimensions == Dimensions(0.0, 0.0, 0.0)


def test_panel_rejects_blank_serial_and_negative_weight() -> None:
    with pytest.raises(ValueError, match="serial"):
        make_panel("   ", project_id=new_id())
    with pytest.raises(ValueError, match="weight"):
        make_panel(project_id=new_id(), weight=-1.0)


def test_dimensions_reject_negative_values() -> None:
    with pytest.raises(ValueError, match="height"):
        Dimensions(100.0, -1.0)


def test_building_rejects_negative_floors() -> None:
    with pytest.raises(ValueError, match="floors"):
        Building(project_id=new_id(), name="Block A", floors=-2)


def test_entities_compare_by_identity() -> None:
    project_id = new_id()
    first = make_panel("PNL-1", project_id=project_id)
    second = make_panel("PNL-1", project_id=project_id)

    assert first != second
    assert first.id != second.id
