"""Role-transition policy expressed as two lookup tables.

Non-admin roles get a flat permission set independent of the current status. The
admin role follows a status-keyed successor table that mirrors the physical
workflow, falling back to its full permission set for statuses the table does not
list. Terminal statuses have no successors for anyone.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING, Final

from paneltrack.domain.lifecycle.catalog import is_terminal
from paneltrack.domain.model import PanelStatus, UserRole

if TYPE_CHECKING:
    from collections.abc import Mapping

_S = PanelStatus

ROLE_ALLOWED_STATUSES: Final[Mapping[UserRole, frozenset[PanelStatus]]] = MappingProxyType(
    {
        UserRole.DATA_ENTRY: frozenset({_S.ISSUED, _S.HELD, _S.CANCELLED}),
        UserRole.PRODUCTION_ENGINEER: frozenset({_S.PRODUCED}),
        UserRole.QC_FACTORY: frozenset({_S.PROCEED_DELIVERY}),
        UserRole.STORE_SITE: frozenset({_S.DELIVERED, _S.BROKEN_SITE}),
        UserRole.QC_SITE: frozenset(
            {_S.APPROVED_MATERIAL, _S.REJECTED_MATERIAL, _S.INSPECTED, _S.APPROVED_FINAL}
        ),
        UserRole.FOREMAN_SITE: frozenset({_S.INSTALLED}),
        UserRole.SITE_ENGINEER: frozenset({_S.CHECKED}),
        UserRole.PROJECT_MANAGER: frozenset(),
        UserRole.ADMIN: frozenset(
            {
                _S.ISSUED,
                _S.HELD,
                _S.PRODUCED,
                _S.PROCEED_DELIVERY,
                _S.DELIVERED,
                _S.BROKEN_SITE,
                _S.APPROVED_MATERIAL,
                _S.REJECTED_MATERIAL,
                _S.INSTALLED,
                _S.CHECKED,
                _S.INSPECTED,
                _S.APPROVED_FINAL,
                _S.CANCELLED,
                _S.MANUFACTURED,
            }
        ),
    }
)

ADMIN_SUCCESSORS: Final[Mapping[PanelStatus, frozenset[PanelStatus]]] = MappingProxyType(
    {
        _S.ISSUED: frozenset({_S.HELD, _S.PRODUCED, _S.CANCELLED}),
        _S.HELD: frozenset({_S.ISSUED, _S.PRODUCED, _S.CANCELLED}),
        _S.PRODUCED: frozenset({_S.PROCEED_DELIVERY}),
        _S.PROCEED_DELIVERY: frozenset({_S.DELIVERED, _S.BROKEN_SITE}),
        _S.DELIVERED: frozenset({_S.APPROVED_MATERIAL, _S.REJECTED_MATERIAL}),
        _S.APPROVED_MATERIAL: frozenset({_S.INSTALLED}),
        _S.INSTALLED: frozenset({_S.CHECKED}),
        _S.CHECKED: frozenset({_S.INSPECTED}),
        _S.INSPECTED: frozenset({_S.APPROVED_FINAL, _S.REJECTED_MATERIAL}),
        # legacy entry point: panels created as "manufactured" skip the factory steps
        _S.MANUFACTURED: frozenset({_S.ISSUED, _S.DELIVERED}),
    }
)


def role_permissions(role: UserRole) -> frozenset[PanelStatus]:
    """Statuses the role may ever set, regardless of where a panel currently is."""

    return ROLE_ALLOWED_STATUSES.get(role, frozenset())


def allowed_next_states(current_status: PanelStatus, role: UserRole) -> frozenset[PanelStatus]:
    if is_terminal(current_status):
        return frozenset()
    if role is UserRole.ADMIN:
        return ADMIN_SUCCESSORS.get(current_status, role_permissions(UserRole.ADMIN))
    return role_permissions(role)
