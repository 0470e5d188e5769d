"""Status catalog: the closed set of lifecycle states and their display metadata."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum, StrEnum
from types import MappingProxyType
from typing import TYPE_CHECKING, Final

from paneltrack.domain.model import PanelStatus

if TYPE_CHECKING:
    from collections.abc import Mapping


class Stage(IntEnum):
    """Physical milestones, in the order a panel passes through them."""

    MANUFACTURED = 0
    DELIVERED = 1
    INSTALLED = 2
    INSPECTED = 3


class BadgeTone(StrEnum):
    INFO = "info"
    PENDING = "pending"
    WARNING = "warning"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class StatusInfo:
    status: PanelStatus
    label: str
    tone: BadgeTone
    stage: Stage
    terminal: bool = False


def _info(
    status: PanelStatus,
    label: str,
    tone: BadgeTone,
    stage: Stage,
    *,
    terminal: bool = False,
) -> tuple[PanelStatus, StatusInfo]:
    return status, StatusInfo(status=status, label=label, tone=tone, stage=stage, terminal=terminal)


STATUS_CATALOG: Final[Mapping[PanelStatus, StatusInfo]] = MappingProxyType(
    dict(
        [
            _info(PanelStatus.ISSUED, "Issued", BadgeTone.INFO, Stage.MANUFACTURED),
            _info(PanelStatus.HELD, "Held", BadgeTone.WARNING, Stage.MANUFACTURED),
            _info(PanelStatus.PREPARED, "Prepared", BadgeTone.INFO, Stage.MANUFACTURED),
            _info(PanelStatus.PRODUCED, "Produced", BadgeTone.INFO, Stage.MANUFACTURED),
            _info(PanelStatus.MANUFACTURED, "Manufactured", BadgeTone.INFO, Stage.MANUFACTURED),
            _info(
                PanelStatus.PROCEED_DELIVERY,
                "Proceed for Delivery",
                BadgeTone.PENDING,
                Stage.MANUFACTURED,
            ),
            _info(PanelStatus.RETURNED, "Returned", BadgeTone.WARNING, Stage.MANUFACTURED),
            _info(PanelStatus.REJECTED, "Rejected", BadgeTone.ERROR, Stage.MANUFACTURED),
            _info(
                PanelStatus.CANCELLED,
                "Cancelled",
                BadgeTone.ERROR,
                Stage.MANUFACTURED,
                terminal=True,
            ),
            _info(PanelStatus.DELIVERED, "Delivered", BadgeTone.PENDING, Stage.DELIVERED),
            _info(
                PanelStatus.BROKEN_SITE,
                "Broken at Site",
                BadgeTone.ERROR,
                Stage.DELIVERED,
                terminal=True,
            ),
            _info(
                PanelStatus.APPROVED_MATERIAL,
                "Approved Material",
                BadgeTone.SUCCESS,
                Stage.DELIVERED,
            ),
            _info(
                PanelStatus.REJECTED_MATERIAL,
                "Rejected Material",
                BadgeTone.ERROR,
                Stage.DELIVERED,
                terminal=True,
            ),
            _info(PanelStatus.INSTALLED, "Installed", BadgeTone.WARNING, Stage.INSTALLED),
            _info(PanelStatus.CHECKED, "Checked", BadgeTone.WARNING, Stage.INSTALLED),
            _info(PanelStatus.INSPECTED, "Inspected", BadgeTone.SUCCESS, Stage.INSPECTED),
            _info(
                PanelStatus.APPROVED_FINAL,
                "Approved Final",
                BadgeTone.SUCCESS,
                Stage.INSPECTED,
                terminal=True,
            ),
        ]
    )
)

TERMINAL_STATUSES: Final[frozenset[PanelStatus]] = frozenset(
    status for status, info in STATUS_CATALOG.items() if info.terminal
)

# Statuses whose acceptance stamps a milestone date if it is still unset.
DELIVERED_FAMILY: Final[frozenset[PanelStatus]] = frozenset({PanelStatus.DELIVERED})
INSTALLED_FAMILY: Final[frozenset[PanelStatus]] = frozenset({PanelStatus.INSTALLED})
INSPECTED_FAMILY: Final[frozenset[PanelStatus]] = frozenset(
    {
        PanelStatus.INSPECTED,
        PanelStatus.CHECKED,
        PanelStatus.APPROVED_MATERIAL,
        PanelStatus.APPROVED_FINAL,
    }
)


def status_info(status: PanelStatus) -> StatusInfo:
    return STATUS_CATALOG[status]


def is_terminal(status: PanelStatus) -> bool:
    return status in TERMINAL_STATUSES


def stage_of(status: PanelStatus) -> Stage:
    return STATUS_CATALOG[status].stage


def lookup_status(value: str) -> PanelStatus | None:
    """Match free text against status values and labels, ignoring case and separators."""

    key = _fold(value)
    if not key:
        return None
    return _STATUS_BY_KEY.get(key)


def _fold(value: str) -> str:
    return "".join(char for char in value.casefold() if char.isalnum())


_STATUS_BY_KEY: Final[Mapping[str, PanelStatus]] = MappingProxyType(
    {
        **{_fold(info.label): status for status, info in STATUS_CATALOG.items()},
        **{_fold(status.value): status for status in PanelStatus},
    }
)
